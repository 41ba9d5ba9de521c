"""
Authentication factories producing azure-core credentials for management clients.

AuthenticationFactory is used for live sessions (azure-identity). The mock
factories are installed by the test harness: the token factory hands out a
fixed bearer token so recordings can be replayed without signing in, the
certificate factory signs in with a service principal certificate.
"""

import time
from typing import Any, Optional

from azure.core.credentials import AccessToken

from .. import constants as CONSTANTS


class AuthenticationFactory:
    """
    Produces azure-identity credentials.

    Args:
        credentials: Optional service principal settings with keys
            azure_tenant_id, azure_client_id, azure_client_secret.
            Without them DefaultAzureCredential is used.
    """

    def __init__(self, credentials: Optional[dict] = None):
        self.credentials = credentials or {}

    def get_credential(self, account=None, environment=None) -> Any:
        """Get Azure credential for SDK clients."""
        from azure.identity import ClientSecretCredential, DefaultAzureCredential

        client_id = self.credentials.get("azure_client_id")
        client_secret = self.credentials.get("azure_client_secret")
        tenant_id = self.credentials.get("azure_tenant_id")
        authority = _authority_host(environment)

        if client_id and client_secret and tenant_id:
            if authority:
                return ClientSecretCredential(
                    tenant_id=tenant_id,
                    client_id=client_id,
                    client_secret=client_secret,
                    authority=authority
                )
            return ClientSecretCredential(
                tenant_id=tenant_id,
                client_id=client_id,
                client_secret=client_secret
            )

        if authority:
            return DefaultAzureCredential(authority=authority)
        return DefaultAzureCredential()


class MockTokenCredential:
    """TokenCredential that always returns the same bearer token."""

    def __init__(self, token: str = CONSTANTS.FAKE_ACCESS_TOKEN, lifetime_seconds: int = 3600):
        self.token = token
        self.lifetime_seconds = lifetime_seconds

    def get_token(self, *scopes, **kwargs) -> AccessToken:
        return AccessToken(self.token, int(time.time()) + self.lifetime_seconds)

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


class MockTokenAuthenticationFactory(AuthenticationFactory):
    """Hands out a MockTokenCredential for a fixed user and token."""

    def __init__(self, user_id: str, token: str):
        super().__init__()
        self.user_id = user_id
        self.token = token

    def get_credential(self, account=None, environment=None) -> MockTokenCredential:
        return MockTokenCredential(self.token)


class MockCertificateAuthenticationFactory(AuthenticationFactory):
    """Signs in with a service principal certificate."""

    def __init__(self, user_id: str, certificate_path: str, tenant_id: str, client_id: str):
        super().__init__()
        self.user_id = user_id
        self.certificate_path = certificate_path
        self.tenant_id = tenant_id
        self.client_id = client_id

    def get_credential(self, account=None, environment=None) -> Any:
        from azure.identity import CertificateCredential

        authority = _authority_host(environment)
        if authority:
            return CertificateCredential(
                self.tenant_id, self.client_id, self.certificate_path, authority=authority
            )
        return CertificateCredential(self.tenant_id, self.client_id, self.certificate_path)


def _authority_host(environment) -> Optional[str]:
    """Login host of a non-public environment, None for the public cloud."""
    if environment is None:
        return None
    from .session import Endpoint

    authority = environment.get_endpoint(Endpoint.ACTIVE_DIRECTORY)
    if not authority or authority == CONSTANTS.AZURE_CLOUD_ENDPOINTS["ActiveDirectory"]:
        return None
    return authority.rstrip("/")
