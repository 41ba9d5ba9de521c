"""
Azure Stack admin client.

There is no Python SDK for the Azure Stack admin API, so this client is a
small azure-core pipeline client in the shape of the azure-mgmt-* clients:
operation groups hang off the client, authentication is a bearer token
policy, and failed calls raise azure.core.exceptions errors.

Operation groups:
    resource_groups: list, get
    provider_registrations: list, get, create_or_update, delete

Usage:
    client = AzureStackClient(credential, subscription_id, base_url="https://adminmanagement.local.azurestack.external")
    for registration in client.provider_registrations.list("system"):
        print(registration.name)
"""

import copy
import logging
from typing import Any, Iterable, List, Optional
from urllib.parse import quote

from azure.core import PipelineClient
from azure.core.exceptions import (
    ClientAuthenticationError,
    HttpResponseError,
    ResourceExistsError,
    ResourceNotFoundError,
    map_error,
)
from azure.core.pipeline import policies
from azure.core.rest import HttpRequest

from .. import constants as CONSTANTS
from .models import ProviderRegistration, ResourceGroup

logger = logging.getLogger(__name__)

ERROR_MAP = {
    401: ClientAuthenticationError,
    404: ResourceNotFoundError,
    409: ResourceExistsError,
}

DEFAULT_BASE_URL = "https://management.azure.com"


class AzureStackClient:
    """
    Client for the Azure Stack admin (Microsoft.Subscriptions) API.

    Args:
        credential: azure-core TokenCredential
        subscription_id: Admin subscription
        base_url: Resource manager endpoint of the Azure Stack deployment
        api_version: API version sent with every request
        **kwargs: azure-core pipeline options (credential_scopes, connection_verify, ...)
    """

    def __init__(
        self,
        credential: Any,
        subscription_id: str,
        base_url: str = DEFAULT_BASE_URL,
        api_version: str = CONSTANTS.AZURE_STACK_API_VERSION,
        **kwargs
    ):
        self.subscription_id = subscription_id
        self.api_version = api_version
        self.base_url = base_url
        # Nothing long-running here; accepted for parity with azure-mgmt-* clients
        kwargs.pop("polling_interval", None)
        scopes = kwargs.pop("credential_scopes", [base_url.rstrip("/") + "/.default"])

        self._client = PipelineClient(
            base_url=base_url,
            policies=[
                policies.RequestIdPolicy(**kwargs),
                policies.HeadersPolicy(**kwargs),
                policies.UserAgentPolicy(sdk_moniker="azcmdlets-azurestack/0.1.0", **kwargs),
                policies.RetryPolicy(**kwargs),
                policies.BearerTokenCredentialPolicy(credential, *scopes),
                policies.NetworkTraceLoggingPolicy(**kwargs),
            ],
            **kwargs
        )
        self.resource_groups = ResourceGroupsOperations(self)
        self.provider_registrations = ProviderRegistrationsOperations(self)

    def with_subscription(self, subscription_id: str) -> 'AzureStackClient':
        """Copy of this client bound to another subscription; the pipeline is shared."""
        other = copy.copy(self)
        other.subscription_id = subscription_id
        other.resource_groups = ResourceGroupsOperations(other)
        other.provider_registrations = ProviderRegistrationsOperations(other)
        return other

    def close(self) -> None:
        self._client.close()

    def __enter__(self):
        self._client.__enter__()
        return self

    def __exit__(self, *exc_details):
        self._client.__exit__(*exc_details)

    def send(self, method: str, path: str, body: Optional[dict] = None, expected: Iterable[int] = (200,)) -> Any:
        """
        Send one request and return the parsed JSON body (None when empty).

        Raises:
            ResourceNotFoundError, ClientAuthenticationError, ResourceExistsError:
                For the mapped status codes
            HttpResponseError: For any other unexpected status code
        """
        request = HttpRequest(
            method,
            self._client.format_url(path),
            params={"api-version": self.api_version},
            json=body
        )
        response = self._client.send_request(request)
        if response.status_code not in expected:
            map_error(status_code=response.status_code, response=response, error_map=ERROR_MAP)
            raise HttpResponseError(response=response)

        if not response.content:
            return None
        return response.json()

    def list_pages(self, path: str) -> List[dict]:
        """Collect 'value' items across nextLink pages."""
        items = []
        page = self.send("GET", path)
        while page:
            items.extend(page.get("value", []))
            next_link = page.get("nextLink")
            if not next_link:
                break
            response = self._client.send_request(HttpRequest("GET", next_link))
            if response.status_code != 200:
                map_error(status_code=response.status_code, response=response, error_map=ERROR_MAP)
                raise HttpResponseError(response=response)
            page = response.json()
        return items


def _segment(value: str) -> str:
    return quote(str(value), safe="")


class ResourceGroupsOperations:
    def __init__(self, client: AzureStackClient):
        self._client = client

    def _path(self) -> str:
        return f"/subscriptions/{_segment(self._client.subscription_id)}/resourcegroups"

    def list(self) -> List[ResourceGroup]:
        return [ResourceGroup.model_validate(item) for item in self._client.list_pages(self._path())]

    def get(self, resource_group: str) -> ResourceGroup:
        data = self._client.send("GET", f"{self._path()}/{_segment(resource_group)}")
        return ResourceGroup.model_validate(data)


class ProviderRegistrationsOperations:
    def __init__(self, client: AzureStackClient):
        self._client = client

    def _path(self, resource_group: str) -> str:
        return (
            f"/subscriptions/{_segment(self._client.subscription_id)}"
            f"/resourcegroups/{_segment(resource_group)}"
            f"/providers/{CONSTANTS.AZURE_STACK_SUBSCRIPTIONS_NAMESPACE}/providerRegistrations"
        )

    def list(self, resource_group: str) -> List[ProviderRegistration]:
        return [
            ProviderRegistration.model_validate(item)
            for item in self._client.list_pages(self._path(resource_group))
        ]

    def get(self, resource_group: str, name: str) -> ProviderRegistration:
        data = self._client.send("GET", f"{self._path(resource_group)}/{_segment(name)}")
        return ProviderRegistration.model_validate(data)

    def create_or_update(self, resource_group: str, registration: ProviderRegistration) -> ProviderRegistration:
        """PUT the registration under its name; returns the service's view of it."""
        logger.debug(f"PUT provider registration {registration.name} in {resource_group}")
        data = self._client.send(
            "PUT",
            f"{self._path(resource_group)}/{_segment(registration.name)}",
            body=registration.to_wire(),
            expected=(200, 201)
        )
        return ProviderRegistration.model_validate(data)

    def delete(self, resource_group: str, name: str) -> None:
        self._client.send("DELETE", f"{self._path(resource_group)}/{_segment(name)}", expected=(200, 204))
