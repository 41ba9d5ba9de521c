"""
Management client creation.

Commands never construct SDK clients themselves; they ask the session client
factory, which wires credential, subscription and endpoint from the current
context. Test runners install a MockClientFactory holding clients that were
built inside a record/playback context.
"""

import inspect
import logging
from typing import Any, Iterable, Optional

from .exceptions import ClientNotAvailableError, InvalidOperationError
from .session import AzureContext, AzureEnvironment, AzureSession, Endpoint

logger = logging.getLogger(__name__)


def build_client(
    client_cls: type,
    credential: Any,
    subscription_id: Optional[str],
    environment: Optional[AzureEnvironment],
    **kwargs
) -> Any:
    """
    Construct an ARM-style client (azure-mgmt-* or AzureStackClient).

    Args:
        client_cls: Client class
        credential: azure-core TokenCredential
        subscription_id: Subscription for clients that take one
        environment: Environment providing the resource manager endpoint
        **kwargs: Forwarded to the client (e.g., polling_interval)

    Raises:
        InvalidOperationError: If the client needs a subscription and none is set
    """
    parameters = inspect.signature(client_cls.__init__).parameters
    client_args = {"credential": credential}

    if "subscription_id" in parameters:
        if not subscription_id:
            raise InvalidOperationError(
                f"No subscription is selected; {client_cls.__name__} requires one. "
                "Use Set-AzureContext -SubscriptionId <id>."
            )
        client_args["subscription_id"] = subscription_id

    if environment is not None:
        base_url = environment.get_endpoint(Endpoint.RESOURCE_MANAGER)
        resource = environment.get_endpoint(Endpoint.ACTIVE_DIRECTORY_RESOURCE_ID) or base_url
        if base_url and "base_url" in parameters:
            client_args["base_url"] = base_url.rstrip("/")
        if resource:
            kwargs.setdefault("credential_scopes", [resource.rstrip("/") + "/.default"])

    if not AzureSession.verify_ssl:
        kwargs.setdefault("connection_verify", False)

    return client_cls(**client_args, **kwargs)


class ClientFactory:
    """Creates clients for the session's current context."""

    def create_arm_client(self, client_cls: type, context: Optional[AzureContext] = None, **kwargs) -> Any:
        context = context or AzureSession.get_context()
        if context is None:
            raise InvalidOperationError("No Azure context is set. Use Set-AzureContext first.")

        credential = AzureSession.get_authentication_factory().get_credential(
            context.account, context.environment
        )
        logger.debug(f"Creating {client_cls.__name__} for subscription {context.subscription_id}")
        return build_client(
            client_cls,
            credential,
            context.subscription_id,
            context.environment,
            **kwargs
        )


class MockClientFactory(ClientFactory):
    """
    Returns pre-built clients by type.

    Args:
        clients: Initialized management clients
        throw_when_not_available: If True, asking for a type that is not in
            clients raises ClientNotAvailableError; if False, a real client
            is created instead.
    """

    def __init__(self, clients: Iterable[Any], throw_when_not_available: bool = True):
        self.clients = [c for c in clients if c is not None]
        self.throw_when_not_available = throw_when_not_available

    def create_arm_client(self, client_cls: type, context: Optional[AzureContext] = None, **kwargs) -> Any:
        for client in self.clients:
            if isinstance(client, client_cls):
                return client

        if self.throw_when_not_available:
            raise ClientNotAvailableError(client_cls.__name__)

        return super().create_arm_client(client_cls, context, **kwargs)
