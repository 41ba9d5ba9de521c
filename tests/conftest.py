import uuid
from unittest.mock import MagicMock

import pytest

from azcmdlets.core.client_factory import MockClientFactory
from azcmdlets.core.session import (
    AzureAccount,
    AzureContext,
    AzureProfile,
    AzureSession,
    AzureSubscription,
    AzureTenant,
    MemoryDataStore,
)
from azcmdlets.testing.recorder import HttpMockServer, RecordMatcher

TEST_SUBSCRIPTION_ID = "11111111-2222-3333-4444-555555555555"
TEST_TENANT_ID = "66666666-7777-8888-9999-000000000000"


@pytest.fixture(scope="function", autouse=True)
def mock_env_vars(monkeypatch, tmp_path):
    """Playback by default, records and profile under tmp_path, no real identities."""
    monkeypatch.setenv("AZURE_TEST_MODE", "Playback")
    monkeypatch.setenv("TEST_HTTPMOCK_OUTPUT", str(tmp_path / "SessionRecords"))
    monkeypatch.setenv("AZCMDLETS_APP_SETTINGS", str(tmp_path / "appsettings.json"))
    for name in (
        "TEST_CSM_ORGID_AUTHENTICATION",
        "TEST_ORGID_AUTHENTICATION",
        "AZURE_SUBSCRIPTION_ID",
        "AZURE_TENANT_ID",
        "AZURE_STORAGE_ACCOUNT",
        "AZCMDLETS_DEBUG",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(AzureSession, "profile_directory", str(tmp_path / ".azcmdlets"))


@pytest.fixture(autouse=True)
def reset_session():
    """Every test starts and ends with a clean session and mock server."""
    _reset()
    yield
    _reset()


def _reset():
    if HttpMockServer._cassette_manager is not None:
        HttpMockServer.flush()
    HttpMockServer.mode = None
    HttpMockServer.records_directory = None
    HttpMockServer.matcher = RecordMatcher()
    HttpMockServer.variables = {}
    HttpMockServer._asset_names_used = 0
    AzureSession.reset()


@pytest.fixture
def session_profile():
    """In-memory profile whose context targets TEST_SUBSCRIPTION_ID in the public cloud."""
    AzureSession.data_store = MemoryDataStore()
    profile = AzureProfile(AzureSession.profile_path())
    environment = profile.environments["AzureCloud"]
    subscription = AzureSubscription(
        id=uuid.UUID(TEST_SUBSCRIPTION_ID),
        name="test-subscription",
        environment=environment.name,
        account="user@contoso.com",
        properties={"Default": "True"}
    )
    account = AzureAccount(id="user@contoso.com")
    profile.subscriptions[subscription.id] = subscription
    profile.accounts[account.id] = account
    profile.context = AzureContext(subscription, account, environment, AzureTenant(id=uuid.UUID(TEST_TENANT_ID)))
    AzureSession.profile = profile
    return profile


@pytest.fixture
def install_clients(session_profile):
    """Install a MockClientFactory holding the given clients."""
    def _install(*clients):
        AzureSession.client_factory = MockClientFactory(clients)
        return AzureSession.client_factory
    return _install


@pytest.fixture
def mock_resource_client():
    from azure.mgmt.resource import ResourceManagementClient

    client = MagicMock(spec=ResourceManagementClient)
    client.resource_groups = MagicMock()
    client.providers = MagicMock()
    client.resource_groups.check_existence.return_value = True
    return client


@pytest.fixture
def mock_azure_stack_client():
    from azcmdlets.clients.azure_stack import AzureStackClient

    client = MagicMock(spec=AzureStackClient)
    client.resource_groups = MagicMock()
    client.provider_registrations = MagicMock()
    client.with_subscription.return_value = client
    return client

