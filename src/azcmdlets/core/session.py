"""
Session and profile state shared by all commands.

The session is process-wide: commands read the current context (subscription,
account, environment, tenant) from the session profile and obtain management
clients from the session client factory. The test harness swaps the data
store, the client factory and the authentication factory for in-memory and
mock implementations, and resets them after every test.

Contents:
    - Endpoint / AzureEnvironment: named cloud with its endpoint map
    - AzureAccount, AzureSubscription, AzureTenant, AzureContext
    - AzureProfile: environments, subscriptions, accounts and current context
    - MemoryDataStore / DiskDataStore: where a profile is saved
    - AzureSession: class-level session state
"""

import json
import os
import uuid
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from .. import constants as CONSTANTS


# ==========================================
# Environments
# ==========================================

class Endpoint(str, Enum):
    ACTIVE_DIRECTORY = "ActiveDirectory"
    ACTIVE_DIRECTORY_RESOURCE_ID = "ActiveDirectoryServiceEndpointResourceId"
    GALLERY = "Gallery"
    SERVICE_MANAGEMENT = "ServiceManagement"
    RESOURCE_MANAGER = "ResourceManager"
    GRAPH = "Graph"
    DATA_LAKE_STORE_SUFFIX = "AzureDataLakeStoreFileSystemEndpointSuffix"
    DATA_LAKE_ANALYTICS_SUFFIX = "AzureDataLakeAnalyticsCatalogAndJobEndpointSuffix"


@dataclass
class AzureEnvironment:
    """A named cloud and its endpoint map (keys are Endpoint values)."""

    name: str
    endpoints: Dict[str, str] = field(default_factory=dict)

    def get_endpoint(self, endpoint: Endpoint) -> Optional[str]:
        return self.endpoints.get(Endpoint(endpoint).value)

    def set_endpoint(self, endpoint: Endpoint, value: Optional[str]) -> None:
        if value:
            self.endpoints[Endpoint(endpoint).value] = value

    @classmethod
    def public(cls) -> 'AzureEnvironment':
        return cls(name=CONSTANTS.AZURE_CLOUD_NAME, endpoints=dict(CONSTANTS.AZURE_CLOUD_ENDPOINTS))


# ==========================================
# Accounts, Subscriptions, Tenants
# ==========================================

class AccountType(str, Enum):
    USER = "User"
    SERVICE_PRINCIPAL = "ServicePrincipal"
    CERTIFICATE = "Certificate"
    ACCESS_TOKEN = "AccessToken"


@dataclass
class AzureAccount:
    id: str = ""
    type: str = AccountType.USER.value
    properties: Dict[str, str] = field(default_factory=dict)


@dataclass
class AzureSubscription:
    id: Optional[uuid.UUID] = None
    name: str = ""
    environment: str = ""
    account: str = ""
    properties: Dict[str, str] = field(default_factory=dict)

    @property
    def is_default(self) -> bool:
        return self.properties.get("Default", "").lower() == "true"


@dataclass
class AzureTenant:
    id: Optional[uuid.UUID] = None
    domain: Optional[str] = None


@dataclass
class AzureContext:
    subscription: AzureSubscription
    account: AzureAccount
    environment: AzureEnvironment
    tenant: AzureTenant

    @property
    def subscription_id(self) -> Optional[str]:
        if self.subscription and self.subscription.id:
            return str(self.subscription.id)
        return None


# ==========================================
# Profile
# ==========================================

class AzureProfile:
    """
    Environments, subscriptions and accounts known to the session, plus the
    context commands run against.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = path
        self.environments: Dict[str, AzureEnvironment] = {
            CONSTANTS.AZURE_CLOUD_NAME: AzureEnvironment.public()
        }
        self.subscriptions: Dict[uuid.UUID, AzureSubscription] = {}
        self.accounts: Dict[str, AzureAccount] = {}
        self.context: Optional[AzureContext] = None

    def add_or_set_environment(self, environment: AzureEnvironment) -> AzureEnvironment:
        self.environments[environment.name] = environment
        return environment

    def set_subscription_as_default(self, name: str, account: str) -> AzureSubscription:
        """
        Mark the named subscription of an account as default, clearing the
        flag on all others.

        Raises:
            ValueError: If no such subscription is known
        """
        match = None
        for subscription in self.subscriptions.values():
            if subscription.name == name and subscription.account == account:
                match = subscription
            else:
                subscription.properties.pop("Default", None)

        if match is None:
            raise ValueError(f"Subscription '{name}' of account '{account}' not found in profile.")

        match.properties["Default"] = "True"
        return match

    @property
    def default_subscription(self) -> Optional[AzureSubscription]:
        for subscription in self.subscriptions.values():
            if subscription.is_default:
                return subscription
        return None

    def to_dict(self) -> Dict[str, Any]:
        def _subscription(s: AzureSubscription) -> dict:
            return {
                "id": str(s.id) if s.id else None,
                "name": s.name,
                "environment": s.environment,
                "account": s.account,
                "properties": dict(s.properties),
            }

        context = None
        if self.context is not None:
            context = {
                "subscription": _subscription(self.context.subscription),
                "account": vars(self.context.account).copy(),
                "environment": self.context.environment.name,
                "tenant": str(self.context.tenant.id) if self.context.tenant.id else None,
            }

        return {
            "environments": {n: dict(e.endpoints) for n, e in self.environments.items()},
            "subscriptions": [_subscription(s) for s in self.subscriptions.values()],
            "accounts": [vars(a).copy() for a in self.accounts.values()],
            "context": context,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], path: Optional[str] = None) -> 'AzureProfile':
        profile = cls(path)

        for name, endpoints in data.get("environments", {}).items():
            profile.environments[name] = AzureEnvironment(name=name, endpoints=dict(endpoints))

        def _subscription(raw: dict) -> AzureSubscription:
            return AzureSubscription(
                id=uuid.UUID(raw["id"]) if raw.get("id") else None,
                name=raw.get("name", ""),
                environment=raw.get("environment", ""),
                account=raw.get("account", ""),
                properties=dict(raw.get("properties", {})),
            )

        for raw in data.get("subscriptions", []):
            subscription = _subscription(raw)
            profile.subscriptions[subscription.id] = subscription

        for raw in data.get("accounts", []):
            account = AzureAccount(**raw)
            profile.accounts[account.id] = account

        raw_context = data.get("context")
        if raw_context:
            environment = profile.environments.get(
                raw_context.get("environment"), AzureEnvironment.public()
            )
            tenant_id = raw_context.get("tenant")
            profile.context = AzureContext(
                subscription=_subscription(raw_context["subscription"]),
                account=AzureAccount(**raw_context["account"]),
                environment=environment,
                tenant=AzureTenant(id=uuid.UUID(tenant_id) if tenant_id else None),
            )

        return profile

    def save(self, data_store: Optional['MemoryDataStore'] = None) -> None:
        """Serialize the profile as JSON into the data store (default: the session's)."""
        store = data_store or AzureSession.data_store
        path = self.path or AzureSession.profile_path()
        store.write_file(path, json.dumps(self.to_dict(), indent=2))


# ==========================================
# Data Stores
# ==========================================

class MemoryDataStore:
    """In-memory file store; keeps test runs away from the user's profile."""

    def __init__(self):
        self.files: Dict[str, str] = {}

    def write_file(self, path: str, content: str) -> None:
        self.files[os.path.normcase(path)] = content

    def read_file(self, path: str) -> str:
        try:
            return self.files[os.path.normcase(path)]
        except KeyError:
            raise FileNotFoundError(path)

    def file_exists(self, path: str) -> bool:
        return os.path.normcase(path) in self.files

    def delete_file(self, path: str) -> None:
        self.files.pop(os.path.normcase(path), None)


class DiskDataStore(MemoryDataStore):
    """File store backed by the local file system."""

    def write_file(self, path: str, content: str) -> None:
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")

    def read_file(self, path: str) -> str:
        return Path(path).read_text(encoding="utf-8")

    def file_exists(self, path: str) -> bool:
        return Path(path).exists()

    def delete_file(self, path: str) -> None:
        Path(path).unlink(missing_ok=True)


# ==========================================
# Session
# ==========================================

class AzureSession:
    """
    Process-wide session state.

    Class-level attributes rather than instance state, because commands and
    the test harness reach the session from unrelated places. reset()
    restores production defaults.
    """

    data_store: MemoryDataStore = DiskDataStore()
    profile: Optional[AzureProfile] = None
    client_factory = None
    authentication_factory = None
    verify_ssl: bool = True
    profile_directory: str = os.path.expanduser(CONSTANTS.PROFILE_DIRECTORY)
    profile_file: str = CONSTANTS.PROFILE_FILE

    @classmethod
    def profile_path(cls) -> str:
        return os.path.join(cls.profile_directory, cls.profile_file)

    @classmethod
    def get_profile(cls) -> AzureProfile:
        """Current profile; loaded from the data store or built from settings on first use."""
        if cls.profile is None:
            path = cls.profile_path()
            if cls.data_store.file_exists(path):
                cls.profile = AzureProfile.from_dict(json.loads(cls.data_store.read_file(path)), path)
            else:
                cls.profile = _profile_from_settings(path)
        return cls.profile

    @classmethod
    def get_context(cls) -> Optional[AzureContext]:
        return cls.get_profile().context

    @classmethod
    def get_client_factory(cls):
        if cls.client_factory is None:
            from .client_factory import ClientFactory
            cls.client_factory = ClientFactory()
        return cls.client_factory

    @classmethod
    def get_authentication_factory(cls):
        if cls.authentication_factory is None:
            from .authentication import AuthenticationFactory
            cls.authentication_factory = AuthenticationFactory()
        return cls.authentication_factory

    @classmethod
    def reset(cls) -> None:
        cls.data_store = DiskDataStore()
        cls.profile = None
        cls.client_factory = None
        cls.authentication_factory = None
        cls.verify_ssl = True


def _profile_from_settings(path: str) -> AzureProfile:
    """Profile for a fresh session: AzureCloud plus the subscription named in the environment."""
    from ..config import get_settings

    settings = get_settings()
    profile = AzureProfile(path)
    environment = profile.environments[CONSTANTS.AZURE_CLOUD_NAME]

    subscription = AzureSubscription(environment=environment.name)
    if settings.AZURE_SUBSCRIPTION_ID:
        subscription.id = uuid.UUID(settings.AZURE_SUBSCRIPTION_ID)
        subscription.properties["Default"] = "True"
        profile.subscriptions[subscription.id] = subscription

    tenant = AzureTenant(id=uuid.UUID(settings.AZURE_TENANT_ID) if settings.AZURE_TENANT_ID else None)
    profile.context = AzureContext(subscription, AzureAccount(), environment, tenant)
    return profile
