"""
Azure Stack admin API models.

Thin DTOs for the Microsoft.Subscriptions admin resources the commands
use. Field names are snake_case; the JSON wire names are the aliases.
Unknown fields returned by the service are kept (extra="allow").
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _ArmModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ResourceGroup(_ArmModel):
    id: Optional[str] = None
    name: str
    location: Optional[str] = None
    tags: Optional[Dict[str, str]] = None


class ResourceProviderEndpoint(_ArmModel):
    endpoint_uri: Optional[str] = Field(default=None, alias="endpointUri")
    authentication_username: Optional[str] = Field(default=None, alias="authenticationUsername")
    authentication_password: Optional[str] = Field(default=None, alias="authenticationPassword")


class RegionalManifest(_ArmModel):
    """Regional resource provider manifest; only the namespace is interpreted."""

    namespace: Optional[str] = None
    resource_types: Optional[List[Dict[str, Any]]] = Field(default=None, alias="resourceTypes")


class ProviderRegistrationProperties(_ArmModel):
    display_name: Optional[str] = Field(default=None, alias="displayName")
    name: Optional[str] = None
    namespace: Optional[str] = None
    enabled: Optional[bool] = None
    location: Optional[str] = None
    manifest_endpoint: Optional[ResourceProviderEndpoint] = Field(default=None, alias="manifestEndpoint")
    manifest: Optional[RegionalManifest] = None
    provisioning_state: Optional[str] = Field(default=None, alias="provisioningState")


class ProviderRegistration(_ArmModel):
    id: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None
    location: Optional[str] = None
    properties: ProviderRegistrationProperties = Field(default_factory=ProviderRegistrationProperties)

    @property
    def registered_name(self) -> Optional[str]:
        """Registration name, falling back to the manifest namespace."""
        if self.properties.name:
            return self.properties.name
        if self.properties.manifest is not None:
            return self.properties.manifest.namespace
        return None
