"""
Unit tests for the Azure Stack admin models.
"""

from azcmdlets.clients.models import (
    ProviderRegistration,
    ProviderRegistrationProperties,
    RegionalManifest,
    ResourceProviderEndpoint,
)


class TestProviderRegistration:

    def test_parse_wire_format(self):
        registration = ProviderRegistration.model_validate({
            "id": "/subscriptions/x/resourceGroups/system/providers/Microsoft.Subscriptions/providerRegistrations/rp",
            "name": "rp",
            "location": "local",
            "properties": {
                "displayName": "My RP",
                "manifestEndpoint": {"endpointUri": "https://rp.local:4443/"},
                "routingResourceManagerType": "Default",
            },
        })

        assert registration.properties.display_name == "My RP"
        assert registration.properties.manifest_endpoint.endpoint_uri == "https://rp.local:4443/"
        # unknown fields survive
        assert registration.properties.model_extra["routingResourceManagerType"] == "Default"

    def test_to_wire_uses_aliases_and_drops_none(self):
        registration = ProviderRegistration(
            name="rp",
            properties=ProviderRegistrationProperties(
                display_name="My RP",
                manifest_endpoint=ResourceProviderEndpoint(endpoint_uri="https://rp.local/", authentication_username="admin")
            )
        )

        wire = registration.to_wire()

        assert wire == {
            "name": "rp",
            "properties": {
                "displayName": "My RP",
                "manifestEndpoint": {"endpointUri": "https://rp.local/", "authenticationUsername": "admin"},
            },
        }

    def test_registered_name_prefers_properties_name(self):
        registration = ProviderRegistration(properties=ProviderRegistrationProperties(
            name="Explicit", manifest=RegionalManifest(namespace="Microsoft.Manifest")
        ))
        assert registration.registered_name == "Explicit"

    def test_registered_name_falls_back_to_manifest_namespace(self):
        registration = ProviderRegistration(properties=ProviderRegistrationProperties(
            manifest=RegionalManifest(namespace="Microsoft.Manifest")
        ))
        assert registration.registered_name == "Microsoft.Manifest"
        assert ProviderRegistration().registered_name is None
