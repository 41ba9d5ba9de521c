"""
Unit tests for the Azure Stack admin client.

The pipeline's send_request is replaced, so these tests check request
shape and response handling without any HTTP traffic.
"""

import json
from unittest.mock import MagicMock

import pytest
from azure.core.exceptions import HttpResponseError, ResourceExistsError, ResourceNotFoundError

from azcmdlets.clients.azure_stack import AzureStackClient
from azcmdlets.clients.models import ProviderRegistration, ProviderRegistrationProperties
from azcmdlets.core.authentication import MockTokenCredential

SUBSCRIPTION_ID = "11111111-2222-3333-4444-555555555555"
REGISTRATIONS_PATH = (
    f"/subscriptions/{SUBSCRIPTION_ID}/resourcegroups/system"
    "/providers/Microsoft.Subscriptions/providerRegistrations"
)


class FakeResponse:
    def __init__(self, status_code=200, body=None, reason="OK"):
        self.status_code = status_code
        self.reason = reason
        self.content = json.dumps(body).encode() if body is not None else b""

    def json(self):
        return json.loads(self.content)

    def text(self):
        return self.content.decode()


@pytest.fixture
def client():
    client = AzureStackClient(
        MockTokenCredential(),
        SUBSCRIPTION_ID,
        base_url="https://adminmanagement.local.azurestack.external"
    )
    client._client.send_request = MagicMock()
    return client


def _sent(client, index=0):
    return client._client.send_request.call_args_list[index][0][0]


class TestResourceGroups:

    def test_list_sends_api_version(self, client):
        client._client.send_request.return_value = FakeResponse(body={"value": [{"name": "system", "location": "local"}]})

        groups = client.resource_groups.list()

        request = _sent(client)
        assert request.method == "GET"
        assert request.url.startswith(
            f"https://adminmanagement.local.azurestack.external/subscriptions/{SUBSCRIPTION_ID}/resourcegroups"
        )
        assert "api-version=2015-11-01" in request.url
        assert [g.name for g in groups] == ["system"]

    def test_list_follows_next_link(self, client):
        client._client.send_request.side_effect = [
            FakeResponse(body={"value": [{"name": "a"}], "nextLink": "https://next/page2"}),
            FakeResponse(body={"value": [{"name": "b"}]}),
        ]

        groups = client.resource_groups.list()

        assert [g.name for g in groups] == ["a", "b"]
        assert _sent(client, 1).url == "https://next/page2"

    def test_get_missing_group_raises_not_found(self, client):
        client._client.send_request.return_value = FakeResponse(404, reason="Not Found")
        with pytest.raises(ResourceNotFoundError):
            client.resource_groups.get("missing")


class TestProviderRegistrations:

    def _registration(self):
        return ProviderRegistration(
            name="Microsoft.Test",
            location="local",
            properties=ProviderRegistrationProperties(
                display_name="Test RP", name="Microsoft.Test", namespace="Microsoft.Test", location="local"
            )
        )

    def test_create_or_update_puts_wire_body(self, client):
        client._client.send_request.return_value = FakeResponse(201, body={
            "name": "Microsoft.Test",
            "location": "local",
            "properties": {"displayName": "Test RP", "provisioningState": "Succeeded"},
        })

        created = client.provider_registrations.create_or_update("system", self._registration())

        request = _sent(client)
        assert request.method == "PUT"
        assert REGISTRATIONS_PATH + "/Microsoft.Test" in request.url
        assert json.loads(request.content)["properties"]["displayName"] == "Test RP"
        assert created.properties.provisioning_state == "Succeeded"

    def test_conflict_raises_resource_exists(self, client):
        client._client.send_request.return_value = FakeResponse(409, reason="Conflict")
        with pytest.raises(ResourceExistsError):
            client.provider_registrations.create_or_update("system", self._registration())

    def test_unexpected_status_raises_http_error(self, client):
        client._client.send_request.return_value = FakeResponse(500, reason="Internal Server Error")
        with pytest.raises(HttpResponseError) as exc_info:
            client.provider_registrations.list("system")
        assert exc_info.value.status_code == 500

    def test_delete_accepts_no_content(self, client):
        client._client.send_request.return_value = FakeResponse(204)
        assert client.provider_registrations.delete("system", "Microsoft.Test") is None
        assert _sent(client).method == "DELETE"

    def test_names_are_escaped_in_path(self, client):
        client._client.send_request.return_value = FakeResponse(body={"name": "a b"})
        client.provider_registrations.get("system", "a b")
        assert "/providerRegistrations/a%20b?" in _sent(client).url


class TestWithSubscription:

    def test_copy_targets_other_subscription(self, client):
        other = client.with_subscription("99999999-0000-0000-0000-000000000000")
        client._client.send_request.return_value = FakeResponse(body={"value": []})

        other.resource_groups.list()

        assert "/subscriptions/99999999-0000-0000-0000-000000000000/" in _sent(client).url
        assert client.subscription_id == SUBSCRIPTION_ID
