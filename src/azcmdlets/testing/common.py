"""Helper commands shared by all scenario scripts."""

import logging

from ..core.registry import script_command
from ..core.session import AzureSession
from .recorder import HttpMockServer

logger = logging.getLogger(__name__)

DEFAULT_RESOURCE_GROUP_PREFIX = "pstestrg"
DEFAULT_LOCATION = "West US"


@script_command("Ignore-SelfSignedCert")
def ignore_self_signed_cert(host):
    """Turn off TLS certificate verification for every client built afterwards."""
    AzureSession.verify_ssl = False
    host.write_verbose("TLS certificate verification disabled")
    return []


@script_command("Get-ResourceName")
def get_resource_name(host, input_object=None, prefix=None):
    return HttpMockServer.get_asset_name(prefix or input_object or "ps")


@script_command("Get-ResourceGroupName")
def get_resource_group_name(host, input_object=None, prefix=None):
    return HttpMockServer.get_asset_name(prefix or input_object or DEFAULT_RESOURCE_GROUP_PREFIX)


@script_command("Get-ProviderLocation")
def get_provider_location(host, input_object=None, provider=None):
    logger.debug(f"Location for {provider or input_object}: {DEFAULT_LOCATION}")
    return DEFAULT_LOCATION


@script_command("Get-TestMode")
def get_test_mode(host):
    return HttpMockServer.get_current_mode().value
