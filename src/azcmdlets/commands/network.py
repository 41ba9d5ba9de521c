"""
Reserved IP commands.

A reserved IP is a public IP address with static allocation; the label is
kept as the "label" tag.

Commands:
    New-ReservedIP, Get-ReservedIP, Remove-ReservedIP
"""

import logging

from azure.mgmt.network import NetworkManagementClient
from azure.mgmt.network.models import PublicIPAddress, PublicIPAddressSku
from azure.mgmt.resource import ResourceManagementClient

from ..core.cmdlet import AzureRMCmdlet
from ..core.parameters import Parameter, ValidateLength, ValidateNotNullOrEmpty
from ..core.registry import CommandRegistry
from .resources import ensure_resource_group_exists

logger = logging.getLogger(__name__)

STATIC_ALLOCATION = "Static"
LABEL_TAG = "label"


def is_reserved(address: PublicIPAddress) -> bool:
    return (address.public_ip_allocation_method or "").lower() == STATIC_ALLOCATION.lower()


@CommandRegistry.register
class NewReservedIP(AzureRMCmdlet):
    verb, noun = "New", "ReservedIP"

    name = Parameter(mandatory=True, validators=[ValidateLength(1, 80)], aliases=["ReservedIPName"])
    resource_group = Parameter(mandatory=True, validators=[ValidateLength(1, 90)], aliases=["ResourceGroupName"])
    location = Parameter(mandatory=True, validators=[ValidateNotNullOrEmpty()])
    label = Parameter(validators=[ValidateLength(0, 100)])

    def execute_cmdlet(self):
        ensure_resource_group_exists(self.get_client(ResourceManagementClient), self.resource_group, self.cmdlet_name)

        parameters = PublicIPAddress(
            location=self.location,
            sku=PublicIPAddressSku(name="Standard"),
            public_ip_allocation_method=STATIC_ALLOCATION,
            tags={LABEL_TAG: self.label} if self.label else None,
        )
        self.write_verbose(f"Reserving IP '{self.name}' in {self.location}")
        address = self.get_client(NetworkManagementClient).public_ip_addresses.begin_create_or_update(
            self.resource_group, self.name, parameters
        ).result()
        logger.info(f"✓ Reserved IP {self.name}: {address.ip_address}")
        self.write_object(address)


@CommandRegistry.register
class GetReservedIP(AzureRMCmdlet):
    verb, noun = "Get", "ReservedIP"

    name = Parameter(validators=[ValidateLength(1, 80)], aliases=["ReservedIPName"])
    resource_group = Parameter(validators=[ValidateLength(1, 90)], aliases=["ResourceGroupName"])

    def execute_cmdlet(self):
        client = self.get_client(NetworkManagementClient)
        if self.name and self.resource_group:
            self.write_object(client.public_ip_addresses.get(self.resource_group, self.name))
            return

        if self.resource_group:
            addresses = client.public_ip_addresses.list(self.resource_group)
        else:
            addresses = client.public_ip_addresses.list_all()

        reserved = [a for a in addresses if is_reserved(a)]
        if self.name:
            reserved = [a for a in reserved if a.name.lower() == self.name.lower()]
        self.write_object(reserved, enumerate_collection=True)


@CommandRegistry.register
class RemoveReservedIP(AzureRMCmdlet):
    verb, noun = "Remove", "ReservedIP"

    name = Parameter(mandatory=True, validators=[ValidateLength(1, 80)], aliases=["ReservedIPName"])
    resource_group = Parameter(mandatory=True, validators=[ValidateLength(1, 90)], aliases=["ResourceGroupName"])
    force = Parameter(type=bool, default=False)
    pass_thru = Parameter(type=bool, default=False)

    def execute_cmdlet(self):
        self.write_verbose(f"Releasing reserved IP '{self.name}'")
        self.get_client(NetworkManagementClient).public_ip_addresses.begin_delete(
            self.resource_group, self.name
        ).result()
        logger.info(f"✓ Reserved IP {self.name} removed")
        if self.pass_thru:
            self.write_object(True)
