"""
Resource group and resource provider commands (Azure Resource Manager).

Commands:
    New-ResourceGroup, Get-ResourceGroup, Remove-ResourceGroup
    Register-ResourceProvider, Get-ResourceProvider
"""

import logging

from azure.mgmt.resource import ResourceManagementClient

from ..core.cmdlet import AzureRMCmdlet
from ..core.exceptions import InvalidOperationError
from ..core.parameters import Parameter, ValidateLength, ValidateNotNullOrEmpty
from ..core.registry import CommandRegistry

logger = logging.getLogger(__name__)


def ensure_resource_group_exists(client: ResourceManagementClient, resource_group: str, command: str) -> None:
    """
    Precondition for commands creating resources inside a resource group.

    Raises:
        InvalidOperationError: If the resource group does not exist
    """
    if not client.resource_groups.check_existence(resource_group):
        raise InvalidOperationError(f"Resource group '{resource_group}' does not exist.", command=command)


@CommandRegistry.register
class NewResourceGroup(AzureRMCmdlet):
    verb, noun = "New", "ResourceGroup"

    name = Parameter(mandatory=True, validators=[ValidateLength(1, 90)], aliases=["ResourceGroupName"])
    location = Parameter(mandatory=True, validators=[ValidateNotNullOrEmpty()])
    force = Parameter(type=bool, default=False)

    def execute_cmdlet(self):
        client = self.get_client(ResourceManagementClient)

        if client.resource_groups.check_existence(self.name) and not self.force:
            raise InvalidOperationError(
                f"Resource group '{self.name}' already exists. Use -Force to update it.",
                command=self.cmdlet_name
            )

        self.write_verbose(f"Creating resource group '{self.name}' in {self.location}")
        group = client.resource_groups.create_or_update(self.name, {"location": self.location})
        logger.info(f"✓ Resource group {self.name} ready")
        self.write_object(group)


@CommandRegistry.register
class GetResourceGroup(AzureRMCmdlet):
    verb, noun = "Get", "ResourceGroup"

    name = Parameter(validators=[ValidateLength(1, 90)], aliases=["ResourceGroupName"])

    def execute_cmdlet(self):
        client = self.get_client(ResourceManagementClient)
        if self.name:
            self.write_object(client.resource_groups.get(self.name))
        else:
            self.write_object(list(client.resource_groups.list()), enumerate_collection=True)


@CommandRegistry.register
class RemoveResourceGroup(AzureRMCmdlet):
    verb, noun = "Remove", "ResourceGroup"

    name = Parameter(mandatory=True, validators=[ValidateLength(1, 90)], aliases=["ResourceGroupName"])
    force = Parameter(type=bool, default=False)
    pass_thru = Parameter(type=bool, default=False)

    def execute_cmdlet(self):
        client = self.get_client(ResourceManagementClient)
        self.write_verbose(f"Removing resource group '{self.name}'")
        client.resource_groups.begin_delete(self.name).result()
        logger.info(f"✓ Resource group {self.name} removed")
        if self.pass_thru:
            self.write_object(True)


@CommandRegistry.register
class RegisterResourceProvider(AzureRMCmdlet):
    verb, noun = "Register", "ResourceProvider"

    provider_namespace = Parameter(mandatory=True, validators=[ValidateNotNullOrEmpty()])
    force = Parameter(type=bool, default=False)

    def execute_cmdlet(self):
        client = self.get_client(ResourceManagementClient)
        self.write_verbose(f"Registering resource provider {self.provider_namespace}")
        self.write_object(client.providers.register(self.provider_namespace))


@CommandRegistry.register
class GetResourceProvider(AzureRMCmdlet):
    """Registered providers, a single provider, or all of them with -ListAvailable."""

    verb, noun = "Get", "ResourceProvider"

    provider_namespace = Parameter()
    list_available = Parameter(type=bool, default=False)

    def execute_cmdlet(self):
        client = self.get_client(ResourceManagementClient)
        if self.provider_namespace:
            self.write_object(client.providers.get(self.provider_namespace))
            return

        providers = list(client.providers.list())
        if not self.list_available:
            providers = [p for p in providers if (p.registration_state or "").lower() == "registered"]
        self.write_object(providers, enumerate_collection=True)
