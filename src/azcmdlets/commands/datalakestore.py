"""
Data Lake Store account commands.

Commands:
    New-DataLakeStoreAccount, Get-DataLakeStoreAccount,
    Remove-DataLakeStoreAccount, Test-DataLakeStoreAccount
"""

import logging

from azure.core.exceptions import ResourceNotFoundError
from azure.mgmt.datalake.store import DataLakeStoreAccountManagementClient
from azure.mgmt.datalake.store.models import CreateDataLakeStoreAccountParameters
from azure.mgmt.resource import ResourceManagementClient

from ..core.cmdlet import AzureRMCmdlet
from ..core.exceptions import InvalidOperationError
from ..core.parameters import Parameter, ValidateLength, ValidateNotNullOrEmpty
from ..core.registry import CommandRegistry
from .resources import ensure_resource_group_exists

logger = logging.getLogger(__name__)

# Account names: 3-24 lower-case letters and digits
ACCOUNT_NAME_LENGTH = (3, 24)


def _resource_group_of(resource_id: str) -> str:
    """'/subscriptions/x/resourceGroups/rg/providers/...' -> 'rg'."""
    parts = resource_id.split("/")
    for i, part in enumerate(parts):
        if part.lower() == "resourcegroups" and i + 1 < len(parts):
            return parts[i + 1]
    raise ValueError(f"No resource group in resource id '{resource_id}'")


class DataLakeStoreCmdlet(AzureRMCmdlet):
    """Shared lookups for the account commands."""

    @property
    def data_lake_client(self) -> DataLakeStoreAccountManagementClient:
        return self.get_client(DataLakeStoreAccountManagementClient)

    def find_account(self, name: str, resource_group: str = None):
        """Account by name; searches the subscription when no resource group is given. None if absent."""
        client = self.data_lake_client
        if resource_group:
            try:
                return client.accounts.get(resource_group, name)
            except ResourceNotFoundError:
                return None

        for account in client.accounts.list():
            if account.name.lower() == name.lower():
                return account
        return None


@CommandRegistry.register
class NewDataLakeStoreAccount(DataLakeStoreCmdlet):
    verb, noun = "New", "DataLakeStoreAccount"

    resource_group = Parameter(mandatory=True, validators=[ValidateLength(1, 90)], aliases=["ResourceGroupName"])
    name = Parameter(mandatory=True, validators=[ValidateLength(*ACCOUNT_NAME_LENGTH)])
    location = Parameter(mandatory=True, validators=[ValidateNotNullOrEmpty()])

    def execute_cmdlet(self):
        ensure_resource_group_exists(self.get_client(ResourceManagementClient), self.resource_group, self.cmdlet_name)

        if self.find_account(self.name, self.resource_group) is not None:
            raise InvalidOperationError(
                f"An account with the name '{self.name}' already exists in resource group '{self.resource_group}'.",
                command=self.cmdlet_name
            )

        self.write_verbose(f"Creating Data Lake Store account '{self.name}' in {self.location}")
        poller = self.data_lake_client.accounts.begin_create(
            self.resource_group,
            self.name,
            CreateDataLakeStoreAccountParameters(location=self.location)
        )
        account = poller.result()
        logger.info(f"✓ Data Lake Store account {self.name} created")
        self.write_object(account)


@CommandRegistry.register
class GetDataLakeStoreAccount(DataLakeStoreCmdlet):
    verb, noun = "Get", "DataLakeStoreAccount"

    name = Parameter(validators=[ValidateLength(*ACCOUNT_NAME_LENGTH)])
    resource_group = Parameter(validators=[ValidateLength(1, 90)], aliases=["ResourceGroupName"])

    def execute_cmdlet(self):
        client = self.data_lake_client
        if not self.name:
            if self.resource_group:
                accounts = client.accounts.list_by_resource_group(self.resource_group)
            else:
                accounts = client.accounts.list()
            self.write_object(list(accounts), enumerate_collection=True)
            return

        resource_group = self.resource_group
        if not resource_group:
            account = self.find_account(self.name)
            if account is None:
                raise InvalidOperationError(
                    f"Data Lake Store account '{self.name}' was not found in the subscription.",
                    command=self.cmdlet_name
                )
            resource_group = _resource_group_of(account.id)

        # get() returns the full account including properties
        self.write_object(client.accounts.get(resource_group, self.name))


@CommandRegistry.register
class RemoveDataLakeStoreAccount(DataLakeStoreCmdlet):
    verb, noun = "Remove", "DataLakeStoreAccount"

    name = Parameter(mandatory=True, validators=[ValidateLength(*ACCOUNT_NAME_LENGTH)])
    resource_group = Parameter(validators=[ValidateLength(1, 90)], aliases=["ResourceGroupName"])
    force = Parameter(type=bool, default=False)
    pass_thru = Parameter(type=bool, default=False)

    def execute_cmdlet(self):
        resource_group = self.resource_group
        if not resource_group:
            account = self.find_account(self.name)
            if account is None:
                raise InvalidOperationError(
                    f"Data Lake Store account '{self.name}' was not found in the subscription.",
                    command=self.cmdlet_name
                )
            resource_group = _resource_group_of(account.id)

        self.write_verbose(f"Removing Data Lake Store account '{self.name}'")
        self.data_lake_client.accounts.begin_delete(resource_group, self.name).result()
        logger.info(f"✓ Data Lake Store account {self.name} removed")
        if self.pass_thru:
            self.write_object(True)


@CommandRegistry.register
class TestDataLakeStoreAccount(DataLakeStoreCmdlet):
    """Writes True when the account exists, False otherwise."""

    verb, noun = "Test", "DataLakeStoreAccount"

    name = Parameter(mandatory=True, validators=[ValidateLength(*ACCOUNT_NAME_LENGTH)])
    resource_group = Parameter(validators=[ValidateLength(1, 90)], aliases=["ResourceGroupName"])

    def execute_cmdlet(self):
        self.write_object(self.find_account(self.name, self.resource_group) is not None)
