"""
Shipped commands.

Importing this package registers every command with the CommandRegistry.

Package Structure:
    commands/
    ├── profile.py        # Get-/Set-AzureContext
    ├── resources.py      # Resource groups and resource providers
    ├── azurestack.py     # Azure Stack provider registrations and environment
    ├── datalakestore.py  # Data Lake Store accounts
    └── network.py        # Reserved (static public) IPs

Usage:
    host = CommandHost()
    host.import_module("azcmdlets.commands")
"""

# Import command modules to trigger registration
from . import profile
from . import resources
from . import azurestack
from . import datalakestore
from . import network
