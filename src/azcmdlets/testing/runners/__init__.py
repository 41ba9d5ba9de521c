"""
Scenario test runners.

    ScenarioTestRunner           - shared record/playback workflow
    AzStackTestRunner            - Azure Stack admin (provider registrations, environment)
    AzStackAdminTestBase         - recorded resource group / plan / offer names
    AdlsTestsBase                - Data Lake Store accounts
    ServiceManagementTestRunner  - reserved IPs
"""

from .base import ScenarioTestRunner
from .azure_stack import AzStackAdminTestBase, AzStackTestRunner
from .datalake_store import AdlsTestsBase
from .service_management import ServiceManagementTestRunner

__all__ = [
    "ScenarioTestRunner",
    "AzStackTestRunner",
    "AzStackAdminTestBase",
    "AdlsTestsBase",
    "ServiceManagementTestRunner",
]
