"""
Record/playback scenario test harness.

Modules:
    recorder: HttpMockServer (vcrpy cassettes + recorded variables) and request matchers
    environment: TestEnvironment from TEST_CSM_ORGID_AUTHENTICATION / TEST_ORGID_AUTHENTICATION
    mock_context: MockContext / UndoContext scoping one test
    setup_helper: EnvironmentSetupHelper (session, modules, script execution)
    assertions, common: script commands available to every scenario script
    runners: per-service test runners

Usage:
    from azcmdlets.testing.runners import AzStackTestRunner

    class TestAzureStack:
        def test_provider_registration(self):
            AzStackTestRunner().run_ps_test("Test-ProviderRegistration")
"""

from .environment import CSMTestEnvironmentFactory, RDFETestEnvironmentFactory, TestEnvironment
from .mock_context import MockContext, UndoContext
from .recorder import HttpMockServer, HttpRecorderMode, PermissiveRecordMatcherWithApiExclusion, RecordMatcher
from .setup_helper import AzureModule, EnvironmentSetupHelper
from .utilities import TestUtilities

__all__ = [
    "CSMTestEnvironmentFactory",
    "RDFETestEnvironmentFactory",
    "TestEnvironment",
    "MockContext",
    "UndoContext",
    "HttpMockServer",
    "HttpRecorderMode",
    "PermissiveRecordMatcherWithApiExclusion",
    "RecordMatcher",
    "AzureModule",
    "EnvironmentSetupHelper",
    "TestUtilities",
]
