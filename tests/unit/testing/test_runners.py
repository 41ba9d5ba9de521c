"""
Unit tests for the scenario runners' hooks (no recording involved).
"""

import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from azcmdlets.core.exceptions import InvalidOperationError, RecordingNotFoundError
from azcmdlets.testing.recorder import HttpMockServer, HttpRecorderMode, PermissiveRecordMatcherWithApiExclusion
from azcmdlets.testing.runners import (
    AdlsTestsBase,
    AzStackAdminTestBase,
    AzStackTestRunner,
    ScenarioTestRunner,
    ServiceManagementTestRunner,
)


class TestScenarioTestRunner:

    @pytest.mark.parametrize("calling_class, expected", [
        ("TestAzureStack", "azure_stack.py"),
        ("tests.scenario_tests.TestResourceGroupScenario", "resource_group_scenario.py"),
        ("ReservedIPTests", "reserved_iptests.py"),
        ("Test", "test.py"),
    ])
    def test_script_module_name(self, calling_class, expected):
        assert ScenarioTestRunner.test_script_module(calling_class) == expected

    def test_resolve_modules_skips_missing_test_script(self, tmp_path):
        runner = ScenarioTestRunner(tmp_path)
        assert runner.resolve_modules("TestNothing") == [
            "azcmdlets.commands.profile",
            "azcmdlets.commands.resources",
        ]

    def test_resolve_modules_includes_test_script(self, tmp_path):
        (tmp_path / "azure_stack.py").write_text("")
        runner = AzStackTestRunner(tmp_path)

        modules = runner.resolve_modules("TestAzureStack")

        assert modules[:3] == [
            str(tmp_path / "global_variables.py"),
            str(tmp_path / "common_operations.py"),
            str(tmp_path / "azure_stack.py"),
        ]


class TestAzStackTestRunner:

    def _settings(self, tmp_path, values):
        (tmp_path / "appsettings.json").write_text(json.dumps(values))

    def test_build_scripts_without_aad(self, tmp_path):
        self._settings(tmp_path, {"AadEnvironment": "false"})

        scripts = AzStackTestRunner(tmp_path).build_scripts("Test-Something")

        assert scripts == [
            "Ignore-SelfSignedCert",
            "Set-AzureStackEnvironment -AzureStackMachineName azurestack",
            "Test-Something",
        ]

    def test_build_scripts_with_aad(self, tmp_path):
        self._settings(tmp_path, {
            "AadEnvironment": "True",
            "AadTenantId": "contoso.onmicrosoft.com",
            "AadApiApplicationId": "https://adminmanagement.contoso.onmicrosoft.com/app",
            "ArmEndpoint": "https://adminmanagement.local.azurestack.external/",
        })

        line = AzStackTestRunner(tmp_path).build_scripts()[1]

        assert "-AadTenantId contoso.onmicrosoft.com" in line
        assert "-AadApplicationId https://adminmanagement.contoso.onmicrosoft.com/app" in line
        assert "-ArmEndpoint https://adminmanagement.local.azurestack.external/" in line
        assert "-GalleryEndpoint" not in line

    def test_runner_modules_include_azure_stack_commands(self, tmp_path):
        assert AzStackTestRunner(tmp_path).runner_modules() == [
            "azcmdlets.commands.profile",
            "azcmdlets.commands.resources",
            "azcmdlets.commands.azurestack",
        ]

    def test_missing_aad_environment_setting_raises(self, tmp_path):
        from azcmdlets.core.exceptions import ConfigurationError

        self._settings(tmp_path, {})
        with pytest.raises(ConfigurationError, match="AadEnvironment"):
            AzStackTestRunner(tmp_path).build_scripts()


class TestAzStackAdminTestBase:

    def test_names_recorded_and_replayed(self):
        HttpMockServer.mode = HttpRecorderMode.RECORD
        recorder = AzStackAdminTestBase()
        recorder.initialize_names()
        recorded = dict(HttpMockServer.variables)

        HttpMockServer.mode = HttpRecorderMode.PLAYBACK
        replayer = AzStackAdminTestBase()
        replayer.initialize_names()

        assert replayer.resource_group_name == recorded["ResourceGroupName"]
        assert replayer.offer_name == recorded["OfferName"]
        assert replayer.offer_name.startswith("TestOffer")

    def test_playback_without_recorded_names_raises(self):
        HttpMockServer.mode = HttpRecorderMode.PLAYBACK
        HttpMockServer.variables = {}
        with pytest.raises(RecordingNotFoundError, match="ResourceGroupName"):
            AzStackAdminTestBase().initialize_names()

    def test_name_variables(self):
        base = AzStackAdminTestBase()
        base.resource_group_name, base.plan_name, base.offer_name = "rg", "plan", "offer"
        assert base.name_variables() == ['$ResourceGroupName = "rg"', '$PlanName = "plan"', '$OfferName = "offer"']


class TestAdlsTestsBase:

    def _runner(self, provider):
        runner = AdlsTestsBase()
        runner.resource_management_client = MagicMock()
        runner.resource_management_client.providers.get.return_value = provider
        return runner

    def _provider(self, **overrides):
        values = dict(
            id="/subscriptions/x/providers/Microsoft.DataLakeStore",
            namespace="Microsoft.DataLakeStore",
            registration_state="Registered",
            resource_types=[SimpleNamespace(locations=["East US 2"])],
        )
        values.update(overrides)
        return SimpleNamespace(**values)

    def test_registration_accepted(self):
        runner = self._runner(self._provider(registration_state="Registering"))
        runner.try_register_subscription_for_resource()
        runner.resource_management_client.providers.register.assert_called_once_with("Microsoft.DataLakeStore")

    @pytest.mark.parametrize("overrides, message", [
        ({"id": ""}, "Provider.id"),
        ({"namespace": "Other"}, "Provider name"),
        ({"registration_state": "NotRegistered"}, "NotRegistered"),
        ({"resource_types": []}, "resource_types is empty"),
        ({"resource_types": [SimpleNamespace(locations=[])]}, "locations is empty"),
    ])
    def test_registration_rejected(self, overrides, message):
        runner = self._runner(self._provider(**overrides))
        with pytest.raises(InvalidOperationError, match=message):
            runner.try_register_subscription_for_resource()

    def test_matcher_ignores_authorization_api_version(self):
        AdlsTestsBase().configure_recorder()
        assert isinstance(HttpMockServer.matcher, PermissiveRecordMatcherWithApiExclusion)
        assert "microsoft.authorization" in HttpMockServer.matcher.providers

    def test_try_create_resource_group_checks_name(self):
        runner = AdlsTestsBase()
        runner.resource_management_client = MagicMock()
        runner.resource_management_client.resource_groups.get.return_value = SimpleNamespace(name="other")
        with pytest.raises(InvalidOperationError, match="not equal"):
            runner.try_create_resource_group("adlsrg")


class TestServiceManagementTestRunner:

    def test_records_next_to_scripts(self, tmp_path):
        ServiceManagementTestRunner(tmp_path / "scripts").configure_recorder()
        assert HttpMockServer.records_directory == str(tmp_path / "SessionRecords")

    def test_imports_sub_directory_then_scripts(self, tmp_path):
        (tmp_path / "reserved_ips").mkdir()
        (tmp_path / "reserved_ips" / "reserved_ip.py").write_text("")
        (tmp_path / "common.py").write_text("")

        modules = ServiceManagementTestRunner(tmp_path).resolve_modules("TestReservedIP")

        assert modules == [
            str(tmp_path / "reserved_ips" / "reserved_ip.py"),
            str(tmp_path / "common.py"),
            "azcmdlets.commands.resources",
        ]
