"""
Unit tests for CommandRegistry and command naming.
"""

import pytest

from azcmdlets.core.cmdlet import Cmdlet
from azcmdlets.core.exceptions import ScriptRuntimeError
from azcmdlets.core.registry import CommandRegistry, command_name, script_command


@pytest.fixture
def registered():
    """Register a cmdlet and a script function from this module; clean them up after."""

    @CommandRegistry.register
    class GetWidget(Cmdlet):
        verb, noun = "Get", "Widget"

        def execute_cmdlet(self):
            pass

    @script_command("Test-Widget")
    def test_widget(host):
        return True

    yield GetWidget, test_widget
    CommandRegistry.clear(__name__)


class TestCommandRegistry:

    def test_commands_in_module(self, registered):
        commands = CommandRegistry.commands_in_module(__name__)
        assert set(commands) == {"Get-Widget", "Test-Widget"}

    def test_package_includes_submodules(self, registered):
        commands = CommandRegistry.commands_in_module("tests.unit")
        assert "Get-Widget" in commands

    def test_lookup_is_case_insensitive(self, registered):
        cmdlet_cls, _ = registered
        assert CommandRegistry.get("get-widget") is cmdlet_cls

    def test_unknown_name_raises(self):
        with pytest.raises(ScriptRuntimeError, match="not recognized"):
            CommandRegistry.get("Get-DoesNotExist")

    def test_list_commands_sorted(self, registered):
        names = CommandRegistry.list_commands()
        assert names == sorted(names)
        assert "Test-Widget" in names

    def test_register_requires_name(self):
        class Nameless(Cmdlet):
            pass

        with pytest.raises(ValueError):
            CommandRegistry.register(Nameless)

    def test_clear_single_module(self, registered):
        CommandRegistry.clear(__name__)
        assert CommandRegistry.commands_in_module(__name__) == {}

    def test_shipped_commands_registered(self):
        import azcmdlets.commands  # noqa: F401

        commands = CommandRegistry.commands_in_module("azcmdlets.commands")
        assert "Set-ResourceProviderRegistration" in commands
        assert "New-ResourceGroup" in commands


class TestCommandName:

    def test_cmdlet_class(self, registered):
        assert command_name(registered[0]) == "Get-Widget"

    def test_script_function(self, registered):
        assert command_name(registered[1]) == "Test-Widget"

    def test_plain_object(self):
        assert command_name(object()) is None
