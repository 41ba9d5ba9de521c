"""
Command registry for name-based command lookup.

This module implements the Registry pattern: commands register themselves
when their module is imported, and are looked up by their "Verb-Noun" name.

How Registration Works:
    Cmdlet classes use the class decorator, script functions use
    script_command():

        @CommandRegistry.register
        class NewResourceGroup(AzureRMCmdlet):
            verb, noun = "New", "ResourceGroup"

        @script_command("Test-ResourceGroup")
        def test_resource_group(host, location="westus"):
            ...

    Registrations are grouped by module, so a script host can import a
    single module and pick up exactly the commands it defines. Importing
    azcmdlets.commands registers every shipped cmdlet.
"""

from typing import Callable, Dict, List, Optional, Union

from .exceptions import ScriptRuntimeError

Command = Union[type, Callable]


class CommandRegistry:
    """
    Central registry of cmdlet classes and script functions.

    Class-level state, because commands register at import time before any
    host exists. Names are case-insensitive, as on the command line.
    """

    # Key: module name, Value: {lower-case command name: command}
    _modules: Dict[str, Dict[str, Command]] = {}

    @classmethod
    def register(cls, command: Command) -> Command:
        """
        Register a cmdlet class (usable as a class decorator).

        Re-registering a name from the same module replaces the previous
        entry; this happens when a script file is imported again into a
        fresh host.

        Raises:
            ValueError: If the command has no name
        """
        name = command_name(command)
        if not name:
            raise ValueError(f"{command!r} does not declare a command name.")
        cls._modules.setdefault(command.__module__, {})[name.lower()] = command
        return command

    @classmethod
    def commands_in_module(cls, module_name: str) -> Dict[str, Command]:
        """
        Return the commands registered by a module, keyed by display name.

        For a package this includes the commands of its submodules.
        """
        commands = {}
        for registered, entries in cls._modules.items():
            if registered == module_name or registered.startswith(module_name + "."):
                for command in entries.values():
                    commands[command_name(command)] = command
        return commands

    @classmethod
    def get(cls, name: str) -> Command:
        """
        Look up a command by name across all modules.

        Raises:
            ScriptRuntimeError: If no module registered that name
        """
        for commands in cls._modules.values():
            if name.lower() in commands:
                return commands[name.lower()]
        raise ScriptRuntimeError(
            f"The term '{name}' is not recognized as the name of a command. "
            f"Available: {cls.list_commands()}"
        )

    @classmethod
    def list_commands(cls) -> List[str]:
        """List all registered command names, sorted alphabetically."""
        return sorted(
            command_name(command)
            for commands in cls._modules.values()
            for command in commands.values()
        )

    @classmethod
    def clear(cls, module_name: Optional[str] = None) -> None:
        """
        Clear registrations (all, or those of one module).

        Primarily used by tests to reset state.
        """
        if module_name is None:
            cls._modules.clear()
        else:
            cls._modules.pop(module_name, None)


def command_name(command: Command) -> Optional[str]:
    """'Verb-Noun' name of a cmdlet class or decorated script function."""
    name = getattr(command, "command_name", None)
    if isinstance(name, str):
        return name
    verb = getattr(command, "verb", None)
    noun = getattr(command, "noun", None)
    if verb and noun:
        return f"{verb}-{noun}"
    return None


def script_command(name: str) -> Callable[[Callable], Callable]:
    """
    Register a plain function as a script command.

    The function receives the running CommandHost as its first argument and
    the script parameters as snake_case keyword arguments.
    """
    def decorator(func: Callable) -> Callable:
        func.command_name = name
        CommandRegistry.register(func)
        return func
    return decorator
