"""
Core abstractions for the management commands.

This package provides the command model (parameters, binding, parameter
sets), the script host that runs scenario scripts, and the session that
supplies the Azure context and management clients to every command.

Modules:
    parameters: Parameter declarations and validators
    cmdlet: Cmdlet, AzureRMCmdlet and AdminApiCmdlet base classes
    registry: CommandRegistry for name-based command lookup
    host: CommandHost script runner
    session: AzureSession, AzureProfile and context types
    authentication: Credential factories (live and mock)
    client_factory: ClientFactory and MockClientFactory
    config_loader: App settings loading utilities
    exceptions: Custom exception types

Usage:
    from azcmdlets.core import CommandHost

    host = CommandHost()
    host.import_module("azcmdlets.commands")
    host.run_script('New-ResourceGroup -Name "rg1" -Location "westus"')
"""

from .cmdlet import AdminApiCmdlet, AzureRMCmdlet, Cmdlet
from .exceptions import (
    ClientNotAvailableError,
    CmdletError,
    ConfigurationError,
    InvalidOperationError,
    ParameterBindingError,
    ParameterValidationError,
    RecordingNotFoundError,
    ScriptRuntimeError,
)
from .host import CommandHost
from .parameters import Parameter
from .registry import CommandRegistry, script_command
from .session import AzureContext, AzureEnvironment, AzureProfile, AzureSession

__all__ = [
    # Commands
    "Cmdlet",
    "AzureRMCmdlet",
    "AdminApiCmdlet",
    "Parameter",
    "CommandRegistry",
    "script_command",
    "CommandHost",
    # Session
    "AzureSession",
    "AzureProfile",
    "AzureContext",
    "AzureEnvironment",
    # Exceptions
    "CmdletError",
    "ParameterBindingError",
    "ParameterValidationError",
    "InvalidOperationError",
    "ConfigurationError",
    "ClientNotAvailableError",
    "RecordingNotFoundError",
    "ScriptRuntimeError",
]
