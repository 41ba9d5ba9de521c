"""
Custom exceptions for the management commands and the test harness.

Exception Hierarchy:
    CmdletError (base)
    ├── ParameterBindingError - Unknown, missing or ambiguous parameters
    ├── ParameterValidationError - A parameter value failed validation
    ├── InvalidOperationError - A precondition of the operation does not hold
    ├── ConfigurationError - Invalid or missing settings
    ├── ClientNotAvailableError - Mock client factory has no such client
    ├── RecordingNotFoundError - Playback requested but nothing was recorded
    └── ScriptRuntimeError - Script host failure (unknown command, error stream)

Errors raised by the Azure SDKs (azure.core.exceptions.HttpResponseError and
subclasses) are not wrapped; they reach the caller unchanged.
"""

from typing import Optional


class CmdletError(Exception):
    """
    Base exception for all command-related errors.

    Attributes:
        message: Human-readable error description
        command: Optional command name (e.g., "New-ResourceGroup")
        parameter: Optional parameter name the error refers to
    """

    def __init__(
        self,
        message: str,
        command: Optional[str] = None,
        parameter: Optional[str] = None
    ):
        self.message = message
        self.command = command
        self.parameter = parameter

        # Build detailed message with context
        details = []
        if command:
            details.append(f"command={command}")
        if parameter:
            details.append(f"parameter={parameter}")

        if details:
            full_message = f"{message} [{', '.join(details)}]"
        else:
            full_message = message

        super().__init__(full_message)


class ParameterBindingError(CmdletError):
    """
    Raised when supplied parameters cannot be bound to a parameter set.

    This typically occurs when:
    - A parameter name is not declared by the command
    - A mandatory parameter of every candidate parameter set is missing
    - The supplied parameters match more than one parameter set
    """


class ParameterValidationError(CmdletError):
    """
    Raised when a bound parameter value fails one of its validators.

    Example:
        >>> NewResourceGroup().invoke(Name="rg", Location="")
        ParameterValidationError: The argument is null or empty. [command=New-ResourceGroup, parameter=Location]
    """


class InvalidOperationError(CmdletError):
    """
    Raised when a precondition of the requested operation does not hold,
    e.g. the target resource group does not exist.
    """


class ConfigurationError(CmdletError):
    """
    Raised when configuration is invalid or missing required fields.

    This typically occurs when:
    - A mandatory app settings key is missing
    - The app settings file has invalid JSON
    - A test environment connection string is malformed
    """

    def __init__(self, message: str, config_file: Optional[str] = None):
        self.config_file = config_file
        if config_file:
            message = f"{message} (file: {config_file})"
        super().__init__(message)


class ClientNotAvailableError(CmdletError):
    """Raised when a mock client factory holds no client of the requested type."""

    def __init__(self, client_type: str):
        self.client_type = client_type
        super().__init__(f"Client of type {client_type} is not available in the mock client factory.")


class RecordingNotFoundError(CmdletError):
    """Raised in Playback mode when no recording exists for the running test."""

    def __init__(self, recording_path: str):
        self.recording_path = recording_path
        super().__init__(
            f"No recording found at {recording_path}. "
            "Run the test with AZURE_TEST_MODE=Record to create it."
        )


class ScriptRuntimeError(CmdletError):
    """
    Raised by the script host when a script cannot run to completion.

    Attributes:
        errors: The host's error stream at the time of failure
    """

    def __init__(self, message: str, command: Optional[str] = None, errors: Optional[list] = None):
        self.errors = list(errors or [])
        super().__init__(message, command=command)
