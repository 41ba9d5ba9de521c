"""
Parameter declarations and validators for commands.

A command declares its parameters as class attributes:

    class NewResourceGroup(AzureRMCmdlet):
        name = Parameter(mandatory=True, validators=[ValidateLength(1, 90)])
        location = Parameter(mandatory=True, validators=[ValidateNotNullOrEmpty()])

The command-line name of a parameter is the PascalCase form of the attribute
name ("resource_group" -> "ResourceGroup"); matching is case-insensitive and
ignores underscores and hyphens, so "ResourceGroup", "resourcegroup" and
"resource_group" all bind to the same parameter.

A parameter without parameter_sets belongs to every parameter set of the
command.
"""

import json
import uuid
from typing import Any, Iterable, Optional, Sequence
from urllib.parse import urlparse

from .exceptions import ParameterValidationError


def normalize_parameter_name(name: str) -> str:
    """Canonical form used to compare parameter names."""
    return name.replace("_", "").replace("-", "").lower()


def to_pascal_case(name: str) -> str:
    return "".join(part[:1].upper() + part[1:] for part in name.split("_"))


class Parameter:
    """
    Declares a named command parameter.

    Args:
        mandatory: Whether the parameter is required in its parameter sets
        parameter_sets: Names of the sets this parameter belongs to (None = all sets)
        validators: Validators run against the converted value
        type: Target type (str, int, bool, uuid.UUID, list)
        default: Value used when the parameter is not supplied
        aliases: Additional accepted names
    """

    def __init__(
        self,
        mandatory: bool = False,
        parameter_sets: Optional[Sequence[str]] = None,
        validators: Optional[Iterable['Validator']] = None,
        type: type = str,
        default: Any = None,
        aliases: Optional[Sequence[str]] = None,
    ):
        self.mandatory = mandatory
        self.parameter_sets = tuple(parameter_sets) if parameter_sets else None
        self.validators = list(validators or [])
        self.type = type
        self.default = default
        self.aliases = tuple(aliases or ())
        self.attribute = None
        self.name = None

    def __set_name__(self, owner, attribute):
        self.attribute = attribute
        self.name = to_pascal_case(attribute)

    def __get__(self, instance, owner):
        if instance is None:
            return self
        return instance.__dict__.get(self.attribute, self.default)

    def __set__(self, instance, value):
        instance.__dict__[self.attribute] = value

    @property
    def is_switch(self) -> bool:
        return self.type is bool

    def names(self) -> set:
        return {normalize_parameter_name(n) for n in (self.name, *self.aliases)}

    def in_set(self, set_name: str) -> bool:
        return self.parameter_sets is None or set_name in self.parameter_sets

    def convert(self, value: Any) -> Any:
        """Convert a raw value (usually a string from a script line) to the declared type."""
        if value is None:
            return None

        if self.type is bool:
            if isinstance(value, bool):
                return value
            return str(value).strip().lower() in ("true", "1", "yes", "$true")

        if self.type is uuid.UUID:
            if isinstance(value, uuid.UUID):
                return value
            try:
                return uuid.UUID(str(value))
            except ValueError:
                raise ParameterValidationError(
                    f"Cannot convert value '{value}' to type Guid.", parameter=self.name
                )

        if self.type is int:
            try:
                return int(value)
            except (TypeError, ValueError):
                raise ParameterValidationError(
                    f"Cannot convert value '{value}' to type Int32.", parameter=self.name
                )

        if self.type is list:
            if isinstance(value, (list, tuple)):
                return list(value)
            return [value]

        if self.type is dict:
            if not isinstance(value, dict):
                raise ParameterValidationError(
                    f"Cannot convert value '{value}' to type Hashtable.", parameter=self.name
                )
            return value

        if isinstance(value, (list, tuple)):
            raise ParameterValidationError(
                "Cannot convert an array to a single value.", parameter=self.name
            )
        return str(value)

    def validate(self, value: Any) -> None:
        for validator in self.validators:
            validator(self.name, value)


# ==========================================
# Validators
# ==========================================

class Validator:
    """Base class; subclasses raise ParameterValidationError on failure."""

    def __call__(self, parameter_name: str, value: Any) -> None:
        raise NotImplementedError

    def fail(self, parameter_name: str, message: str) -> None:
        raise ParameterValidationError(message, parameter=parameter_name)


class ValidateNotNull(Validator):
    def __call__(self, parameter_name, value):
        if value is None:
            self.fail(parameter_name, "The argument is null.")


class ValidateNotNullOrEmpty(Validator):
    def __call__(self, parameter_name, value):
        if value is None or (hasattr(value, "__len__") and len(value) == 0):
            self.fail(parameter_name, "The argument is null or empty.")


class ValidateLength(Validator):
    """Checks 'min_length <= len(value) <= max_length' for strings."""

    def __init__(self, min_length: int, max_length: int):
        self.min_length = min_length
        self.max_length = max_length

    def __call__(self, parameter_name, value):
        if value is None:
            return
        length = len(value)
        if length < self.min_length:
            self.fail(
                parameter_name,
                f"The number of characters ({length}) in the argument is too small. "
                f"Specify an argument whose length is greater than or equal to "
                f"\"{self.min_length}\" and then try the command again."
            )
        if length > self.max_length:
            self.fail(
                parameter_name,
                f"The character length of the {length} argument is too long. "
                f"Shorten the character length of the argument so it is fewer than "
                f"or equal to \"{self.max_length}\" characters, and then try the command again."
            )


class ValidateAbsoluteUri(Validator):
    def __call__(self, parameter_name, value):
        if value is None:
            return
        parsed = urlparse(str(value))
        if not parsed.scheme or not parsed.netloc:
            self.fail(parameter_name, f"The value '{value}' is not an absolute URI.")


class ValidateGuidNotEmpty(Validator):
    def __call__(self, parameter_name, value):
        if value is None:
            return
        if uuid.UUID(str(value)).int == 0:
            self.fail(parameter_name, "The Guid value must not be empty.")


class ValidateSet(Validator):
    """Value must be one of the allowed values (case-insensitive)."""

    def __init__(self, *allowed: str):
        self.allowed = allowed

    def __call__(self, parameter_name, value):
        if value is None:
            return
        if str(value).lower() not in {a.lower() for a in self.allowed}:
            self.fail(
                parameter_name,
                f"The argument '{value}' does not belong to the set "
                f"\"{','.join(self.allowed)}\"."
            )


class ValidateJson(Validator):
    def __call__(self, parameter_name, value):
        if value is None:
            return
        try:
            json.loads(value)
        except (TypeError, ValueError) as e:
            self.fail(parameter_name, f"The value is not valid JSON: {e}")
