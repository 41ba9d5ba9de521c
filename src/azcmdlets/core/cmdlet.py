"""
Command base classes.

Cmdlet
    Parameter binding and output collection. invoke() binds the supplied
    named parameters, resolves the parameter set, converts and validates
    every value, and only then calls execute_cmdlet(). Nothing reaches the
    network before binding succeeded.

AzureRMCmdlet
    Adds the session context and client creation through the session
    client factory.

AdminApiCmdlet
    Azure Stack admin commands: execute_core() returns the object to write,
    get_azure_stack_client() targets the context or an explicit subscription.
"""

import logging
from typing import Any, Dict, List, Optional

from .exceptions import (
    InvalidOperationError,
    ParameterBindingError,
    ParameterValidationError,
)
from .parameters import Parameter, normalize_parameter_name
from .session import AzureContext, AzureSession

logger = logging.getLogger(__name__)

ALL_PARAMETER_SETS = "__AllParameterSets"


class Cmdlet:
    """
    Base class for all commands.

    Subclasses set verb, noun, optionally default_parameter_set, declare
    Parameter attributes and implement execute_cmdlet().
    """

    verb: Optional[str] = None
    noun: Optional[str] = None
    default_parameter_set: Optional[str] = None

    def __init__(self, host=None):
        self.host = host
        self.output: List[Any] = []
        self.parameter_set_name: Optional[str] = None
        self.bound_parameters: Dict[str, Any] = {}

    @property
    def cmdlet_name(self) -> str:
        return f"{self.verb}-{self.noun}"

    # ==========================================
    # Parameter Declarations
    # ==========================================

    @classmethod
    def parameters(cls) -> Dict[str, Parameter]:
        """Declared parameters keyed by attribute name, base classes first."""
        declared = {}
        for klass in reversed(cls.__mro__):
            for attribute, value in vars(klass).items():
                if isinstance(value, Parameter):
                    declared[attribute] = value
        return declared

    @classmethod
    def parameter_set_names(cls) -> List[str]:
        names = set()
        for parameter in cls.parameters().values():
            names.update(parameter.parameter_sets or ())
        return sorted(names) or [ALL_PARAMETER_SETS]

    # ==========================================
    # Binding
    # ==========================================

    def invoke(self, **params) -> List[Any]:
        """
        Bind parameters and run the command.

        Args:
            **params: Parameter values by name (case-insensitive)

        Returns:
            Objects written by the command

        Raises:
            ParameterBindingError: Unknown, duplicate, missing or ambiguous parameters
            ParameterValidationError: A value failed conversion or validation
        """
        self.bind(params)
        logger.debug(f"{self.cmdlet_name} bound to parameter set {self.parameter_set_name}")
        self.execute_cmdlet()
        return self.output

    def bind(self, params: Dict[str, Any]) -> None:
        declared = self.parameters()
        lookup = {}
        for parameter in declared.values():
            for key in parameter.names():
                lookup[key] = parameter

        supplied = {}
        for raw_name, value in params.items():
            parameter = lookup.get(normalize_parameter_name(raw_name))
            if parameter is None:
                raise ParameterBindingError(
                    f"A parameter cannot be found that matches parameter name '{raw_name}'.",
                    command=self.cmdlet_name,
                    parameter=raw_name
                )
            if parameter.attribute in supplied:
                raise ParameterBindingError(
                    f"Cannot bind parameter because parameter '{parameter.name}' is specified more than once.",
                    command=self.cmdlet_name,
                    parameter=parameter.name
                )
            supplied[parameter.attribute] = value

        self.parameter_set_name = self._resolve_parameter_set(declared, supplied)

        for attribute, raw_value in supplied.items():
            parameter = declared[attribute]
            try:
                value = parameter.convert(raw_value)
                if value is None and parameter.mandatory and parameter.in_set(self.parameter_set_name):
                    raise ParameterValidationError(
                        "Cannot bind argument because it is null.", parameter=parameter.name
                    )
                parameter.validate(value)
            except ParameterValidationError as e:
                raise ParameterValidationError(e.message, command=self.cmdlet_name, parameter=parameter.name) from e

            setattr(self, attribute, value)
            self.bound_parameters[parameter.name] = value

    def _resolve_parameter_set(self, declared: Dict[str, Parameter], supplied: Dict[str, Any]) -> str:
        def missing(set_name: str) -> List[str]:
            return [
                p.name for attribute, p in declared.items()
                if p.mandatory and p.in_set(set_name) and attribute not in supplied
            ]

        candidates = [
            set_name for set_name in self.parameter_set_names()
            if all(declared[attribute].in_set(set_name) for attribute in supplied)
        ]
        if not candidates:
            raise ParameterBindingError(
                "Parameter set cannot be resolved using the specified named parameters.",
                command=self.cmdlet_name
            )

        complete = [set_name for set_name in candidates if not missing(set_name)]
        if not complete:
            target = self.default_parameter_set if self.default_parameter_set in candidates else candidates[0]
            raise ParameterBindingError(
                f"Missing mandatory parameters: {', '.join(missing(target))}.",
                command=self.cmdlet_name
            )

        if len(complete) == 1:
            return complete[0]
        if self.default_parameter_set in complete:
            return self.default_parameter_set
        raise ParameterBindingError(
            f"Parameter set cannot be resolved; the parameters match sets {', '.join(complete)}.",
            command=self.cmdlet_name
        )

    # ==========================================
    # Execution and Streams
    # ==========================================

    def execute_cmdlet(self) -> None:
        raise NotImplementedError(f"{type(self).__name__} must implement execute_cmdlet()")

    def write_object(self, obj: Any, enumerate_collection: bool = False) -> None:
        if enumerate_collection and isinstance(obj, (list, tuple)):
            self.output.extend(obj)
        elif obj is not None:
            self.output.append(obj)

    def write_verbose(self, message: str) -> None:
        if self.host is not None:
            self.host.write_verbose(message)
        else:
            logger.debug(message)

    def write_debug(self, message: str) -> None:
        if self.host is not None:
            self.host.write_debug(message)
        else:
            logger.debug(message)

    def write_warning(self, message: str) -> None:
        if self.host is not None:
            self.host.write_warning(message)
        else:
            logger.warning(message)


class AzureRMCmdlet(Cmdlet):
    """Command running against the session's current Azure context."""

    @property
    def default_context(self) -> AzureContext:
        context = AzureSession.get_context()
        if context is None:
            raise InvalidOperationError(
                "No Azure context is set. Use Set-AzureContext first.", command=self.cmdlet_name
            )
        return context

    def get_client(self, client_cls: type, **kwargs) -> Any:
        return AzureSession.get_client_factory().create_arm_client(
            client_cls, self.default_context, **kwargs
        )


class AdminApiCmdlet(AzureRMCmdlet):
    """Azure Stack admin command; execute_core() returns the object to write."""

    def execute_cmdlet(self) -> None:
        result = self.execute_core()
        self.write_object(result, enumerate_collection=True)

    def execute_core(self) -> Any:
        raise NotImplementedError(f"{type(self).__name__} must implement execute_core()")

    def get_azure_stack_client(self, subscription_id=None):
        """Azure Stack client for the context subscription, or for subscription_id when given."""
        from ..clients.azure_stack import AzureStackClient

        client = self.get_client(AzureStackClient)
        if subscription_id:
            return client.with_subscription(str(subscription_id))
        return client
