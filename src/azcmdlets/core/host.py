"""
Script host.

Runs scenario scripts written in the command-line call syntax:

    # comments and blank lines are skipped
    $rg = "TestRg01"
    New-ResourceGroup -Name $rg -Location "westus"
    $offer = New-Offer -Services @("Microsoft.Sql", "Microsoft.Storage") -Force
    Assert-NotNull $offer

Commands come from imported modules (cmdlet classes and @script_command
functions registered by the module) plus the built-in Write-* commands.
With $ErrorActionPreference = "Stop" the first failing command raises;
otherwise the failure is appended to the error stream and the script
continues.
"""

import importlib
import importlib.util
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .. import constants as CONSTANTS
from .exceptions import ScriptRuntimeError
from .registry import CommandRegistry

logger = logging.getLogger(__name__)

PREFERENCE_VARIABLES = {
    "ErrorActionPreference": CONSTANTS.PREFERENCE_CONTINUE,
    "VerbosePreference": CONSTANTS.PREFERENCE_SILENTLY_CONTINUE,
    "DebugPreference": CONSTANTS.PREFERENCE_SILENTLY_CONTINUE,
    "WarningPreference": CONSTANTS.PREFERENCE_CONTINUE,
}

_ASSIGNMENT = re.compile(r"^\$(?P<name>[A-Za-z_][A-Za-z0-9_]*)\s*=\s*(?P<rest>.+)$")
_VARIABLE_IN_STRING = re.compile(r"\$(?P<name>[A-Za-z_][A-Za-z0-9_]*)")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def to_snake_case(name: str) -> str:
    """'SubscriptionUser' -> 'subscription_user'."""
    return _CAMEL_BOUNDARY.sub("_", name.lstrip("-")).replace("-", "_").lower()


def get_member(obj: Any, name: str) -> Any:
    """
    '$registration.Properties.DisplayName' lookup of one member.

    Dict keys match case-insensitively, attributes by name or by their
    snake_case form. A missing member (or a None object) yields None.
    """
    if obj is None:
        return None
    if isinstance(obj, dict):
        for key, value in obj.items():
            if str(key).lower() == name.lower():
                return value
        return None
    for attribute in (name, to_snake_case(name)):
        if hasattr(obj, attribute):
            return getattr(obj, attribute)
    return None


# ==========================================
# Tokenizer
# ==========================================

class Token:
    """A lexical element of a script line: word, string or array."""

    __slots__ = ("kind", "text", "quote")

    def __init__(self, kind: str, text: str, quote: Optional[str] = None):
        self.kind = kind
        self.text = text
        self.quote = quote

    def __repr__(self):
        return f"Token({self.kind!r}, {self.text!r})"

    @property
    def is_parameter_name(self) -> bool:
        return self.kind == "word" and len(self.text) > 1 and self.text[0] == "-" and self.text[1].isalpha()


def _read_quoted(line: str, start: int) -> Tuple[str, int]:
    """Read a quoted string starting at line[start]; a doubled quote is an escaped quote."""
    quote = line[start]
    chars = []
    i = start + 1
    while i < len(line):
        if line[i] == quote:
            if i + 1 < len(line) and line[i + 1] == quote:
                chars.append(quote)
                i += 2
                continue
            return "".join(chars), i + 1
        if line[i] == "`" and quote == '"' and i + 1 < len(line):
            chars.append(line[i + 1])
            i += 2
            continue
        chars.append(line[i])
        i += 1
    raise ScriptRuntimeError(f"The string is missing the terminator: {quote}. Line: {line}")


def _read_array(line: str, start: int) -> Tuple[str, int]:
    """Read '@( ... )' starting at line[start]; returns the inner text."""
    depth = 0
    i = start + 1
    while i < len(line):
        c = line[i]
        if c in "\"'":
            _, i = _read_quoted(line, i)
            continue
        if c == "(":
            depth += 1
        elif c == ")":
            depth -= 1
            if depth == 0:
                return line[start + 2:i], i + 1
        i += 1
    raise ScriptRuntimeError(f"Missing closing ')' in array expression. Line: {line}")


def tokenize(line: str) -> List[Token]:
    tokens = []
    i = 0
    while i < len(line):
        c = line[i]
        if c.isspace():
            i += 1
        elif c == "#":
            break
        elif c in "\"'":
            text, i = _read_quoted(line, i)
            tokens.append(Token("string", text, quote=c))
        elif line.startswith("@(", i):
            text, i = _read_array(line, i)
            tokens.append(Token("array", text))
        else:
            j = i
            while j < len(line) and not line[j].isspace() and line[j] not in "\"'#":
                j += 1
            tokens.append(Token("word", line[i:j]))
            i = j
    return tokens


def _split_array_items(inner: str) -> List[str]:
    items, current, i = [], [], 0
    while i < len(inner):
        c = inner[i]
        if c in "\"'":
            _, end = _read_quoted(inner, i)
            current.append(inner[i:end])
            i = end
            continue
        if c == ",":
            items.append("".join(current).strip())
            current = []
        else:
            current.append(c)
        i += 1
    tail = "".join(current).strip()
    if tail or items:
        items.append(tail)
    return [item for item in items if item]


# ==========================================
# Host
# ==========================================

class CommandHost:
    """
    Executes scripts against an explicit command table.

    Attributes:
        commands: Imported commands keyed by lower-case name
        variables: Script variables, including the preference variables
        output: Objects written by top-level script lines
        errors: Error stream (messages of non-terminating failures)
    """

    def __init__(self):
        self.commands: Dict[str, Any] = {}
        self.variables: Dict[str, Any] = dict(PREFERENCE_VARIABLES)
        self.output: List[Any] = []
        self.errors: List[str] = []
        self.imported_modules: List[str] = []
        self._add_commands(BUILTIN_COMMANDS)

    # ==========================================
    # Modules and Variables
    # ==========================================

    def import_module(self, module: str) -> List[str]:
        """
        Import commands from a module.

        Args:
            module: Dotted module name (e.g., "azcmdlets.commands") or path to a .py file

        Returns:
            Names of the commands made available

        Raises:
            ScriptRuntimeError: If the module file does not exist
        """
        if module.endswith(".py") or Path(module).suffix == ".py":
            module_name = self._load_file_module(Path(module))
        else:
            module_name = importlib.import_module(module).__name__

        commands = CommandRegistry.commands_in_module(module_name)
        self._add_commands(commands)
        self.imported_modules.append(module)
        logger.debug(f"Imported {len(commands)} command(s) from {module}")
        return sorted(commands)

    def _load_file_module(self, path: Path) -> str:
        if not path.exists():
            raise ScriptRuntimeError(f"The specified module '{path}' was not loaded because no valid module file was found.")

        module_name = f"azcmdlets_scripts.{re.sub(r'[^0-9A-Za-z_]', '_', path.stem)}"
        CommandRegistry.clear(module_name)
        spec = importlib.util.spec_from_file_location(module_name, path)
        loaded = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(loaded)
        return module_name

    def _add_commands(self, commands: Dict[str, Any]) -> None:
        for name, command in commands.items():
            self.commands[name.lower()] = command

    def get_command(self, name: str) -> Any:
        try:
            return self.commands[name.lower()]
        except KeyError:
            raise ScriptRuntimeError(
                f"The term '{name}' is not recognized as the name of a cmdlet, function or script.",
                command=name
            )

    def set_variable(self, name: str, value: Any) -> None:
        self.variables[name] = value

    def get_variable(self, name: str) -> Any:
        lowered = name.lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
        if lowered == "null":
            return None
        for key, value in self.variables.items():
            if key.lower() == lowered:
                return value
        return None

    def preference(self, name: str) -> str:
        return str(self.get_variable(name) or PREFERENCE_VARIABLES[name])

    # ==========================================
    # Execution
    # ==========================================

    def run_script(self, script: str) -> List[Any]:
        """
        Run every line of a script.

        Returns:
            Objects written by the script's lines

        Raises:
            Exception: The first failure, when ErrorActionPreference is Stop
        """
        written = []
        for line in script.splitlines():
            if not line.strip() or line.strip().startswith("#"):
                continue
            try:
                written.extend(self.run_line(line))
            except Exception as e:
                self.write_error(e)
        self.output.extend(written)
        return written

    def run_line(self, line: str) -> List[Any]:
        line = line.strip()
        match = _ASSIGNMENT.match(line)
        if match:
            result, is_command = self._evaluate(match.group("rest"))
            if is_command:
                # a single output object is assigned unwrapped
                if len(result) == 1:
                    result = result[0]
                elif not result:
                    result = None
            self.set_variable(match.group("name"), result)
            return []

        result, _ = self._evaluate(line)
        return result if isinstance(result, list) else [result]

    def _evaluate(self, text: str) -> Tuple[Any, bool]:
        """Evaluate a command call or a single value; the flag tells which it was."""
        tokens = tokenize(text)
        if not tokens:
            return [], False
        head = tokens[0]
        if head.kind == "word" and not head.text.startswith("$") and not head.is_parameter_name:
            name, params = self.parse_command(tokens)
            return self.invoke(name, **params), True
        if len(tokens) > 1:
            raise ScriptRuntimeError(f"Unexpected token '{tokens[1].text}' in expression: {text}")
        return self._value(head), False

    def parse_command(self, tokens: List[Token]) -> Tuple[str, Dict[str, Any]]:
        """
        Split command tokens into the command name and named parameters.

        '-Switch' without a value binds True; '-Name:value' binds value.
        A single value without a name binds to the command's first
        positional slot ('InputObject').
        """
        name = tokens[0].text
        params: Dict[str, Any] = {}
        positional = []
        i = 1
        while i < len(tokens):
            token = tokens[i]
            if token.is_parameter_name:
                parameter, _, inline = token.text[1:].partition(":")
                if inline:
                    params[parameter] = self._value(Token("word", inline))
                    i += 1
                elif i + 1 < len(tokens) and not tokens[i + 1].is_parameter_name:
                    params[parameter] = self._value(tokens[i + 1])
                    i += 2
                else:
                    params[parameter] = True
                    i += 1
            else:
                positional.append(self._value(token))
                i += 1

        if len(positional) > 1:
            raise ScriptRuntimeError(
                f"A positional parameter cannot be found that accepts argument '{positional[1]}'.",
                command=name
            )
        if positional:
            params["InputObject"] = positional[0]
        return name, params

    def _value(self, token: Token) -> Any:
        if token.kind == "string":
            if token.quote == '"':
                return _VARIABLE_IN_STRING.sub(lambda m: str(self.get_variable(m.group("name"))), token.text)
            return token.text
        if token.kind == "array":
            values = []
            for item in _split_array_items(token.text):
                item_tokens = tokenize(item)
                values.extend(self._value(t) for t in item_tokens)
            return values
        if token.text.startswith("$"):
            name, *members = token.text[1:].split(".")
            value = self.get_variable(name)
            for member in members:
                value = get_member(value, member)
            return value
        return token.text

    def invoke(self, name: str, **params) -> List[Any]:
        """
        Invoke a command by name with named parameters.

        Cmdlet classes are instantiated and bound; script functions are
        called with the host and snake_case keyword arguments.
        """
        command = self.get_command(name)
        logger.debug(f"Invoking {name} {sorted(params)}")

        if isinstance(command, type):
            return command(host=self).invoke(**params)

        result = command(self, **{to_snake_case(k): v for k, v in params.items()})
        if result is None:
            return []
        return result if isinstance(result, list) else [result]

    # ==========================================
    # Streams
    # ==========================================

    def write_error(self, error: Any) -> None:
        message = str(error)
        if self.preference("ErrorActionPreference").lower() == CONSTANTS.PREFERENCE_STOP.lower():
            if isinstance(error, Exception):
                raise error
            raise ScriptRuntimeError(message, errors=self.errors)
        logger.error(message)
        self.errors.append(message)

    def write_verbose(self, message: str) -> None:
        if self.preference("VerbosePreference").lower() == CONSTANTS.PREFERENCE_CONTINUE.lower():
            logger.info(f"VERBOSE: {message}")
        else:
            logger.debug(f"VERBOSE: {message}")

    def write_debug(self, message: str) -> None:
        if self.preference("DebugPreference").lower() == CONSTANTS.PREFERENCE_CONTINUE.lower():
            logger.info(f"DEBUG: {message}")
        else:
            logger.debug(f"DEBUG: {message}")

    def write_warning(self, message: str) -> None:
        if self.preference("WarningPreference").lower() != CONSTANTS.PREFERENCE_SILENTLY_CONTINUE.lower():
            logger.warning(message)


# ==========================================
# Built-in Commands
# ==========================================

def write_verbose(host: CommandHost, input_object=None, message=None):
    host.write_verbose(str(message if message is not None else input_object))


def write_debug(host: CommandHost, input_object=None, message=None):
    host.write_debug(str(message if message is not None else input_object))


def write_warning(host: CommandHost, input_object=None, message=None):
    host.write_warning(str(message if message is not None else input_object))


def write_error(host: CommandHost, input_object=None, message=None):
    host.write_error(str(message if message is not None else input_object))


def write_output(host: CommandHost, input_object=None):
    return input_object


BUILTIN_COMMANDS = {
    "Write-Verbose": write_verbose,
    "Write-Debug": write_debug,
    "Write-Warning": write_warning,
    "Write-Error": write_error,
    "Write-Output": write_output,
}
