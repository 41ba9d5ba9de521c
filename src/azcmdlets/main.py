"""
azcmdlets - CLI Entry Point.

Runs a single command and prints its output as JSON:

    azcmdlets New-ResourceGroup -Name rg1 -Location westus

Without a command it starts an interactive loop reading one script line at
a time ('help', 'list' and 'exit' are handled by the loop itself).
"""

import argparse
import dataclasses
import json
import sys
import uuid
from enum import Enum
from typing import Any, List, Optional

from . import logger as logging_setup
from .config import get_settings
from .core.exceptions import CmdletError
from .core.host import CommandHost
from .core.registry import command_name

COMMANDS_MODULE = "azcmdlets.commands"


# ==========================================
# Output
# ==========================================

def to_serializable(obj: Any) -> Any:
    """Convert command output (SDK models, pydantic models, dataclasses) to JSON-friendly values."""
    if obj is None or isinstance(obj, (str, int, float, bool)):
        return obj
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, uuid.UUID):
        return str(obj)
    if isinstance(obj, dict):
        return {str(k): to_serializable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set)):
        return [to_serializable(v) for v in obj]
    if hasattr(obj, "model_dump"):
        return to_serializable(obj.model_dump(by_alias=True, exclude_none=True))
    if hasattr(obj, "as_dict"):
        return to_serializable(obj.as_dict())
    if dataclasses.is_dataclass(obj):
        return to_serializable(dataclasses.asdict(obj))
    return str(obj)


def print_output(output: List[Any]) -> None:
    if not output:
        return
    value = output[0] if len(output) == 1 else output
    print(json.dumps(to_serializable(value), indent=2))


# ==========================================
# Command Helpers
# ==========================================

def help_menu():
    print("""
Available commands:

  <Verb-Noun> [-Parameter value ...]  - Runs a command, e.g.
                                        New-ResourceGroup -Name rg1 -Location westus
  $name = <Verb-Noun> ...             - Runs a command and stores its output in $name
  list                                - Lists all available commands.
  help                                - Shows this help menu.
  exit                                - Exit the program.
""")


def create_host() -> CommandHost:
    host = CommandHost()
    host.import_module(COMMANDS_MODULE)
    return host


def run_line(host: CommandHost, line: str) -> bool:
    """Run one script line; returns False if it failed."""
    logger = logging_setup.logger
    try:
        print_output(host.run_line(line))
        return True
    except CmdletError as e:
        logger.error(f"✗ {e}")
    except Exception as e:
        logger.error(f"✗ {type(e).__name__}: {e}")
    logging_setup.print_stack_trace()
    return False


def interactive_loop(host: CommandHost) -> int:
    logger = logging_setup.logger
    logger.info("Welcome to azcmdlets. Type 'help' for commands.")

    while True:
        try:
            user_input = input(">>> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("Goodbye!")
            break

        if not user_input or user_input.startswith("#"):
            continue

        if user_input == "help":
            help_menu()
            continue

        elif user_input == "list":
            for name in list_command_names(host):
                print(f"  {name}")
            continue

        elif user_input == "exit":
            print("Goodbye!")
            break

        run_line(host, user_input)

    return 0


def list_command_names(host: CommandHost) -> List[str]:
    return sorted(command_name(command) or name for name, command in host.commands.items())


# ==========================================
# Main
# ==========================================

def parse_args(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(prog="azcmdlets", description="Azure management commands")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging and stack traces")
    parser.add_argument("command", nargs=argparse.REMAINDER, help="Command line, e.g. Get-ResourceGroup -Name rg1")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging_setup.configure_logger(args.debug or get_settings().AZCMDLETS_DEBUG)

    host = create_host()
    if not args.command:
        return interactive_loop(host)

    return 0 if run_line(host, " ".join(_quote(a) for a in args.command)) else 1


def _quote(argument: str) -> str:
    # shell already split the line; re-quote arguments holding whitespace
    if any(c.isspace() for c in argument) and not argument.startswith(("'", '"')):
        return "'" + argument.replace("'", "''") + "'"
    return argument


if __name__ == "__main__":
    sys.exit(main())
