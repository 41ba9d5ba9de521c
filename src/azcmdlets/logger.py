import logging
import sys
import traceback

from colorlog import ColoredFormatter

LOGGER_NAME = "azcmdlets"


def setup_logger(debug_mode=False):
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if debug_mode else logging.INFO)

    # Create console handler
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.DEBUG if debug_mode else logging.INFO)

    # Create colored formatter
    formatter = ColoredFormatter(
        "%(log_color)s[%(levelname)s] %(message)s",
        log_colors={
            "DEBUG":    "cyan",
            "INFO":     "green",
            "WARNING":  "yellow",
            "ERROR":    "red",
            "CRITICAL": "red,bg_white",
        }
    )
    handler.setFormatter(formatter)

    if not logger.handlers:
        logger.addHandler(handler)
    else:
        for existing in logger.handlers:
            existing.setLevel(logging.DEBUG if debug_mode else logging.INFO)

    return logger


def get_debug_mode():
    return DEBUG_MODE


def print_stack_trace():
    """
    Print the stack trace of the exception being handled if debug mode is enabled.
    """
    if get_debug_mode():
        error_msg = traceback.format_exc()
        logger.error(error_msg)


# Logger defaults to INFO unless reconfigured later.
DEBUG_MODE = False
logger = setup_logger(debug_mode=DEBUG_MODE)


def configure_logger(debug_mode: bool) -> None:
    """Re-setup the package logger, e.g. after reading --debug or AZCMDLETS_DEBUG."""
    global logger, DEBUG_MODE
    DEBUG_MODE = debug_mode
    logger = setup_logger(debug_mode=DEBUG_MODE)
    if DEBUG_MODE:
        logger.debug("Debug mode is active.")
