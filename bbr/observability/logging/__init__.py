"""Logging configuration: -v verbosity, backend level and handler setup."""

from .backend import BackendOptions, ConsoleFormatter, JSONFormatter
from .levels import (
    DEBUG,
    DEFAULT,
    INVALID_LOG_VERBOSITY,
    TRACE,
    VERBOSE,
    InvalidLogVerbosityError,
    backend_level_for_verbosity,
    to_stdlib_level,
    v_level,
)
from .options import ZAP_LOG_LEVEL_FLAG_NAME, LoggingOptions, new_options

__all__ = [
    "BackendOptions",
    "ConsoleFormatter",
    "JSONFormatter",
    "DEBUG",
    "DEFAULT",
    "INVALID_LOG_VERBOSITY",
    "TRACE",
    "VERBOSE",
    "InvalidLogVerbosityError",
    "backend_level_for_verbosity",
    "to_stdlib_level",
    "v_level",
    "ZAP_LOG_LEVEL_FLAG_NAME",
    "LoggingOptions",
    "new_options",
]
