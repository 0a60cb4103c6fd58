"""Structured logging backend - zap-style options rendered onto the logging module."""

import json
import logging
import os
import sys
import traceback
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, TextIO

from bbr.flags import FlagSet
from bbr.observability.logging.levels import (
    DEBUG_LEVEL,
    ERROR_LEVEL,
    INFO_LEVEL,
    WARN_LEVEL,
    from_stdlib_level,
    level_name,
    parse_backend_level,
    to_stdlib_level,
)

ENCODER_JSON = "json"
ENCODER_CONSOLE = "console"
ENCODERS = (ENCODER_JSON, ENCODER_CONSOLE)

TIME_ENCODINGS = ("epoch", "millis", "nano", "iso8601", "rfc3339", "rfc3339nano")

STACKTRACE_LEVELS = ("info", "error", "panic")

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


class Colors:
    """ANSI color codes (only used when TTY detected)"""
    RESET = '\033[0m'
    MAGENTA = '\033[95m'   # debug and below
    BLUE = '\033[94m'      # info
    YELLOW = '\033[93m'    # warn
    RED = '\033[91m'       # error and above


def _should_use_colors(stream: TextIO) -> bool:
    """Check if colored output should be enabled"""
    force_color = os.getenv('FORCE_COLOR', '').lower()
    if force_color in ('1', 'true', 'yes', 'on'):
        return True
    elif force_color in ('0', 'false', 'no', 'off'):
        return False

    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def _level_color(level: int) -> str:
    if level <= DEBUG_LEVEL:
        return Colors.MAGENTA
    if level == INFO_LEVEL:
        return Colors.BLUE
    if level == WARN_LEVEL:
        return Colors.YELLOW
    return Colors.RED


def format_time(created: float, encoding: str) -> Any:
    """Render a record timestamp with one of the zap time encodings."""
    if encoding == "millis":
        return created * 1000
    if encoding == "nano":
        return int(created * 1_000_000_000)
    if encoding == "epoch":
        return created

    ts = datetime.fromtimestamp(created).astimezone()
    if encoding == "rfc3339":
        return ts.isoformat(timespec="seconds")
    if encoding == "rfc3339nano":
        return ts.isoformat(timespec="microseconds")
    return ts.isoformat(timespec="milliseconds")


class ConsoleFormatter(logging.Formatter):
    """Tab separated, human readable lines: time, level, logger, caller, message."""

    def __init__(self, time_encoding: str = "iso8601", use_colors: bool = False):
        super().__init__()
        self.time_encoding = time_encoding
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        level = from_stdlib_level(record.levelno)
        name = level_name(level)
        if self.use_colors:
            name = f"{_level_color(level)}{name}{Colors.RESET}"

        fields = [
            str(format_time(record.created, self.time_encoding)),
            name,
            record.name,
            f"{record.filename}:{record.lineno}",
            record.getMessage(),
        ]
        extra = _extra_fields(record)
        if extra:
            fields.append(json.dumps(extra, default=str, ensure_ascii=False))

        line = "\t".join(fields)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        if record.stack_info:
            line += "\n" + record.stack_info
        return line


class JSONFormatter(logging.Formatter):
    """One JSON object per record, keyed the way zap's production encoder is."""

    def __init__(self, time_encoding: str = "epoch"):
        super().__init__()
        self.time_encoding = time_encoding

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "level": level_name(from_stdlib_level(record.levelno)),
            "ts": format_time(record.created, self.time_encoding),
            "logger": record.name,
            "caller": f"{record.filename}:{record.lineno}",
            "msg": record.getMessage(),
        }
        entry.update(_extra_fields(record))

        if record.exc_info and record.exc_info[1] is not None:
            entry["error"] = str(record.exc_info[1])
            entry["errorVerbose"] = self.formatException(record.exc_info)
        if record.stack_info:
            entry["stacktrace"] = record.stack_info

        return json.dumps(entry, default=str, ensure_ascii=False)


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS and not k.startswith("_")}


class StacktraceFilter(logging.Filter):
    """Attach the current call stack to records at or above a level."""

    def __init__(self, levelno: int):
        super().__init__()
        self.levelno = levelno

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno >= self.levelno and not record.stack_info and not record.exc_info:
            record.stack_info = "".join(traceback.format_stack()[:-1]).rstrip()
        return True


class _LevelFlag:
    """Flag value that parses a backend level into an attribute of BackendOptions."""

    def __init__(self, options: "BackendOptions", attr: str, allowed: Optional[tuple] = None):
        self.options = options
        self.attr = attr
        self.allowed = allowed

    def set(self, raw: str) -> None:
        if self.allowed and raw.strip().lower() not in self.allowed:
            raise ValueError(f"unrecognized level {raw!r}: use one of {', '.join(self.allowed)}")
        setattr(self.options, self.attr, parse_backend_level(raw))

    def __str__(self) -> str:
        level = getattr(self.options, self.attr)
        return "" if level is None else level_name(level)

    def type(self) -> str:
        return "level"


class _ChoiceFlag:
    """Flag value restricted to a fixed set of strings."""

    def __init__(self, options: "BackendOptions", attr: str, choices: tuple, type_name: str):
        self.options = options
        self.attr = attr
        self.choices = choices
        self.type_name = type_name

    def set(self, raw: str) -> None:
        if raw not in self.choices:
            raise ValueError(f"must be one of {', '.join(self.choices)}")
        setattr(self.options, self.attr, raw)

    def __str__(self) -> str:
        return getattr(self.options, self.attr)

    def type(self) -> str:
        return self.type_name


@dataclass
class BackendOptions:
    """Structured logging backend configuration.

    Unset fields (empty string or None) resolve from ``development`` when the
    handler is built: development logs console lines from debug up with
    stacktraces from warn, production logs JSON from info up with
    stacktraces from error.
    """

    development: bool = False
    encoder: str = ""
    level: Optional[int] = None
    stacktrace_level: Optional[int] = None
    time_encoding: str = ""

    def bind_flags(self, fs: FlagSet) -> None:
        """Bind the --zap-* flags onto ``fs``."""
        fs.bool_var(self, "development", "zap-devel", self.development,
                    "Development Mode defaults(encoder=consoleEncoder,logLevel=Debug,stackTraceLevel=Warn). "
                    "Production Mode defaults(encoder=jsonEncoder,logLevel=Info,stackTraceLevel=Error)")
        fs.var(_ChoiceFlag(self, "encoder", ENCODERS, "encoder"), "zap-encoder",
               "Zap log encoding (one of 'json' or 'console')")
        fs.var(_LevelFlag(self, "level"), "zap-log-level",
               "Zap Level to configure the verbosity of logging. Can be one of 'debug', 'info', 'error', "
               "'panic' or any integer value > 0 which corresponds to custom debug levels of increasing verbosity")
        fs.var(_LevelFlag(self, "stacktrace_level", STACKTRACE_LEVELS), "zap-stacktrace-level",
               "Zap Level at and above which stacktraces are captured (one of 'info', 'error', 'panic').")
        fs.var(_ChoiceFlag(self, "time_encoding", TIME_ENCODINGS, "time-encoding"), "zap-time-encoding",
               "Zap time encoding (one of 'epoch', 'millis', 'nano', 'iso8601', 'rfc3339' or 'rfc3339nano').")

    def resolved_level(self) -> int:
        if self.level is not None:
            return self.level
        return DEBUG_LEVEL if self.development else INFO_LEVEL

    def resolved_stacktrace_level(self) -> int:
        if self.stacktrace_level is not None:
            return self.stacktrace_level
        return WARN_LEVEL if self.development else ERROR_LEVEL

    def resolved_encoder(self) -> str:
        if self.encoder:
            return self.encoder
        return ENCODER_CONSOLE if self.development else ENCODER_JSON

    def resolved_time_encoding(self) -> str:
        if self.time_encoding:
            return self.time_encoding
        return "iso8601" if self.development else "epoch"

    def build_handler(self, stream: Optional[TextIO] = None) -> logging.Handler:
        """Create a stream handler with formatter, level and stacktrace filter applied."""
        stream = stream or sys.stderr
        handler = logging.StreamHandler(stream)
        handler.setLevel(to_stdlib_level(self.resolved_level()))

        if self.resolved_encoder() == ENCODER_JSON:
            formatter = JSONFormatter(time_encoding=self.resolved_time_encoding())
        else:
            formatter = ConsoleFormatter(
                time_encoding=self.resolved_time_encoding(),
                use_colors=_should_use_colors(stream),
            )
        handler.setFormatter(formatter)
        handler.addFilter(StacktraceFilter(to_stdlib_level(self.resolved_stacktrace_level())))
        handler._bbr_backend = True
        return handler

    def configure(self, logger: Optional[logging.Logger] = None,
                  stream: Optional[TextIO] = None) -> logging.Handler:
        """Install the backend handler on ``logger`` (root by default).

        A handler installed by an earlier call is replaced; other handlers are
        left alone.
        """
        target = logger or logging.getLogger()
        for existing in list(target.handlers):
            if getattr(existing, "_bbr_backend", False):
                target.removeHandler(existing)

        handler = self.build_handler(stream)
        target.setLevel(handler.level)
        target.addHandler(handler)
        return handler
