"""Log verbosity constants and the verbosity -> backend level mapping.

Two numbering schemes meet here:

- verbosity (``-v``): 0 and up, higher means chattier.
- backend level: the structured logger's severity threshold, where lower is
  more permissive (-1 debug, 0 info, 1 warn, 2 error, ...). Verbosity N maps
  to backend level -N, so each extra ``-v`` step lets one more level through.

Backend levels are rendered onto the standard ``logging`` module numbering by
``to_stdlib_level``; levels below debug become stdlib levels 9, 8, ... so a
message logged with ``logger.log(v_level(TRACE), ...)`` only shows at ``-v=5``
or above.
"""

import logging

# Verbosity levels for -v.
DEFAULT = 2
VERBOSE = 3
DEBUG = 4
TRACE = 5

# Backend severity levels.
DEBUG_LEVEL = -1
INFO_LEVEL = 0
WARN_LEVEL = 1
ERROR_LEVEL = 2
DPANIC_LEVEL = 3
PANIC_LEVEL = 4
FATAL_LEVEL = 5

LEVEL_NAMES = {
    DEBUG_LEVEL: "debug",
    INFO_LEVEL: "info",
    WARN_LEVEL: "warn",
    ERROR_LEVEL: "error",
    DPANIC_LEVEL: "dpanic",
    PANIC_LEVEL: "panic",
    FATAL_LEVEL: "fatal",
}
_LEVELS_BY_NAME = {name: level for level, name in LEVEL_NAMES.items()}
_LEVELS_BY_NAME["warning"] = WARN_LEVEL


class InvalidLogVerbosityError(ValueError):
    """Raised when -v is negative."""


INVALID_LOG_VERBOSITY = InvalidLogVerbosityError("invalid log verbosity: must be a non-negative integer")


def backend_level_for_verbosity(verbosity: int) -> int:
    """Backend level derived from a -v verbosity when no level is given explicitly."""
    return -1 * verbosity


def to_stdlib_level(level: int) -> int:
    """Map a backend level onto ``logging`` level numbers."""
    if level >= DEBUG_LEVEL:
        return min(logging.INFO + 10 * level, logging.CRITICAL)
    return max(1, logging.DEBUG + 1 + level)


def from_stdlib_level(levelno: int) -> int:
    """Inverse of ``to_stdlib_level`` for rendering records."""
    if levelno >= logging.DEBUG:
        return min(round((levelno - logging.INFO) / 10), DPANIC_LEVEL)
    return levelno - logging.DEBUG - 1


def v_level(verbosity: int) -> int:
    """Stdlib level for a message that should show from -v=<verbosity> up."""
    return to_stdlib_level(backend_level_for_verbosity(verbosity))


def level_name(level: int) -> str:
    return LEVEL_NAMES.get(level, f"Level({level})")


def parse_backend_level(raw: str) -> int:
    """Parse a level name or a positive integer N (meaning level -N).

    Raises:
        ValueError: for unknown names, zero and negative numbers
    """
    value = raw.strip().lower()
    if value in _LEVELS_BY_NAME:
        return _LEVELS_BY_NAME[value]
    try:
        n = int(value)
    except ValueError:
        raise ValueError(
            f"unrecognized level {raw!r}: use one of {', '.join(LEVEL_NAMES.values())} or an integer > 0"
        ) from None
    if n <= 0:
        raise ValueError(f"invalid level {raw!r}: integer levels must be > 0")
    return -n
