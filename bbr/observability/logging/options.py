"""Logging options - the -v flag and the logging backend flags."""

import logging
from dataclasses import dataclass, field
from typing import Optional, TextIO

from bbr.flags import FlagSet
from bbr.observability.logging.backend import BackendOptions
from bbr.observability.logging.levels import (
    DEFAULT,
    INVALID_LOG_VERBOSITY,
    backend_level_for_verbosity,
    level_name,
)

logger = logging.getLogger(__name__)

ZAP_LOG_LEVEL_FLAG_NAME = "zap-log-level"


@dataclass
class LoggingOptions:
    """Logging configuration for command-line flags."""

    log_verbosity: int = DEFAULT
    backend: BackendOptions = field(default_factory=lambda: BackendOptions(development=True))

    # Flag set passed to add_flags(), only looked up in complete(). Not owned.
    _fs: Optional[FlagSet] = field(default=None, repr=False, compare=False)

    def add_flags(self, fs: FlagSet) -> None:
        """Bind -v and the backend flags onto ``fs``."""
        self._fs = fs
        fs.int_var(self, "log_verbosity", "v", self.log_verbosity,
                   "Number for the log level verbosity.", shorthand="v")
        self.backend.bind_flags(fs)

    def complete(self, fs: Optional[FlagSet] = None) -> None:
        """Derive the backend level from -v unless --zap-log-level was given.

        ``fs`` defaults to the flag set bound in add_flags(). Once derived, the
        level flag is marked changed so later readers treat it as resolved.
        """
        if fs is None:
            fs = self._fs
        level_flag = fs.lookup(ZAP_LOG_LEVEL_FLAG_NAME) if fs is not None else None
        if level_flag is not None and level_flag.changed:
            logger.debug(f"Explicit --{ZAP_LOG_LEVEL_FLAG_NAME} wins over -v={self.log_verbosity}")
            return

        self.backend.level = backend_level_for_verbosity(self.log_verbosity)
        if level_flag is not None:
            level_flag.changed = True
        logger.debug(f"Derived log level {level_name(self.backend.level)} from -v={self.log_verbosity}")

    def validate(self) -> None:
        """Check the options for invalid values."""
        if self.log_verbosity < 0:
            raise INVALID_LOG_VERBOSITY.with_traceback(None)

    def configure(self, logger: Optional[logging.Logger] = None,
                  stream: Optional[TextIO] = None) -> logging.Handler:
        """Install the logging backend described by these options."""
        return self.backend.configure(logger=logger, stream=stream)


def new_options() -> LoggingOptions:
    """Return LoggingOptions initialized with default values."""
    return LoggingOptions()
