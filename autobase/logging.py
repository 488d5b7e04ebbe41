"""Logging from config and env.

Levels (inclusive):
- ERROR: fatal run failures and failed rebase attempts
- WARNING: non-critical issues and ERROR
- INFO: per-candidate decisions, WARNING, and ERROR
- DEBUG: debugging and all levels above

Configure via autobase.yaml (logging.level, logging.format) or env (LOGGING_LEVEL, LOGGING_FORMAT).

Inside a GitHub Actions runner the log viewer already timestamps every
line, so the default format drops asctime there, and step debug logging
(RUNNER_DEBUG=1) forces DEBUG.
"""

import logging
import os
from typing import Mapping

from autobase.config import LoggingConfig

# Supported levels only (DEBUG, INFO, WARNING, ERROR)
LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

DEFAULT_LEVEL = "INFO"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
ACTIONS_FORMAT = "%(levelname)s %(name)s: %(message)s"


def _resolve_level(level: str) -> int:
    """Map level name to logging constant.

    Falls back to INFO if unknown.
    """
    return LEVELS.get(level.upper().strip(), logging.INFO)


def running_in_actions(env: Mapping[str, str] | None = None) -> bool:
    source = os.environ if env is None else env
    return source.get("GITHUB_ACTIONS") == "true"


class AutobaseLogging:
    """Configures root logger from LoggingConfig and the runner environment."""

    def __init__(self, config: LoggingConfig, env: Mapping[str, str] | None = None) -> None:
        source = os.environ if env is None else env
        in_actions = running_in_actions(source)
        self._level = _resolve_level(config.level)
        if in_actions and source.get("RUNNER_DEBUG") == "1":
            self._level = logging.DEBUG
        fmt = config.format
        if in_actions and (not fmt or fmt == DEFAULT_FORMAT):
            fmt = ACTIONS_FORMAT
        self._format = fmt or DEFAULT_FORMAT

    @property
    def level(self) -> int:
        return self._level

    @property
    def format(self) -> str:
        return self._format

    def setup(self) -> None:
        """Apply level and format to the root logger."""
        logging.basicConfig(
            level=self._level,
            format=self._format,
            force=True,
        )
