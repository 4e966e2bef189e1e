"""Logging setup for the pidsync command line."""

from __future__ import annotations

import logging
from typing import Final

from .env import optional_env_var
from .errors import ConfigurationError

LOG_LEVEL_ENV: Final[str] = "PIDSYNC_LOG_LEVEL"

# httpx logs every request at INFO; one line per DOI probe drowns the reports.
_QUIET_LOGGERS: Final[tuple[str, ...]] = ("httpx", "httpcore")

log = logging.getLogger(__name__)


def resolve_log_level(default: int = logging.INFO) -> int:
    """Return the level named by ``PIDSYNC_LOG_LEVEL``, or ``default`` when unset."""

    name = optional_env_var(LOG_LEVEL_ENV)
    if name is None:
        return default
    level = logging.getLevelNamesMapping().get(name.upper())
    if level is None:
        raise ConfigurationError(f"{LOG_LEVEL_ENV} must name a logging level, got {name!r}")
    return level


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Initialise the root logger for CLI output.

    ``level`` overrides ``PIDSYNC_LOG_LEVEL``; an unknown level name falls back to
    INFO with a warning. HTTP client loggers stay at WARNING unless DEBUG is
    requested. Pass ``force=True`` to reconfigure in tests.
    """

    invalid: ConfigurationError | None = None
    if level is None:
        try:
            level = resolve_log_level()
        except ConfigurationError as exc:
            invalid = exc
            level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    quiet_level = level if level <= logging.DEBUG else max(level, logging.WARNING)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)
    if invalid is not None:
        log.warning("%s; using INFO", invalid)
