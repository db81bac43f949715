"""Logging configuration for envbind's own command-line tool.

The settings are themselves bound from the environment with envbind.
"""

from __future__ import annotations

import logging
from typing import Annotated, Literal

from pydantic import BaseModel, Field

from envbind.schema import Schema
from envbind.sources import EnvironmentSource
from envbind.tags import Env


class LoggingConfig(BaseModel):
    """Configuration for logging.

    Parameters
    ----------
    level : str
        Log level, read from ``ENVBIND_LOG_LEVEL``.
    format : str
        Log format string, read from ``ENVBIND_LOG_FORMAT``.

    Examples
    --------
    >>> config = LoggingConfig()
    >>> config.level
    'WARNING'
    """

    level: Annotated[
        Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        Env("name:ENVBIND_LOG_LEVEL"),
    ] = Field(default="WARNING", description="Log level")
    format: Annotated[str, Env("name:ENVBIND_LOG_FORMAT")] = Field(
        default="%(levelname)s %(name)s: %(message)s", description="Log format"
    )


def load_logging_config(source: EnvironmentSource | None = None) -> LoggingConfig:
    """Build a :class:`LoggingConfig` from the environment.

    Parameters
    ----------
    source : EnvironmentSource | None
        Source to read; the process environment when None.

    Returns
    -------
    LoggingConfig
        Bound configuration.
    """
    config = LoggingConfig()
    Schema(config).bind(source)
    return config


def configure_logging(config: LoggingConfig) -> None:
    """Apply ``config`` to the root logger."""
    logging.basicConfig(level=config.level, format=config.format, force=True)
