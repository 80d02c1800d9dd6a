"""
Logging setup for imagemaker.

structlog renders every record, stdlib ``logging`` routes it. Records go to
a coloured console on stderr and, with ``IMAGEMAKER_ENABLE_JSON_LOGGING=1``,
to a rotating JSON file under ``.imagemaker/logs``. Anything bound with
``structlog.contextvars`` (the current stage, the pixel type) is merged into
each record.

Environment
-----------
IMAGEMAKER_LOG_LEVEL
    DEBUG, INFO, WARNING (default), ERROR or CRITICAL.
IMAGEMAKER_ENABLE_JSON_LOGGING
    ``1``/``true`` to also write JSON logs.
IMAGEMAKER_LOG_DIR
    Directory for the JSON logs.
"""

import json as jsonlib
import logging
import logging.config
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

import structlog
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from structlog.processors import CallsiteParameter, CallsiteParameterAdder
from structlog.typing import Processor

from imagemaker.loggers.processors import (
    CallPrettifier,
    NumpyValueConverter,
    PathPrettifier,
    ShapeFormatter,
    ZonedTimeStamper,
)

LOGGER_NAME = "imagemaker"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
DEFAULT_LOG_LEVEL = "WARNING"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024


def check_log_level(level: str) -> str:
    """Normalize a level name, raising ValueError for unknown names."""
    level_upper = level.strip().upper()
    if level_upper not in VALID_LOG_LEVELS:
        msg = f"Invalid logging level {level!r}. Must be one of {VALID_LOG_LEVELS}."
        raise ValueError(msg)
    return level_upper


class LogSettings(BaseSettings):
    """Logging options, read from ``IMAGEMAKER_*`` environment variables."""

    log_level: str = DEFAULT_LOG_LEVEL
    enable_json_logging: bool = False
    log_dir: Path = Path(".imagemaker/logs")

    model_config = SettingsConfigDict(env_prefix="IMAGEMAKER_", extra="ignore")

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        return check_log_level(v)


def shared_processors(base_dir: Path) -> List[Processor]:
    """Processors run for structlog events and foreign stdlib records alike."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        CallsiteParameterAdder(
            [
                CallsiteParameter.MODULE,
                CallsiteParameter.FUNC_NAME,
                CallsiteParameter.LINENO,
            ]
        ),
        PathPrettifier(base_dir=base_dir),
        NumpyValueConverter(),
        structlog.stdlib.ExtraAdder(),
        structlog.processors.StackInfoRenderer(),
    ]


def _console_formatter(pre_chain: List[Processor]) -> Dict[str, Any]:
    return {
        "()": structlog.stdlib.ProcessorFormatter,
        "foreign_pre_chain": pre_chain,
        "processors": [
            ZonedTimeStamper(fmt="%H:%M:%S"),
            CallPrettifier(concise=True),
            ShapeFormatter(),
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.dev.ConsoleRenderer(
                colors=True,
                sort_keys=False,
                exception_formatter=structlog.dev.RichTracebackFormatter(
                    width=-1, show_locals=False
                ),
            ),
        ],
    }


def _json_formatter(pre_chain: List[Processor]) -> Dict[str, Any]:
    return {
        "()": structlog.stdlib.ProcessorFormatter,
        "foreign_pre_chain": pre_chain,
        "processors": [
            ZonedTimeStamper(),
            CallPrettifier(concise=False),
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(serializer=jsonlib.dumps),
        ],
    }


def _json_file_handler(name: str, log_dir: Path) -> Dict[str, Any]:
    """Handler config for a fresh timestamped log file.

    ``latest.log`` in the same directory is pointed at the new file.
    """
    log_dir.mkdir(parents=True, exist_ok=True)
    logfile = log_dir / f"{name}_{datetime.now():%Y-%m-%d_%H-%M-%S}.log"
    latest = log_dir / "latest.log"
    if latest.exists() or latest.is_symlink():
        latest.unlink()
    latest.symlink_to(logfile.name)
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "formatter": "json",
        "filename": str(logfile),
        "maxBytes": LOG_FILE_MAX_BYTES,
        "backupCount": 5,
    }


def build_logging_config(
    name: str, settings: LogSettings, base_dir: Path
) -> Dict[str, Any]:
    """The ``dictConfig`` mapping for the ``name`` logger."""
    pre_chain = shared_processors(base_dir)
    handlers: Dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "console",
            "stream": "ext://sys.stderr",
        },
    }
    if settings.enable_json_logging:
        handlers["json"] = _json_file_handler(name, settings.log_dir)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": _console_formatter(pre_chain),
            "json": _json_formatter(pre_chain),
        },
        "handlers": handlers,
        "loggers": {
            name: {
                "handlers": list(handlers),
                "level": settings.log_level,
                "propagate": False,
            },
        },
    }


def configure_logging(
    name: str = LOGGER_NAME,
    settings: LogSettings | None = None,
    base_dir: Path | None = None,
) -> structlog.stdlib.BoundLogger:
    """Configure stdlib logging and structlog once and return the logger.

    Parameters
    ----------
    name : str
        Name of the stdlib logger the records are routed through.
    settings : LogSettings, optional
        Defaults to the values found in the environment.
    base_dir : Path, optional
        Paths below it are logged relative to it. Defaults to the working
        directory.
    """
    settings = settings or LogSettings()
    base_dir = base_dir or Path.cwd()

    logging.config.dictConfig(build_logging_config(name, settings, base_dir))
    structlog.configure(
        processors=[
            *shared_processors(base_dir),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    return structlog.get_logger(name)


def set_level(level: str, name: str = LOGGER_NAME) -> None:
    """Change the level of an already configured logger."""
    logging.getLogger(name).setLevel(check_log_level(level))
