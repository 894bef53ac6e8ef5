"""
Logging setup for Baserow Bindings.

The CLI, the generation pipeline and the record client all log through the
standard library. `configure_logging` installs one stderr handler on the root
logger, either with a readable line format or as one JSON object per line
(for CI runs of the generator, where logs are collected and searched).

Context goes into `extra=`; the JSON output lifts those keys to the top level:

    from baserow_bindings.utils.logging import configure_logging, get_logger

    configure_logging(level="INFO", json_logs=True)
    log = get_logger(__name__)
    log.info("[TABLE EMITTED] Orders", extra={"table_id": 101})
    # {"time": "...", "level": "INFO", "logger": "...", "message": "[TABLE EMITTED] Orders", "table_id": 101}
"""

from __future__ import annotations

import json
import logging
import logging.config
from typing import Any, Dict, Iterator, Optional, Tuple

CONSOLE_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
CONSOLE_DATEFMT = "%H:%M:%S"

# Chatty third-party loggers, only let through on DEBUG runs.
QUIET_LOGGERS = ("httpx", "httpcore")

_RESERVED = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "extra"}


def _extra_items(record: logging.LogRecord) -> Iterator[Tuple[str, Any]]:
    """Keys passed through `extra=`, plus a nested `extra` dict if a caller set one."""
    for key, value in vars(record).items():
        if key not in _RESERVED and not key.startswith("_"):
            yield key, value
    nested = getattr(record, "extra", None)
    if isinstance(nested, dict):
        yield from nested.items()


class JsonFormatter(logging.Formatter):
    """One JSON object per record; unserializable values are rendered with str()."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(_extra_items(record))
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack_info"] = self.formatStack(record.stack_info)
        return json.dumps(payload, default=str)


def _logging_config(level: str, formatter: str) -> Dict[str, Any]:
    third_party = level if level.upper() == "DEBUG" else "WARNING"
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {"format": CONSOLE_FORMAT, "datefmt": CONSOLE_DATEFMT},
            "json": {"()": JsonFormatter},
        },
        "handlers": {
            "stderr": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stderr",
                "formatter": formatter,
            }
        },
        "loggers": {name: {"level": third_party} for name in QUIET_LOGGERS},
        "root": {"handlers": ["stderr"], "level": level},
    }


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """
    Install the root handler.

    Parameters
    ----------
    level : str
        Level name for the root logger ("DEBUG", "INFO", ...).
    json_logs : bool
        Emit JSON lines instead of the console format.
    """
    logging.config.dictConfig(_logging_config(level.upper(), "json" if json_logs else "console"))


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name)


__all__ = ["JsonFormatter", "configure_logging", "get_logger"]
