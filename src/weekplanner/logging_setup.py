"""Logging configuration for the command-line tool.

Library modules only create module-level loggers. Handlers are attached
here, on the ``weekplanner`` package logger, when the CLI starts.
"""

import json
import logging
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional, Union

PACKAGE_LOGGER = "weekplanner"
CONSOLE_FORMAT = "%(levelname)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """One JSON object per line, for the optional log file."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        # Extra fields passed as extra={"_json_<name>": value}
        for k, v in record.__dict__.items():
            if k.startswith("_json_"):
                payload[k[6:]] = v
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(
    level: int = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """Attach console (and optionally rotating file) handlers.

    Calling it again replaces the handlers rather than stacking them.

    Args:
        level: Level for the package logger.
        log_file: Optional path for a JSON-lines log (512 kB x 5 backups).

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            path, maxBytes=512_000, backupCount=5, encoding="utf-8"
        )
        file_handler.setFormatter(JsonFormatter())
        logger.addHandler(file_handler)

    logger.debug("logging initialised", extra={"_json_phase": "startup"})
    return logger


__all__ = ["JsonFormatter", "configure_logging"]
