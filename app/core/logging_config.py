# app/core/logging_config.py
"""
Logging configuration for CrewPlan payroll.

Production writes JSON lines to rotating files (application, errors and a
separate payroll calculation log). Development logs coloured text to the
console and plain text to a small rotating file.
"""

import json
import logging
import logging.handlers
import os
import sys
from datetime import datetime, timezone
from pathlib import Path

IS_PRODUCTION = os.getenv("PRODUCTION", "false").lower() == "true"

LOG_DIR = Path(os.getenv("LOG_DIR", "logs"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO" if IS_PRODUCTION else "DEBUG").upper()

APP_LOG_FILE = LOG_DIR / "app.log"
ERROR_LOG_FILE = LOG_DIR / "error.log"
PAYROLL_LOG_FILE = LOG_DIR / "payroll.log"

# Calculations under this logger also go to PAYROLL_LOG_FILE
PAYROLL_LOGGER = "app.core.payroll"

# Attributes the request middleware may attach to a record
REQUEST_FIELDS = {
    "request_id": "request_id",
    "method": "method",
    "path": "path",
    "status_code": "status_code",
    "duration": "duration_ms",
}


class JSONFormatter(logging.Formatter):
    """One JSON object per line, for log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        extra_fields = getattr(record, "extra_fields", None)
        if extra_fields:
            entry.update(extra_fields)

        for attribute, key in REQUEST_FIELDS.items():
            if hasattr(record, attribute):
                entry[key] = getattr(record, attribute)

        return json.dumps(entry, ensure_ascii=False, default=str)


class ColoredFormatter(logging.Formatter):
    """Console formatter that colours the level name."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        color = self.COLORS.get(levelname)
        if color:
            record.levelname = f"{color}{levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


def _rotating_handler(
    path: Path, level: int, formatter: logging.Formatter, max_bytes: int, backups: int
) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backups, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def _console_handler(level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging() -> None:
    """
    Configure root, payroll and uvicorn loggers.

    LOG_LEVEL overrides the root level (default INFO in production,
    DEBUG in development). Calling it again replaces the handlers.
    """
    LOG_DIR.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    root_logger.handlers.clear()

    payroll_logger = logging.getLogger(PAYROLL_LOGGER)
    payroll_logger.handlers.clear()

    if IS_PRODUCTION:
        json_formatter = JSONFormatter()
        root_logger.addHandler(_rotating_handler(APP_LOG_FILE, logging.INFO, json_formatter, 10_000_000, 5))
        root_logger.addHandler(_rotating_handler(ERROR_LOG_FILE, logging.ERROR, json_formatter, 10_000_000, 10))
        root_logger.addHandler(_console_handler(logging.WARNING, json_formatter))
        payroll_logger.addHandler(_rotating_handler(PAYROLL_LOG_FILE, logging.INFO, json_formatter, 20_000_000, 12))
    else:
        root_logger.addHandler(
            _console_handler(
                logging.DEBUG,
                ColoredFormatter(fmt="%(levelname)-8s %(asctime)s [%(name)s] %(message)s", datefmt="%Y-%m-%d %H:%M:%S"),
            )
        )
        root_logger.addHandler(
            _rotating_handler(
                APP_LOG_FILE,
                logging.DEBUG,
                logging.Formatter("%(levelname)s %(asctime)s [%(name)s:%(lineno)d] %(message)s"),
                5_000_000,
                2,
            )
        )

    for name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
        logging.getLogger(name).setLevel(logging.INFO)

    logging.getLogger("watchfiles").setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        f"Logging configured (production={IS_PRODUCTION}, level={LOG_LEVEL})",
        extra={"extra_fields": {"log_dir": str(LOG_DIR.absolute()), "production": IS_PRODUCTION}},
    )


def get_logger(name: str) -> logging.Logger:
    """Logger for a module (pass __name__)."""
    return logging.getLogger(name)
