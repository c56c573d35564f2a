"""
Project-wide logging setup.

Call configure_logging() once at startup (main.py, scripts); every module
gets its logger through get_logger(__name__). Library code never configures
handlers itself.
"""

from __future__ import annotations

import json as _json
import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional

from infra.paths import PROJECT_ROOT, STORAGE_DIR

LOG_DIR = STORAGE_DIR / "logs"

_ROOT_NAME = "siege_pulse"

# LogRecord attributes that are not user-supplied "extra" fields.
_RESERVED = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """One JSON object per line; extra=... fields are merged in."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": time.strftime("%Y-%m-%dT%H:%M:%S", time.localtime(record.created)),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RESERVED and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return _json.dumps(payload, default=str, ensure_ascii=False)


def configure_logging(
    level: str | int = "INFO",
    json: bool = False,
    log_file: Optional[str | Path] = None,
) -> logging.Logger:
    """
    Configure the project logger (console and optional file).

    Args:
        level: Level name or number
        json: Emit JSON lines instead of plain text
        log_file: Optional file path; relative paths land under storage/logs

    Returns:
        The configured project root logger
    """
    root = logging.getLogger(_ROOT_NAME)
    root.setLevel(level if isinstance(level, int) else level.upper())
    root.propagate = False
    for handler in list(root.handlers):
        root.removeHandler(handler)

    formatter: logging.Formatter
    if json:
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s %(levelname)-7s %(name)s: %(message)s")

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    root.addHandler(console)

    if log_file is not None:
        path = Path(log_file)
        if not path.is_absolute():
            path = LOG_DIR / path
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    return root


def get_logger(name: str) -> logging.Logger:
    """
    Logger under the project namespace.

    Until configure_logging() runs, records propagate to the standard
    logging root and follow whatever the host application set up.
    """
    if name.startswith(_ROOT_NAME):
        return logging.getLogger(name)
    return logging.getLogger(f"{_ROOT_NAME}.{name}")


__all__ = [
    "PROJECT_ROOT",
    "STORAGE_DIR",
    "LOG_DIR",
    "JsonFormatter",
    "configure_logging",
    "get_logger",
]
