from __future__ import annotations

import json
import logging
import sys
import time
from pathlib import Path
from typing import Any, Dict, Optional

from .paths import get_logs_dir, resolve_working_dir

_CONSOLE_FORMAT = "[%(name)s] %(asctime)s %(levelname)s %(message)s"
_CONSOLE_MARK = "_tunicguard_console"
_JSON_MARK = "_tunicguard_json"
_RESERVED_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


class JsonLogFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload: Dict[str, Any] = {
            "ts": time.time(),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        for key, value in getattr(record, "__dict__", {}).items():
            if key.startswith("_") or key in _RESERVED_ATTRS:
                continue
            if key in payload:
                continue
            try:
                json.dumps(value)
            except TypeError:
                continue
            payload[key] = value
        return json.dumps(payload, ensure_ascii=False)


def configure_json_logging(name: str = "tunicguard", working_dir: Optional[Path] = None) -> logging.Logger:
    base = working_dir or resolve_working_dir()
    logs_dir = get_logs_dir(base)
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / "tunicguard.log.jsonl"
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        if not getattr(handler, _JSON_MARK, False):
            continue
        if getattr(handler, "baseFilename", None) == str(log_path):
            return logger
        _detach(logger, handler)
    handler = logging.FileHandler(log_path, encoding="utf-8")
    handler.setFormatter(JsonLogFormatter())
    setattr(handler, _JSON_MARK, True)
    logger.addHandler(handler)
    return logger


def configure_console_logging(level: str | int = "INFO", name: str = "tunicguard") -> logging.Logger:
    """Attach a single stderr handler to the project logger, replacing any earlier one."""

    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            resolved = logging.INFO
    else:
        resolved = int(level)
    logger = logging.getLogger(name)
    logger.setLevel(resolved)
    # sys.stderr may have been swapped (and the old stream closed) since the last call.
    for handler in list(logger.handlers):
        if getattr(handler, _CONSOLE_MARK, False):
            _detach(logger, handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    handler.setLevel(resolved)
    setattr(handler, _CONSOLE_MARK, True)
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def release_logging(name: str = "tunicguard") -> None:
    """Detach and close the handlers installed by the configure helpers."""

    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        if getattr(handler, _CONSOLE_MARK, False) or getattr(handler, _JSON_MARK, False):
            _detach(logger, handler)


def _detach(logger: logging.Logger, handler: logging.Handler) -> None:
    logger.removeHandler(handler)
    handler.close()


__all__ = ["JsonLogFormatter", "configure_console_logging", "configure_json_logging", "release_logging"]
