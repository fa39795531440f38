"""Logging utilities for accesscore consumers.

This module provides:
- Logging configuration from AccessConfig
- Safe, length-bounded previews of submitted permission data
- Structured (JSON) or plain formatting with actor/target account ids
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from .config import AccessConfig, LogLevel

# Record attributes set by the logging module itself.
_RESERVED_ATTRS = frozenset(
    {
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "message", "pathname", "process", "processName", "relativeCreated",
        "thread", "threadName", "exc_info", "exc_text", "stack_info",
        "taskName", "actor_id", "target_id",
    }
)


def safe_preview(value: Any, limit: int = 240) -> str:
    """Create a safe, length-bounded preview of a value for logging.

    Structured values are rendered as JSON, whitespace is collapsed and the
    result is truncated to ``limit`` characters.

    Args:
        value: The value to preview (any type)
        limit: Maximum length of the preview (default: 240)

    Returns:
        A single-line, truncated string representation
    """
    if value is None:
        return ""

    if isinstance(value, str):
        s = value
    elif isinstance(value, (dict, list)):
        try:
            s = json.dumps(value, default=str, ensure_ascii=False)
        except (TypeError, ValueError):
            s = str(value)
    else:
        s = str(value)

    s = " ".join(s.split())

    if len(s) > limit:
        return s[: limit - 1] + "…"

    return s


class AccessLogFormatter(logging.Formatter):
    """Formatter that includes the acting and target account ids.

    Outputs either one JSON object per record or a plain text line.
    Extra fields passed through ``extra=`` are included (as previews) in
    JSON output.
    """

    def __init__(self, json_format: bool = True, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.json_format = json_format

    def format(self, record: logging.LogRecord) -> str:
        actor_id = getattr(record, "actor_id", None)
        target_id = getattr(record, "target_id", None)

        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if actor_id is not None:
            log_data["actor_id"] = str(actor_id)
        if target_id is not None:
            log_data["target_id"] = str(target_id)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if self.json_format:
            for key, value in record.__dict__.items():
                if key not in _RESERVED_ATTRS:
                    log_data[key] = safe_preview(value)
            return json.dumps(log_data, default=str, ensure_ascii=False)

        parts = [
            f"[{log_data['timestamp']}]",
            log_data["level"],
            log_data["logger"],
        ]
        if actor_id is not None:
            parts.append(f"actor={log_data['actor_id']}")
        if target_id is not None:
            parts.append(f"target={log_data['target_id']}")
        parts.append(f": {log_data['message']}")
        return " ".join(parts)


class AccessLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that adds ``actor_id`` and ``target_id`` to every record.

    Usage:
        logger = get_access_logger(__name__, actor_id=user.id, target_id=account.id)
        logger.info("Permissions updated")
    """

    def __init__(
        self,
        logger: logging.Logger,
        actor_id: Optional[int | str] = None,
        target_id: Optional[int | str] = None,
    ):
        super().__init__(logger, {})
        self.actor_id = actor_id
        self.target_id = target_id

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        actor_id = kwargs.pop("actor_id", self.actor_id)
        target_id = kwargs.pop("target_id", self.target_id)

        extra = dict(kwargs.get("extra") or {})
        if actor_id is not None:
            extra["actor_id"] = actor_id
        if target_id is not None:
            extra["target_id"] = target_id
        kwargs["extra"] = extra

        return msg, kwargs


def setup_logging(
    config: Optional[AccessConfig] = None,
    json_format: Optional[bool] = None,
) -> None:
    """Configure the root logger from an AccessConfig.

    Args:
        config: AccessConfig instance (if None, loads from environment)
        json_format: Force JSON (True) or plain (False) output; defaults to
            ``config.log_json``
    """
    if config is None:
        from .config import load_config_from_env
        config = load_config_from_env()

    level_map = {
        LogLevel.DEBUG: logging.DEBUG,
        LogLevel.INFO: logging.INFO,
        LogLevel.WARNING: logging.WARNING,
        LogLevel.ERROR: logging.ERROR,
        LogLevel.CRITICAL: logging.CRITICAL,
    }
    log_level = level_map.get(config.log_level, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(
        AccessLogFormatter(json_format=config.log_json if json_format is None else json_format)
    )
    root_logger.addHandler(console_handler)

    if config.service_name:
        logging.getLogger(config.service_name).setLevel(log_level)


def get_access_logger(
    name: str,
    actor_id: Optional[int | str] = None,
    target_id: Optional[int | str] = None,
) -> AccessLoggerAdapter:
    """Get a logger adapter bound to the acting and target accounts.

    Args:
        name: Logger name (typically __name__)
        actor_id: Account making the change
        target_id: Account being changed

    Returns:
        AccessLoggerAdapter instance
    """
    return AccessLoggerAdapter(logging.getLogger(name), actor_id=actor_id, target_id=target_id)


__all__ = [
    "AccessLogFormatter",
    "AccessLoggerAdapter",
    "get_access_logger",
    "safe_preview",
    "setup_logging",
]
