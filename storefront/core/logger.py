"""
Centralized logging configuration for the Storefront Service.

Provides a structured logging interface with:
- Structured entries carrying service, environment and trace id
- JSON (production/files) and colored console formats
- Per-call metadata dictionaries with an "event" key
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from storefront.core.config import config
from storefront.middleware.trace_context import get_trace_id


class StructuredLogger:
    """
    Logger with structured entries and trace correlation.
    Wraps the root Python logger so third-party output shares the same handlers.
    """

    def __init__(self):
        self.service_name = config.service_name
        self.environment = config.environment
        self.level = config.log_level.upper()
        self.format = config.log_format
        self._setup_logging()

    def _setup_logging(self):
        """Configure Python logging with handlers"""
        root = logging.getLogger()
        root.handlers.clear()
        root.setLevel(getattr(logging, self.level, logging.INFO))

        if config.log_to_console:
            console_handler = logging.StreamHandler(sys.stdout)
            if self.format == "json":
                console_handler.setFormatter(JSONFormatter())
            else:
                console_handler.setFormatter(ConsoleFormatter())
            root.addHandler(console_handler)

        if config.log_to_file:
            os.makedirs(os.path.dirname(config.log_file_path), exist_ok=True)
            file_handler = logging.FileHandler(config.log_file_path)
            file_handler.setFormatter(JSONFormatter())  # Always JSON for files
            root.addHandler(file_handler)

    def _build_log_entry(
        self,
        level: str,
        message: str,
        user_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        **kwargs
    ) -> Dict[str, Any]:
        """Build structured log entry"""
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": level,
            "service": self.service_name,
            "environment": self.environment,
            "message": message,
            "traceId": get_trace_id(),
        }

        if user_id:
            entry["userId"] = user_id

        if metadata:
            entry["metadata"] = metadata

        entry.update(kwargs)
        return entry

    def _log(
        self,
        level: str,
        message: str,
        user_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        **kwargs
    ):
        exc_info = kwargs.pop("exc_info", False)
        log_entry = self._build_log_entry(level, message, user_id, metadata, **kwargs)
        log_method = getattr(logging.getLogger(self.service_name), level.lower())

        if self.format == "json":
            log_method(json.dumps(log_entry, default=str), exc_info=exc_info)
        else:
            # 'message' would clash with the LogRecord attribute
            extra_data = {k: v for k, v in log_entry.items() if k != "message"}
            log_method(message, extra=extra_data, exc_info=exc_info)

    def debug(self, message: str, user_id: Optional[str] = None,
              metadata: Optional[Dict[str, Any]] = None, **kwargs):
        self._log("DEBUG", message, user_id, metadata, **kwargs)

    def info(self, message: str, user_id: Optional[str] = None,
             metadata: Optional[Dict[str, Any]] = None, **kwargs):
        self._log("INFO", message, user_id, metadata, **kwargs)

    def warning(self, message: str, user_id: Optional[str] = None,
                metadata: Optional[Dict[str, Any]] = None, **kwargs):
        self._log("WARNING", message, user_id, metadata, **kwargs)

    def error(
        self,
        message: str,
        user_id: Optional[str] = None,
        error: Optional[Union[str, Exception]] = None,
        metadata: Optional[Dict[str, Any]] = None,
        **kwargs
    ):
        """Error level logging, optionally attaching an exception summary"""
        if metadata is None:
            metadata = {}

        if error:
            if isinstance(error, Exception):
                metadata["error"] = {
                    "type": type(error).__name__,
                    "message": str(error),
                }
            else:
                metadata["error"] = {"message": str(error)}

        self._log("ERROR", message, user_id, metadata, **kwargs)


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    RESERVED = {
        "name", "msg", "args", "created", "filename", "funcName", "levelname",
        "levelno", "lineno", "module", "msecs", "message", "pathname", "process",
        "processName", "relativeCreated", "thread", "threadName", "exc_info",
        "exc_text", "stack_info", "taskName",
    }

    def format(self, record):
        message = record.getMessage()
        # Entries from StructuredLogger in json mode are already serialized
        if message.startswith("{"):
            return message

        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "service": config.service_name,
            "message": message,
        }
        for key, value in record.__dict__.items():
            if key not in self.RESERVED:
                log_data[key] = value
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ConsoleFormatter(logging.Formatter):
    """Colored console formatter for development"""

    COLORS = {
        "DEBUG": "\033[36m",      # Cyan
        "INFO": "\033[32m",       # Green
        "WARNING": "\033[33m",    # Yellow
        "ERROR": "\033[31m",      # Red
        "CRITICAL": "\033[35m",   # Magenta
        "RESET": "\033[0m",
    }

    def format(self, record):
        color = self.COLORS.get(record.levelname, self.COLORS["RESET"])
        reset = self.COLORS["RESET"]
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")

        line = f"{color}[{timestamp}] {record.levelname}{reset} - {record.getMessage()}"
        metadata = getattr(record, "metadata", None)
        if metadata:
            line += f" {json.dumps(metadata, default=str)}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


logger = StructuredLogger()
