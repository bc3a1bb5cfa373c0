"""
Structured Logging

All logs are JSON with consistent, queryable fields.
Query logs by: module, action, category, attempt, etc.

LOKI QUERIES
============
# All errors
{project="pitchcraft"} | json | level="ERROR"

# Every transport attempt that did not succeed
{project="pitchcraft"} | json | module="llm.invoker" action="attempt_failed"

# Generation failures by category
{project="pitchcraft"} | json | module="generation" action="generate_failed"

# Monitor model latency
{project="pitchcraft"} | json | action="attempt_done"

USAGE
=====
from src.utils.logging import log, get_logger, configure_logging

logger = get_logger()
log.info(logger, "generation", "generate_start", "Generating presentation",
         source_length=len(text))

log.error(logger, "generation", "generate_failed", "Generation failed",
          error=str(e), category=e.category.value)

ACTION NAMING
=============
Consistent suffixes for queryable actions:
  *_start    : beginning of an operation
  *_done     : successful completion
  *_failed   : error/failure
  *_retry    : scheduling another attempt
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Optional


class StructuredFormatter(logging.Formatter):
    """JSON formatter for log shipping, or a compact line format for development."""

    def __init__(self, pretty: bool = False):
        super().__init__()
        self.pretty = pretty

    def format(self, record: logging.LogRecord) -> str:
        msg = record.getMessage()

        # Structured log (emitted via StructuredLogger)
        if getattr(record, "_structured", False):
            data = {
                "ts": _timestamp(),
                "level": record.levelname,
                "module": record._module,
                "action": record._action,
                "msg": msg,
            }
            for key, value in record._extra.items():
                if value is not None:
                    data[key] = value

            if self.pretty:
                return self._pretty(data)
            return json.dumps(data, default=str, separators=(",", ":"))

        # Third-party log, wrap in JSON so the shipper can still parse it
        if self.pretty:
            return msg
        return json.dumps(
            {
                "ts": _timestamp(),
                "level": record.levelname,
                "module": "legacy",
                "action": "log",
                "msg": msg,
            },
            default=str,
            separators=(",", ":"),
        )

    def _pretty(self, data: dict) -> str:
        """Human-readable format for development."""
        ts = data["ts"][11:23]  # HH:MM:SS.mmm
        lvl = data["level"][0]  # I/W/E/D
        mod = data["module"].upper()[:12].ljust(12)
        act = data["action"]
        msg = data["msg"]

        skip = {"ts", "level", "module", "action", "msg"}
        ctx = " ".join(f"{k}={v}" for k, v in data.items() if k not in skip)

        return f"{ts} {lvl} [{mod}] {act}: {msg}" + (f" | {ctx}" if ctx else "")


def _timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


class StructuredLogger:
    """
    Centralized structured logging.

    All methods accept a stdlib logging.Logger, module name, action name,
    message, and arbitrary context fields.
    """

    def _log(
        self,
        logger: logging.Logger,
        level: int,
        module: str,
        action: str,
        msg: str,
        **kwargs,
    ) -> None:
        """Emit a structured log."""
        extra = {
            "_structured": True,
            "_module": module,
            "_action": action,
            "_extra": {k: v for k, v in kwargs.items() if v is not None},
        }
        logger.log(level, msg, extra=extra)

    def info(
        self,
        logger: logging.Logger,
        module: str,
        action: str,
        msg: str,
        **kwargs,
    ) -> None:
        """Log INFO level."""
        self._log(logger, logging.INFO, module, action, msg, **kwargs)

    def warning(
        self,
        logger: logging.Logger,
        module: str,
        action: str,
        msg: str,
        **kwargs,
    ) -> None:
        """Log WARNING level."""
        self._log(logger, logging.WARNING, module, action, msg, **kwargs)

    def error(
        self,
        logger: logging.Logger,
        module: str,
        action: str,
        msg: str,
        error: Optional[str] = None,
        error_type: Optional[str] = None,
        **kwargs,
    ) -> None:
        """Log ERROR level."""
        self._log(
            logger, logging.ERROR, module, action, msg,
            error=error, error_type=error_type, **kwargs,
        )

    def debug(
        self,
        logger: logging.Logger,
        module: str,
        action: str,
        msg: str,
        **kwargs,
    ) -> None:
        """Log DEBUG level."""
        self._log(logger, logging.DEBUG, module, action, msg, **kwargs)


# Singleton instance, import this everywhere
log = StructuredLogger()

_project_logger = None


def get_logger() -> logging.Logger:
    """Get the shared project logger."""
    global _project_logger
    if _project_logger is None:
        _project_logger = logging.getLogger("pitchcraft")
    return _project_logger


def configure_logging() -> None:
    """Configure root logger with structured formatter. Call once at startup.

    Reads from environment:
      LOG_FORMAT: "json" (default) or "pretty" (for development)
      LOG_LEVEL: "INFO" (default), "DEBUG", "WARNING", "ERROR"
    """
    pretty = os.environ.get("LOG_FORMAT", "json") == "pretty"
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter(pretty=pretty))

    logging.basicConfig(
        level=level,
        handlers=[handler],
        force=True,
    )

    # HTTP clients
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    # Server
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    # Other noisy libs
    logging.getLogger("asyncio").setLevel(logging.WARNING)
