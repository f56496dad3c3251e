# ============================================================================
# STRUCTURED LOGGING
# ============================================================================
# EPOCH: 1 - SCHEMA INFERENCE
# STATUS: Core - Structured logging with schema context
# PURPOSE: Trace warnings and failures back to the schema/table/type involved
# CREATED: 19 OCT 2026
# EXPORTS: ComponentType, LogContext, StructuredFormatter, HumanFormatter,
#          ContextLogger, get_logger, configure_logging, log_context,
#          get_current_context, log_checkpoint
# ============================================================================
"""
Structured Logging

Inference and mutation run deep call chains: a missing back-reference is
noticed three levels into a traversal, a failed foreign key inside a
simple schema import. Every log line therefore carries the schema, table
and type being worked on, pushed with log_context() by the outer caller.

Output is either one JSON object per line (LOG_FORMAT=json) or a compact
human format with the context in brackets.

Usage:
    from core.logging import get_logger, log_context, ComponentType

    logger = get_logger(__name__, ComponentType.MANAGER)

    with log_context(schema_name="Blog", operation="set_foreign_key"):
        with log_context(table_name="Post"):
            logger.info("Wiring BlogId")
"""

import json
import logging
import os
import sys
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Union

from __version__ import __version__


class ComponentType(str, Enum):
    """Which part of the engine emitted a record."""
    INFERENCE = "inference"
    MANAGER = "manager"
    PROVIDER = "provider"
    STORAGE = "storage"
    GENERATION = "generation"
    NAMING = "naming"


# ============================================================================
# CONTEXT STACK
# ============================================================================

@dataclass
class LogContext:
    """
    Fields attached to every record logged inside a log_context block.

    Unset fields are left out of the output.
    """
    schema_name: Optional[str] = None
    table_name: Optional[str] = None
    type_name: Optional[str] = None
    correlation_id: Optional[str] = None
    component: Optional[str] = None
    operation: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def merged(self, **overrides: Any) -> "LogContext":
        """A child context: overrides win, everything else is inherited."""
        values = {
            f.name: overrides.get(f.name, getattr(self, f.name))
            for f in fields(self)
            if f.name != "extra"
        }
        return LogContext(extra={**self.extra, **overrides.get("extra", {})}, **values)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "extra" and getattr(self, f.name) is not None
        }
        result.update(self.extra)
        return result


# One stack per thread; worker threads start with an empty context
_local = threading.local()


def _stack() -> list:
    stack = getattr(_local, "stack", None)
    if stack is None:
        stack = _local.stack = []
    return stack


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def get_current_context() -> LogContext:
    """Innermost active context, or an empty one."""
    stack = _stack()
    return stack[-1] if stack else LogContext()


@contextmanager
def log_context(**kwargs: Any) -> Iterator[LogContext]:
    """
    Push context fields for the duration of a block.

    Unknown keyword names are ignored so callers can pass whatever context
    they have. Nested blocks inherit and override.

    Example:
        with log_context(schema_name="Blog", table_name="Post"):
            logger.info("Adding column")
    """
    context = get_current_context().merged(**kwargs)
    stack = _stack()
    stack.append(context)
    try:
        yield context
    finally:
        stack.pop()


# ============================================================================
# FORMATTERS
# ============================================================================

class StructuredFormatter(logging.Formatter):
    """
    One JSON object per record.

    Keys: timestamp, level, logger, message, context (active log_context),
    data (adapter extras), exception, source.
    """

    def __init__(self, include_context: bool = True, include_source: bool = True):
        super().__init__()
        self.include_context = include_context
        self.include_source = include_source

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": _utc_timestamp(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if self.include_context:
            context = get_current_context().to_dict()
            if context:
                payload["context"] = context

        data = getattr(record, "extra", None)
        if data:
            payload["data"] = data

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        if self.include_source:
            payload["source"] = f"{record.filename}:{record.lineno} {record.funcName}"

        return json.dumps(payload, default=str)


class HumanFormatter(logging.Formatter):
    """``2026-10-19 12:00:00 INFO     name [schema=Blog, table=Post]: message``"""

    _CONTEXT_LABELS = (("schema_name", "schema"), ("table_name", "table"), ("type_name", "type"))

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        context = get_current_context()

        parts = [
            f"{label}={getattr(context, attr)}"
            for attr, label in self._CONTEXT_LABELS
            if getattr(context, attr)
        ]
        where = f" [{', '.join(parts)}]" if parts else ""

        line = f"{timestamp} {record.levelname.ljust(8)} {record.name}{where}: {record.getMessage()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


# ============================================================================
# LOGGERS
# ============================================================================

class ContextLogger(logging.LoggerAdapter):
    """
    Adapter that copies the active log context onto each record.

    Everything lands in a single ``record.extra`` dict, which is what the
    formatters read.
    """

    def process(self, msg, kwargs):
        extra = dict(kwargs.get("extra") or {})
        extra.update(get_current_context().to_dict())

        component = (self.extra or {}).get("component")
        if component:
            extra.setdefault("component", getattr(component, "value", component))

        kwargs["extra"] = {"extra": extra}
        return msg, kwargs


def get_logger(name: str, component: Optional[ComponentType] = None) -> ContextLogger:
    """
    Context-aware logger for a module.

    Args:
        name: Logger name (usually ``__name__``)
        component: Engine component, added to every record
    """
    return ContextLogger(logging.getLogger(name), {"component": component})


def configure_logging(level: Union[str, int] = "INFO", json_output: bool = False) -> None:
    """
    Install a single stdout handler on the root logger.

    Args:
        level: Level name or number
        json_output: JSON lines instead of the human format (LOG_FORMAT=json
            has the same effect)
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    use_json = json_output or os.getenv("LOG_FORMAT", "").lower() == "json"
    formatter = StructuredFormatter() if use_json else HumanFormatter()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)

    logging.getLogger(__name__).debug(f"Logging configured for schema engine v{__version__}")


# ============================================================================
# CHECKPOINTS
# ============================================================================

def log_checkpoint(
    name: str,
    data: Optional[Dict[str, Any]] = None,
    logger: Optional[logging.Logger] = None,
) -> None:
    """
    Log a named progress point, such as "type_schema_created".

    Checkpoints take the place of started/finished notifications: anything
    interested in progress filters the ``checkpoint`` logger.
    """
    logger = logger or logging.getLogger("checkpoint")

    checkpoint: Dict[str, Any] = {"checkpoint": name, "timestamp": _utc_timestamp()}
    context = get_current_context()
    for attr in ("schema_name", "type_name"):
        value = getattr(context, attr)
        if value:
            checkpoint[attr] = value
    if data:
        checkpoint["data"] = data

    logger.info(f"CHECKPOINT: {name}", extra={"extra": checkpoint})


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ComponentType",
    "LogContext",
    "StructuredFormatter",
    "HumanFormatter",
    "ContextLogger",
    "get_logger",
    "configure_logging",
    "log_context",
    "get_current_context",
    "log_checkpoint",
]
