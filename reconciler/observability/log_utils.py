"""
Structured context for engine log records.

The executor logs every entry with its entry id, operation and attempt
count. Context values are flattened to short strings before they reach a
record: resource properties can be large, and a value that fails to format
must never turn a provider failure into a logging failure.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

import enum
import logging
from typing import Any

# Attributes LogRecord sets itself; `extra` may not overwrite them
_RECORD_ATTRIBUTES = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def safe_log_value(value: Any, max_length: int = 500) -> str:
    """
    Render a context value as a bounded string.

    Enums log their value; collections log their size, never their contents.

    Args:
        value: Value to render
        max_length: Length after which the rendering is cut

    Returns:
        str: Rendering safe to attach to a record
    """
    try:
        if isinstance(value, enum.Enum):
            text = str(value.value)
        elif isinstance(value, dict):
            text = f"dict({len(value)} keys)"
        elif isinstance(value, (list, tuple, set, frozenset)):
            text = f"{type(value).__name__}({len(value)} items)"
        else:
            text = str(value)
    except Exception as e:
        return f"<unable to log: {type(e).__name__}>"

    if len(text) > max_length:
        return f"{text[:max_length]}... (truncated, {len(text)} total)"
    return text


def _record_extra(context: dict[str, Any]) -> dict[str, str]:
    """Rendered context; keys clashing with LogRecord attributes get a ctx_ prefix."""
    extra = {}
    for key, value in context.items():
        name = f"ctx_{key}" if key in _RECORD_ATTRIBUTES else key
        extra[name] = safe_log_value(value)
    return extra


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **context,
) -> None:
    """
    Log a message with rendered context attached as record attributes.

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, etc.)
        message: Log message
        **context: Record attributes, e.g. entry_id or operation
    """
    logger.log(level, message, extra=_record_extra(context))


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: BaseException,
    **context,
) -> None:
    """
    Log a failure at ERROR with its traceback, type and message.

    Args:
        logger: Logger instance
        message: Log message
        exc: Exception that ended the operation
        **context: Record attributes, e.g. entry_id or attempts
    """
    extra = _record_extra(context)
    extra["error_type"] = type(exc).__name__
    extra["error_msg"] = safe_log_value(exc)
    logger.error(message, exc_info=exc, extra=extra)
