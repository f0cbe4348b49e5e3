"""Structured logging with per-operation context using structlog and contextvars."""

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

import structlog

# Context variables for the current export/import operation
current_operation: ContextVar[str | None] = ContextVar("current_operation", default=None)
current_operation_id: ContextVar[str | None] = ContextVar("current_operation_id", default=None)

_configured = False


def setup_structured_logging(level: str = "INFO", json: bool = True) -> None:
    """Configure structlog over stdlib logging with operation context.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json: Render JSON lines when true, human-readable console output otherwise
    """
    global _configured
    if _configured:
        return

    renderer = structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,  # Inject operation context
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level.upper()),
    )

    _configured = True


def bind_operation_context(operation: str, operation_id: str) -> None:
    """Bind operation context for all subsequent logs in this context."""
    current_operation.set(operation)
    current_operation_id.set(operation_id)
    structlog.contextvars.bind_contextvars(operation=operation, operation_id=operation_id)


def clear_operation_context() -> None:
    """Clear operation context after the operation completes."""
    current_operation.set(None)
    current_operation_id.set(None)
    structlog.contextvars.unbind_contextvars("operation", "operation_id")


@contextmanager
def operation_context(operation: str) -> Iterator[str]:
    """Bind a fresh operation id for the duration of the block.

    Yields:
        The generated operation id
    """
    operation_id = uuid.uuid4().hex[:12]
    bind_operation_context(operation, operation_id)
    try:
        yield operation_id
    finally:
        clear_operation_context()


def get_logger(name: str = "recipe_export") -> structlog.stdlib.BoundLogger:
    """Get a structlog logger carrying the current operation context."""
    return structlog.get_logger(name)


def get_current_operation() -> str | None:
    """Get the current operation name from context."""
    return current_operation.get()
