"""Observability module: structured logging with operation context."""

from .logging import (
    bind_operation_context,
    clear_operation_context,
    get_current_operation,
    get_logger,
    operation_context,
    setup_structured_logging,
)

__all__ = [
    "bind_operation_context",
    "clear_operation_context",
    "get_current_operation",
    "get_logger",
    "operation_context",
    "setup_structured_logging",
]
