"""
Observability package.

Exports: configure_logging, correlation ID helpers, structured log helpers
"""

from docchat.observability.correlation import (
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from docchat.observability.log_utils import (
    log_exception_with_context,
    log_with_context,
    safe_log_value,
)
from docchat.observability.logger import CorrelationIdFilter, configure_logging

__all__ = [
    "configure_logging",
    "CorrelationIdFilter",
    "set_correlation_id",
    "get_correlation_id",
    "clear_correlation_id",
    "safe_log_value",
    "log_with_context",
    "log_exception_with_context",
]
