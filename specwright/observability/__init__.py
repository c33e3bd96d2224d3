"""
Observability module.

Provides structured logging, request id tracking and Langfuse tracing.
"""

from specwright.observability.correlation import get_correlation_id, set_correlation_id
from specwright.observability.langfuse_tracer import LangfuseTracer, get_tracer
from specwright.observability.logger import configure_logging, get_logger

__all__ = [
    "LangfuseTracer",
    "configure_logging",
    "get_correlation_id",
    "get_logger",
    "get_tracer",
    "set_correlation_id",
]
