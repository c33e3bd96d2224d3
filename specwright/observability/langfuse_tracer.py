"""
Langfuse tracing integration.

Singleton tracer for Langfuse observability operations. Each model call is
recorded as one generation carrying model, duration, output length, token
usage and any error. When keys are missing or tracing is disabled, spans
are no-ops.

Dependencies: langfuse, specwright.configs, specwright.observability.correlation
System role: Distributed tracing for model calls
"""

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from langfuse import Langfuse

from specwright.configs import get_settings
from specwright.observability.correlation import get_correlation_id

logger = logging.getLogger(__name__)


@dataclass
class SpanRecord:
    """Mutable handle callers fill in while a span is open."""

    name: str
    output_length: int = 0
    usage: dict[str, int] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)


class LangfuseTracer:
    """Langfuse tracer singleton."""

    _instance: "LangfuseTracer | None" = None

    def __new__(cls) -> "LangfuseTracer":
        """Singleton pattern for tracer instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self) -> None:
        """Initialize Langfuse client with configuration."""
        if self._initialized:
            return
        self._initialized = True
        self._client: Langfuse | None = None

        config = get_settings().observability
        if not (config.enable_tracing and config.public_key and config.secret_key):
            logger.info("Langfuse tracing disabled (keys not configured)")
            return

        try:
            self._client = Langfuse(
                public_key=config.public_key,
                secret_key=config.secret_key,
                host=config.host,
            )
            logger.info("Langfuse tracer initialized", extra={"host": config.host})
        except Exception as e:
            logger.warning(
                "Langfuse initialization failed, tracing disabled",
                extra={"error_type": type(e).__name__, "error_msg": str(e)},
            )
            self._client = None

    @property
    def enabled(self) -> bool:
        return self._client is not None

    @contextmanager
    def span(self, name: str, model: str, **attributes: Any) -> Iterator[SpanRecord]:
        """
        Record one model call.

        The span is always closed. Exceptions are marked on the generation
        and re-raised unchanged.

        Args:
            name: Span name, e.g. "llm.complete"
            model: Model identifier
            **attributes: Extra metadata (route, session_id, max_tokens...)
        """
        record = SpanRecord(name=name)
        started = time.perf_counter()
        generation = None
        if self._client is not None:
            try:
                generation = self._client.start_generation(
                    name=name,
                    model=model,
                    metadata={"request_id": get_correlation_id(), **attributes},
                )
            except Exception as e:
                logger.debug("Langfuse span start failed", extra={"error_msg": str(e)})

        try:
            yield record
        except BaseException as exc:
            if generation is not None:
                generation.update(
                    level="ERROR",
                    status_message=f"{type(exc).__name__}: {exc}",
                    metadata={"duration_ms": _elapsed_ms(started)},
                )
            raise
        else:
            if generation is not None:
                generation.update(
                    usage_details=record.usage or None,
                    metadata={
                        "duration_ms": _elapsed_ms(started),
                        "output_length": record.output_length,
                        **record.metadata,
                    },
                )
        finally:
            if generation is not None:
                generation.end()

    def flush(self) -> None:
        """Flush buffered events (called on shutdown)."""
        if self._client is not None:
            self._client.flush()


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


def get_tracer() -> LangfuseTracer:
    """Return the process-wide tracer."""
    return LangfuseTracer()
