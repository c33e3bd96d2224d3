"""
Completion client for the upstream LLM provider.

Wraps an OpenAI-compatible chat endpoint (OpenRouter by default) behind
three call shapes used by the generation stages:

- ``complete``: buffered single-turn completion returning the full text
- ``complete_stream``: single-turn completion yielding text deltas
- ``complete_chat_stream``: multi-turn chat yielding text deltas

Every call logs ``llm.<mode>.start`` / ``.end`` / ``.error`` events and is
recorded as one Langfuse generation. Provider errors are re-raised
unchanged so the API layer can classify them.

Dependencies: langchain_openai, langchain_core, specwright.configs, specwright.observability
System role: Single gateway between the pipeline and the model provider
"""

import logging
import time
from collections.abc import AsyncIterator, Callable, Sequence
from dataclasses import dataclass
from typing import Any, Literal

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from specwright.configs.llm import LLMSettings
from specwright.observability.correlation import get_correlation_id
from specwright.observability.langfuse_tracer import LangfuseTracer, get_tracer
from specwright.observability.log_utils import log_with_context

logger = logging.getLogger(__name__)

ModelFactory = Callable[[str], BaseChatModel]


@dataclass(frozen=True)
class CallContext:
    """Observability-only metadata attached to a model call."""

    request_id: str | None = None
    route: str | None = None
    session_id: str | None = None

    def as_log_fields(self) -> dict[str, Any]:
        return {
            "request_id": self.request_id or get_correlation_id() or None,
            "route": self.route,
            "session_id": self.session_id,
        }


@dataclass(frozen=True)
class ChatMessage:
    """One turn of a multi-turn conversation."""

    role: Literal["system", "user", "assistant"]
    content: str


def content_to_text(content: Any) -> str:
    """
    Normalize message content to plain text.

    Providers return either a string or a list of content parts
    (strings or dicts with a "text" key).
    """
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for item in content:
            if isinstance(item, str):
                parts.append(item)
            elif isinstance(item, dict):
                parts.append(str(item.get("text", "")))
            else:
                parts.append(str(item))
        return "".join(parts)
    return str(content)


def _to_langchain(messages: Sequence[ChatMessage]) -> list[BaseMessage]:
    converted: list[BaseMessage] = []
    for message in messages:
        if message.role == "system":
            converted.append(SystemMessage(content=message.content))
        elif message.role == "assistant":
            converted.append(AIMessage(content=message.content))
        else:
            converted.append(HumanMessage(content=message.content))
    return converted


def _usage_fields(usage: dict[str, Any] | None) -> dict[str, int]:
    if not usage:
        return {}
    return {
        key: int(usage[key])
        for key in ("input_tokens", "output_tokens", "total_tokens")
        if usage.get(key) is not None
    }


class CompletionClient:
    """
    Gateway to the chat completion provider.

    Chat model handles are created lazily, once per model name, and reused
    for the lifetime of the client. The client itself is held process-wide
    by the service cache.
    """

    def __init__(
        self,
        settings: LLMSettings | None = None,
        model_factory: ModelFactory | None = None,
        tracer: LangfuseTracer | None = None,
    ) -> None:
        """
        Initialize completion client.

        Args:
            settings: Provider settings (defaults to application settings)
            model_factory: Builds a chat model for a model name; defaults to ChatOpenAI
            tracer: Langfuse tracer (defaults to the process singleton)
        """
        if settings is None:
            from specwright.configs import get_settings

            settings = get_settings().llm
        self.settings = settings
        self._model_factory = model_factory or self._build_openai_model
        self._tracer = tracer or get_tracer()
        self._models: dict[str, BaseChatModel] = {}

    def _build_openai_model(self, model: str) -> BaseChatModel:
        return ChatOpenAI(
            model=model,
            api_key=self.settings.api_key,
            base_url=self.settings.base_url,
            temperature=self.settings.temperature,
            timeout=self.settings.request_timeout_seconds,
            max_retries=self.settings.max_retries,
            stream_usage=True,
            default_headers={
                "HTTP-Referer": self.settings.app_url,
                "X-Title": self.settings.app_name,
            },
        )

    def get_model(self, model: str) -> BaseChatModel:
        """Return the cached chat model for a model name."""
        if model not in self._models:
            logger.info("Creating chat model handle", extra={"model": model})
            self._models[model] = self._model_factory(model)
        return self._models[model]

    async def complete(
        self,
        model: str,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int,
        context: CallContext | None = None,
    ) -> str:
        """
        Run a buffered single-turn completion.

        Args:
            model: Provider model identifier
            system_prompt: System instruction
            user_prompt: User message
            max_tokens: Output token cap for this stage
            context: Observability metadata

        Returns:
            str: Full response text, empty string when the model returned nothing
        """
        context = context or CallContext()
        fields = context.as_log_fields()
        messages = [SystemMessage(content=system_prompt), HumanMessage(content=user_prompt)]
        prompt_length = len(system_prompt) + len(user_prompt)

        log_with_context(
            logger, logging.INFO, "llm.complete.start",
            event="llm.complete.start", model=model, prompt_length=prompt_length,
            max_tokens=max_tokens, **fields,
        )
        started = time.perf_counter()
        with self._tracer.span("llm.complete", model=model, max_tokens=max_tokens, **fields) as span:
            try:
                response = await self.get_model(model).bind(max_tokens=max_tokens).ainvoke(messages)
            except Exception as exc:
                log_with_context(
                    logger, logging.ERROR, "llm.complete.error",
                    event="llm.complete.error", model=model,
                    duration_ms=round((time.perf_counter() - started) * 1000, 2),
                    error_type=type(exc).__name__, error_msg=str(exc), **fields,
                )
                raise

            text = content_to_text(getattr(response, "content", None))
            usage = _usage_fields(getattr(response, "usage_metadata", None))
            span.output_length = len(text)
            span.usage = usage

        log_with_context(
            logger, logging.INFO, "llm.complete.end",
            event="llm.complete.end", model=model,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
            output_length=len(text), **usage, **fields,
        )
        return text

    def complete_stream(
        self,
        model: str,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int,
        context: CallContext | None = None,
    ) -> AsyncIterator[str]:
        """
        Stream a single-turn completion as text deltas.

        The returned iterator is finite, forward-only and not restartable.
        Empty deltas are skipped.
        """
        messages = [SystemMessage(content=system_prompt), HumanMessage(content=user_prompt)]
        return self._stream(
            "stream", model, messages, max_tokens, context,
            prompt_length=len(system_prompt) + len(user_prompt),
        )

    def complete_chat_stream(
        self,
        model: str,
        messages: Sequence[ChatMessage],
        max_tokens: int,
        context: CallContext | None = None,
    ) -> AsyncIterator[str]:
        """Stream a multi-turn chat completion as text deltas."""
        return self._stream(
            "chat_stream", model, _to_langchain(messages), max_tokens, context,
            prompt_length=sum(len(m.content) for m in messages),
        )

    async def _stream(
        self,
        mode: str,
        model: str,
        messages: list[BaseMessage],
        max_tokens: int,
        context: CallContext | None,
        prompt_length: int,
    ) -> AsyncIterator[str]:
        context = context or CallContext()
        fields = context.as_log_fields()
        event = f"llm.{mode}"

        log_with_context(
            logger, logging.INFO, f"{event}.start",
            event=f"{event}.start", model=model, prompt_length=prompt_length,
            max_tokens=max_tokens, **fields,
        )
        started = time.perf_counter()
        output_length = 0
        usage: dict[str, int] = {}

        with self._tracer.span(event, model=model, max_tokens=max_tokens, **fields) as span:
            upstream = self.get_model(model).bind(max_tokens=max_tokens).astream(messages)
            try:
                async for chunk in upstream:
                    chunk_usage = _usage_fields(getattr(chunk, "usage_metadata", None))
                    if chunk_usage:
                        usage = chunk_usage
                    delta = content_to_text(getattr(chunk, "content", None))
                    if not delta:
                        continue
                    output_length += len(delta)
                    yield delta
            except GeneratorExit:
                log_with_context(
                    logger, logging.INFO, f"{event}.cancelled",
                    event=f"{event}.cancelled", model=model, output_length=output_length,
                    duration_ms=round((time.perf_counter() - started) * 1000, 2), **fields,
                )
                raise
            except Exception as exc:
                log_with_context(
                    logger, logging.ERROR, f"{event}.error",
                    event=f"{event}.error", model=model, output_length=output_length,
                    duration_ms=round((time.perf_counter() - started) * 1000, 2),
                    error_type=type(exc).__name__, error_msg=str(exc), **fields,
                )
                raise
            finally:
                await upstream.aclose()
            span.output_length = output_length
            span.usage = usage

        log_with_context(
            logger, logging.INFO, f"{event}.end",
            event=f"{event}.end", model=model, output_length=output_length,
            duration_ms=round((time.perf_counter() - started) * 1000, 2), **usage, **fields,
        )
