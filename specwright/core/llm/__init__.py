"""Model gateway and structured-output handling."""

from specwright.core.llm.client import CallContext, ChatMessage, CompletionClient
from specwright.core.llm.extraction import ExtractionKind, extract

__all__ = ["CallContext", "ChatMessage", "CompletionClient", "ExtractionKind", "extract"]
