"""Protocol exchanges and the shared adapter error hierarchy."""

from __future__ import annotations

from .base import (
    AdapterConfigurationRequired,
    AdapterConnectionError,
    AdapterEmptyResponse,
    AdapterError,
    AdapterProviderError,
    Message,
    ProtocolExchange,
    Role,
    build_messages,
    make_message,
)
from .chat_completions_adapt import ChatCompletionsExchange, normalize_completions_url
from .gemini_adapt import GEMINI_HOST_MARKER, GeminiExchange
from .registry import REGISTRY, create_exchange

__all__ = [
    "AdapterError",
    "AdapterConfigurationRequired",
    "AdapterConnectionError",
    "AdapterEmptyResponse",
    "AdapterProviderError",
    "Message",
    "ProtocolExchange",
    "Role",
    "build_messages",
    "make_message",
    "ChatCompletionsExchange",
    "normalize_completions_url",
    "GEMINI_HOST_MARKER",
    "GeminiExchange",
    "REGISTRY",
    "create_exchange",
]
