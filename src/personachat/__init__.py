"""Persona chat sessions over Gemini and OpenAI-compatible providers."""

from __future__ import annotations

from personachat.application import (
    Conversation,
    ConversationService,
    MessageExchanger,
    build_session,
    resolve_protocol,
)
from personachat.domain import ConversationMessage, Protocol, SessionDescriptor
from personachat.infrastructure.adapters import (
    AdapterConfigurationRequired,
    AdapterConnectionError,
    AdapterEmptyResponse,
    AdapterError,
    AdapterProviderError,
)

__version__ = "0.1.0"

__all__ = [
    "Conversation",
    "ConversationService",
    "MessageExchanger",
    "build_session",
    "resolve_protocol",
    "ConversationMessage",
    "Protocol",
    "SessionDescriptor",
    "AdapterError",
    "AdapterConfigurationRequired",
    "AdapterConnectionError",
    "AdapterEmptyResponse",
    "AdapterProviderError",
]
