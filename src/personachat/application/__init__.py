"""Session building, message exchange and the conversation service."""

from __future__ import annotations

from .conversation import Conversation, ConversationService
from .exchanger import MessageExchanger
from .key_pools import KeyPool
from .session_builder import build_session, resolve_protocol

__all__ = [
    "Conversation",
    "ConversationService",
    "MessageExchanger",
    "KeyPool",
    "build_session",
    "resolve_protocol",
]
