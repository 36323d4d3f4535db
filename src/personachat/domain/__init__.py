"""Domain value objects for personachat."""

from __future__ import annotations

from .chat import ChatRole, ConversationMessage, Protocol, SessionDescriptor, now_ms
from .config import ClientSettings, ConfigError, KeyPoolCfg, PersonaCfg

__all__ = [
    "ChatRole",
    "ConversationMessage",
    "Protocol",
    "SessionDescriptor",
    "now_ms",
    "ClientSettings",
    "ConfigError",
    "KeyPoolCfg",
    "PersonaCfg",
]
