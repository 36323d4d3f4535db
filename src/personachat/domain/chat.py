"""Conversation and session value objects shared by the provider layer."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

ChatRole = Literal["user", "model"]


class Protocol(str, Enum):
    """Wire protocol a session speaks, fixed when the session is built."""

    VENDOR_NATIVE = "vendor_native"
    GENERIC_CHAT_COMPLETIONS = "generic_chat_completions"


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class ConversationMessage:
    role: ChatRole
    text: str
    timestamp: int = field(default_factory=now_ms)


@dataclass(frozen=True, kw_only=True)
class SessionDescriptor:
    """Everything an exchange needs, captured once per conversation view.

    All fields are fixed except ``transcript``: the exchanger appends the
    ``(user, model)`` pair to it after every successful exchange so the next
    call continues the conversation. Callers must not share one descriptor
    across concurrent ``send`` calls.
    """

    protocol: Protocol
    model_name: str
    endpoint_url: str
    credential: str = field(repr=False)
    system_instruction: str
    transcript: list[ConversationMessage] = field(default_factory=list, compare=False)

    def record_exchange(self, user_text: str, reply: str) -> None:
        self.transcript.append(ConversationMessage(role="user", text=user_text))
        self.transcript.append(ConversationMessage(role="model", text=reply))


__all__ = [
    "ChatRole",
    "Protocol",
    "ConversationMessage",
    "SessionDescriptor",
    "now_ms",
]
