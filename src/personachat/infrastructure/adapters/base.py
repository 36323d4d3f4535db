"""Core exchange protocol, error types and message helpers."""

from __future__ import annotations

from typing import Dict, Iterable, List, Literal, Protocol, runtime_checkable

from personachat.domain.chat import ConversationMessage, SessionDescriptor

Role = Literal["system", "user", "assistant"]
Message = Dict[str, str]


class AdapterError(Exception):
    """Base class for exchange failures.

    Messages are shown to the user as a chat bubble, so they must never carry
    the session credential.
    """


class AdapterConfigurationRequired(AdapterError):
    """Raised before any request when the session lacks an endpoint or credential."""


class AdapterProviderError(AdapterError):
    """Raised when the provider answers with a non-2xx status."""

    def __init__(self, message: str, *, status: int, body: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.body = body

    @property
    def is_auth_failure(self) -> bool:
        return self.status in (401, 403)

    @property
    def is_quota_exceeded(self) -> bool:
        return self.status == 429


class AdapterEmptyResponse(AdapterError):
    """Raised when a chat-completions provider returns no extractable text."""


class AdapterConnectionError(AdapterError):
    """Raised when the transport fails (DNS, TLS, timeout, refused connection)."""


@runtime_checkable
class ProtocolExchange(Protocol):
    """Minimal interface for one wire protocol."""

    name: str
    fallback_reply: str | None

    def send(self, session: SessionDescriptor, user_message: str, *, timeout_s: float = 600.0) -> str:
        """Perform one request for *user_message* and return the reply text."""


def make_message(role: Role, content: str) -> Message:
    """Create a chat message dictionary."""

    return {"role": role, "content": content}


def to_chat_role(message: ConversationMessage) -> Role:
    return "assistant" if message.role == "model" else "user"


def build_messages(
    *,
    system: str | None,
    history: Iterable[ConversationMessage],
    user_message: str,
) -> List[Message]:
    """Create a chat-completions message list: system, history, then the new turn."""

    messages: List[Message] = []
    if system is not None:
        messages.append(make_message("system", system))
    for item in history:
        messages.append(make_message(to_chat_role(item), item.text))
    messages.append(make_message("user", user_message))
    return messages


__all__ = [
    "Role",
    "Message",
    "ProtocolExchange",
    "AdapterError",
    "AdapterConfigurationRequired",
    "AdapterProviderError",
    "AdapterEmptyResponse",
    "AdapterConnectionError",
    "make_message",
    "to_chat_role",
    "build_messages",
]
