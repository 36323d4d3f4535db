"""Exchange registry keyed by wire protocol."""

from __future__ import annotations

from typing import Callable, Dict

from personachat.domain.chat import Protocol

from .base import AdapterConfigurationRequired, ProtocolExchange
from .chat_completions_adapt import ChatCompletionsExchange
from .gemini_adapt import GeminiExchange

REGISTRY: Dict[Protocol, Callable[[], ProtocolExchange]] = {
    Protocol.VENDOR_NATIVE: lambda: GeminiExchange(),
    Protocol.GENERIC_CHAT_COMPLETIONS: lambda: ChatCompletionsExchange(),
}


def create_exchange(protocol: Protocol) -> ProtocolExchange:
    """Instantiate the exchange that speaks *protocol*."""

    try:
        factory = REGISTRY[protocol]
    except KeyError as exc:  # pragma: no cover - closed enum
        raise AdapterConfigurationRequired(f"Unsupported protocol '{protocol}'.") from exc
    return factory()


__all__ = ["REGISTRY", "create_exchange"]
