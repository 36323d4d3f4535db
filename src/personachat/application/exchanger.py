"""Message exchange: one request per user turn against the session's provider."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from personachat.domain.chat import Protocol, SessionDescriptor
from personachat.infrastructure.adapters.base import AdapterError, ProtocolExchange
from personachat.infrastructure.adapters.registry import create_exchange

logger = logging.getLogger(__name__)


@dataclass
class MessageExchanger:
    """Dispatch a user message through the exchange matching the session protocol.

    Exactly one outbound request is made per :meth:`send`; failures propagate
    as :class:`AdapterError` subclasses and are never retried here.
    """

    timeout_s: float = 600.0
    exchange_factory: Callable[[Protocol], ProtocolExchange] = field(default=create_exchange, repr=False)

    def send(self, session: SessionDescriptor, user_message: str) -> str:
        exchange = self.exchange_factory(session.protocol)
        logger.info("Sending turn via %s (model=%s)", exchange.name, session.model_name or "<default>")
        try:
            reply = exchange.send(session, user_message, timeout_s=self.timeout_s)
        except AdapterError as exc:
            logger.warning("%s exchange failed: %s", exchange.name, exc.__class__.__name__)
            raise
        if reply == exchange.fallback_reply:
            # placeholder text is shown to the user but never replayed as a model turn
            logger.info("%s returned no text; turn not recorded.", exchange.name)
            return reply
        session.record_exchange(user_message, reply)
        return reply


__all__ = ["MessageExchanger"]
