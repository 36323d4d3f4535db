"""Session construction: resolve the wire protocol once and snapshot history."""

from __future__ import annotations

import logging
from typing import Iterable

from personachat.domain.chat import ConversationMessage, Protocol, SessionDescriptor
from personachat.infrastructure.adapters.gemini_adapt import GEMINI_HOST_MARKER

logger = logging.getLogger(__name__)


def resolve_protocol(endpoint_url: str | None) -> Protocol:
    """Classify *endpoint_url*.

    No endpoint, or an endpoint on the Gemini API host, means the vendor
    protocol; anything else is treated as an OpenAI-compatible server.
    """

    url = (endpoint_url or "").strip()
    if not url:
        return Protocol.VENDOR_NATIVE
    if GEMINI_HOST_MARKER in url:
        return Protocol.VENDOR_NATIVE
    return Protocol.GENERIC_CHAT_COMPLETIONS


def resolve_credential(credential: str | None, default_credential: str | None = None) -> str:
    if credential and credential.strip():
        return credential.strip()
    return (default_credential or "").strip()


def build_session(
    model_name: str | None,
    system_instruction: str,
    history: Iterable[ConversationMessage],
    endpoint_url: str | None = None,
    credential: str | None = None,
    *,
    default_credential: str | None = None,
) -> SessionDescriptor:
    """Create a :class:`SessionDescriptor` for one conversation view.

    Never performs I/O and never fails: a missing credential or endpoint only
    surfaces when the first message is sent.
    """

    protocol = resolve_protocol(endpoint_url)
    resolved_credential = resolve_credential(credential, default_credential)
    if not resolved_credential:
        logger.warning("No API key resolved for %s session; sends may be rejected.", protocol.value)

    session = SessionDescriptor(
        protocol=protocol,
        model_name=(model_name or "").strip(),
        endpoint_url=(endpoint_url or "").strip(),
        credential=resolved_credential,
        system_instruction=system_instruction,
        transcript=list(history),
    )
    logger.debug(
        "Built %s session (model=%s, %d prior messages)",
        protocol.value,
        session.model_name or "<default>",
        len(session.transcript),
    )
    return session


__all__ = ["build_session", "resolve_credential", "resolve_protocol"]
