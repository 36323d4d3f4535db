"""OpenAI-compatible chat-completions exchange for custom and self-hosted endpoints."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from personachat.domain.chat import SessionDescriptor

from .base import AdapterConfigurationRequired, AdapterEmptyResponse, build_messages
from .http_utils import post_json
from .util import CHAT_COMPLETION_EXTRACTORS, extract_reply

COMPLETIONS_PATH = "/chat/completions"
GENERATE_MARKER = "/generate"
TEMPERATURE = 0.7


def normalize_completions_url(endpoint_url: str) -> str:
    """Append ``/chat/completions`` unless *endpoint_url* already looks complete.

    A URL counts as complete when it ends with the completions path, names a
    ``/generate`` route, carries a query string, or has a colon anywhere after
    the scheme. That last rule covers ``/models/x:predict`` and also any
    explicit port, so ``http://localhost:1234/v1`` is used as written and must
    spell out the full path.
    """

    url = endpoint_url.strip()
    if url.endswith(COMPLETIONS_PATH) or GENERATE_MARKER in url:
        return url
    remainder = url.split("://", 1)[-1]
    if "?" in url or ":" in remainder:
        return url
    return url.rstrip("/") + COMPLETIONS_PATH


def authorization_header(credential: str) -> str | None:
    key = credential.strip()
    if not key:
        return None
    if key.lower().startswith(("bearer ", "basic ")):
        return key
    return f"Bearer {key}"


@dataclass
class ChatCompletionsExchange:
    """Exchange for any server that accepts the chat-completions JSON shape."""

    name: str = "chat_completions"
    fallback_reply: str | None = None

    def send(self, session: SessionDescriptor, user_message: str, *, timeout_s: float = 600.0) -> str:
        if not session.endpoint_url.strip():
            raise AdapterConfigurationRequired(
                "No endpoint URL is configured for this persona. Ask an administrator to set one."
            )

        payload: Dict[str, object] = {
            "messages": build_messages(
                system=session.system_instruction,
                history=session.transcript,
                user_message=user_message,
            ),
            "stream": False,
            "temperature": TEMPERATURE,
        }
        model = session.model_name.strip()
        if model:
            payload["model"] = model

        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        auth = authorization_header(session.credential)
        if auth is not None:
            headers["Authorization"] = auth

        data = post_json(
            normalize_completions_url(session.endpoint_url),
            payload,
            headers=headers,
            timeout_s=timeout_s,
            secret=session.credential,
        )

        text = extract_reply(data, CHAT_COMPLETION_EXTRACTORS)
        if not text:
            raise AdapterEmptyResponse("The provider returned no text content.")
        return text.strip()


__all__ = [
    "COMPLETIONS_PATH",
    "ChatCompletionsExchange",
    "authorization_header",
    "normalize_completions_url",
]
