"""Gemini generateContent exchange (the vendor-native protocol)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List

from personachat.domain.chat import ConversationMessage, SessionDescriptor

from .base import AdapterConfigurationRequired
from .http_utils import post_json
from .util import GEMINI_EXTRACTORS, extract_reply

logger = logging.getLogger(__name__)

GEMINI_HOST_MARKER = "googleapis.com"
GEMINI_DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
GEMINI_DEFAULT_MODEL = "gemini-2.0-flash"
GEMINI_FALLBACK_REPLY = "No response from Gemini."

TEMPERATURE = 0.7
MAX_OUTPUT_TOKENS = 2048
MIN_CREDENTIAL_LENGTH = 4


def gemini_url(endpoint_url: str, model_name: str) -> str:
    """Return the generateContent URL for *endpoint_url* and *model_name*.

    An endpoint that already names the ``:generateContent`` method (Vertex
    style) is used as-is.
    """

    base = (endpoint_url or GEMINI_DEFAULT_BASE_URL).strip().rstrip("/")
    if ":generateContent" in base:
        return base
    model = model_name.strip() or GEMINI_DEFAULT_MODEL
    return f"{base}/models/{model}:generateContent"


def build_contents(history: List[ConversationMessage], user_message: str) -> List[Dict[str, object]]:
    contents: List[Dict[str, object]] = [
        {"role": msg.role, "parts": [{"text": msg.text}]}
        for msg in history
        if msg.role in ("user", "model")
    ]
    contents.append({"role": "user", "parts": [{"text": user_message}]})
    return contents


@dataclass
class GeminiExchange:
    """Exchange that speaks the Gemini REST protocol directly."""

    name: str = "gemini"
    fallback_reply: str = GEMINI_FALLBACK_REPLY

    def send(self, session: SessionDescriptor, user_message: str, *, timeout_s: float = 600.0) -> str:
        credential = session.credential.strip()
        if len(credential) < MIN_CREDENTIAL_LENGTH:
            raise AdapterConfigurationRequired(
                "No API key is configured for this persona. Ask an administrator to add one."
            )

        payload: Dict[str, object] = {
            "contents": build_contents(session.transcript, user_message),
            "systemInstruction": {"parts": [{"text": session.system_instruction}]},
            "generationConfig": {
                "temperature": TEMPERATURE,
                "maxOutputTokens": MAX_OUTPUT_TOKENS,
            },
        }
        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": credential,
        }
        data = post_json(
            gemini_url(session.endpoint_url, session.model_name),
            payload,
            headers=headers,
            timeout_s=timeout_s,
            secret=session.credential,
        )

        text = extract_reply(data, GEMINI_EXTRACTORS)
        if not text:
            logger.info("Gemini returned no candidate text; using fallback reply.")
            return self.fallback_reply
        return text.strip()


__all__ = [
    "GEMINI_HOST_MARKER",
    "GEMINI_DEFAULT_BASE_URL",
    "GEMINI_DEFAULT_MODEL",
    "GEMINI_FALLBACK_REPLY",
    "GeminiExchange",
    "build_contents",
    "gemini_url",
]
