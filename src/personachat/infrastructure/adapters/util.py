"""Reply extraction helpers.

Providers disagree on where the reply text lives. Each extractor probes one
response shape and returns ``None`` when the shape does not match; the chains
below are tried in order and the first non-empty text wins.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Optional, Sequence

Extractor = Callable[[Any], Optional[str]]


def _text_or_none(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _first(items: Any) -> Any:
    if isinstance(items, Sequence) and not isinstance(items, (str, bytes)) and items:
        return items[0]
    return None


def chat_choice_content(data: Any) -> str | None:
    """``choices[0].message.content`` of a chat-completions response."""

    choice = _first(data.get("choices")) if isinstance(data, dict) else None
    message = choice.get("message") if isinstance(choice, dict) else None
    return _text_or_none(message.get("content")) if isinstance(message, dict) else None


def top_level_content(data: Any) -> str | None:
    return _text_or_none(data.get("content")) if isinstance(data, dict) else None


def top_level_response(data: Any) -> str | None:
    return _text_or_none(data.get("response")) if isinstance(data, dict) else None


def gemini_candidate_text(data: Any) -> str | None:
    """``candidates[0].content.parts[0].text`` of a generateContent response."""

    candidate = _first(data.get("candidates")) if isinstance(data, dict) else None
    content = candidate.get("content") if isinstance(candidate, dict) else None
    part = _first(content.get("parts")) if isinstance(content, dict) else None
    return _text_or_none(part.get("text")) if isinstance(part, dict) else None


CHAT_COMPLETION_EXTRACTORS: tuple[Extractor, ...] = (
    chat_choice_content,
    top_level_content,
    top_level_response,
)

GEMINI_EXTRACTORS: tuple[Extractor, ...] = (gemini_candidate_text,)


def extract_reply(data: Any, extractors: Iterable[Extractor]) -> str | None:
    """Return the first non-empty text produced by *extractors*, or ``None``."""

    for extractor in extractors:
        text = extractor(data)
        if text:
            return text
    return None


__all__ = [
    "Extractor",
    "chat_choice_content",
    "top_level_content",
    "top_level_response",
    "gemini_candidate_text",
    "CHAT_COMPLETION_EXTRACTORS",
    "GEMINI_EXTRACTORS",
    "extract_reply",
]
