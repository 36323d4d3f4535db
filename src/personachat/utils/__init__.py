"""General utility helpers for personachat."""

from __future__ import annotations

import re

_REDACTED = "***REDACTED***"
_KEY_PARAM = re.compile(r"(?i)([?&]key=)[^&\s]+")
MIN_SUBSTRING_SECRET = 8


def redact_secret(text: str, secret: str | None) -> str:
    """Remove *secret*, and any ``key=`` query parameter value, from *text*."""

    if not text:
        return text

    redacted = text
    for candidate in _secret_variants(secret):
        if len(candidate) < MIN_SUBSTRING_SECRET:
            # short keys only match as whole tokens
            pattern = re.compile(rf"(?<![\w-]){re.escape(candidate)}(?![\w-])")
            redacted = pattern.sub(_REDACTED, redacted)
        else:
            redacted = redacted.replace(candidate, _REDACTED)
    return _KEY_PARAM.sub(lambda match: f"{match.group(1)}{_REDACTED}", redacted)


def _secret_variants(secret: str | None) -> list[str]:
    if not secret or not secret.strip():
        return []
    variants = {secret, secret.strip()}
    scheme, _, token = secret.strip().partition(" ")
    if scheme.lower() in ("bearer", "basic") and token.strip():
        variants.add(token.strip())
    # longest first
    return sorted(variants, key=len, reverse=True)


def truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit]


__all__ = ["redact_secret", "truncate"]
