"""Shared HTTP helpers for protocol exchanges."""

from __future__ import annotations

import logging
from typing import Any, Dict
from urllib.parse import urlsplit

import requests

from personachat.utils import redact_secret, truncate

from .base import AdapterConnectionError, AdapterProviderError

logger = logging.getLogger(__name__)

ERROR_BODY_LIMIT = 150


def post_json(
    url: str,
    payload: Dict[str, Any],
    *,
    headers: Dict[str, str] | None = None,
    timeout_s: float = 600.0,
    secret: str | None = None,
) -> Any:
    """POST *payload* and return the decoded JSON body.

    A 2xx body that is not valid JSON decodes to ``None``; callers treat that
    the same as a payload with no reply text.
    """

    host = urlsplit(url).netloc
    logger.debug("POST %s (timeout=%ss)", host, timeout_s)
    try:
        response = requests.post(url, json=payload, headers=headers, timeout=timeout_s)
    except requests.exceptions.RequestException as exc:
        logger.warning("Request to %s failed: %s", host, exc.__class__.__name__)
        raise AdapterConnectionError(redact_secret(f"Connection failed: {exc}", secret)) from None

    if not 200 <= response.status_code < 300:
        logger.warning("Provider at %s answered HTTP %s", host, response.status_code)
        raise map_http_error(response.status_code, response.text, secret=secret)

    logger.debug("Provider at %s answered HTTP %s", host, response.status_code)
    try:
        return response.json()
    except ValueError:
        return None


def map_http_error(status: int, body: str, *, secret: str | None = None) -> AdapterProviderError:
    snippet = truncate(redact_secret(body or "", secret), ERROR_BODY_LIMIT)
    message = f"Provider error ({status}): {snippet}" if snippet else f"Provider error ({status})."
    return AdapterProviderError(message, status=status, body=snippet)


__all__ = ["ERROR_BODY_LIMIT", "post_json", "map_http_error"]
