"""Shared fixtures: a recording stand-in for ``requests.post``."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import pytest
import requests

from personachat.infrastructure.adapters import http_utils


@dataclass
class FakeResponse:
    status_code: int = 200
    payload: Any = None
    text: str = ""

    def json(self) -> Any:
        if self.payload is None:
            return json.loads(self.text)
        return self.payload


@dataclass
class FakeTransport:
    """Queue of canned responses; records every call it receives."""

    responses: list[Any] = field(default_factory=list)
    calls: list[dict[str, Any]] = field(default_factory=list)

    def queue(self, status_code: int = 200, payload: Any = None, text: str = "") -> None:
        if payload is not None and not text:
            text = json.dumps(payload)
        self.responses.append(FakeResponse(status_code=status_code, payload=payload, text=text))

    def fail_with(self, exc: Exception) -> None:
        self.responses.append(exc)

    def __call__(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"url": url, **kwargs})
        if not self.responses:
            raise AssertionError(f"Unexpected request to {url}")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    @property
    def last(self) -> dict[str, Any]:
        return self.calls[-1]


@pytest.fixture
def transport(monkeypatch: pytest.MonkeyPatch) -> FakeTransport:
    fake = FakeTransport()
    monkeypatch.setattr(http_utils.requests, "post", fake)
    return fake


@pytest.fixture
def connection_refused() -> Exception:
    return requests.exceptions.ConnectionError("Connection refused by host")
