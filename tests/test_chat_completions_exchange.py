"""Tests for the OpenAI-compatible chat-completions exchange."""

from __future__ import annotations

import pytest

from personachat.application.exchanger import MessageExchanger
from personachat.application.session_builder import build_session
from personachat.domain.chat import ConversationMessage
from personachat.infrastructure.adapters.base import (
    AdapterConnectionError,
    AdapterEmptyResponse,
    AdapterProviderError,
)
from personachat.infrastructure.adapters.chat_completions_adapt import (
    authorization_header,
    normalize_completions_url,
)

CREDENTIAL = "sk-test-abc123"


def _session(endpoint: str = "https://api.example-llm.com/v1", credential: str = CREDENTIAL, model: str = "gpt-x"):
    history = [
        ConversationMessage(role="user", text="hi", timestamp=1),
        ConversationMessage(role="model", text="hello", timestamp=1),
    ]
    return build_session(model, "You are terse.", history, endpoint, credential)


def _ok(content: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


@pytest.mark.parametrize(
    ("endpoint", "expected"),
    [
        ("https://host.com/api", "https://host.com/api/chat/completions"),
        ("https://host.com/api/", "https://host.com/api/chat/completions"),
        ("https://host.com/api/chat/completions", "https://host.com/api/chat/completions"),
        ("https://host.com/api?key=x", "https://host.com/api?key=x"),
        ("https://host.com/v1/models/tiny:predict", "https://host.com/v1/models/tiny:predict"),
        ("https://host.com/api/generate", "https://host.com/api/generate"),
        ("http://localhost:1234", "http://localhost:1234"),
        ("http://localhost:11434/v1", "http://localhost:11434/v1"),
        ("http://localhost:11434/v1/chat/completions", "http://localhost:11434/v1/chat/completions"),
    ],
)
def test_normalize_completions_url(endpoint: str, expected: str) -> None:
    assert normalize_completions_url(endpoint) == expected


def test_bare_host_with_port_is_sent_as_written(transport) -> None:
    transport.queue(payload=_ok("ok"))
    MessageExchanger().send(_session(endpoint="http://localhost:1234"), "q")
    assert transport.last["url"] == "http://localhost:1234"


def test_authorization_header_variants() -> None:
    assert authorization_header("") is None
    assert authorization_header("   ") is None
    assert authorization_header("abc") == "Bearer abc"
    assert authorization_header("Bearer abc") == "Bearer abc"
    assert authorization_header("Basic dXNlcjpwYXNz") == "Basic dXNlcjpwYXNz"


def test_request_shape_preserves_history_order(transport) -> None:
    transport.queue(payload=_ok("fine, thanks"))
    reply = MessageExchanger().send(_session(), "how are you")

    assert reply == "fine, thanks"
    assert len(transport.calls) == 1
    call = transport.last
    assert call["url"] == "https://api.example-llm.com/v1/chat/completions"
    assert call["json"]["messages"] == [
        {"role": "system", "content": "You are terse."},
        {"role": "user", "content": "hi"},
        {"role": "assistant", "content": "hello"},
        {"role": "user", "content": "how are you"},
    ]
    assert call["json"]["model"] == "gpt-x"
    assert call["json"]["stream"] is False
    assert call["json"]["temperature"] == 0.7
    assert call["headers"]["Authorization"] == f"Bearer {CREDENTIAL}"


def test_blank_model_and_credential_are_omitted(transport) -> None:
    transport.queue(payload=_ok("ok"))
    MessageExchanger().send(_session(model="  ", credential=""), "hello")

    call = transport.last
    assert "model" not in call["json"]
    assert "Authorization" not in call["headers"]


def test_transcript_grows_and_carries_context(transport) -> None:
    session = _session()
    exchanger = MessageExchanger()
    transport.queue(payload=_ok("first reply"))
    transport.queue(payload=_ok("second reply"))

    exchanger.send(session, "one")
    exchanger.send(session, "two")

    assert [(m.role, m.text) for m in session.transcript[2:]] == [
        ("user", "one"),
        ("model", "first reply"),
        ("user", "two"),
        ("model", "second reply"),
    ]
    second_messages = transport.calls[1]["json"]["messages"]
    assert second_messages[-3:] == [
        {"role": "user", "content": "one"},
        {"role": "assistant", "content": "first reply"},
        {"role": "user", "content": "two"},
    ]


@pytest.mark.parametrize(
    ("payload", "expected"),
    [
        ({"choices": [{"message": {"content": "from choices"}}], "content": "ignored"}, "from choices"),
        ({"choices": [], "content": "from content"}, "from content"),
        ({"response": "from response"}, "from response"),
        ({"choices": [{"message": {"content": ""}}], "response": "fallback"}, "fallback"),
    ],
)
def test_reply_extraction_order(transport, payload: dict, expected: str) -> None:
    transport.queue(payload=payload)
    assert MessageExchanger().send(_session(), "q") == expected


@pytest.mark.parametrize(
    "payload",
    [{}, {"choices": [{"message": {"content": "   "}}]}, {"unexpected": True}],
)
def test_empty_payload_is_a_failure(transport, payload: dict) -> None:
    session = _session()
    transport.queue(payload=payload)
    with pytest.raises(AdapterEmptyResponse):
        MessageExchanger().send(session, "q")
    assert len(session.transcript) == 2


def test_non_json_body_is_an_empty_response(transport) -> None:
    transport.queue(status_code=200, text="<html>gateway</html>")
    with pytest.raises(AdapterEmptyResponse):
        MessageExchanger().send(_session(), "q")


def test_provider_error_carries_status_and_truncated_body(transport) -> None:
    transport.queue(status_code=500, text="x" * 400)
    with pytest.raises(AdapterProviderError) as excinfo:
        MessageExchanger().send(_session(), "q")
    assert excinfo.value.status == 500
    assert len(excinfo.value.body) == 150
    assert "500" in str(excinfo.value)


@pytest.mark.parametrize("status", [401, 403, 500])
def test_credential_never_leaks_into_errors(transport, status: int) -> None:
    transport.queue(status_code=status, text=f'{{"error": "bad key {CREDENTIAL} for Bearer {CREDENTIAL}"}}')
    with pytest.raises(AdapterProviderError) as excinfo:
        MessageExchanger().send(_session(), "q")
    assert CREDENTIAL not in str(excinfo.value)
    assert CREDENTIAL not in excinfo.value.body


def test_connection_failure_is_classified(transport, connection_refused) -> None:
    session = _session()
    transport.fail_with(connection_refused)
    with pytest.raises(AdapterConnectionError) as excinfo:
        MessageExchanger().send(session, "q")
    assert "Connection refused" in str(excinfo.value)
    assert len(transport.calls) == 1
    assert len(session.transcript) == 2


def test_timeout_is_passed_to_transport(transport) -> None:
    transport.queue(payload=_ok("ok"))
    MessageExchanger(timeout_s=12.5).send(_session(), "q")
    assert transport.last["timeout"] == 12.5
