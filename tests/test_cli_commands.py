"""CLI command tests for personachat."""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest
from typer.testing import CliRunner

from personachat.cli import app


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("PERSONACHAT_API_KEY", "PERSONACHAT_TIMEOUT_S", "PERSONACHAT_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("COLUMNS", "200")


def _copy_config_tree(tmp_path: Path) -> Path:
    destination = tmp_path / "config"
    shutil.copytree(Path("config"), destination)
    return destination


def test_cli_validate_happy_path(tmp_path: Path) -> None:
    config_dir = _copy_config_tree(tmp_path)
    runner = CliRunner()
    result = runner.invoke(app, ["validate", "--config-dir", str(config_dir)], catch_exceptions=False)
    assert result.exit_code == 0
    assert "Configs OK" in result.stdout


def test_cli_validate_reports_bad_reference(tmp_path: Path) -> None:
    config_dir = _copy_config_tree(tmp_path)
    persona_file = config_dir / "personas" / "sast_analyzer.yaml"
    persona_file.write_text(
        persona_file.read_text(encoding="utf-8").replace("gemini_vault", "ghost_pool"),
        encoding="utf-8",
    )
    result = CliRunner().invoke(app, ["validate", "--config-dir", str(config_dir)])
    assert result.exit_code == 1
    assert "ghost_pool" in result.stdout


def test_cli_personas_lists_protocols(tmp_path: Path) -> None:
    config_dir = _copy_config_tree(tmp_path)
    result = CliRunner().invoke(app, ["personas", "--config-dir", str(config_dir)], catch_exceptions=False)
    assert result.exit_code == 0
    for name in ("ops_advisor", "sast_analyzer", "local_llama"):
        assert name in result.stdout
    assert "generic_chat_completions" in result.stdout
    assert "vendor_native" in result.stdout


def test_cli_show_persona_hides_keys(tmp_path: Path) -> None:
    config_dir = _copy_config_tree(tmp_path)
    result = CliRunner().invoke(
        app,
        ["show", "persona", "sast_analyzer", "--config-dir", str(config_dir)],
        catch_exceptions=False,
    )
    assert result.exit_code == 0
    assert "gemini_vault" in result.stdout
    assert "replace-with-gemini-key" not in result.stdout


def test_cli_show_rejects_unknown_subject(tmp_path: Path) -> None:
    config_dir = _copy_config_tree(tmp_path)
    result = CliRunner().invoke(app, ["show", "key_pool", "x", "--config-dir", str(config_dir)])
    assert result.exit_code == 1


def test_cli_ask_generic_persona(tmp_path: Path, transport) -> None:
    config_dir = _copy_config_tree(tmp_path)
    transport.queue(payload={"choices": [{"message": {"content": "Hi there"}}]})
    result = CliRunner().invoke(
        app,
        ["ask", "hello", "--persona", "local_llama", "--config-dir", str(config_dir)],
        catch_exceptions=False,
    )
    assert result.exit_code == 0
    assert "Hi there" in result.stdout
    assert transport.last["url"] == "http://localhost:11434/v1/chat/completions"


def test_cli_ask_without_key_reports_configuration_error(tmp_path: Path, transport) -> None:
    config_dir = _copy_config_tree(tmp_path)
    result = CliRunner().invoke(app, ["ask", "hello", "--persona", "ops_advisor", "--config-dir", str(config_dir)])
    assert result.exit_code == 1
    assert "API key" in result.stdout
    assert transport.calls == []


def test_cli_ask_unknown_persona(tmp_path: Path) -> None:
    config_dir = _copy_config_tree(tmp_path)
    result = CliRunner().invoke(app, ["ask", "hello", "--persona", "ghost", "--config-dir", str(config_dir)])
    assert result.exit_code == 1
    assert "Unknown persona" in result.stdout


def test_cli_chat_loop_keeps_context(tmp_path: Path, transport, monkeypatch: pytest.MonkeyPatch) -> None:
    config_dir = _copy_config_tree(tmp_path)
    monkeypatch.setenv("PERSONACHAT_API_KEY", "process-key-123")
    transport.queue(payload={"candidates": [{"content": {"parts": [{"text": "first answer"}]}}]})
    transport.queue(payload={"candidates": [{"content": {"parts": [{"text": "second answer"}]}}]})

    result = CliRunner().invoke(
        app,
        ["chat", "--persona", "ops_advisor", "--config-dir", str(config_dir)],
        input="one\ntwo\n/exit\n",
        catch_exceptions=False,
    )

    assert result.exit_code == 0
    assert "first answer" in result.stdout
    assert "second answer" in result.stdout
    assert len(transport.calls) == 2
    contents = transport.calls[1]["json"]["contents"]
    assert [turn["parts"][0]["text"] for turn in contents] == ["one", "first answer", "two"]
    assert "process-key-123" not in result.stdout


def test_cli_validate_defaults_to_config_directory() -> None:
    result = CliRunner().invoke(app, ["validate"], catch_exceptions=False)
    assert result.exit_code == 0
    assert "Configs OK" in result.stdout
