"""Command line interface for personachat."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable

import typer
from rich.console import Console
from rich.table import Table

from personachat.application.context import ApplicationContext
from personachat.application.session_builder import resolve_protocol
from personachat.config_loader import (
    ConfigError,
    KeyPoolCfg,
    PersonaCfg,
    collect_configs,
    load_settings,
    validate_configs,
)
from personachat.utils.logging import setup_logging

app = typer.Typer(help="Chat with configured personas over Gemini or OpenAI-compatible endpoints.")
console = Console()

EXIT_COMMANDS = ("/exit", "/quit")


def _handle_config_error(exc: ConfigError) -> None:
    console.print(str(exc))
    raise typer.Exit(code=1) from exc


def _load_and_validate(config_dir: Path) -> tuple[dict[str, PersonaCfg], dict[str, KeyPoolCfg]]:
    try:
        personas, key_pools = collect_configs(config_dir)
        validate_configs(personas, key_pools)
        return personas, key_pools
    except ConfigError as exc:
        _handle_config_error(exc)
        raise  # pragma: no cover


def _require_persona(name: str, personas: dict[str, PersonaCfg]) -> PersonaCfg:
    persona = personas.get(name)
    if persona is None:
        console.print(f"[red]Unknown persona '{name}'. Available: {', '.join(sorted(personas))}[/red]")
        raise typer.Exit(code=1)
    return persona


def _create_context(key_pools: dict[str, KeyPoolCfg], verbose: int) -> ApplicationContext:
    try:
        settings = load_settings()
    except ConfigError as exc:
        _handle_config_error(exc)
        raise  # pragma: no cover
    setup_logging(settings.log_level, verbose=verbose)
    return ApplicationContext.create(console=console, settings=settings, key_pools=key_pools)


def _config_dir_param() -> Any:
    return typer.Option(
        default=Path("config"),
        exists=True,
        file_okay=False,
        dir_okay=True,
        readable=True,
        help="Directory containing persona and key pool YAML files.",
    )


@app.command()
def validate(config_dir: Path = _config_dir_param()) -> None:
    """Validate configuration files."""

    _load_and_validate(config_dir)
    console.print("[green]Configs OK[/green]")


@app.command()
def personas(config_dir: Path = _config_dir_param()) -> None:
    """List configured personas and the protocol each one speaks."""

    persona_map, _ = _load_and_validate(config_dir)
    table = Table(title="Personas")
    table.add_column("Name", justify="left")
    table.add_column("Model", justify="left")
    table.add_column("Protocol", justify="left")
    table.add_column("Description", justify="left")
    for persona in persona_map.values():
        table.add_row(
            persona.name,
            persona.model or "—",
            resolve_protocol(persona.base_url).value,
            persona.description,
        )
    console.print(table)


@app.command()
def show(
    subject: str = typer.Argument(..., help="Entity to show. Currently only 'persona'."),
    name: str = typer.Argument(..., help="Name of the persona."),
    config_dir: Path = _config_dir_param(),
) -> None:
    """Display details about a configuration entity."""

    if subject != "persona":
        console.print("[red]Only 'persona' is supported for show.[/red]")
        raise typer.Exit(code=1)

    persona_map, _ = _load_and_validate(config_dir)
    _print_persona_details(_require_persona(name, persona_map))


def _print_persona_details(persona: PersonaCfg) -> None:
    console.print(f"[bold]Persona:[/bold] {persona.name}")
    console.print(f"Description: {persona.description}")
    console.print("")

    table = Table(title="Persona Overview")
    table.add_column("Field", justify="left")
    table.add_column("Value", justify="left")
    table.add_row("Model", persona.model or "—")
    table.add_row("Endpoint", persona.base_url or "(Gemini default)")
    table.add_row("Protocol", resolve_protocol(persona.base_url).value)
    if persona.key_pool:
        credential = f"key pool '{persona.key_pool}'"
    elif persona.api_key:
        credential = "persona key"
    else:
        credential = "process default"
    table.add_row("Credential", credential)
    table.add_row("System Prompt", persona.system_prompt)
    console.print(table)


@app.command()
def ask(
    message: str = typer.Argument(..., help="Message to send."),
    persona: str = typer.Option(..., "--persona", help="Persona name."),
    config_dir: Path = _config_dir_param(),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="Increase log verbosity."),
) -> None:
    """Send a single message to a persona and print the reply."""

    persona_map, key_pools = _load_and_validate(config_dir)
    persona_cfg = _require_persona(persona, persona_map)
    app_context = _create_context(key_pools, verbose)
    conversation = app_context.conversations.open(persona_cfg)
    reply = conversation.reply(message)
    console.print(reply.text, markup=False)
    if conversation.last_error is not None:
        raise typer.Exit(code=1)


@app.command()
def chat(
    persona: str = typer.Option(..., "--persona", help="Persona name."),
    config_dir: Path = _config_dir_param(),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="Increase log verbosity."),
) -> None:
    """Open an interactive conversation. Type /exit to leave."""

    persona_map, key_pools = _load_and_validate(config_dir)
    persona_cfg = _require_persona(persona, persona_map)
    app_context = _create_context(key_pools, verbose)
    conversation = app_context.conversations.open(persona_cfg)

    console.print(f"[bold]{persona_cfg.name}[/bold] ({conversation.session.protocol.value}). Type /exit to leave.")
    while True:
        try:
            text = console.input("[bold cyan]you>[/bold cyan] ").strip()
        except (EOFError, KeyboardInterrupt):
            console.print("")
            break
        if not text:
            continue
        if text.lower() in EXIT_COMMANDS:
            break
        reply = conversation.reply(text)
        style = "red" if conversation.last_error is not None else None
        console.print(f"[bold magenta]{persona_cfg.name}>[/bold magenta] ", end="")
        console.print(reply.text, style=style, markup=False)


def main(argv: Iterable[str] | None = None) -> None:
    """Invoke the Typer application."""
    app(args=list(argv) if argv is not None else None)


if __name__ == "__main__":
    main()
