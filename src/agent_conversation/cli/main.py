"""CLI entry point for agent-conversation.

Invoked as::

    agent-conversation [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m agent_conversation.cli.main

Commands
--------
- version  — Show version information
- chat     — Ask the agent a question, optionally continuing a history
- show     — Display an exported message history
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

console = Console()

_ROLE_STYLES = {"user": "green", "assistant": "blue", "system": "yellow"}

# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


def _load_config(config_path: str | None) -> object:
    """Load ``AgentConfig`` from a YAML file, or from the environment."""
    from agent_conversation.config import AgentConfig

    if config_path:
        return AgentConfig.from_yaml(config_path)
    return AgentConfig.from_env()


def _make_model(config: object) -> object:
    """Instantiate the chat model described by ``config.model``."""
    from agent_conversation.llm.openai import OpenAIChatModel

    settings = config.model  # type: ignore[attr-defined]
    return OpenAIChatModel(
        settings.name,
        base_url=settings.base_url,
        temperature=settings.temperature,
        timeout=settings.timeout,
        max_retries=settings.max_retries,
    )


def _format_for(path: str, fmt: str | None) -> str:
    if fmt:
        return fmt.lower()
    return "yaml" if Path(path).suffix.lower() in (".yaml", ".yml") else "json"


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="agent-conversation")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """Conversation sessions for model-backed agents"""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


# ---------------------------------------------------------------------------
# version
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from agent_conversation import __version__

    console.print(f"[bold]agent-conversation[/bold] v{__version__}")


# ---------------------------------------------------------------------------
# chat
# ---------------------------------------------------------------------------


@cli.command(name="chat")
@click.argument("task")
@click.option("--history", "history_file", default=None, help="Exported history to continue from.")
@click.option("--export", "export_file", default=None, help="Write the resulting history here.")
@click.option(
    "--format",
    "fmt",
    default=None,
    type=click.Choice(["json", "yaml"], case_sensitive=False),
    help="History/export format. Defaults to the file extension.",
)
@click.option("--config", "config_path", default=None, help="YAML agent configuration file.")
@click.option("--model", "model_name", default=None, help="Override the configured model name.")
def chat_command(
    task: str,
    history_file: str | None,
    export_file: str | None,
    fmt: str | None,
    config_path: str | None,
    model_name: str | None,
) -> None:
    """Ask the agent TASK and print its answer."""
    from agent_conversation.agent import Agent
    from agent_conversation.engine.base import EngineError
    from agent_conversation.llm.errors import LLMError
    from agent_conversation.session.export import dump_messages, load_messages

    try:
        config = _load_config(config_path)
    except (ValueError, OSError) as exc:
        console.print(f"[red]Invalid configuration:[/red] {exc}")
        sys.exit(1)
    if model_name:
        config.model.name = model_name  # type: ignore[attr-defined]

    messages = None
    if history_file:
        try:
            raw = Path(history_file).read_text(encoding="utf-8")
            messages = load_messages(raw, _format_for(history_file, fmt))  # type: ignore[arg-type]
        except (ValueError, OSError) as exc:
            console.print(f"[red]Failed to read history:[/red] {exc}")
            sys.exit(1)

    try:
        with _make_model(config) as model:  # type: ignore[attr-defined]
            agent = Agent(model=model, config=config)  # type: ignore[arg-type]
            answer, session = agent.run(task, messages=messages, return_session=True)
    except (ValueError, LLMError, EngineError) as exc:
        console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)

    console.print(Panel(answer, title="[blue]Answer[/blue]", expand=False))

    if export_file:
        output_path = Path(export_file)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(
            dump_messages(session, _format_for(export_file, fmt)),  # type: ignore[arg-type]
            encoding="utf-8",
        )
        console.print(f"[green]History exported:[/green] {export_file}")


# ---------------------------------------------------------------------------
# show
# ---------------------------------------------------------------------------


@cli.command(name="show")
@click.argument("history_file")
@click.option(
    "--format",
    "fmt",
    default=None,
    type=click.Choice(["json", "yaml"], case_sensitive=False),
    help="Document format. Defaults to the file extension.",
)
def show_command(history_file: str, fmt: str | None) -> None:
    """Display the exported history in HISTORY_FILE."""
    import json

    import yaml

    path = Path(history_file)
    resolved = _format_for(history_file, fmt)
    try:
        raw = path.read_text(encoding="utf-8")
        data = yaml.safe_load(raw) if resolved == "yaml" else json.loads(raw)
    except (ValueError, OSError, yaml.YAMLError) as exc:
        console.print(f"[red]Failed to read history:[/red] {exc}")
        sys.exit(1)

    if not isinstance(data, list) or not data:
        console.print("[yellow]No messages found.[/yellow]")
        return

    table = Table(title=path.name, show_lines=True)
    table.add_column("#", justify="right")
    table.add_column("Role", style="bold")
    table.add_column("Timestamp", style="dim")
    table.add_column("Content")

    for index, entry in enumerate(data):
        entry = entry if isinstance(entry, dict) else {}
        role = str(entry.get("role", "?"))
        style = _ROLE_STYLES.get(role, "white")
        table.add_row(
            str(index),
            f"[{style}]{role}[/{style}]",
            str(entry.get("timestamp", "")),
            str(entry.get("content", ""))[:200],
        )

    console.print(table)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


if __name__ == "__main__":
    cli()
