"""CLI entry point for agent-timeline."""

from pathlib import Path

import typer

APP_HELP = """
Replay recorded agent event streams through the timeline reconciler.

\b
A recording is a JSONL file with one agent event per line, e.g.:
  {"type": "tool_start", "tool": "Read", "args": {"file_path": "a.ts"}}
  {"type": "tool_complete", "tool": "Read", "result": "const x=1;"}
"""

REPLAY_HELP = """
Derive the timeline snapshot (messages, tool calls, progress) as JSON.

Run status and the active tool are taken from the stream's own
complete/error/done and tool events unless given explicitly.

\b
Examples:
  # Full snapshot
  agent-timeline replay run.jsonl

  # Tool calls as they looked while Bash was still running
  agent-timeline replay run.jsonl --status running --current-tool Bash | jq '.tool_calls'

  # Include the user's prompt as the first message
  agent-timeline replay run.jsonl --prompt "Fix the failing test" | jq '.messages[0]'

  # Compact output for piping
  agent-timeline replay run.jsonl --compact | jq '.metadata.total_messages'
"""

INSPECT_HELP = """
Print a plain-text overview: status, tool calls, progress steps and
collapsed message previews.
"""

app = typer.Typer(add_completion=False, help=APP_HELP)


def _load(
    input_path: Path,
    status: str | None,
    current_tool: str | None,
    prompt: str | None,
    config: Path | None,
    debug: bool,
):
    from .config import ConfigError, load_settings
    from .events import load_events
    from .logging import setup_logging
    from .models import RunStatus
    from .timeline import TimelineSession

    setup_logging(debug=debug)

    if not input_path.exists():
        typer.echo(f"Error: File not found: {input_path}", err=True)
        raise typer.Exit(1)

    try:
        settings = load_settings(config)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    if status is not None and status not in {s.value for s in RunStatus}:
        typer.echo(f"Error: Invalid status: {status}", err=True)
        raise typer.Exit(1)

    session = TimelineSession(prompt, settings=settings)
    session.extend(load_events(input_path))
    return session, session.snapshot(status, current_tool), settings


@app.command(help=REPLAY_HELP)
def replay(
    input_path: Path = typer.Argument(..., help="Path to JSONL event recording"),
    status: str | None = typer.Option(
        None, "--status", help="Overall run status: running, complete or error"
    ),
    current_tool: str | None = typer.Option(None, "--current-tool", help="Active tool name"),
    prompt: str | None = typer.Option(None, "--prompt", help="User message that started the run"),
    output: Path | None = typer.Option(None, "-o", "--output", help="Output JSON file path"),
    compact: bool = typer.Option(False, "--compact", help="No indentation (for piping)"),
    config: Path | None = typer.Option(None, "--config", help="Settings TOML file"),
    debug: bool = typer.Option(False, "--debug", help="Verbose logging to stderr"),
) -> None:
    from .renderer import render_json

    _, timeline, _ = _load(input_path, status, current_tool, prompt, config, debug)
    json_str = render_json(timeline, input_path, compact=compact)

    if output is None:
        typer.echo(json_str)
    else:
        output.write_text(json_str)
        typer.echo(f"Written to {output}", err=True)


@app.command(help=INSPECT_HELP)
def inspect(
    input_path: Path = typer.Argument(..., help="Path to JSONL event recording"),
    status: str | None = typer.Option(
        None, "--status", help="Overall run status: running, complete or error"
    ),
    current_tool: str | None = typer.Option(None, "--current-tool", help="Active tool name"),
    prompt: str | None = typer.Option(None, "--prompt", help="User message that started the run"),
    expand: list[str] = typer.Option(
        [], "--expand", help="Message id to show expanded (repeatable)"
    ),
    collapse: list[str] = typer.Option(
        [], "--collapse", help="Message id to show collapsed (repeatable)"
    ),
    config: Path | None = typer.Option(None, "--config", help="Settings TOML file"),
    debug: bool = typer.Option(False, "--debug", help="Verbose logging to stderr"),
) -> None:
    from .renderer import render_text

    session, timeline, settings = _load(input_path, status, current_tool, prompt, config, debug)
    for message_id, wanted in [(m, True) for m in expand] + [(m, False) for m in collapse]:
        if session.is_expanded(message_id) != wanted:
            session.toggle(message_id)

    typer.echo(render_text(timeline, session.disclosure, settings.max_preview_lines))


if __name__ == "__main__":
    app()
