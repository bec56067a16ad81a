"""CLI for questions-ui - local web form for agent questions."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from questions_ui import __version__
from questions_ui.config import configure_logging, load_settings


@click.group()
@click.version_option(version=__version__, prog_name="questions-ui")
def main() -> None:
    """Questions UI - answer batches of agent questions in a browser.

    Runs a local web form and exposes it to agents as an MCP tool.
    """
    pass


@main.command()
@click.option("--port", default=None, type=int, help="Port to run the web server on")
@click.option("--host", default="127.0.0.1", help="Host to bind to")
def serve(port: int | None, host: str) -> None:
    """Start only the HTTP API and form pages (for development)."""
    import uvicorn

    settings = load_settings()
    configure_logging(settings.log_level)
    port = port or settings.port

    click.echo(f"Starting Questions UI server on {host}:{port}")
    uvicorn.run(
        "questions_ui.web:app",
        host=host,
        port=port,
    )


@main.command()
def mcp() -> None:
    """Run the MCP server for agent integration.

    Starts the local web server, then serves the ask_questions_web tool
    over stdio.

    \b
    Configure in .mcp.json:
        {
            "mcpServers": {
                "questions-ui": {
                    "command": "questions-ui",
                    "args": ["mcp"]
                }
            }
        }
    """
    from mcp_questions_ui.server import main as run_mcp_server

    run_mcp_server()


def _load_request(path: Path):
    """Read a questions file: a list of questions or a full tool input object."""
    from questions_ui.schemas import AskQuestionsInput

    data = json.loads(path.read_text())
    if isinstance(data, list):
        data = {"questions": data}
    return AskQuestionsInput.model_validate(data)


@main.command()
@click.argument(
    "questions_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--timeout-ms",
    type=int,
    default=None,
    help="How long to wait for answers (defaults to QUESTIONS_UI_TIMEOUT)",
)
@click.option(
    "--no-open",
    is_flag=True,
    help="Do not open a browser, just print the URL",
)
@click.option(
    "--raw",
    is_flag=True,
    help="Output raw JSON instead of the summary",
)
def ask(questions_file: Path, timeout_ms: int | None, no_open: bool, raw: bool) -> None:
    """Ask questions from a JSON file and print the answers.

    \b
    Example:
        questions-ui ask questions.json
        questions-ui ask questions.json --no-open --timeout-ms 60000 --raw
    """
    from dataclasses import replace

    from questions_ui.errors import QuestionsUIError
    from questions_ui.tools import ask_questions_web
    from questions_ui.web import get_web_server

    settings = load_settings()
    configure_logging(settings.log_level)

    try:
        request = _load_request(questions_file)
    except (json.JSONDecodeError, ValidationError) as e:
        click.echo(f"Invalid questions file: {e}", err=True)
        sys.exit(1)

    settings = replace(
        settings,
        timeout_ms=timeout_ms if timeout_ms is not None else settings.timeout_ms,
        no_open=no_open or settings.no_open,
    )

    server = get_web_server(settings.port)
    try:
        server.start()
    except QuestionsUIError as e:
        click.echo(f"Failed to start web server: {e}", err=True)
        sys.exit(1)

    try:
        result = asyncio.run(ask_questions_web(request, server=server, settings=settings))
    finally:
        server.stop()

    if raw:
        click.echo(json.dumps(result.model_dump(), indent=2))
    else:
        click.echo(result.summary)

    if result.timed_out:
        sys.exit(2)


@main.command()
@click.option(
    "--force", "-f",
    is_flag=True,
    help="Replace an existing questions-ui entry in .mcp.json",
)
def init(force: bool) -> None:
    """Register questions-ui in the current project's .mcp.json.

    \b
    Example:
        cd /path/to/myproject
        questions-ui init
    """
    import shutil

    mcp_json_path = Path.cwd() / ".mcp.json"
    executable = shutil.which("questions-ui") or "questions-ui"

    server_config = {
        "command": executable,
        "args": ["mcp"],
    }

    if mcp_json_path.exists():
        try:
            mcp_config = json.loads(mcp_json_path.read_text())
        except json.JSONDecodeError:
            mcp_config = {"mcpServers": {}}
    else:
        mcp_config = {"mcpServers": {}}

    if "mcpServers" not in mcp_config:
        mcp_config["mcpServers"] = {}

    if "questions-ui" in mcp_config["mcpServers"] and not force:
        click.echo(".mcp.json already has questions-ui config (use --force to replace)")
        return

    mcp_config["mcpServers"]["questions-ui"] = server_config
    mcp_json_path.write_text(json.dumps(mcp_config, indent=2) + "\n")
    click.echo("Updated .mcp.json with questions-ui MCP server")
    click.echo("\nNext steps:")
    click.echo("  1. Restart your agent to load MCP tools")
    click.echo("  2. Ask it to clarify requirements with ask_questions_web")


if __name__ == "__main__":
    main()
