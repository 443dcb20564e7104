import asyncio
import logging

from dataclasses import dataclass
from rich.console import Console
from typing import Optional

import typer

from agentdump import __version__
from agentdump.commands import HELP_TEXT, CommandShell
from agentdump.config import load_dump_config, load_search_config
from agentdump.loader import DumpNotFoundError, load_index

app = typer.Typer(
    help="AgentDump - IL2CPP dump search tool",
    no_args_is_help=True,
)

console = Console()

EXIT_COMMANDS = ("exit", "quit")


@dataclass
class CliOptions:
    """Global options shared by every command."""
    path: str
    output: str
    limit: int
    path_option: Optional[str] = None


def _open_shell(ctx: typer.Context) -> CommandShell:
    """Load the dump named by the global options and wrap it in a CommandShell."""
    options: CliOptions = ctx.obj
    try:
        index = load_index(options.path)
    except DumpNotFoundError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    return CommandShell(
        index,
        output=options.output,
        limit=options.limit,
        search_config=load_search_config(),
    )


@app.command()
def run(ctx: typer.Context, command: str):
    """Execute a single command and exit.

    Args:
        command: Command line, e.g. "class Player" or "hierarchy Enemy"

    Examples:
        agentdump run "class Player"
        agentdump --json --limit 10 run "find health"
    """
    shell = _open_shell(ctx)
    try:
        output = shell.execute(command)
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)

    typer.echo(output)


@app.command()
def shell(ctx: typer.Context):
    """Start an interactive session over the loaded dump."""
    command_shell = _open_shell(ctx)
    stats = command_shell.index.stats()

    console.print("=== AgentDump - IL2CPP Search Tool ===", style="bold")
    console.print(
        f"Loaded: {stats.total_classes} classes, {stats.total_methods} methods, "
        f"{stats.total_fields} fields"
    )
    console.print(
        f"Types: {stats.total_interfaces} interfaces, {stats.total_enums} enums, "
        f"{stats.total_structs} structs"
    )
    console.print(
        f"Unity: {stats.mono_behaviours} MonoBehaviours, "
        f"{stats.scriptable_objects} ScriptableObjects\n"
    )
    console.print(HELP_TEXT, markup=False, highlight=False)

    while True:
        try:
            line = console.input("> ").strip()
        except (EOFError, KeyboardInterrupt):
            break

        if not line:
            continue
        if line.lower() in EXIT_COMMANDS:
            break

        try:
            output = command_shell.execute(line)
        except Exception as e:
            console.print(f"Error: {e}", style="red", markup=False)
            continue

        console.print(output, markup=False, highlight=False)


@app.command()
def stats(ctx: typer.Context):
    """Show class, member and namespace counts for the dump."""
    typer.echo(_open_shell(ctx).execute("stats"))


@app.command()
def mcp_server(ctx: typer.Context):
    """Start the MCP server for agent integration.

    This command starts a Model Context Protocol server on stdio that
    exposes dump queries as structured tools.
    """
    from agentdump import mcp_server as server

    options: CliOptions = ctx.obj
    # Without --path the server falls back to AGENTDUMP_PATH, then the config file
    server.configure(options.path_option, limit=options.limit)
    asyncio.run(server.main())


def _version_callback(value: bool):
    """Show version and exit."""
    if value:
        console.print(f"agentdump version {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    path: Optional[str] = typer.Option(
        None, "--path", "-p", help="IL2CPP dump folder or dump.cs file"
    ),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    ts_output: bool = typer.Option(False, "--ts", help="Output as TypeScript"),
    limit: Optional[int] = typer.Option(
        None, "--limit", "-l", min=1, help="Max results per query"
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = load_dump_config()
    if ts_output:
        output = "ts"
    elif json_output:
        output = "json"
    else:
        output = config.output

    ctx.obj = CliOptions(
        path=path if path is not None else config.path,
        output=output,
        limit=limit if limit is not None else config.limit,
        path_option=path,
    )
