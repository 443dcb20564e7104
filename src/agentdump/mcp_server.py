"""MCP server that exposes AgentDump queries to coding agents.

The dump is parsed once, on the first tool call, and the resulting index is
shared read-only by every later call.
"""

import json
import os
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent

from agentdump.commands import CommandShell
from agentdump.config import load_dump_config, load_search_config
from agentdump.formatting import stats_to_dict
from agentdump.loader import DumpNotFoundError, load_index
from agentdump.search import SearchIndex

PATH_ENV_VAR = "AGENTDUMP_PATH"

# Initialize MCP server
app = Server("agentdump")

_dump_path: str | None = None
_limit: int = 50
_index: SearchIndex | None = None


def configure(path: str | None, limit: int = 50) -> None:
    """Set the dump location used on the next index load."""
    global _dump_path, _limit, _index
    _dump_path = path
    _limit = limit
    _index = None


def _get_index() -> SearchIndex:
    global _index
    if _index is None:
        path = _dump_path or os.environ.get(PATH_ENV_VAR) or load_dump_config().path
        _index = load_index(path)
    return _index


@app.list_tools()
async def list_tools() -> list[Tool]:
    """Declare available tools."""
    return [
        Tool(
            name="dump_query",
            description=(
                "Query an IL2CPP dump (classes, fields, methods and their addresses). "
                "Takes an AgentDump command such as 'class Player', 'field.offset 0x10', "
                "'method.param Vector3', 'hierarchy Enemy', 'derived MonoBehaviour', "
                "'rva 0x1A2B3C' or 'detail PlayerController'. Returns JSON."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "command": {
                        "type": "string",
                        "description": "AgentDump command line, e.g. 'find health'",
                    },
                    "limit": {
                        "type": "integer",
                        "description": "Maximum number of results per list (default 50)",
                    },
                },
                "required": ["command"],
            },
        ),
        Tool(
            name="dump_stats",
            description=(
                "Get totals for the loaded IL2CPP dump: classes, methods, fields, "
                "properties, namespaces, per-kind counts, MonoBehaviours and "
                "ScriptableObjects."
            ),
            inputSchema={"type": "object", "properties": {}},
        ),
    ]


@app.call_tool()
async def call_tool(name: str, arguments: Any) -> list[TextContent]:
    """Handle tool calls by routing them to the command interpreter."""
    if name == "dump_query":
        return await _handle_query(arguments["command"], arguments.get("limit"))
    elif name == "dump_stats":
        return await _handle_stats()

    raise ValueError(f"Unknown tool: {name}")


async def _handle_query(command: str, limit: int | None = None) -> list[TextContent]:
    """Handle dump_query tool calls.

    Args:
        command: AgentDump command line
        limit: Maximum results per list, or None for the configured default

    Returns:
        List containing a single TextContent with JSON results
    """
    try:
        shell = CommandShell(
            _get_index(),
            output="json",
            limit=limit if limit is not None else _limit,
            search_config=load_search_config(),
        )
        text = shell.execute(command)
    except DumpNotFoundError as e:
        text = f"Error loading dump: {e}"
    except Exception as e:
        text = f"Unexpected error: {e}"

    return [TextContent(type="text", text=text)]


async def _handle_stats() -> list[TextContent]:
    """Handle dump_stats tool calls."""
    try:
        text = json.dumps(stats_to_dict(_get_index().stats()), indent=2)
    except DumpNotFoundError as e:
        text = f"Error loading dump: {e}"
    except Exception as e:
        text = f"Unexpected error: {e}"

    return [TextContent(type="text", text=text)]


async def main():
    """Run the MCP server."""
    async with stdio_server() as (read_stream, write_stream):
        await app.run(read_stream, write_stream, app.create_initialization_options())


if __name__ == "__main__":
    import asyncio

    asyncio.run(main())
