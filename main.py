#!/usr/bin/env python3
"""Reveal in Explorer MCP Server - Main entry point."""

import argparse
import asyncio
import contextlib
import json
import logging
import sys
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from mcp.types import Tool, TextContent
from starlette.applications import Starlette

from reveal_explorer.config import ConfigLoader
from reveal_explorer.logging_config import setup_logging
from reveal_explorer.models import RevealConfig, RevealResult
from reveal_explorer.revealer import ExplorerRevealer

logger = logging.getLogger(__name__)

# Create MCP server instance
app = Server("reveal-explorer-server")

# Set from --config; None means the standard search locations
config_path: Optional[Path] = None


REVEAL_TOOL = Tool(
    name="reveal_in_explorer",
    description=(
        "Open Windows File Explorer with a file selected. "
        "Works on native Windows and inside WSL, where Linux paths are translated "
        "to Windows paths (wslpath first, then /mnt/<drive>/ mapping or the configured mount drive)."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "path": {
                "type": "string",
                "description": "Path or file:// URI of the file to reveal",
            },
            "active_document": {
                "type": "string",
                "description": "Path of the file currently open in the editor, used when path is omitted",
                "default": None,
            },
            "wsl_mount_drive": {
                "type": "string",
                "description": 'Override the configured WSL mount drive (e.g., "Z:")',
                "default": None,
            },
        },
    },
)


@app.list_tools()
async def list_tools() -> list[Tool]:
    """List available tools."""
    return [REVEAL_TOOL]


@app.call_tool()
async def call_tool(name: str, arguments: dict) -> list[TextContent]:
    """Handle tool invocations."""
    try:
        if name == "reveal_in_explorer":
            result = await handle_reveal(arguments)
            return [TextContent(type="text", text=result)]

        else:
            raise ValueError(f"Unknown tool: {name}")

    except Exception as e:
        logger.exception("Tool %s failed", name)
        error_msg = f"Error executing {name}: {str(e)}"
        return [TextContent(type="text", text=error_msg)]


def load_config(mount_drive_override: Optional[str] = None) -> RevealConfig:
    """Load reveal settings, applying a per-call mount drive override."""
    config = ConfigLoader(config_path).load()
    if mount_drive_override:
        config = RevealConfig(**{**config.model_dump(), "wsl_mount_drive": mount_drive_override})
    return config


def run_reveal(
    path: Optional[str],
    active_document: Optional[str] = None,
    mount_drive_override: Optional[str] = None,
) -> RevealResult:
    """Reveal a file with the current configuration."""
    revealer = ExplorerRevealer(load_config(mount_drive_override))
    return revealer.reveal(path, active_document=active_document)


async def handle_reveal(arguments: dict) -> str:
    """Handle reveal_in_explorer tool invocation.

    Args:
        arguments: Tool arguments

    Returns:
        JSON string with reveal result
    """
    result = await asyncio.to_thread(
        run_reveal,
        arguments.get("path"),
        arguments.get("active_document"),
        arguments.get("wsl_mount_drive"),
    )
    return json.dumps(result.model_dump(mode="json"), indent=2)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="Reveal in Explorer MCP Server")
    parser.add_argument(
        "--transport",
        choices=["stdio", "streamable-http"],
        default="stdio",
        help="Transport type (default: stdio)",
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1, only used with streamable-http)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8080,
        help="Port to listen on (default: 8080, only used with streamable-http)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to reveal_config.toml (default: REVEAL_CONFIG or ./reveal_config.toml)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--reveal",
        metavar="PATH",
        nargs="?",
        const="",
        default=None,
        help="Reveal PATH (or --active-document) once and exit instead of starting the server",
    )
    parser.add_argument(
        "--active-document",
        metavar="PATH",
        default=None,
        help="File open in the editor, revealed when --reveal is given without PATH",
    )
    return parser.parse_args(argv)


async def run_streamable_http(host: str, port: int) -> None:
    """Run the MCP server with Streamable HTTP transport."""
    import uvicorn

    session_manager = StreamableHTTPSessionManager(app=app)

    @contextlib.asynccontextmanager
    async def lifespan(starlette_app: Starlette) -> AsyncIterator[None]:
        async with session_manager.run():
            yield

    # /mcp is routed at the ASGI level; handle_request writes to send directly
    # and returns no Response for Starlette's endpoint wrapper.
    starlette_app = Starlette(lifespan=lifespan)

    async def asgi_app(scope, receive, send):
        if scope["type"] == "http" and scope["path"] == "/mcp":
            await session_manager.handle_request(scope, receive, send)
        else:
            await starlette_app(scope, receive, send)

    config = uvicorn.Config(
        asgi_app,
        host=host,
        port=port,
        log_level="info",
    )
    server = uvicorn.Server(config)
    await server.serve()


def reveal_once(path: Optional[str], active_document: Optional[str] = None) -> int:
    """Reveal a single path from the command line and return the exit status."""
    result = run_reveal(path or None, active_document)
    print(result.message, file=sys.stdout if result.success else sys.stderr)
    return 0 if result.success else 1


async def main():
    """Main entry point for the MCP server."""
    global config_path

    args = parse_args()
    setup_logging(args.log_level)
    config_path = args.config

    if args.reveal is not None:
        sys.exit(reveal_once(args.reveal, args.active_document))

    if args.transport == "streamable-http":
        await run_streamable_http(args.host, args.port)
    else:
        async with stdio_server() as (read_stream, write_stream):
            await app.run(read_stream, write_stream, app.create_initialization_options())


def cli():
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    cli()
