# server/main.py
import argparse
import logging
import sys
from typing import List, Optional, Sequence

from fastmcp import FastMCP
from fs_sandbox.config import Settings
from fs_sandbox.di import build_container
from fs_sandbox.logging import configure_logging
from server.registry import build_dispatcher
from server.tools.files import register_file_tools

logger = logging.getLogger("server.main")


def create_app(allowed_dirs: Optional[List[str]] = None, settings: Optional[Settings] = None) -> FastMCP:
    """
    Build DI container, create FastMCP host, and register tools.
    Keep the server (protocol) separate from tool/service logic.
    """
    container = build_container(allowed_dirs, settings)
    dispatcher = build_dispatcher(container)

    mcp = FastMCP(container.settings.MCP_SERVER_NAME, version="0.1.0")

    # Register tools (thin adapters)
    register_file_tools(mcp, dispatcher)

    if len(container.allow_list) == 0:
        logger.warning("No allowed directories configured; every file operation will be denied")
    else:
        logger.info("Allowed directories: %s", ", ".join(container.allow_list.names()))
    return mcp


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="fs-sandbox-mcp",
        description="MCP file-system tools confined to an allow-list of directories.",
    )
    parser.add_argument(
        "allowed_dirs",
        nargs="*",
        help="Directories the server may access (defaults to ALLOWED_DIRS)",
    )
    args = parser.parse_args(argv)

    settings = Settings()
    configure_logging(settings.LOG_LEVEL)
    try:
        app = create_app(args.allowed_dirs or None, settings)
        # stdio transport: client (agent/IDE) launches this process and speaks JSON-RPC on stdin/stdout
        app.run(transport="stdio")
    except Exception:
        logger.exception("Failed to start MCP server")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
