# =============================================================================
# main.py  —  Entry Point for the Logseq MCP Server
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py        (or the `logseq-mcp` console script)
#
# WHAT HAPPENS:
#   1. Loads settings from the environment / .env (LOGSEQ_API_TOKEN required)
#   2. Creates ONE LogseqClient, shared by every tool call
#   3. Creates the ToolDispatcher and the FastMCP server around it
#   4. Serves MCP over stdin/stdout until the client disconnects
#   5. Closes the HTTP connection pool
#
# A missing or invalid setting stops the process here, before any MCP
# message is read: the client sees the server exit with status 1 and the
# reason on stderr.
#
# CLAUDE DESKTOP EXAMPLE (claude_desktop_config.json):
#   "logseq": {
#     "command": "uv",
#     "args": ["run", "--directory", "/path/to/repo", "python", "main.py"],
#     "env": {"LOGSEQ_API_TOKEN": "your-token"}
#   }
# =============================================================================

import asyncio
import logging
import sys

from logseq_core.api_client import LogseqClient
from logseq_core.config import load_settings
from logseq_core.dispatcher import ToolDispatcher
from logseq_core.errors import ConfigError
from logseq_core.models import Settings
from logseq_tools.mcp_server import build_server, configure_logging

logger = logging.getLogger(__name__)


async def serve(settings: Settings) -> None:
    """Run the MCP server over stdio until the client goes away."""
    async with LogseqClient(settings) as client:
        server = build_server(ToolDispatcher(client))
        logger.info(f"Serving Logseq at {settings.base_url} over stdio")
        await server.run_async(transport="stdio")


def main() -> None:
    configure_logging()
    try:
        settings = load_settings()
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    configure_logging(settings.log_level)
    try:
        asyncio.run(serve(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")


# =============================================================================
# Script entry point
# =============================================================================
if __name__ == "__main__":
    main()
