# =============================================================================
# logseq_tools/mcp_server.py  —  FastMCP Tool Server (ALL tools in one place)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Exposes every tool in logseq_core.catalog over MCP.  Each tool is a thin
#   FastMCP wrapper around ToolDispatcher.dispatch(); the wrapper handles
#   logging and converting our ToolResult into what FastMCP expects.
#
# HOW IT WORKS (the flow):
#   1. An MCP client (Claude Desktop, an agent, ...) lists tools and gets the
#      catalog's JSON schemas, verbatim
#   2. It calls a tool by name (e.g. "get_page")
#   3. FastMCP routes the call to the matching LogseqTool below
#   4. LogseqTool.run() hands the raw arguments to the dispatcher, which
#      validates them, calls Logseq, and shapes the answer
#   5. Error results are raised as ToolError, which FastMCP reports to the
#      client as isError: true
#
# TOOL REGISTRATION:
#   Tools are Tool objects carrying the catalog schema verbatim, not
#   @mcp.tool() functions.  Arguments reach the dispatcher exactly as the
#   client sent them.
#
# RUNNING THIS SERVER:
#   python main.py               (reads LOGSEQ_API_TOKEN etc. from env/.env)
#   python -m logseq_tools.mcp_server
# =============================================================================

import json
import logging
import sys
from typing import Any

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.tools.tool import Tool
from fastmcp.tools.tool import ToolResult as MCPToolResult
from mcp.types import TextContent
from pydantic import PrivateAttr

from logseq_core.catalog import list_tools
from logseq_core.dispatcher import ToolDispatcher
from logseq_core.models import ToolCall, ToolDescriptor, ToolResult

# =============================================================================
# Logging Setup
# =============================================================================
# We log to STDERR because MCP talks over STDOUT.  A stray log line on stdout
# would corrupt the JSON-RPC stream and the client would drop the connection.
#
# ANSI COLOR CODES:
#     - CYAN for incoming requests (tool name + parameters)
#     - GREEN for responses
#     - YELLOW for intermediate status / errors
# =============================================================================

_CYAN = "\033[36m"     # Requests (tool calls with params)
_GREEN = "\033[32m"    # Responses
_YELLOW = "\033[33m"   # Status/error messages
_RESET = "\033[0m"     # Reset to default terminal color

# Responses can be whole page lists; keep log lines readable.
_MAX_LOGGED_CHARS = 500

logger = logging.getLogger("logseq_tools")


def configure_logging(level: str = "INFO") -> None:
    """Send all logging to stderr with the [MCP] format."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [MCP] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
        force=True,
    )
    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def _log_request(tool_name: str, params: dict[str, Any]) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
    logger.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logger.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, result: ToolResult) -> ToolResult:
    """Log the (truncated) tool response in GREEN, then return it."""
    text = result.text
    if len(text) > _MAX_LOGGED_CHARS:
        text = text[:_MAX_LOGGED_CHARS] + f"... ({len(result.text)} chars)"
    logger.info(f"{_GREEN}  ← {tool_name} response: {json.dumps(text)}{_RESET}")
    return result


# =============================================================================
# LogseqTool — one catalog entry, registered with FastMCP
# =============================================================================
class LogseqTool(Tool):
    """A FastMCP tool whose schema comes from a ToolDescriptor and whose
    execution is delegated to the shared ToolDispatcher."""

    _dispatcher: ToolDispatcher = PrivateAttr()

    @classmethod
    def from_descriptor(
        cls, descriptor: ToolDescriptor, dispatcher: ToolDispatcher
    ) -> "LogseqTool":
        tool = cls(
            name=descriptor.name,
            description=descriptor.description,
            parameters=descriptor.parameter_schema,
        )
        tool._dispatcher = dispatcher
        return tool

    async def run(self, arguments: dict[str, Any]) -> MCPToolResult:
        _log_request(self.name, arguments or {})

        result = await self._dispatcher.dispatch(ToolCall(name=self.name, arguments=arguments))
        if result.is_error:
            _log_status(f"{self.name} failed: {result.text}")
            raise ToolError(result.text)

        _log_response(self.name, result)
        return MCPToolResult(
            content=[
                TextContent(type="text", text=block["text"])
                for block in result.content
                if block.get("type") == "text"
            ]
        )


# =============================================================================
# Server factory
# =============================================================================
def build_server(dispatcher: ToolDispatcher) -> FastMCP:
    """Create the FastMCP server with every catalog tool registered.

    Args:
        dispatcher: The dispatcher shared by all tools.

    Returns:
        A FastMCP instance ready for .run() (stdio) or in-memory clients.
    """
    mcp = FastMCP(
        "logseq-mcp-server",
        instructions=(
            "Read and write a Logseq knowledge graph: list and read pages, "
            "create pages and blocks, update blocks, search, and run "
            "Datascript queries. Nothing can be deleted through this server."
        ),
    )
    for descriptor in list_tools():
        mcp.add_tool(LogseqTool.from_descriptor(descriptor, dispatcher))
    logger.info(f"Registered {len(list_tools())} Logseq tools")
    return mcp


# =============================================================================
# Server entry point
# =============================================================================
if __name__ == "__main__":
    from main import main

    main()
