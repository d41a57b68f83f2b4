# =============================================================================
# logseq_tools/__init__.py
# =============================================================================
# This package contains the FastMCP front-end.
#
# ARCHITECTURAL ROLE:
#   logseq_tools/ is the "translation layer" between MCP and logseq_core/.
#     1. It registers every catalog entry as a FastMCP tool
#     2. It forwards each call to ToolDispatcher.dispatch()
#     3. It converts the ToolResult into MCP content (or a ToolError)
#
# WHAT IT DOES NOT DO:
#   - No argument validation (the dispatcher does that)
#   - No HTTP calls (the API client does that)
#   - No response shaping (logseq_core.formatting does that)
# =============================================================================
