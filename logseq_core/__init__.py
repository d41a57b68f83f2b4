# =============================================================================
# logseq_core/__init__.py
# =============================================================================
# This package contains ALL bridging logic between MCP tool calls and the
# Logseq HTTP API.
#
# ARCHITECTURAL RULE:
#   Nothing in this package imports FastMCP or the MCP SDK.  The front-end
#   (logseq_tools/) hands us a ToolCall and gets a ToolResult back; how those
#   travel over stdio is not our concern here.
#
# THE FLOW:
#   ToolCall ──▶ dispatcher (validate) ──▶ api_client (HTTP) ──▶ Logseq
#                      ◀── formatting (shape) ◀── raw JSON ◀──┘
# =============================================================================
