# =============================================================================
# logseq_core/catalog.py  —  The Tool Catalog
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Declares every tool the bridge advertises on tools/list: its name, the
#   description the LLM reads, and the JSON schema of its arguments.
#
# CONSISTENCY CONTRACT:
#   Each descriptor here has exactly one handler in dispatcher.py, and each
#   schema's "properties"/"required" lists are exactly what that handler
#   accepts.  tests/test_catalog.py enforces both directions.
#
# TOOL NAMING CONVENTIONS:
#   - get_* / list_* / search / find_* → read-only, safe to retry
#   - create_* / update_*              → writes; NOT idempotent in Logseq,
#                                        so callers should not blindly retry
#   There are no delete tools: they are deliberately not exposed.
# =============================================================================

from typing import Any, Optional

from logseq_core.models import ToolDescriptor


def _schema(
    properties: Optional[dict[str, Any]] = None,
    required: Optional[list[str]] = None,
) -> dict[str, Any]:
    """Build an object schema that rejects unknown parameters."""
    return {
        "type": "object",
        "properties": properties or {},
        "required": required or [],
        "additionalProperties": False,
    }


_PROPERTIES_SCHEMA = {
    "type": "object",
    "description": (
        "Optional properties as key-value pairs. Common page properties: "
        "'tags' (array of strings), 'alias' (array of strings), "
        "'template' (string), 'public' (boolean)."
    ),
    "additionalProperties": True,
}


TOOL_CATALOG: tuple[ToolDescriptor, ...] = (
    ToolDescriptor(
        name="list_pages",
        description=(
            "List all pages in the current Logseq graph. Returns page objects "
            "(name, originalName, uuid, ...) that can be used with the other "
            "page tools."
        ),
        parameter_schema=_schema(),
    ),
    ToolDescriptor(
        name="get_page",
        description=(
            "Get metadata for one page by name or UUID: properties, UUID, "
            "journal flag and timestamps. Fails if the page does not exist."
        ),
        parameter_schema=_schema(
            {
                "name_or_uuid": {
                    "type": "string",
                    "description": "Page name as it appears in Logseq, or the page UUID.",
                },
            },
            ["name_or_uuid"],
        ),
    ),
    ToolDescriptor(
        name="get_page_content",
        description=(
            "Get the full content of a page as an indented markdown outline. "
            "Use this to read what a page says."
        ),
        parameter_schema=_schema(
            {
                "name_or_uuid": {
                    "type": "string",
                    "description": "Page name as it appears in Logseq, or the page UUID.",
                },
            },
            ["name_or_uuid"],
        ),
    ),
    ToolDescriptor(
        name="create_page",
        description=(
            "Create a new page, optionally with page properties such as tags "
            "or aliases. Returns the created page."
        ),
        parameter_schema=_schema(
            {
                "name": {"type": "string", "description": "Name of the new page."},
                "properties": _PROPERTIES_SCHEMA,
            },
            ["name"],
        ),
    ),
    ToolDescriptor(
        name="get_block",
        description=(
            "Get one block by UUID: content, properties, page reference and "
            "children. Fails if the block does not exist."
        ),
        parameter_schema=_schema(
            {
                "uuid": {
                    "type": "string",
                    "description": "Block UUID, as returned by create_block, search or datascript_query.",
                },
            },
            ["uuid"],
        ),
    ),
    ToolDescriptor(
        name="create_block",
        description=(
            "Insert a new block. The parent is either a page name (the block is "
            "appended to that page) or a block UUID (the block is placed relative "
            "to that block according to 'position'). Any UUID-shaped parent is "
            "treated as a block, so pass pages by name, not by page UUID. "
            "Returns the created block."
        ),
        parameter_schema=_schema(
            {
                "parent": {
                    "type": "string",
                    "description": (
                        "Page name, or block UUID to insert into / next to. "
                        "Pages must be given by name: a page UUID is sent as a block UUID."
                    ),
                },
                "content": {
                    "type": "string",
                    "description": "Block content in markdown, including Logseq syntax like [[links]].",
                },
                "position": {
                    "type": "string",
                    "enum": ["child", "sibling", "before"],
                    "description": (
                        "'child' (default) nests the block under the parent; "
                        "'sibling' places it after the parent block; 'before' "
                        "places it before the parent block. 'sibling' and "
                        "'before' require a block UUID parent."
                    ),
                },
                "properties": {
                    "type": "object",
                    "description": "Optional block properties as key-value pairs.",
                    "additionalProperties": True,
                },
            },
            ["parent", "content"],
        ),
    ),
    ToolDescriptor(
        name="update_block",
        description=(
            "Replace the content of an existing block, optionally setting block "
            "properties."
        ),
        parameter_schema=_schema(
            {
                "uuid": {"type": "string", "description": "UUID of the block to update."},
                "content": {
                    "type": "string",
                    "description": "New block content in markdown; replaces the existing content.",
                },
                "properties": {
                    "type": "object",
                    "description": "Optional block properties to set, e.g. {'priority': 'high'}.",
                    "additionalProperties": True,
                },
            },
            ["uuid", "content"],
        ),
    ),
    ToolDescriptor(
        name="search",
        description=(
            "Find blocks whose content contains the given text (case-sensitive "
            "substring match). Returns matching blocks with their UUIDs."
        ),
        parameter_schema=_schema(
            {"query": {"type": "string", "description": "Text to look for in block content."}},
            ["query"],
        ),
    ),
    ToolDescriptor(
        name="datascript_query",
        description=(
            "Run a raw Datascript (datalog) query against the Logseq database. "
            "Use for questions the other tools cannot answer; requires knowledge "
            "of Logseq's schema (:block/content, :block/page, :block/name, ...)."
        ),
        parameter_schema=_schema(
            {
                "query": {
                    "type": "string",
                    "description": (
                        "Datalog query, e.g. '[:find (pull ?b [*]) :where "
                        "[?b :block/marker \"TODO\"]]'."
                    ),
                },
            },
            ["query"],
        ),
    ),
    ToolDescriptor(
        name="get_current_page",
        description=(
            "Get the page currently open in the Logseq window. Reports that no "
            "page is open when the user is elsewhere (e.g. the journals view)."
        ),
        parameter_schema=_schema(),
    ),
    ToolDescriptor(
        name="get_current_block",
        description=(
            "Get the block the user is currently editing. Reports that no block "
            "is being edited when none is."
        ),
        parameter_schema=_schema(),
    ),
    ToolDescriptor(
        name="get_current_graph",
        description="Get the current graph's name, path and URL.",
        parameter_schema=_schema(),
    ),
    ToolDescriptor(
        name="get_user_configs",
        description=(
            "Get the user's Logseq configuration: preferred language, date "
            "format, preferred workflow (TODO/DOING vs NOW/LATER), theme, ..."
        ),
        parameter_schema=_schema(),
    ),
    ToolDescriptor(
        name="get_state_from_store",
        description=(
            "Read a value from Logseq's application state store by key path, "
            "e.g. 'ui/theme' or 'ui/sidebar-open?'."
        ),
        parameter_schema=_schema(
            {"key": {"type": "string", "description": "State key path, e.g. 'ui/theme'."}},
            ["key"],
        ),
    ),
    ToolDescriptor(
        name="find_incomplete_todos",
        description=(
            "List every incomplete task in the graph (markers NOW, DOING, TODO, "
            "LATER, WAITING), grouped by marker with page and block UUID."
        ),
        parameter_schema=_schema(),
    ),
)


def list_tools() -> tuple[ToolDescriptor, ...]:
    """Return the full, ordered tool catalog."""
    return TOOL_CATALOG

