# =============================================================================
# logseq_core/formatting.py  —  Response Shaping
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Turns raw Logseq JSON into something an LLM can read without wading
#   through internal fields:
#     - block trees  → indented markdown outline
#     - datalog rows → small {"uuid", "content"} match objects
#     - todo rows    → a report grouped by task marker
#
#   Everything here is pure: JSON in, str/list out, no I/O.
# =============================================================================

from typing import Any

# NOW/DOING are "in progress", TODO/LATER are "not started", WAITING is
# blocked.  Report them in that order.
TODO_MARKERS: tuple[str, ...] = ("NOW", "DOING", "TODO", "LATER", "WAITING")


# =============================================================================
# Block trees
# =============================================================================
def format_blocks_as_markdown(blocks: list[Any]) -> str:
    """Render a getPageBlocksTree result as a markdown outline.

    Each block becomes "* content" on its own line, indented two spaces per
    nesting level.  Children that Logseq returns as bare references
    (["uuid", "..."]) instead of expanded blocks are skipped.

    Example:
        * Project kickoff
          * Agenda
            * Budget
        * Follow-ups
    """
    lines: list[str] = []
    for block in blocks:
        _format_block(block, 0, lines)
    return "\n".join(lines)


def _format_block(block: Any, depth: int, lines: list[str]) -> None:
    if not isinstance(block, dict):
        return
    indent = "  " * depth
    content = str(block.get("content") or "")
    # Multi-line blocks keep their continuation lines under the bullet.
    first, *rest = content.split("\n")
    lines.append(f"{indent}* {first}")
    for line in rest:
        lines.append(f"{indent}  {line}")
    for child in block.get("children") or []:
        _format_block(child, depth + 1, lines)


# =============================================================================
# Datalog rows
# =============================================================================
def escape_datalog_string(text: str) -> str:
    """Escape text for embedding inside a double-quoted datalog string."""
    return text.replace("\\", "\\\\").replace('"', '\\"')


def search_query(text: str) -> str:
    """Datalog query matching blocks whose content contains `text`."""
    return (
        "[:find ?uuid ?content "
        ":where [?b :block/uuid ?uuid] [?b :block/content ?content] "
        f'[(clojure.string/includes? ?content "{escape_datalog_string(text)}")]]'
    )


INCOMPLETE_TODOS_QUERY = (
    "[:find ?uuid ?content ?marker ?page-name "
    ":where [?b :block/uuid ?uuid] [?b :block/content ?content] "
    "[?b :block/marker ?marker] [?b :block/page ?p] [?p :block/name ?page-name] "
    '[(contains? #{"NOW" "DOING" "TODO" "LATER" "WAITING"} ?marker)]]'
)


def _rows(result: Any, width: int) -> list[list[str]]:
    """Keep only datalog result rows with at least `width` string columns."""
    if not isinstance(result, list):
        return []
    rows = []
    for row in result:
        if isinstance(row, list) and len(row) >= width:
            cells = row[:width]
            if all(isinstance(cell, str) for cell in cells):
                rows.append(cells)
    return rows


def search_matches(result: Any) -> list[dict[str, str]]:
    """Turn [uuid, content] rows into match objects."""
    return [{"uuid": uuid, "content": content} for uuid, content in _rows(result, 2)]


def todo_items(result: Any) -> list[dict[str, str]]:
    """Turn [uuid, content, marker, page-name] rows into todo dicts."""
    return [
        {"uuid": uuid, "content": content, "marker": marker, "page": page}
        for uuid, content, marker, page in _rows(result, 4)
    ]


def format_todos(todos: list[dict[str, str]]) -> str:
    """Render todo dicts as a report grouped by marker."""
    if not todos:
        return "No incomplete todos found."

    by_marker: dict[str, list[dict[str, str]]] = {}
    for todo in todos:
        by_marker.setdefault(todo["marker"], []).append(todo)

    lines = [f"Found {len(todos)} incomplete todos:", ""]
    for marker in TODO_MARKERS:
        items = by_marker.get(marker)
        if not items:
            continue
        lines.append(f"## {marker} ({len(items)} items)")
        for i, todo in enumerate(items, start=1):
            lines.append(f"{i}. {todo['content']}")
            lines.append(f"   Page: {todo['page']}")
            lines.append(f"   UUID: {todo['uuid']}")
        lines.append("")

    lines.append("Summary by status:")
    for marker in TODO_MARKERS:
        if marker in by_marker:
            lines.append(f"- {marker}: {len(by_marker[marker])}")
    return "\n".join(lines)
