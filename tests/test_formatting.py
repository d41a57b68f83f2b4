from __future__ import annotations

from logseq_core.formatting import (
    escape_datalog_string,
    format_blocks_as_markdown,
    format_todos,
    search_matches,
    todo_items,
)


def test_multiline_block_keeps_continuation_under_bullet():
    blocks = [{"content": "Title\nsecond line", "children": [{"content": "child"}]}]

    assert format_blocks_as_markdown(blocks) == "* Title\n  second line\n  * child"


def test_blocks_without_content_render_as_empty_bullets():
    assert format_blocks_as_markdown([{"children": []}, "not-a-block"]) == "* "


def test_escape_datalog_string():
    assert escape_datalog_string('a\\b "c"') == 'a\\\\b \\"c\\"'


def test_search_matches_ignores_malformed_rows():
    assert search_matches({"error": "x"}) == []
    assert search_matches([["u", 1], ["u2", "c2", "extra"]]) == [{"uuid": "u2", "content": "c2"}]


def test_todo_report_sections_and_summary():
    todos = todo_items(
        [
            ["u1", "WAITING on vendor", "WAITING", "work"],
            ["u2", "DOING refactor", "DOING", "work"],
        ]
    )

    report = format_todos(todos)

    assert report.splitlines()[0] == "Found 2 incomplete todos:"
    assert report.index("## DOING (1 items)") < report.index("## WAITING (1 items)")
    assert "1. DOING refactor\n   Page: work\n   UUID: u2" in report
    assert report.endswith("Summary by status:\n- DOING: 1\n- WAITING: 1")
