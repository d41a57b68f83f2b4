from __future__ import annotations

import json

import pytest
from fastmcp import Client
from fastmcp.exceptions import ToolError

from logseq_core.catalog import TOOL_CATALOG
from logseq_tools.mcp_server import build_server


@pytest.fixture
def server(dispatcher):
    return build_server(dispatcher)


@pytest.mark.asyncio
async def test_tools_list_advertises_catalog_schemas(server):
    async with Client(server) as client:
        tools = await client.list_tools()

    by_name = {tool.name: tool for tool in tools}
    assert set(by_name) == {d.name for d in TOOL_CATALOG}
    for descriptor in TOOL_CATALOG:
        schema = by_name[descriptor.name].inputSchema
        assert sorted(schema.get("required", [])) == sorted(descriptor.required)
        assert set(schema.get("properties", {})) == set(descriptor.properties)


@pytest.mark.asyncio
async def test_successful_call_returns_text_content(server, fake_client):
    fake_client.responses["logseq.Editor.getPage"] = {"name": "inbox", "uuid": "p-1"}

    async with Client(server) as client:
        result = await client.call_tool("get_page", {"name_or_uuid": "Inbox"})

    assert json.loads(result.content[0].text) == {"name": "inbox", "uuid": "p-1"}
    assert fake_client.calls == [("logseq.Editor.getPage", ["Inbox"])]


@pytest.mark.asyncio
async def test_error_result_is_reported_as_tool_error(server, fake_client):
    fake_client.responses["logseq.Editor.getPage"] = None

    async with Client(server) as client:
        with pytest.raises(ToolError, match="page not found: Ghost"):
            await client.call_tool("get_page", {"name_or_uuid": "Ghost"})


@pytest.mark.asyncio
async def test_null_current_page_is_not_an_error(server, fake_client):
    async with Client(server) as client:
        result = await client.call_tool("get_current_page", {})

    assert result.content[0].text == "No page is currently open."
