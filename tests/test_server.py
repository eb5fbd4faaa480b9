"""Tests for the FastMCP server.

Verifies server creation, tool registration and execution, resource
publication and reads, configuration integration, and error reporting.
Tool handlers are run directly through ``server.get_tools()``; resources are
listed and read, and client-visible errors checked, through an in-memory
``fastmcp.Client``.
"""

from __future__ import annotations

import asyncio
import json
from datetime import datetime

import pytest
from fastmcp import Client, FastMCP
from fastmcp.exceptions import ToolError
from mcp.shared.exceptions import McpError
from mcp.types import INVALID_PARAMS, INVALID_REQUEST, CallToolResult

from todo_catalog_mcp.catalog import DEFAULT_SEED, TodoCatalog
from todo_catalog_mcp.config import CatalogConfig
from todo_catalog_mcp.mcp.server import create_server


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _parse_tool_result(result) -> dict:
    """Extract a dict from a FastMCP ToolResult whose first content is JSON."""
    if isinstance(result, dict):
        return result
    if hasattr(result, "content") and result.content:
        return json.loads(result.content[0].text)
    raise TypeError(f"Cannot parse tool result of type {type(result)}")


def _tool_text(result) -> str:
    """Extract the confirmation text from a FastMCP ToolResult."""
    if isinstance(result, str):
        return result
    return result.content[0].text


def _call_tool(server: FastMCP, name: str, args: dict | None = None):
    tools = asyncio.run(server.get_tools())
    return asyncio.run(tools[name].run(args or {}))


def _call_tool_as_client(server: FastMCP, name: str, args: dict) -> CallToolResult:
    async def _run():
        async with Client(server) as client:
            return await client.call_tool_mcp(name, args)

    return asyncio.run(_run())


def _list_resources(server: FastMCP) -> list:
    async def _run():
        async with Client(server) as client:
            return await client.list_resources()

    return asyncio.run(_run())


def _read_resource(server: FastMCP, uri: str) -> str:
    async def _run():
        async with Client(server) as client:
            return await client.read_resource(uri)

    contents = asyncio.run(_run())
    return contents[0].text


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def catalog() -> TodoCatalog:
    return TodoCatalog(DEFAULT_SEED)


@pytest.fixture()
def config() -> CatalogConfig:
    return CatalogConfig()


@pytest.fixture()
def server(config, catalog) -> FastMCP:
    return create_server(config=config, catalog=catalog)


# ---------------------------------------------------------------------------
# Server creation tests
# ---------------------------------------------------------------------------


class TestCreateServer:
    def test_returns_fastmcp_instance(self, server):
        assert isinstance(server, FastMCP)

    def test_server_name(self, server):
        assert server.name == "todo"

    def test_custom_server_name(self, catalog):
        server = create_server(config=CatalogConfig(server_name="tasks"), catalog=catalog)
        assert server.name == "tasks"

    def test_builds_catalog_from_config(self):
        server = create_server(config=CatalogConfig())
        names = {r.name for r in _list_resources(server)}
        assert names == {"✓ Write spec", "✓ Implement", "□ Test"}

    def test_loads_config_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        config_path = tmp_path / "custom.json"
        config_path.write_text(json.dumps({"seed_defaults": False}), encoding="utf-8")
        server = create_server(config_path=str(config_path))
        assert _list_resources(server) == []

    def test_servers_are_independent(self):
        first = create_server(config=CatalogConfig(), catalog=TodoCatalog(DEFAULT_SEED))
        second = create_server(config=CatalogConfig(), catalog=TodoCatalog(DEFAULT_SEED))
        _call_tool(first, "add_todo", {"title": "Only here"})
        assert len(_list_resources(first)) == 4
        assert len(_list_resources(second)) == 3


# ---------------------------------------------------------------------------
# Tool registration
# ---------------------------------------------------------------------------


class TestTools:
    """Handlers run directly, as the CLI runs them: failures raise McpError."""

    def test_tools_registered(self, server):
        tools = asyncio.run(server.get_tools())
        assert {"add_todo", "complete_todo", "health_check"} <= set(tools)

    def test_tool_descriptions(self, server):
        tools = asyncio.run(server.get_tools())
        assert tools["add_todo"].description == "Add a new todo"
        assert tools["complete_todo"].description == "Mark a todo as completed"

    def test_tool_parameters(self, server):
        tools = asyncio.run(server.get_tools())
        add_schema = tools["add_todo"].parameters
        assert add_schema["required"] == ["title"]
        assert add_schema["properties"]["title"]["type"] == "string"
        assert add_schema["properties"]["title"]["description"] == "Title of the todo"
        complete_schema = tools["complete_todo"].parameters
        assert complete_schema["required"] == ["id"]

    def test_add_todo(self, server, catalog):
        text = _tool_text(_call_tool(server, "add_todo", {"title": "Ship it"}))
        assert text == "Added todo - ID: 4, Title: Ship it"
        assert catalog.read("4").value.completed is False

    def test_complete_todo(self, server, catalog):
        text = _tool_text(_call_tool(server, "complete_todo", {"id": "3"}))
        assert text == 'Completed todo 3: "Test"'
        assert catalog.read("3").value.completed is True

    def test_complete_todo_already_completed(self, server):
        text = _tool_text(_call_tool(server, "complete_todo", {"id": "1"}))
        assert text == "Todo 1 is already completed"

    def test_add_todo_empty_title(self, server, catalog):
        with pytest.raises(McpError) as exc_info:
            _call_tool(server, "add_todo", {"title": ""})
        assert exc_info.value.error.code == INVALID_PARAMS
        assert len(catalog) == 3

    def test_complete_todo_not_found(self, server):
        with pytest.raises(McpError) as exc_info:
            _call_tool(server, "complete_todo", {"id": "42"})
        assert exc_info.value.error.code == INVALID_REQUEST
        assert exc_info.value.error.message == "Todo 42 not found"

    def test_complete_todo_empty_id(self, server):
        with pytest.raises(McpError) as exc_info:
            _call_tool(server, "complete_todo", {"id": ""})
        assert exc_info.value.error.code == INVALID_PARAMS


# ---------------------------------------------------------------------------
# Health check tool
# ---------------------------------------------------------------------------


class TestHealthCheckTool:
    def test_contains_required_fields(self, server):
        result = _parse_tool_result(_call_tool(server, "health_check"))
        for field in (
            "server_version",
            "status",
            "entries",
            "completed",
            "pending",
            "next_id",
            "locale",
            "uri_scheme",
            "timestamp",
        ):
            assert field in result, f"Missing field: {field}"

    def test_values_on_fresh_server(self, server):
        from todo_catalog_mcp import __version__

        result = _parse_tool_result(_call_tool(server, "health_check"))
        assert result["server_version"] == __version__
        assert result["status"] == "healthy"
        assert result["entries"] == 3
        assert result["completed"] == 2
        assert result["pending"] == 1
        assert result["next_id"] == "4"
        assert result["locale"] == "en"
        assert result["uri_scheme"] == "todo"
        datetime.fromisoformat(result["timestamp"])

    def test_counts_follow_mutations(self, server):
        _call_tool(server, "add_todo", {"title": "Ship it"})
        _call_tool(server, "complete_todo", {"id": "3"})
        result = _parse_tool_result(_call_tool(server, "health_check"))
        assert result["entries"] == 4
        assert result["completed"] == 3
        assert result["pending"] == 1
        assert result["next_id"] == "5"


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------


class TestResources:
    def test_list_resources(self, server):
        resources = _list_resources(server)
        assert [r.name for r in resources] == ["✓ Write spec", "✓ Implement", "□ Test"]
        assert [r.description for r in resources] == [
            "Status: completed",
            "Status: completed",
            "Status: pending",
        ]
        assert all(r.mimeType == "text/plain" for r in resources)
        assert all(str(r.uri).startswith("todo://") for r in resources)

    def test_read_resource(self, server):
        assert _read_resource(server, "todo://3") == "ID: 3\nTitle: Test\nStatus: pending"

    def test_read_reflects_completion(self, server):
        _call_tool(server, "complete_todo", {"id": "3"})
        assert _read_resource(server, "todo://3").endswith("Status: completed")

    def test_listing_follows_add(self, server):
        _call_tool(server, "add_todo", {"title": "Ship it"})
        resources = _list_resources(server)
        assert len(resources) == 4
        assert resources[-1].name == "□ Ship it"
        assert _read_resource(server, "todo://4") == "ID: 4\nTitle: Ship it\nStatus: pending"

    def test_listing_follows_completion_in_place(self, server):
        _call_tool(server, "complete_todo", {"id": "3"})
        resources = _list_resources(server)
        assert [r.name for r in resources] == ["✓ Write spec", "✓ Implement", "✓ Test"]
        assert resources[2].description == "Status: completed"

    def test_read_unknown_resource(self, server):
        with pytest.raises(McpError) as exc_info:
            _read_resource(server, "todo://99")
        assert exc_info.value.error.code == INVALID_REQUEST
        assert exc_info.value.error.message == "Todo 99 not found"

    def test_custom_scheme_and_locale(self, catalog):
        server = create_server(
            config=CatalogConfig(uri_scheme="task", locale="ja"), catalog=catalog
        )
        resources = _list_resources(server)
        assert resources[2].name == "□ Test"
        assert resources[2].description == "状態: 未完了"
        assert str(resources[2].uri).startswith("task://")
        assert _read_resource(server, "task://1") == "ID: 1\nタイトル: Write spec\n状態: 完了"


# ---------------------------------------------------------------------------
# Errors as seen by a client session
# ---------------------------------------------------------------------------


class TestClientErrors:
    @pytest.mark.parametrize(
        "name, args, expected",
        [
            ("add_todo", {"title": ""}, "Title is required"),
            ("add_todo", {"title": "   "}, "Title is required"),
            ("complete_todo", {"id": ""}, "ID is required"),
            ("complete_todo", {"id": "42"}, "Todo 42 not found"),
            ("delete_todo", {"id": "1"}, "Unknown tool: delete_todo"),
        ],
    )
    def test_tool_error_result(self, server, catalog, name, args, expected):
        before = catalog.list_entries()
        result = _call_tool_as_client(server, name, args)
        assert result.isError is True
        assert [c.text for c in result.content] == [expected]
        assert catalog.list_entries() == before

    def test_call_tool_raises_localized_tool_error(self, server):
        async def _run():
            async with Client(server) as client:
                await client.call_tool("complete_todo", {"id": "42"})

        with pytest.raises(ToolError) as exc_info:
            asyncio.run(_run())
        assert str(exc_info.value) == "Todo 42 not found"

    def test_successful_call_is_not_an_error(self, server):
        result = _call_tool_as_client(server, "complete_todo", {"id": "3"})
        assert result.isError is False
        assert result.content[0].text == 'Completed todo 3: "Test"'

    def test_japanese_messages(self, catalog):
        server = create_server(config=CatalogConfig(locale="ja"), catalog=catalog)
        missing = _call_tool_as_client(server, "complete_todo", {"id": "42"})
        unknown = _call_tool_as_client(server, "delete_todo", {})
        assert missing.content[0].text == "ID 42 のTODOは見つかりません"
        assert unknown.content[0].text == "不明なツールです: delete_todo"

    def test_read_unknown_resource_in_japanese(self, catalog):
        server = create_server(config=CatalogConfig(locale="ja"), catalog=catalog)
        with pytest.raises(McpError) as exc_info:
            _read_resource(server, "todo://99")
        assert exc_info.value.error.code == INVALID_REQUEST
        assert exc_info.value.error.message == "ID 99 のTODOは見つかりません"

    def test_read_unknown_resource_with_custom_scheme(self, catalog):
        server = create_server(config=CatalogConfig(uri_scheme="task"), catalog=catalog)
        with pytest.raises(McpError) as exc_info:
            _read_resource(server, "task://nope")
        assert exc_info.value.error.code == INVALID_REQUEST
