from __future__ import annotations

import json

import pytest
from mcp.shared.memory import create_connected_server_and_client_session

from archyra.server import build_tools, create_mcp_server
from archyra.tooling.config import ArchyraSettings
from archyra.tooling.registry import ComponentRegistry


def test_build_tools_advertises_four_tools() -> None:
    tools = {tool.name: tool for tool in build_tools()}
    assert set(tools) == {"list_components", "get_component", "add_component", "get_install_command"}

    category = tools["list_components"].inputSchema["properties"]["category"]
    assert category["enum"] == ["all", "loading", "processing", "creative", "auth", "chat", "ecommerce"]
    assert "required" not in tools["list_components"].inputSchema

    assert tools["get_component"].inputSchema["required"] == ["name"]
    assert tools["get_component"].inputSchema["properties"]["format"]["enum"] == ["react", "vanilla"]
    assert tools["add_component"].inputSchema["required"] == ["name"]
    assert "directory" in tools["add_component"].inputSchema["properties"]
    assert tools["get_install_command"].inputSchema["required"] == ["name"]


@pytest.mark.anyio
async def test_server_lists_tools(sample_registry: ComponentRegistry, settings: ArchyraSettings) -> None:
    server = create_mcp_server(registry=sample_registry, settings=settings)
    async with create_connected_server_and_client_session(server) as client:
        result = await client.list_tools()
    assert sorted(tool.name for tool in result.tools) == [
        "add_component",
        "get_component",
        "get_install_command",
        "list_components",
    ]


@pytest.mark.anyio
async def test_server_call_returns_json_text(sample_registry: ComponentRegistry, settings: ArchyraSettings) -> None:
    server = create_mcp_server(registry=sample_registry, settings=settings)
    async with create_connected_server_and_client_session(server) as client:
        result = await client.call_tool("list_components", {"category": "loading"})
    assert not result.isError
    payload = json.loads(result.content[0].text)
    assert payload["total"] == 2


@pytest.mark.anyio
async def test_server_install_command_is_plain_text(
    sample_registry: ComponentRegistry, settings: ArchyraSettings
) -> None:
    server = create_mcp_server(registry=sample_registry, settings=settings)
    async with create_connected_server_and_client_session(server) as client:
        result = await client.call_tool("get_install_command", {"name": "LoadingDots"})
    assert not result.isError
    assert result.content[0].text == "npm install framer-motion"


@pytest.mark.anyio
async def test_server_errors_do_not_stop_the_session(
    sample_registry: ComponentRegistry, settings: ArchyraSettings
) -> None:
    server = create_mcp_server(registry=sample_registry, settings=settings)
    async with create_connected_server_and_client_session(server) as client:
        missing = await client.call_tool("get_component", {"name": "does-not-exist-xyz"})
        unavailable = await client.call_tool("get_component", {"name": "PulseCircle", "format": "vanilla"})
        unknown = await client.call_tool("not_a_tool", {})
        found = await client.call_tool("get_component", {"name": "pulsecircle"})

    assert missing.isError
    assert "not found" in missing.content[0].text
    assert unavailable.isError
    assert "Vanilla HTML/CSS version not available" in unavailable.content[0].text
    assert unknown.isError
    assert "Unknown tool" in unknown.content[0].text
    assert not found.isError
    assert json.loads(found.content[0].text)["id"] == "pulse-circle"


@pytest.mark.anyio
async def test_server_rejects_out_of_enum_arguments(
    sample_registry: ComponentRegistry, settings: ArchyraSettings
) -> None:
    server = create_mcp_server(registry=sample_registry, settings=settings)
    async with create_connected_server_and_client_session(server) as client:
        result = await client.call_tool("get_component", {"name": "LoadingDots", "format": "svelte"})
        followup = await client.call_tool("list_components", {})
    assert result.isError
    assert not followup.isError
