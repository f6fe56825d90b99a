"""Shared fixtures for bridge agent tests."""

import pytest

from fakes import FakeMCPClient, remote_tool


@pytest.fixture
def search_tool():
    """A remote 'search' tool taking a string 'q'."""
    return remote_tool("search", required=["q"], q="string")


@pytest.fixture
def browser_tools():
    """Remote browser automation tools."""
    return [
        remote_tool("chrome_navigate", required=["url"], url="string"),
        remote_tool("chrome_fill", required=["selector", "value"], selector="string", value="string"),
        remote_tool("chrome_screenshot"),
    ]


@pytest.fixture
def fake_mcp(search_tool, browser_tools):
    """MCP client exposing search plus browser tools."""
    return FakeMCPClient(tools=[search_tool, *browser_tools])
