"""Tests for the MCP tool server."""

import asyncio

import pytest
from conftest import FakeUpstreamClient
from mcp.server.fastmcp.exceptions import ToolError

from rootscope.config import Settings
from rootscope.server import _unwrap, create_server
from rootscope.services import AnalysisService, ToolResult

PASS_THROUGH_TOOLS = {
    "searchEntities",
    "getProject",
    "getOrg",
    "getPeople",
    "getInvestors",
    "getFundingRounds",
    "syncUpdate",
    "getHotProjects",
    "getXHotProjects",
    "getXPopularFigures",
    "getJobChanges",
    "getNewTokens",
    "getEcosystemMap",
    "getTagMap",
    "getProjectsByEcosystem",
    "getProjectsByTags",
}

ANALYSIS_TOOLS = {"analyzeEntity", "compareEntities", "trackTrends"}


@pytest.fixture
def server():
    client = FakeUpstreamClient()
    service = AnalysisService(
        client_factory=lambda: client,
        config=Settings(rootdata_api_key="test"),  # type: ignore[arg-type]
    )
    return create_server(service)


class TestServer:
    """Test tool registration."""

    def test_all_tools_registered(self, server) -> None:
        """Test every pass-through and analysis tool is exposed."""
        tools = asyncio.run(server.list_tools())
        assert {tool.name for tool in tools} == PASS_THROUGH_TOOLS | ANALYSIS_TOOLS

    def test_analysis_tools_have_descriptions(self, server) -> None:
        """Test analysis tools document themselves."""
        tools = {tool.name: tool for tool in asyncio.run(server.list_tools())}
        assert "composite analysis" in tools["analyzeEntity"].description
        assert "funding" in tools["compareEntities"].description

    def test_unwrap_raises_on_error(self) -> None:
        """Test error results become tool errors."""
        with pytest.raises(ToolError, match="Error: nope"):
            _unwrap(ToolResult(is_error=True, error_message="Error: nope"))
        assert _unwrap(ToolResult(content="[]")) == "[]"
