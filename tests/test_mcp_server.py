"""
Tests for the FastMCP tool layer.
"""

import json

import pytest
from fastmcp import Client

from core.config import Settings
from core.sap_help import SEARCH_PATH
from tests.conftest import LOIO, make_raw_hit
from tools import mcp_server
from tools.mcp_server import SapHelpService


@pytest.fixture
async def service(portal):
    service = SapHelpService(Settings(search_snippet_chars=20), transport=portal.transport)
    yield service
    await service.aclose()


class TestSapHelpServiceSearch:
    """Tests for the sap_help_search payload."""

    async def test_results_payload(self, service):
        payload = await service.search("currency conversion")

        (result,) = payload["results"]
        assert result["id"] == f"sap-help-{LOIO}"
        assert result["title"] == "Currency Conversion"
        assert result["url"].startswith("https://help.sap.com/docs/")
        assert result["snippet"] == "Convert amounts betw..."
        assert result["metadata"] == {"source": "sap-help", "totalSnippets": 1, "rank": 1}

    async def test_search_fills_the_service_cache(self, service):
        await service.search("currency conversion")
        assert LOIO in service.cache

    async def test_titles_are_cleaned(self, portal, service):
        portal.search_results = [make_raw_hit(title="Currency\x00 Conversion\r\n")]
        payload = await service.search("currency")
        assert payload["results"][0]["title"] == "Currency Conversion\n"

    async def test_missing_query(self, service, portal):
        assert await service.search("  ") == {"error": "Missing required parameter: query"}
        assert portal.requests == []

    async def test_no_results(self, portal, service):
        portal.search_results = []
        payload = await service.search("nothing")
        assert payload == {"error": 'No SAP Help results found for "nothing". Try different keywords.'}

    async def test_remote_failure(self, portal, service):
        portal.status[SEARCH_PATH] = 500
        payload = await service.search("currency")
        assert payload["error"].startswith("SAP Help search error:")


class TestSapHelpServiceGet:
    """Tests for the sap_help_get payload."""

    async def test_document_payload(self, service):
        payload = await service.get(f"sap-help-{LOIO}")

        assert payload["id"] == f"sap-help-{LOIO}"
        assert payload["title"] == f"SAP Help Document (sap-help-{LOIO})"
        assert payload["url"] == f"https://help.sap.com/#sap-help-{LOIO}"
        assert payload["text"].startswith("# Currency Conversion")
        assert payload["metadata"] == {
            "source": "sap-help",
            "resultId": f"sap-help-{LOIO}",
            "contentLength": len(payload["text"]),
        }

    async def test_search_then_get_uses_cache(self, portal, service):
        await service.search("currency conversion")
        await service.get(f"sap-help-{LOIO}")
        assert len(portal.calls(SEARCH_PATH)) == 1

    async def test_content_is_bounded_by_settings(self, portal):
        portal.page = {"data": {"body": "<p>word. </p>" * 5000}}
        service = SapHelpService(Settings(max_content_length=3000), transport=portal.transport)
        payload = await service.get(f"sap-help-{LOIO}")
        assert payload["metadata"]["contentLength"] <= 3000
        assert "Content Truncated" in payload["text"]
        await service.aclose()

    async def test_errors_become_payloads(self, service):
        payload = await service.get("bogus")
        assert payload["error"].startswith("Failed to get SAP Help content:")

    async def test_missing_result_id(self, service):
        assert await service.get("") == {"error": "Missing required parameter: result_id"}


class TestMcpTools:
    """Tests for the registered MCP tools, called through an in-memory client."""

    async def test_tools_are_registered(self):
        async with Client(mcp_server.mcp) as client:
            tools = await client.list_tools()
        assert {tool.name for tool in tools} == {"sap_help_search", "sap_help_get"}

    async def test_search_tool_round_trip(self, monkeypatch, portal):
        monkeypatch.setattr(mcp_server, "service", SapHelpService(Settings(), transport=portal.transport))

        async with Client(mcp_server.mcp) as client:
            result = await client.call_tool("sap_help_search", {"query": "currency conversion"})

        payload = json.loads(result.content[0].text)
        assert payload["results"][0]["id"] == f"sap-help-{LOIO}"


class TestServiceLifetime:
    """Tests for closing the service's HTTP pool."""

    async def test_aclose_closes_client(self, service):
        await service.search("currency conversion")
        assert service.client.is_closed is False
        await service.aclose()
        assert service.client.is_closed is True

    async def test_server_shutdown_closes_service(self, monkeypatch, portal):
        owned = SapHelpService(Settings(), transport=portal.transport)
        monkeypatch.setattr(mcp_server, "service", owned)

        async with mcp_server._lifespan(mcp_server.mcp):
            await owned.search("currency conversion")
            assert owned.client.is_closed is False

        assert owned.client.is_closed is True
