# =============================================================================
# tools/mcp_server.py  —  FastMCP Tool Server (ALL tools in one place)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Exposes the SAP Help lookup chain as two MCP tools.  Each tool is a thin
#   wrapper around core/sap_help.py: it validates input, shapes the output
#   dict, and makes sure every failure comes back as {"error": "..."} instead
#   of an exception on the MCP wire.
#
# THE TOOLS:
#   sap_help_search(query)      → ranked results, each with an id
#   sap_help_get(result_id)     → full page text for one of those ids
#
#   The agent is expected to search first and then fetch by id.  Ids look
#   like "sap-help-<loio>".
#
# STATE:
#   One SapHelpService per server process.  It owns the SearchHitCache, so
#   hits found by sap_help_search are available to sap_help_get without a
#   second search round-trip.  Its HTTP client keeps one connection pool for
#   the life of the server and is closed when the server shuts down.
#
# RUNNING THIS SERVER:
#   a) Standalone:  python -m tools.mcp_server
#   b) Spawned by the ADK agent over stdio (see agent/docs_agent.py)
# =============================================================================

import json
import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from dotenv import load_dotenv
from fastmcp import FastMCP

from core.cache import SearchHitCache
from core.config import Settings, load_settings
from core.errors import SapHelpContentError
from core.sap_help import SapHelpClient, get_sap_help_content, search_sap_help
from core.text import clean_text

load_dotenv()

# =============================================================================
# Logging Setup
# =============================================================================
# Logs go to STDERR: stdout carries the MCP JSON stream, and a stray log line
# there would corrupt it.
#
# ANSI colors:
#   CYAN   → incoming tool calls
#   GREEN  → responses
#   YELLOW → intermediate status
# =============================================================================
_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RESET = "\033[0m"

# Keep response log lines readable when a whole document comes back
_LOG_PREVIEW_CHARS = 500


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [MCP] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def _log_request(tool_name: str, **params) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
    logging.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logging.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, result: dict) -> dict:
    """Log the tool response as compact JSON in GREEN, then return it."""
    payload = json.dumps(result, separators=(",", ":"), ensure_ascii=False)
    if len(payload) > _LOG_PREVIEW_CHARS:
        payload = payload[:_LOG_PREVIEW_CHARS] + f"... ({len(payload)} chars)"
    logging.info(f"{_GREEN}  ← {tool_name} response: {payload}{_RESET}")
    return result


# =============================================================================
# SapHelpService — per-process state shared by both tools
# =============================================================================
class SapHelpService:
    """Shapes core/sap_help.py results into tool payloads.

    Args:
        settings: Runtime configuration.
        transport: Optional httpx transport, forwarded to SapHelpClient.
        cache: Optional pre-built cache; a fresh one is created otherwise.
    """

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        cache: Optional[SearchHitCache] = None,
    ):
        self.settings = settings
        self.cache = cache if cache is not None else SearchHitCache()
        self.client = SapHelpClient(
            base_url=settings.base_url,
            timeout=settings.request_timeout,
            transport=transport,
        )

    def _shorten(self, snippet: str) -> str:
        limit = self.settings.search_snippet_chars
        if len(snippet) > limit:
            return snippet[:limit] + "..."
        return snippet

    async def search(self, query: str) -> dict:
        if not query or not query.strip():
            return {"error": "Missing required parameter: query"}

        response = await search_sap_help(query, self.client, self.cache)
        if not response.results:
            return {"error": response.error}

        _log_status(f"{len(response.results)} result(s), cache now holds {len(self.cache)} hit(s)")
        results = []
        for entry in response.results:
            results.append({
                "id": entry.id,
                "title": clean_text(entry.title) or "SAP Help Document",
                "url": entry.url or f"#{entry.id}",
                "snippet": clean_text(self._shorten(entry.snippet)),
                "metadata": {
                    "source": "sap-help",
                    "totalSnippets": 1,
                    "rank": entry.rank,
                },
            })
        return {"results": results}

    async def aclose(self) -> None:
        """Close the pooled HTTP connections held by the client."""
        await self.client.aclose()

    async def get(self, result_id: str) -> dict:
        if not result_id or not result_id.strip():
            return {"error": "Missing required parameter: result_id"}

        try:
            content = await get_sap_help_content(
                result_id,
                self.client,
                self.cache,
                max_length=self.settings.max_content_length,
            )
        except SapHelpContentError as exc:
            _log_status(str(exc))
            return {"error": str(exc)}

        text = clean_text(content)
        return {
            "id": result_id,
            "title": f"SAP Help Document ({result_id})",
            "text": text,
            "url": f"{self.settings.base_url}/#{result_id}",
            "metadata": {
                "source": "sap-help",
                "resultId": result_id,
                "contentLength": len(text),
            },
        }


# =============================================================================
# Create the FastMCP server instance
# =============================================================================
settings = load_settings()
configure_logging(settings.log_level)

service = SapHelpService(settings)


@asynccontextmanager
async def _lifespan(server: FastMCP):
    try:
        yield {}
    finally:
        await service.aclose()


mcp = FastMCP(
    "sap-help-docs",
    instructions=(
        "Search the SAP Help Portal with sap_help_search, then read a page "
        "with sap_help_get using an id from the search results."
    ),
    lifespan=_lifespan,
)


# =============================================================================
# TOOL 1: sap_help_search
# =============================================================================
@mcp.tool()
async def sap_help_search(query: str) -> dict:
    """Search the SAP Help Portal for product documentation.

    WHEN TO CALL THIS: First, for any question about SAP products, APIs,
    configuration or release notes.

    Args:
        query: Search terms, e.g. "currency conversion" or "CDS view annotations".

    Returns:
        A dict with "results": up to 20 entries, each with
          - id: Pass this to sap_help_get (e.g. "sap-help-<loio>")
          - title, url: The page title and link
          - snippet: Short excerpt plus product and version
          - metadata: {"source": "sap-help", "rank": 1-based position}
        Or a dict with "error" if nothing was found or the portal failed.
    """
    _log_request("sap_help_search", query=query)
    return _log_response("sap_help_search", await service.search(query))


# =============================================================================
# TOOL 2: sap_help_get
# =============================================================================
@mcp.tool()
async def sap_help_get(result_id: str) -> dict:
    """Retrieve full SAP Help page content by result_id returned from sap_help_search.

    WHEN TO CALL THIS: After sap_help_search, for the one or two results
    that best match the question.

    Args:
        result_id: Result ID from sap_help_search (e.g., "sap-help-<loio>").

    Returns:
        A dict with:
          - text: The page as Markdown, with a header naming product,
                  version and source URL.  Very long pages keep their
                  beginning and end with a notice in between.
          - metadata: {"source", "resultId", "contentLength"}
        Or a dict with "error" describing why the page could not be read.
    """
    _log_request("sap_help_get", result_id=result_id)
    return _log_response("sap_help_get", await service.get(result_id))


# =============================================================================
# Server entry point
# =============================================================================
if __name__ == "__main__":
    mcp.run()
