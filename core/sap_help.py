# =============================================================================
# core/sap_help.py  —  The remote lookup chain (search → metadata → page)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Talks to the SAP Help Portal's JSON endpoints and turns a search hit into
#   a rendered, size-bounded document.
#
# THE CHAIN (each stage seeds the next one's request):
#
#   ┌──────────────┐   loio, url,    ┌─────────────────┐  deliverable id,  ┌───────────────┐
#   │ 1. SEARCH    │ ─ productId ──▶ │ 2. METADATA     │ ─ buildNo, ─────▶ │ 3. PAGE       │
#   │ elasticsearch│                 │ deliverable-    │   filePath        │ pagecontent   │
#   └──────────────┘                 │ Metadata        │                   └───────────────┘
#                                    └─────────────────┘                          │
#                                                                   html_to_text → truncate
#
#   Retrieval starts from a result id ("sap-help-" + loio).  The hit comes
#   from the cache; on a miss the search stage runs again with the bare loio
#   as the query, and only an exact loio match counts.
#
# FAILURE MODEL:
#   Any stage failing aborts the whole retrieval; no partial document is
#   returned.  The single exception is an empty page body, which yields a
#   normal document whose body says no content is available.
#
# PUBLIC ENTRY POINTS:
#   search_sap_help()      → SearchResponse (errors become response.error)
#   get_sap_help_content() → str (errors become SapHelpContentError)
#   fetch_document()       → RenderedDocument (typed errors, for finer control)
# =============================================================================

import logging
from typing import Any, Optional

import httpx

from core.cache import SearchHitCache
from core.config import DEFAULT_BASE_URL, DEFAULT_MAX_CONTENT_LENGTH, DEFAULT_TIMEOUT_SECONDS
from core.errors import (
    DocumentNotFound,
    IncompleteMetadata,
    MalformedIdentifier,
    RemoteCallFailed,
    SapHelpContentError,
    SapHelpError,
    UnparsableDocumentUrl,
)
from core.markup import html_to_text
from core.models import (
    RESULT_ID_PREFIX,
    DocumentMetadata,
    MetadataRequest,
    PageContent,
    RenderedDocument,
    SearchHit,
    SearchResponse,
    SearchResultEntry,
)
from core.truncate import truncate_content
from core.urls import build_query, ensure_absolute_url, parse_docs_path_parts

logger = logging.getLogger(__name__)

SEARCH_PATH = "/http.svc/elasticsearch"
METADATA_PATH = "/http.svc/deliverableMetadata"
PAGE_CONTENT_PATH = "/http.svc/pagecontent"

DEFAULT_LANGUAGE = "en-US"
SEARCH_WINDOW = 20

# One User-Agent per stage so portal-side logs can tell the calls apart
SEARCH_AGENT = "sap-help-mcp/help-search"
LOOKUP_AGENT = "sap-help-mcp/help-get"
METADATA_AGENT = "sap-help-mcp/help-metadata"
CONTENT_AGENT = "sap-help-mcp/help-content"

NO_CONTENT_PLACEHOLDER = "No content available for this page."
FOOTER = "*This content is from the SAP Help Portal and represents official SAP documentation.*"


def _dig(data: Any, *keys: str) -> Any:
    """Walk nested dicts; any missing or non-dict level yields None."""
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def _missing(value: Any) -> bool:
    return value is None or value == ""


def _search_params(query: str) -> dict[str, str]:
    # product/version are empty on purpose: build_query() drops them, which the
    # portal reads as "no filter".
    return {
        "transtype": "standard,html,pdf,others",
        "state": "PRODUCTION,TEST,DRAFT",
        "product": "",
        "version": "",
        "q": query,
        "to": str(SEARCH_WINDOW - 1),      # 0-based, inclusive
        "area": "content",
        "advancedSearch": "0",
        "excludeNotSearchable": "1",
        "language": DEFAULT_LANGUAGE,
    }


def _parse_hit(raw: dict) -> Optional[SearchHit]:
    loio = raw.get("loio")
    if _missing(loio):
        return None
    return SearchHit(
        loio=str(loio),
        title=raw.get("title") or "",
        url=raw.get("url") or "",
        product_id=raw.get("productId") or None,
        product=raw.get("product") or None,
        version=raw.get("version") or None,
        version_id=raw.get("versionId") or None,
        language=raw.get("language") or None,
        snippet=raw.get("snippet") or None,
    )


def product_label(hit: SearchHit) -> str:
    return hit.product or hit.product_id or "Unknown"


def version_label(hit: SearchHit) -> str:
    return hit.version or hit.version_id or "Latest"


# =============================================================================
# SapHelpClient — one method per remote stage
# =============================================================================
class SapHelpClient:
    """Async client for the help portal's http.svc endpoints.

    Args:
        base_url: Portal origin, e.g. "https://help.sap.com".
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport.  Tests pass an
                   httpx.MockTransport so no request leaves the process.

    All stages share one pooled httpx.AsyncClient.  The owner calls aclose()
    when done; a closed client reopens its pool on the next request.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._http: Optional[httpx.AsyncClient] = None

    @property
    def http(self) -> httpx.AsyncClient:
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(timeout=self._timeout, transport=self._transport)
        return self._http

    @property
    def is_closed(self) -> bool:
        return self._http is None or self._http.is_closed

    async def aclose(self) -> None:
        if self._http is not None:
            await self._http.aclose()

    async def _get_json(
        self,
        path: str,
        params: dict[str, Any],
        user_agent: str,
        failure_message: str,
    ) -> dict:
        url = f"{self.base_url}{path}?{build_query(params)}"
        headers = {
            "Accept": "application/json",
            "User-Agent": user_agent,
            "Referer": self.base_url,
        }
        logger.debug("GET %s", url)

        try:
            response = await self.http.get(url, headers=headers)
        except httpx.HTTPError as exc:
            raise RemoteCallFailed(failure_message, status_text=str(exc) or type(exc).__name__) from exc

        if not response.is_success:
            raise RemoteCallFailed(failure_message, response.status_code, response.reason_phrase)

        try:
            data = response.json()
        except ValueError as exc:
            raise RemoteCallFailed(failure_message, status_text="response body is not valid JSON") from exc
        return data if isinstance(data, dict) else {}

    # -------------------------------------------------------------------------
    # Stage 1: search
    # -------------------------------------------------------------------------
    async def search(
        self,
        query: str,
        user_agent: str = SEARCH_AGENT,
        failure_message: str = "SAP Help search failed",
    ) -> list[SearchHit]:
        """Run a full-text search and return the raw hits (at most 20)."""
        data = await self._get_json(SEARCH_PATH, _search_params(query), user_agent, failure_message)
        raw_results = _dig(data, "data", "results") or []
        hits = [_parse_hit(raw) for raw in raw_results if isinstance(raw, dict)]
        hits = [hit for hit in hits if hit is not None]
        logger.info("Search %r returned %d hit(s)", query, len(hits))
        return hits

    # -------------------------------------------------------------------------
    # Stage 2: deliverable metadata
    # -------------------------------------------------------------------------
    async def fetch_metadata(self, request: MetadataRequest) -> DocumentMetadata:
        """Resolve a planned request to deliverable id, build number and file path.

        Raises:
            IncompleteMetadata: the response lacks a deliverable id or build number.
        """
        params = {
            "product_url": request.product_url,
            "topic_url": request.topic_url,
            "version": "LATEST",
            "loadlandingpageontopicnotfound": "true",
            "deliverable_url": request.deliverable_url,
            "language": request.language,
            "deliverableInfo": "1",
            "toc": "1",
        }
        data = await self._get_json(METADATA_PATH, params, METADATA_AGENT, "Metadata request failed")

        deliverable_id = _dig(data, "data", "deliverable", "id")
        build_no = _dig(data, "data", "deliverable", "buildNo")
        file_path = _dig(data, "data", "filePath") or request.topic_url

        if _missing(deliverable_id) or _missing(build_no):
            raise IncompleteMetadata("Missing required metadata: deliverable_id, buildNo, or file_path")

        metadata = DocumentMetadata(
            deliverable_id=str(deliverable_id),
            build_no=str(build_no),
            file_path=str(file_path),
        )
        logger.info(
            "Metadata for %s: deliverable=%s build=%s file=%s",
            request.topic_url, metadata.deliverable_id, metadata.build_no, metadata.file_path,
        )
        return metadata

    # -------------------------------------------------------------------------
    # Stage 3: page content
    # -------------------------------------------------------------------------
    async def fetch_page(self, metadata: DocumentMetadata) -> PageContent:
        params = {
            "deliverableInfo": "1",
            "deliverable_id": metadata.deliverable_id,
            "buildNo": metadata.build_no,
            "file_path": metadata.file_path,
        }
        data = await self._get_json(PAGE_CONTENT_PATH, params, CONTENT_AGENT, "Page content request failed")

        title = _dig(data, "data", "currentPage", "t") or _dig(data, "data", "deliverable", "title")
        body = _dig(data, "data", "body") or ""
        return PageContent(title=title or None, body=str(body))


# =============================================================================
# Metadata planning — the product/deliverable fallback rule
# =============================================================================
def plan_metadata_request(hit: SearchHit, origin: str = DEFAULT_BASE_URL) -> MetadataRequest:
    """Derive the metadata-call parameters from a hit.

    product_url prefers the hit's productId and falls back to the product
    segment of its URL.  deliverable_url only ever comes from the URL.

    Raises:
        UnparsableDocumentUrl: the URL cannot be parsed AND the hit has no
            productId, so there is nothing to ask the metadata endpoint for.
    """
    topic_url = f"{hit.loio}.html"
    language = hit.language or DEFAULT_LANGUAGE

    try:
        product_segment, deliverable_loio = parse_docs_path_parts(hit.url, origin)
    except UnparsableDocumentUrl as exc:
        if not hit.product_id:
            raise UnparsableDocumentUrl(
                "Could not determine product_url from hit; missing productId and unparsable url"
            ) from exc
        # Tolerated because productId alone is enough to address the deliverable.
        # Worth checking against real traffic whether these hits resolve correctly.
        logger.warning("Hit %s has unparsable url %r; using productId %s", hit.loio, hit.url, hit.product_id)
        return MetadataRequest(product_url=hit.product_id, topic_url=topic_url, language=language)

    return MetadataRequest(
        product_url=hit.product_id or product_segment,
        topic_url=topic_url,
        deliverable_url=deliverable_loio,
        language=language,
    )


# =============================================================================
# Search entry point
# =============================================================================
def _to_entry(hit: SearchHit, rank: int, origin: str) -> SearchResultEntry:
    snippet = f"{hit.snippet or hit.title} — Product: {product_label(hit)} ({version_label(hit)})"
    return SearchResultEntry(
        id=RESULT_ID_PREFIX + hit.loio,
        title=hit.title,
        url=ensure_absolute_url(hit.url, origin),
        snippet=snippet,
        rank=rank,
        loio=hit.loio,
        product=hit.product or hit.product_id,
        version=hit.version or hit.version_id,
    )


async def search_sap_help(query: str, client: SapHelpClient, cache: SearchHitCache) -> SearchResponse:
    """Search the portal, cache every hit and return ranked entries.

    Never raises for remote failures: an empty result list comes back with
    `error` explaining why.
    """
    try:
        hits = await client.search(query)
    except SapHelpError as exc:
        logger.warning("Search for %r failed: %s", query, exc)
        return SearchResponse(query=query, error=f"SAP Help search error: {exc}")

    if not hits:
        return SearchResponse(
            query=query,
            error=f'No SAP Help results found for "{query}". Try different keywords.',
        )

    cache.put_many(hits)
    entries = [
        _to_entry(hit, rank, client.base_url)
        for rank, hit in enumerate(hits[:SEARCH_WINDOW], start=1)
    ]
    return SearchResponse(query=query, results=entries)


# =============================================================================
# Retrieval entry points
# =============================================================================
def loio_from_result_id(result_id: str) -> str:
    """Strip the "sap-help-" prefix; anything else is a MalformedIdentifier."""
    if not result_id.startswith(RESULT_ID_PREFIX) or len(result_id) == len(RESULT_ID_PREFIX):
        raise MalformedIdentifier("Invalid SAP Help result ID. Use an ID from sap_help_search results.")
    return result_id[len(RESULT_ID_PREFIX):]


async def resolve_hit(loio: str, client: SapHelpClient, cache: SearchHitCache) -> SearchHit:
    """Return the cached hit for loio, or re-search for an exact match."""
    hit = cache.get(loio)
    if hit is not None:
        logger.debug("Cache hit for %s", loio)
        return hit

    logger.info("Cache miss for %s, searching by loio", loio)
    hits = await client.search(loio, user_agent=LOOKUP_AGENT, failure_message="Failed to find document")
    for candidate in hits:
        if candidate.loio == loio:
            return candidate
    raise DocumentNotFound(f"Document with loio {loio} not found")


async def fetch_document(result_id: str, client: SapHelpClient, cache: SearchHitCache) -> RenderedDocument:
    """Run the full chain for one result id and return the converted document.

    Raises:
        MalformedIdentifier, DocumentNotFound, UnparsableDocumentUrl,
        IncompleteMetadata, RemoteCallFailed.
    """
    loio = loio_from_result_id(result_id)
    hit = await resolve_hit(loio, client, cache)

    request = plan_metadata_request(hit, client.base_url)
    metadata = await client.fetch_metadata(request)
    page = await client.fetch_page(metadata)

    has_content = bool(page.body.strip())
    return RenderedDocument(
        title=page.title or hit.title,
        url=ensure_absolute_url(hit.url, client.base_url),
        product=product_label(hit),
        version=version_label(hit),
        language=hit.language or DEFAULT_LANGUAGE,
        summary=hit.snippet,
        body=html_to_text(page.body) if has_content else NO_CONTENT_PLACEHOLDER,
        has_content=has_content,
    )


def render_document(document: RenderedDocument) -> str:
    """Lay a document out as Markdown: title, metadata header, body, footer."""
    lines = [
        f"# {document.title}",
        "",
        "**Source:** SAP Help Portal",
        f"**URL:** {document.url}",
        f"**Product:** {document.product}",
        f"**Version:** {document.version}",
        f"**Language:** {document.language}",
    ]
    if document.summary:
        lines.append(f"**Summary:** {document.summary}")
    lines += ["", "---", "", document.body, "", "---", "", FOOTER]
    return "\n".join(lines)


async def get_sap_help_content(
    result_id: str,
    client: SapHelpClient,
    cache: SearchHitCache,
    max_length: int = DEFAULT_MAX_CONTENT_LENGTH,
) -> str:
    """Retrieve, render and truncate one document.

    Raises:
        SapHelpContentError: any stage failed; the typed error is chained.
    """
    try:
        document = await fetch_document(result_id, client, cache)
    except SapHelpError as exc:
        logger.warning("Retrieval of %s failed: %s", result_id, exc)
        raise SapHelpContentError(f"Failed to get SAP Help content: {exc}") from exc

    result = truncate_content(render_document(document), max_length)
    if result.was_truncated:
        logger.info(
            "Truncated %s from %d to %d characters",
            result_id, result.original_length, result.truncated_length,
        )
    return result.content
