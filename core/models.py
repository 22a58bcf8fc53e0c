# =============================================================================
# core/models.py  —  Data Models (the "nouns" of the system)
# =============================================================================
#
# These dataclasses define the shape of every piece of information that flows
# through the lookup chain.  They carry no behavior; the functions in
# core/sap_help.py build and consume them.
#
# LIFECYCLE AT A GLANCE:
#   SearchHit          → received from the search call, cached by loio
#   SearchResultEntry  → what the caller sees in a result list
#   MetadataRequest    → parameters planned from a hit for the metadata call
#   DocumentMetadata   → deliverable id / build number / file path (transient)
#   PageContent        → title + raw body markup from the page call
#   RenderedDocument   → everything needed to print the final document
#   TruncationResult   → output of the size-management step
# =============================================================================

from dataclasses import dataclass, field
from typing import Optional

RESULT_ID_PREFIX = "sap-help-"


# -----------------------------------------------------------------------------
# SearchHit — one raw hit from the help portal search endpoint
# -----------------------------------------------------------------------------
# Frozen: the remote data is treated as immutable for the process lifetime,
# so any cached copy of a hit is as good as any other.
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class SearchHit:
    """A search hit as reported by the help portal."""

    loio: str                              # Opaque, stable document id
    title: str
    url: str                               # Usually relative: /docs/{product}/{deliverable}/{file}
    product_id: Optional[str] = None       # URL-style product segment, e.g. "SAP_S4HANA_CLOUD"
    product: Optional[str] = None          # Display name
    version: Optional[str] = None
    version_id: Optional[str] = None
    language: Optional[str] = None
    snippet: Optional[str] = None


# -----------------------------------------------------------------------------
# SearchResultEntry — the normalized projection handed back to callers
# -----------------------------------------------------------------------------
@dataclass
class SearchResultEntry:
    """One ranked search result."""

    id: str                                # "sap-help-" + loio
    title: str
    url: str                               # Always absolute
    snippet: str                           # Hit snippet + product/version annotation
    rank: int                              # 1-based
    loio: str
    product: Optional[str] = None
    version: Optional[str] = None


@dataclass
class SearchResponse:
    """Result of a search; `error` explains an empty result list."""

    query: str
    results: list[SearchResultEntry] = field(default_factory=list)
    error: Optional[str] = None


# -----------------------------------------------------------------------------
# MetadataRequest — typed output of the metadata-planning step
# -----------------------------------------------------------------------------
# deliverable_url is None when the hit URL could not be parsed but the hit
# already named its product; the query builder then drops the parameter.
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class MetadataRequest:
    """Parameters for the deliverableMetadata call."""

    product_url: str
    topic_url: str                         # "{loio}.html"
    deliverable_url: Optional[str] = None
    language: str = "en-US"


@dataclass(frozen=True)
class DocumentMetadata:
    """Deliverable coordinates needed to fetch the page body."""

    deliverable_id: str
    build_no: str
    file_path: str


@dataclass(frozen=True)
class PageContent:
    """Title and raw body markup from the pagecontent call."""

    title: Optional[str]
    body: str


# -----------------------------------------------------------------------------
# RenderedDocument — built fresh for every retrieval, never cached
# -----------------------------------------------------------------------------
@dataclass
class RenderedDocument:
    """A converted help page plus the annotations printed in its header."""

    title: str
    url: str
    product: str
    version: str
    language: str
    body: str                              # Markdown-flavored text, already converted
    summary: Optional[str] = None
    has_content: bool = True               # False → body is the placeholder text


@dataclass
class TruncationResult:
    """Outcome of a truncation pass."""

    content: str
    was_truncated: bool
    original_length: int
    truncated_length: int
