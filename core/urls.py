# =============================================================================
# core/urls.py  —  Query Builder + URL Normalizer
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   1. build_query()            → canonical query strings for the three remote calls
#   2. ensure_absolute_url()    → turns "/docs/..." hit URLs into full links
#   3. parse_docs_path_parts()  → pulls product + deliverable out of a docs path
#
# THE HELP PORTAL PATH CONVENTION:
#   /docs/{product}/{deliverable}/{file}.html?locale=en-US
#     product      → URL segment of the product, e.g. "SAP_S4HANA_CLOUD"
#     deliverable  → 32-hex-character deliverable loio
#     file         → the topic, usually "{loio}.html"
# =============================================================================

from typing import Mapping, Optional, Union
from urllib.parse import quote, urljoin, urlparse

from core.config import DEFAULT_BASE_URL
from core.errors import UnparsableDocumentUrl

QueryValue = Optional[Union[str, int, float, bool]]

# Characters encodeURIComponent leaves alone, besides alphanumerics and "-_."
_UNRESERVED = "!~*'()"


def _encode(value: str) -> str:
    return quote(value, safe=_UNRESERVED)


def build_query(params: Mapping[str, QueryValue]) -> str:
    """Encode params as a query string, dropping None and "" values.

    Ordering follows the mapping's iteration order.  Booleans are written
    as "true"/"false".
    """
    pairs = []
    for key, value in params.items():
        if value is None or value == "":
            continue
        if isinstance(value, bool):
            text = "true" if value else "false"
        else:
            text = str(value)
        pairs.append(f"{_encode(key)}={_encode(text)}")
    return "&".join(pairs)


def ensure_absolute_url(url: str, origin: str = DEFAULT_BASE_URL) -> str:
    """Prefix relative URLs with the portal origin; absolute URLs pass through."""
    if url.startswith("http://") or url.startswith("https://"):
        return url
    if not url.startswith("/"):
        url = "/" + url
    return origin.rstrip("/") + url


def parse_docs_path_parts(url_or_path: str, origin: str = DEFAULT_BASE_URL) -> tuple[str, str]:
    """Split a docs URL into (product URL segment, deliverable loio).

    Accepts a full URL or a path relative to the portal origin.  Query
    string and fragment are ignored.

    Raises:
        UnparsableDocumentUrl: the path does not start with "docs" or has
            fewer than four segments.
    """
    resolved = urljoin(origin.rstrip("/") + "/", url_or_path)
    parts = [segment for segment in urlparse(resolved).path.split("/") if segment]
    if len(parts) < 4 or parts[0] != "docs":
        raise UnparsableDocumentUrl(f"Unexpected docs URL: {resolved}")
    return parts[1], parts[2]
