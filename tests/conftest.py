"""
Shared fixtures for the SAP Help tool tests.

No test touches the network: every remote call goes through FakePortal, an
httpx.MockTransport handler that serves canned JSON for the three
http.svc endpoints and records each request it receives.
"""

import httpx
import pytest

from core.cache import SearchHitCache
from core.sap_help import METADATA_PATH, PAGE_CONTENT_PATH, SEARCH_PATH, SapHelpClient

LOIO = "a2f1a7c8d9e04b6f8e1c2d3b4a5f6e7d"
DELIVERABLE = "0f69f8fb28ac4bf48d2b57b9637e81fa"


def make_raw_hit(**overrides) -> dict:
    """A search hit shaped like the portal's elasticsearch response."""
    hit = {
        "loio": LOIO,
        "title": "Currency Conversion",
        "url": f"/docs/SAP_S4HANA_CLOUD/{DELIVERABLE}/{LOIO}.html?locale=en-US",
        "productId": "SAP_S4HANA_CLOUD",
        "product": "SAP S/4HANA Cloud",
        "version": "2408",
        "language": "en-US",
        "snippet": "Convert amounts between currencies.",
    }
    hit.update(overrides)
    return hit


class FakePortal:
    """Canned help-portal endpoints; tweak the attributes per test."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.search_results: list[dict] = [make_raw_hit()]
        self.metadata: dict = {
            "data": {
                "deliverable": {"id": "4711", "buildNo": "123"},
                "filePath": f"{LOIO}.html",
            }
        }
        self.page: dict = {
            "data": {
                "currentPage": {"t": "Currency Conversion"},
                "body": "<h1>Currency Conversion</h1><p>Rates are read from table TCURR.</p>",
            }
        }
        self.status: dict[str, int] = {}
        self.error: Exception | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error

        path = request.url.path
        if path in self.status:
            return httpx.Response(self.status[path])
        if path == SEARCH_PATH:
            return httpx.Response(200, json={"data": {"results": self.search_results}})
        if path == METADATA_PATH:
            return httpx.Response(200, json=self.metadata)
        if path == PAGE_CONTENT_PATH:
            return httpx.Response(200, json=self.page)
        return httpx.Response(404)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]


@pytest.fixture
def portal() -> FakePortal:
    return FakePortal()


@pytest.fixture
async def client(portal: FakePortal):
    client = SapHelpClient(transport=portal.transport)
    yield client
    await client.aclose()


@pytest.fixture
def cache() -> SearchHitCache:
    return SearchHitCache()
