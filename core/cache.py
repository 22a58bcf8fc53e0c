# =============================================================================
# core/cache.py  —  Result Cache (loio → SearchHit)
# =============================================================================
#
# Every search writes its hits here; retrieval reads from here before falling
# back to a fresh search.  The cache is an ordinary object owned by whoever
# creates it (one per tool-server process in tools/mcp_server.py, one per test
# in tests/), and is passed explicitly into search_sap_help() and
# fetch_document().
#
# No eviction and no TTL: the cache grows for the lifetime of its owner.
# Concurrent searches may overwrite the same loio; last write wins, and any
# copy is equally valid because hits are immutable.
# =============================================================================

from typing import Iterable, Optional

from core.models import SearchHit


class SearchHitCache:
    """In-memory mapping from loio to the hit that produced it."""

    def __init__(self):
        self._hits: dict[str, SearchHit] = {}

    def put(self, hit: SearchHit) -> None:
        self._hits[hit.loio] = hit

    def put_many(self, hits: Iterable[SearchHit]) -> None:
        for hit in hits:
            self.put(hit)

    def get(self, loio: str) -> Optional[SearchHit]:
        return self._hits.get(loio)

    def __contains__(self, loio: object) -> bool:
        return loio in self._hits

    def __len__(self) -> int:
        return len(self._hits)
