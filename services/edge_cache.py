"""In-process edge cache for responses requested with a cacheTtl."""

import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True)
class CachedResponse:
    """A fully received upstream response."""

    status_code: int
    headers: dict[str, str]
    body: bytes
    expires_at: float


class EdgeCache:
    """Bounded TTL cache keyed by target URL.

    Entries are stored regardless of the upstream's Cache-Control, for the TTL
    the caller asked for. Least recently used entries are evicted first.
    """

    def __init__(
        self,
        max_entries: int = 256,
        max_body_bytes: int = 5 * 1024 * 1024,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_entries = max_entries
        self.max_body_bytes = max_body_bytes
        self._clock = clock
        self._entries: OrderedDict[str, CachedResponse] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, url: str) -> CachedResponse | None:
        """Return a fresh entry for url, dropping it if expired."""
        entry = self._entries.get(url)
        if entry is None:
            return None
        if entry.expires_at <= self._clock():
            del self._entries[url]
            return None
        self._entries.move_to_end(url)
        return entry

    def put(
        self,
        url: str,
        status_code: int,
        headers: dict[str, str],
        body: bytes,
        ttl: int,
    ) -> bool:
        """Store a response for ttl seconds. Returns False if it was not cacheable."""
        if not 200 <= status_code < 300 or len(body) > self.max_body_bytes:
            return False
        self._entries[url] = CachedResponse(
            status_code=status_code,
            headers=headers,
            body=body,
            expires_at=self._clock() + ttl,
        )
        self._entries.move_to_end(url)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)
        return True

    def accepts(self, size: int) -> bool:
        """Whether a body of this many bytes may still be cached."""
        return size <= self.max_body_bytes
