"""Query parameter parsing for proxied requests."""

import re

import httpx

from core.exceptions import InvalidTargetURL
from core.request_types import ProxyTarget

# Leading integer; trailing text is ignored ("3600s" -> 3600)
_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


def parse_target(raw: str) -> ProxyTarget:
    """Parse the `url` parameter as an absolute URL."""
    try:
        url = httpx.URL(raw)
    except httpx.InvalidURL as e:
        raise InvalidTargetURL(raw, str(e)) from e
    if not url.scheme:
        raise InvalidTargetURL(raw, "missing scheme")
    if not url.host:
        raise InvalidTargetURL(raw, "missing host")
    # netloc carries the port only when it is not the scheme default
    return ProxyTarget(url=str(url), host=url.netloc.decode("ascii"))


def parse_cache_ttl(raw: str | None) -> int | None:
    """Return the requested edge-cache TTL in seconds, or None for no caching.

    Values that do not start with an integer, zero and negatives all mean
    no caching.
    """
    if not raw:
        return None
    match = _LEADING_INT.match(raw)
    if not match:
        return None
    ttl = int(match.group(1))
    return ttl if ttl > 0 else None
