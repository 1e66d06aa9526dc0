"""Shared request data types."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ProxyTarget:
    """Validated destination of a forwarded request."""

    url: str
    host: str
