"""Header construction for forwarded requests and relayed responses."""

from collections.abc import Iterable, Mapping

import httpx

from auth import SECRET_HEADER

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class HeaderBuilder:
    """Build upstream request headers and downstream response headers."""

    def build_forward_headers(
        self,
        headers: Iterable[tuple[str, str]],
        target_host: str,
    ) -> httpx.Headers:
        """Copy inbound headers minus the proxy secret, with Host rewritten."""
        secret = SECRET_HEADER.lower()
        forward = httpx.Headers([(key, value) for key, value in headers if key.lower() != secret])
        forward["Host"] = target_host
        return forward

    def build_response_headers(
        self,
        upstream_headers: Mapping[str, str],
        version: str,
        cache_ttl: int | None = None,
    ) -> dict[str, str]:
        """Compose the fixed header set returned to the caller."""
        headers = {
            "Content-Type": upstream_headers.get("content-type") or DEFAULT_CONTENT_TYPE,
            "X-Proxied": "true",
            "X-Proxy-Version": version,
        }
        if cache_ttl is not None:
            headers["X-Cache-TTL"] = str(cache_ttl)

        retry_after = upstream_headers.get("retry-after")
        if retry_after:
            headers["Retry-After"] = retry_after
        return headers
