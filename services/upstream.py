"""HTTP forwarding to the target URL."""

from collections.abc import AsyncGenerator

import httpx
from fastapi import Response
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from core.headers import HeaderBuilder
from core.protocols import RequestLogger
from core.request_types import ProxyTarget
from services.edge_cache import EdgeCache

# Upstream headers kept alongside a cached body
_CACHED_HEADERS = ("content-type", "retry-after")


class UpstreamClient:
    """Forward GET requests to arbitrary targets with streaming support."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        cache: EdgeCache,
        header_builder: HeaderBuilder | None = None,
    ) -> None:
        self._client = client
        self._cache = cache
        self._headers = header_builder or HeaderBuilder()

    async def forward(
        self,
        target: ProxyTarget,
        headers: httpx.Headers,
        cache_ttl: int | None,
        version: str,
        logger: RequestLogger,
    ) -> Response | StreamingResponse:
        """Forward a request, serving from the edge cache when allowed."""
        if cache_ttl is not None:
            cached = self._cache.get(target.url)
            if cached is not None:
                logger.log_forward(target.host, cached.status_code, cache_ttl=cache_ttl, cache_hit=True)
                return Response(
                    content=cached.body,
                    status_code=cached.status_code,
                    headers=self._headers.build_response_headers(cached.headers, version, cache_ttl),
                )

        try:
            return await self._streaming_request(target, headers, cache_ttl, version, logger)
        except (httpx.RequestError, httpx.InvalidURL) as e:
            message = str(e) or type(e).__name__
            logger.log_error(target.host, 502, message)
            return Response(
                content=f"Proxy error: {message}",
                status_code=502,
                media_type="text/plain",
            )

    async def _streaming_request(
        self,
        target: ProxyTarget,
        headers: httpx.Headers,
        cache_ttl: int | None,
        version: str,
        logger: RequestLogger,
    ) -> StreamingResponse:
        """Send the request and relay the body as it arrives."""
        req = self._client.build_request("GET", target.url, headers=headers)
        response = await self._client.send(req, stream=True)
        logger.log_forward(target.host, response.status_code, cache_ttl=cache_ttl)

        body = self._relay(response)
        if cache_ttl is not None:
            body = self._tee_into_cache(body, target, response, cache_ttl)

        return StreamingResponse(
            body,
            status_code=response.status_code,
            headers=self._headers.build_response_headers(response.headers, version, cache_ttl),
            background=BackgroundTask(self._cleanup_streaming, response),
        )

    async def _relay(self, response: httpx.Response) -> AsyncGenerator[bytes, None]:
        """Yield the upstream body, closing it even if the caller goes away."""
        try:
            async for chunk in response.aiter_bytes():
                yield chunk
        finally:
            await response.aclose()

    async def _tee_into_cache(
        self,
        body: AsyncGenerator[bytes, None],
        target: ProxyTarget,
        response: httpx.Response,
        cache_ttl: int,
    ) -> AsyncGenerator[bytes, None]:
        """Pass chunks through while collecting them for the edge cache."""
        chunks: list[bytes] | None = []
        size = 0
        try:
            async for chunk in body:
                if chunks is not None:
                    size += len(chunk)
                    if self._cache.accepts(size):
                        chunks.append(chunk)
                    else:
                        chunks = None
                yield chunk
        finally:
            await body.aclose()

        # Only reached when the body was read to the end
        if chunks is not None:
            cached_headers = {
                name: response.headers[name] for name in _CACHED_HEADERS if name in response.headers
            }
            self._cache.put(target.url, response.status_code, cached_headers, b"".join(chunks), cache_ttl)

    async def _cleanup_streaming(self, response: httpx.Response) -> None:
        """Clean up streaming resources."""
        await response.aclose()
