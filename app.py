"""FastAPI application factory."""

from contextlib import asynccontextmanager
from http.cookiejar import CookieJar, DefaultCookiePolicy

import httpx
from fastapi import FastAPI, Request

from api.handlers import handle_health, handle_proxy
from core.config import Config
from core.headers import HeaderBuilder
from core.protocols import RequestLogger
from services.edge_cache import EdgeCache
from services.upstream import UpstreamClient


def create_app(
    config: Config,
    logger: RequestLogger,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    header_builder = HeaderBuilder()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client = httpx.AsyncClient(
            timeout=config.upstream.timeout,
            follow_redirects=config.upstream.follow_redirects,
            # Upstream cookies must not leak from one request into the next
            cookies=CookieJar(policy=DefaultCookiePolicy(allowed_domains=[])),
            transport=transport,
        )
        cache = EdgeCache(
            max_entries=config.cache.max_entries,
            max_body_bytes=config.cache.max_body_bytes,
        )
        app.state.upstream_client = UpstreamClient(client, cache, header_builder)
        try:
            yield
        finally:
            await client.aclose()

    app = FastAPI(
        title="Egress Proxy",
        version=config.version,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    # Plain routes accept every method; the proxy handler answers 405 itself
    async def health(request: Request):
        return await handle_health(config)

    async def proxy(request: Request):
        return await handle_proxy(request, config, logger, header_builder)

    app.add_route("/health", health)
    app.add_route("/version", health)
    app.add_route("/{path:path}", proxy)

    return app
