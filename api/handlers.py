"""FastAPI route handlers."""

from fastapi import Request, Response
from fastapi.responses import JSONResponse, StreamingResponse

from auth import SECRET_HEADER, secret_matches
from core.config import Config
from core.exceptions import InvalidTargetURL
from core.headers import HeaderBuilder
from core.params import parse_cache_ttl, parse_target
from core.protocols import RequestLogger
from ui.log_utils import write_incoming_log


def _reject(logger: RequestLogger, status_code: int, reason: str) -> Response:
    logger.log_rejected(status_code, reason)
    return Response(content=reason, status_code=status_code, media_type="text/plain")


async def handle_health(config: Config) -> JSONResponse:
    """Handle /health and /version."""
    return JSONResponse({"version": config.version, "ok": True})


async def handle_proxy(
    request: Request,
    config: Config,
    logger: RequestLogger,
    header_builder: HeaderBuilder,
) -> Response | StreamingResponse:
    """Authenticate, validate and forward a request to its `url` parameter."""
    if request.method != "GET":
        return _reject(logger, 405, "Method not allowed")

    if not secret_matches(request.headers.get(SECRET_HEADER), config.secret):
        return _reject(logger, 401, "Unauthorized")

    raw_url = request.query_params.get("url")
    if not raw_url:
        return _reject(logger, 400, "Missing url parameter")

    try:
        target = parse_target(raw_url)
    except InvalidTargetURL:
        return _reject(logger, 400, "Invalid target URL")

    headers = header_builder.build_forward_headers(request.headers.items(), target.host)
    cache_ttl = parse_cache_ttl(request.query_params.get("cacheTtl"))

    if config.proxy.debug:
        write_incoming_log(
            request.method,
            request.url.path,
            dict(request.headers),
            dict(request.query_params),
        )

    upstream = request.app.state.upstream_client
    return await upstream.forward(target, headers, cache_ttl, config.version, logger)
