"""Shared fixtures: a mock origin server and a configured proxy app."""

from collections import Counter

import brotli
import httpx
import pytest
import zstandard
from fastapi.testclient import TestClient

from app import create_app
from core.config import Config

SECRET = "local-dev-secret"
VERSION = "1.2.3-test"
ORIGIN = "http://origin.test"


class TrackedStream(httpx.AsyncByteStream):
    """Chunked body that records whether it was closed."""

    def __init__(self, chunks: list[bytes]):
        self.chunks = chunks
        self.closed = False

    async def __aiter__(self):
        for chunk in self.chunks:
            yield chunk

    async def aclose(self):
        self.closed = True


class OriginServer:
    """Origin reachable through httpx.MockTransport."""

    def __init__(self):
        self.hits: Counter[str] = Counter()
        self.requests: list[httpx.Request] = []
        self.streams: list[TrackedStream] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.hits[path] += 1
        self.requests.append(request)

        # Echo headers back as JSON
        if path == "/echo-headers":
            return httpx.Response(
                200,
                json={
                    "method": request.method,
                    "url": str(request.url),
                    "headers": dict(request.headers),
                },
            )

        # Respond with Retry-After for rate limit testing
        if path == "/rate-limited":
            return httpx.Response(429, headers={"Retry-After": "120"}, text="slow down")

        if path == "/binary":
            return httpx.Response(200, content=b"\x00\xffbinary\r\n\x7f")

        if path == "/chunked":
            stream = TrackedStream([b"first,", b"second,", b"third"])
            self.streams.append(stream)
            return httpx.Response(200, headers={"Content-Type": "text/csv"}, stream=stream)

        if path == "/compressed":
            encoding = request.headers.get("accept-encoding", "")
            if encoding == "br":
                return httpx.Response(
                    200,
                    headers={"Content-Encoding": "br", "Content-Type": "text/plain"},
                    content=brotli.compress(b"ok-compressed"),
                )
            if encoding == "zstd":
                return httpx.Response(
                    200,
                    headers={"Content-Encoding": "zstd", "Content-Type": "text/plain"},
                    content=zstandard.ZstdCompressor().compress(b"ok-compressed"),
                )
            return httpx.Response(200, headers={"Content-Type": "text/plain"}, content=b"ok-compressed")

        if path == "/teapot":
            return httpx.Response(418, extensions={"reason_phrase": b"Short And Stout"}, text="tea")

        if path == "/unreachable":
            raise httpx.ConnectError("Connection refused", request=request)

        if path == "/counter":
            return httpx.Response(200, text=f"hit {self.hits[path]}")

        return httpx.Response(200, text="ok")


class RecordingLogger:
    """RequestLogger that keeps every event for assertions."""

    def __init__(self):
        self.forwarded: list[tuple[str, int, int | None, bool]] = []
        self.rejected: list[tuple[int, str]] = []
        self.errors: list[tuple[str, int, str]] = []

    def log_forward(self, target, status, *, cache_ttl=None, cache_hit=False):
        self.forwarded.append((target, status, cache_ttl, cache_hit))

    def log_rejected(self, status, reason):
        self.rejected.append((status, reason))

    def log_error(self, target, status, message):
        self.errors.append((target, status, message))


@pytest.fixture(autouse=True)
def _no_env_secret(monkeypatch):
    monkeypatch.delenv("PROXY_SECRET", raising=False)


@pytest.fixture
def config():
    return Config(secret=SECRET, version=VERSION)


@pytest.fixture
def origin():
    return OriginServer()


@pytest.fixture
def logger():
    return RecordingLogger()


@pytest.fixture
def client(config, logger, origin):
    app = create_app(config, logger, transport=httpx.MockTransport(origin))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    return {"X-Proxy-Secret": SECRET}
