"""Shared protocol definitions."""

from typing import Protocol


class RequestLogger(Protocol):
    """Protocol for request logging (Dashboard, ConsoleLogger)."""

    def log_forward(
        self,
        target: str,
        status: int,
        *,
        cache_ttl: int | None = None,
        cache_hit: bool = False,
    ) -> None: ...
    def log_rejected(self, status: int, reason: str) -> None: ...
    def log_error(self, target: str, status: int, message: str) -> None: ...
