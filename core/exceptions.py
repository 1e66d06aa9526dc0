"""Custom exception hierarchy for the egress proxy."""


class ProxyError(Exception):
    """Base exception for all proxy errors."""


class ConfigurationError(ProxyError):
    """Raised when configuration is missing or invalid."""


class InvalidTargetURL(ProxyError):
    """Raised when the `url` query parameter is not an absolute URL.

    Attributes:
        raw: The value received in the query string
    """

    def __init__(self, raw: str, reason: str = "") -> None:
        super().__init__(f"Invalid target URL: {raw!r}" + (f" ({reason})" if reason else ""))
        self.raw = raw
