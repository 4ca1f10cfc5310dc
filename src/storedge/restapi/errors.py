"""Error types raised by the storEDGE REST API client.

HTTP status codes are not errors at this layer: responses are always decoded
and handed back with their status. Only configuration problems, transport
failures and undecodable bodies raise.
"""

from typing import Any


class StoredgeError(Exception):
    """Base class for all client errors."""


class ConfigurationError(StoredgeError, ValueError):
    """Raised when the client is constructed with missing or invalid settings."""


class TransportError(StoredgeError):
    """Raised when a request cannot be completed (network, timeout, TLS, DNS).

    The originating ``httpx.HTTPError`` is available as ``__cause__``.
    """

    def __init__(self, message: str, method: str, url: str):
        super().__init__(message)
        self.method = method
        self.url = url


class DecodeError(StoredgeError):
    """Raised when a response body is not valid JSON."""

    def __init__(self, message: str, raw_body: str, status_code: int):
        super().__init__(message)
        self.raw_body = raw_body
        self.status_code = status_code


class HttpStatusError(StoredgeError):
    """Raised by ``ApiResponse.raise_for_status`` for non-2xx responses."""

    def __init__(self, message: str, status_code: int, body: Any):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
