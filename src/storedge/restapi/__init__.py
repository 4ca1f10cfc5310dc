"""storEDGE REST API client package.

Provides a thin HTTP client for the storEDGE facility management API. Every
request is signed with two-legged OAuth 1.0 and every response is decoded
into an ``ApiResponse`` carrying the JSON body and HTTP status.

Exports:
    StoredgeClient: HTTP client with one method per API endpoint.
    OAuth1Auth: httpx authentication flow performing OAuth 1.0 signing.
    ApiResponse: Decoded response with status code.
    QueryOptions: Structured query parameters for list endpoints.
    build_query: Query string builder used by the endpoint methods.
    DEFAULT_TIMEOUT: Default HTTP request timeout.
    Error types: StoredgeError and its subclasses.
"""

from .auth import OAuth1Auth
from .client import DEFAULT_TIMEOUT, StoredgeClient, build_query
from .errors import (
    ConfigurationError,
    DecodeError,
    HttpStatusError,
    StoredgeError,
    TransportError,
)
from .types import ApiResponse, QueryOptions

__all__ = [
    "DEFAULT_TIMEOUT",
    "ApiResponse",
    "ConfigurationError",
    "DecodeError",
    "HttpStatusError",
    "OAuth1Auth",
    "QueryOptions",
    "StoredgeClient",
    "StoredgeError",
    "TransportError",
    "build_query",
]
