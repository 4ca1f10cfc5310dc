"""OAuth 1.0 request signing for httpx.

Implements HMAC-SHA1 signing as described in the OAuth Core 1.0 spec. The
storEDGE API uses it two-legged: only a consumer key and secret, no token.
"""

import base64
import hashlib
import hmac
import secrets
import time
from collections.abc import Callable, Generator, Iterable
from urllib.parse import parse_qsl, quote

import httpx

from ..logs import get_logger

logger = get_logger(__name__)

SIGNATURE_METHOD = "HMAC-SHA1"
OAUTH_VERSION = "1.0"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def percent_encode(value: object) -> str:
    """Percent-encode a value per RFC 3986 (only unreserved characters kept)."""
    return quote(str(value), safe="~")


def base_string_uri(url: httpx.URL) -> str:
    """Return the URL without query and fragment, scheme and host lowercased.

    The port is only included when it is not the default for the scheme.
    """
    scheme = url.scheme.lower()
    host = url.raw_host.decode("ascii").lower()
    path = url.raw_path.decode("ascii").split("?", 1)[0] or "/"
    if url.port is not None:
        host = f"{host}:{url.port}"
    return f"{scheme}://{host}{path}"


def normalize_parameters(params: Iterable[tuple[str, str]]) -> str:
    """Encode, sort by name then value, and join parameters with ``&``."""
    encoded = sorted((percent_encode(k), percent_encode(v)) for k, v in params)
    return "&".join(f"{k}={v}" for k, v in encoded)


def signature_base_string(
    method: str,
    url: httpx.URL,
    params: Iterable[tuple[str, str]],
) -> str:
    """Build the signature base string for a request.

    Args:
        method: HTTP method.
        url: Full request URL. Its query parameters are not read here; pass
            them in ``params``.
        params: All parameters to sign (oauth, query and form body).

    Returns:
        ``METHOD&encoded-uri&encoded-parameters``.
    """
    return "&".join(
        [
            method.upper(),
            percent_encode(base_string_uri(url)),
            percent_encode(normalize_parameters(params)),
        ],
    )


def hmac_sha1_signature(
    base_string: str,
    consumer_secret: str,
    token_secret: str = "",
) -> str:
    """Sign a base string with HMAC-SHA1 and return it base64 encoded."""
    key = f"{percent_encode(consumer_secret)}&{percent_encode(token_secret)}"
    digest = hmac.new(
        key.encode("utf-8"),
        base_string.encode("utf-8"),
        hashlib.sha1,
    ).digest()
    return base64.b64encode(digest).decode("ascii")


def _default_nonce() -> str:
    return secrets.token_hex(16)


class OAuth1Auth(httpx.Auth):
    """httpx authentication flow that signs each request with OAuth 1.0.

    A fresh nonce and timestamp are generated per request, so identical
    requests never share a signature. Query parameters and form-encoded body
    parameters are signed; JSON bodies are sent untouched and not signed.
    """

    requires_request_body = True

    def __init__(
        self,
        consumer_key: str,
        consumer_secret: str,
        token: str | None = None,
        token_secret: str = "",
        clock: Callable[[], float] = time.time,
        nonce_factory: Callable[[], str] = _default_nonce,
    ):
        """Initialize the signer.

        Args:
            consumer_key: OAuth consumer key (the storEDGE API key).
            consumer_secret: OAuth consumer secret (the storEDGE API secret).
            token: Optional access token for three-legged use.
            token_secret: Secret matching ``token``.
            clock: Returns the current Unix time; injectable for tests.
            nonce_factory: Returns a unique nonce; injectable for tests.
        """
        self.consumer_key = consumer_key
        self.consumer_secret = consumer_secret
        self.token = token
        self.token_secret = token_secret
        self._clock = clock
        self._nonce_factory = nonce_factory

    def oauth_parameters(self) -> dict[str, str]:
        """Return a fresh set of oauth protocol parameters (unsigned)."""
        params = {
            "oauth_consumer_key": self.consumer_key,
            "oauth_nonce": self._nonce_factory(),
            "oauth_signature_method": SIGNATURE_METHOD,
            "oauth_timestamp": str(int(self._clock())),
            "oauth_version": OAUTH_VERSION,
        }
        if self.token:
            params["oauth_token"] = self.token
        return params

    def sign(self, request: httpx.Request) -> dict[str, str]:
        """Compute the signed oauth parameters for a request.

        Returns:
            The oauth parameters including ``oauth_signature``.
        """
        oauth_params = self.oauth_parameters()
        params = list(oauth_params.items())
        params.extend(request.url.params.multi_items())

        content_type = request.headers.get("Content-Type", "")
        if content_type.startswith(FORM_CONTENT_TYPE) and request.content:
            params.extend(
                parse_qsl(request.content.decode("utf-8"), keep_blank_values=True),
            )

        base_string = signature_base_string(request.method, request.url, params)
        oauth_params["oauth_signature"] = hmac_sha1_signature(
            base_string,
            self.consumer_secret,
            self.token_secret,
        )
        return oauth_params

    def auth_flow(
        self,
        request: httpx.Request,
    ) -> Generator[httpx.Request, httpx.Response, None]:
        """Attach the OAuth ``Authorization`` header and send the request."""
        oauth_params = self.sign(request)
        request.headers["Authorization"] = "OAuth " + ", ".join(
            f'{percent_encode(k)}="{percent_encode(v)}"'
            for k, v in oauth_params.items()
        )
        logger.debug(
            "Signed request",
            method=request.method,
            nonce=oauth_params["oauth_nonce"],
            timestamp=oauth_params["oauth_timestamp"],
        )
        yield request
