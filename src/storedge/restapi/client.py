"""storEDGE REST API client.

Provides an HTTP client with OAuth 1.0 request signing, one method per API
endpoint, and uniform decoding of JSON responses into ``ApiResponse``.
"""

import time
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, TypeAlias

import httpx

from ..lazy import LockedLazy
from ..logs import get_logger
from .auth import OAuth1Auth
from .errors import ConfigurationError, DecodeError, TransportError
from .types import ApiResponse, QueryOptions

if TYPE_CHECKING:
    from ..config import ClientConfig

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 10.0

Options: TypeAlias = Mapping[str, Any] | QueryOptions | None
Body: TypeAlias = Mapping[str, Any]


def build_query(options: Mapping[str, Any] | QueryOptions) -> str:
    """Build a query string suffix from options.

    Values are inserted as given, without percent-encoding, in the mapping's
    iteration order. Duplicate handling is left to the caller.

    Args:
        options: Mapping of parameter names to values, or ``QueryOptions``.

    Returns:
        ``"?k1=v1&k2=v2"``, or ``""`` when there are no options.
    """
    if isinstance(options, QueryOptions):
        options = options.to_params()
    if not options:
        return ""
    return "?" + "&".join(f"{key}={value}" for key, value in options.items())


def _query(options: Options) -> str:
    return "" if options is None else build_query(options)


class StoredgeClient:
    """HTTP client for the storEDGE REST API.

    Every endpoint method maps to exactly one HTTP request and returns an
    ``ApiResponse``. HTTP error statuses are returned, not raised, since the
    API reports some failures as 200 with an error payload and others as
    4xx with a structured body. Transport failures raise ``TransportError``
    and undecodable bodies raise ``DecodeError``. Nothing is retried.

    The underlying ``httpx.Client`` is built on first use and shared by all
    threads. Can be used as a context manager for automatic cleanup.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        api_secret: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the REST API client.

        Args:
            base_url: Base URL including the version prefix
                (e.g., "https://api.storedgefms.com/v1/").
            api_key: API access key, used as the OAuth consumer key.
            api_secret: API secret, used as the OAuth consumer secret.
            timeout: Request timeout in seconds (default: 10.0).
            transport: Optional httpx transport, mainly for tests.

        Raises:
            ConfigurationError: If a credential or the base URL is empty, or
                timeout is not positive.
        """
        if not base_url:
            msg = "base_url cannot be empty"
            raise ConfigurationError(msg)
        if not api_key:
            msg = "api_key cannot be empty"
            raise ConfigurationError(msg)
        if not api_secret:
            msg = "api_secret cannot be empty"
            raise ConfigurationError(msg)
        if not isinstance(timeout, (int, float)) or timeout <= 0:
            msg = "timeout must be positive"
            raise ConfigurationError(msg)

        # Relative endpoint paths resolve against the last path segment
        self.base_url = base_url.rstrip("/") + "/"
        self.api_key = api_key
        self.api_secret = api_secret
        self.timeout = timeout
        self._transport = transport

        self._client: LockedLazy[httpx.Client] = LockedLazy(self._make_client)

    @classmethod
    def from_config(
        cls,
        config: "ClientConfig",
        transport: httpx.BaseTransport | None = None,
    ) -> "StoredgeClient":
        """Create a client from a validated ``ClientConfig``."""
        return cls(
            base_url=config.base_url,
            api_key=config.api_key,
            api_secret=config.api_secret,
            timeout=config.timeout,
            transport=transport,
        )

    def _make_client(self) -> httpx.Client:
        logger.debug("Creating HTTP client", base_url=self.base_url)
        return httpx.Client(
            base_url=self.base_url,
            headers={"Accept": "application/json"},
            timeout=self.timeout,
            auth=OAuth1Auth(self.api_key, self.api_secret),
            transport=self._transport,
        )

    def get_transport(self) -> httpx.Client:
        """Get or create the shared, OAuth-signing httpx client.

        Returns:
            The httpx.Client used for every request from this instance.
        """
        return self._client.get()

    def __enter__(self):
        """Enter context manager."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager and cleanup resources."""
        self.close()

    def close(self):
        """Close the HTTP client if it was created.

        Later requests raise ``TransportError``; the client is not rebuilt.
        """
        client = self._client.peek()
        if client is not None and not client.is_closed:
            client.close()

    # ------------------------------------------------------------------
    # Request pipeline
    # ------------------------------------------------------------------

    def _request(
        self,
        method: str,
        path: str,
        body: Body | None = None,
    ) -> ApiResponse:
        """Make a signed HTTP request and decode the JSON response.

        Args:
            method: HTTP method.
            path: Endpoint path relative to the base URL, optionally with a
                query string, or an absolute URL.
            body: JSON body. ``None`` sends no body at all.

        Returns:
            The decoded response with its status code.

        Raises:
            TransportError: If the request could not be completed.
            DecodeError: If the response body is not valid JSON.
        """
        # Leading dots and slashes would escape the base URL's path prefix
        path = path.lstrip("./")
        url = path if "://" in path else self.base_url + path

        client = self.get_transport()
        if client.is_closed:
            msg = f"{method} {path} failed: client has been closed"
            raise TransportError(msg, method=method, url=url)

        start_time = time.time()
        try:
            logger.debug(
                "Making API request",
                method=method,
                path=path,
                has_body=body is not None,
            )
            if body is None:
                response = client.request(method, path)
            else:
                response = client.request(method, path, json=body)
        except httpx.HTTPError as exc:
            duration = time.time() - start_time
            logger.debug(
                "API request failed",
                method=method,
                path=path,
                error=repr(exc),
                duration_seconds=round(duration, 3),
            )
            msg = f"{method} {path} failed: {exc!r}"
            raise TransportError(msg, method=method, url=url) from exc

        duration = time.time() - start_time
        logger.debug(
            "API request completed",
            method=method,
            path=path,
            status_code=response.status_code,
            duration_seconds=round(duration, 3),
        )

        if not response.content:
            data = None
        else:
            try:
                data = response.json()
            except ValueError as exc:
                msg = (
                    f"{method} {path} returned a non-JSON body "
                    f"(HTTP {response.status_code})"
                )
                raise DecodeError(
                    msg,
                    raw_body=response.text,
                    status_code=response.status_code,
                ) from exc

        return ApiResponse(
            status_code=response.status_code,
            body=data,
            headers=httpx.Headers(response.headers),
        )

    def _get(self, path: str) -> ApiResponse:
        return self._request("GET", path)

    def _post(self, path: str, body: Body) -> ApiResponse:
        return self._request("POST", path, body)

    def _put(self, path: str, body: Body) -> ApiResponse:
        return self._request("PUT", path, body)

    def _patch(self, path: str, body: Body) -> ApiResponse:
        return self._request("PATCH", path, body)

    def _delete(self, path: str, body: Body | None = None) -> ApiResponse:
        return self._request("DELETE", path, body)

    # ------------------------------------------------------------------
    # Facility
    # ------------------------------------------------------------------

    def get_facility_info(self, facility_id: str) -> ApiResponse:
        """Fetch general information about a facility."""
        return self._get(f"{facility_id}/info")

    # ------------------------------------------------------------------
    # Leads
    # ------------------------------------------------------------------

    def get_leads(self, facility_id: str, options: Options = None) -> ApiResponse:
        """List a facility's leads.

        Args:
            facility_id: Facility UUID.
            options: Optional query parameters (pagination, filters).
        """
        return self._get(f"{facility_id}/leads{_query(options)}")

    def create_lead(self, facility_id: str, data: Body) -> ApiResponse:
        """Create a lead (reservation or inquiry)."""
        return self._post(f"{facility_id}/leads", data)

    def delete_lead(
        self,
        facility_id: str,
        lead_id: str,
        data: Body | None = None,
    ) -> ApiResponse:
        """Close a lead.

        Args:
            facility_id: Facility UUID.
            lead_id: Lead UUID.
            data: Optional body, e.g. ``{"lead": {"close_reason_id": ...,
                "note": ...}}``. Without it the request carries no body.
        """
        return self._delete(f"{facility_id}/leads/{lead_id}", data)

    # ------------------------------------------------------------------
    # Tenants
    # ------------------------------------------------------------------

    def sign_up_tenant(
        self,
        facility_id: str,
        tenant_id: str,
        data: Body,
    ) -> ApiResponse:
        """Create online account credentials for an existing tenant."""
        return self._post(f"{facility_id}/tenants/{tenant_id}/sign_up", data)

    def sign_in_tenant(self, facility_id: str, data: Body) -> ApiResponse:
        """Authenticate a tenant by username and password."""
        return self._post(f"{facility_id}/tenants/sign_in", data)

    def change_tenant_password(
        self,
        facility_id: str,
        tenant_id: str,
        data: Body,
    ) -> ApiResponse:
        """Change a tenant's password (current and new password in body)."""
        return self._put(f"{facility_id}/tenants/{tenant_id}/change_password", data)

    def update_tenant_put(
        self,
        facility_id: str,
        tenant_id: str,
        data: Body,
    ) -> ApiResponse:
        """Replace a tenant record (PUT, full replacement)."""
        return self._put(f"{facility_id}/tenants/{tenant_id}", data)

    def update_tenant_patch(
        self,
        facility_id: str,
        tenant_id: str,
        data: Body,
    ) -> ApiResponse:
        """Update selected tenant fields (PATCH, partial update)."""
        return self._patch(f"{facility_id}/tenants/{tenant_id}", data)

    # ------------------------------------------------------------------
    # Unit groups
    # ------------------------------------------------------------------

    def get_unit_groups(self, facility_id: str, options: Options = None) -> ApiResponse:
        """List a facility's unit groups."""
        return self._get(f"{facility_id}/unit_groups{_query(options)}")

    def get_unit_group(
        self,
        facility_id: str,
        unit_group_id: str,
        options: Options = None,
    ) -> ApiResponse:
        """Fetch a single unit group."""
        return self._get(f"{facility_id}/unit_groups/{unit_group_id}{_query(options)}")

    def get_unit_group_units(
        self,
        facility_id: str,
        unit_group_id: str,
        options: Options = None,
    ) -> ApiResponse:
        """List the units belonging to a unit group."""
        return self._get(
            f"{facility_id}/unit_groups/{unit_group_id}/units{_query(options)}",
        )

    # ------------------------------------------------------------------
    # Units
    # ------------------------------------------------------------------

    def get_units(self, facility_id: str, options: Options = None) -> ApiResponse:
        """List a facility's units.

        Args:
            facility_id: Facility UUID.
            options: Optional query parameters,
                e.g. ``{"per_page": "2", "page": "2"}``.
        """
        return self._get(f"{facility_id}/units{_query(options)}")

    def get_available_units(
        self,
        facility_id: str,
        options: Options = None,
    ) -> ApiResponse:
        """List units currently available to rent."""
        return self._get(f"{facility_id}/units/available{_query(options)}")

    def get_unit(
        self,
        facility_id: str,
        unit_id: str,
        options: Options = None,
    ) -> ApiResponse:
        """Fetch a single unit."""
        return self._get(f"{facility_id}/units/{unit_id}{_query(options)}")

    # ------------------------------------------------------------------
    # Discount plans
    # ------------------------------------------------------------------

    def get_discount_plan(
        self,
        facility_id: str,
        discount_plan_id: str,
        options: Options = None,
    ) -> ApiResponse:
        """Fetch a single discount plan."""
        return self._get(
            f"{facility_id}/discount_plans/{discount_plan_id}{_query(options)}",
        )

    # ------------------------------------------------------------------
    # Move-ins
    # ------------------------------------------------------------------

    def process_move_in(self, facility_id: str, data: Body) -> ApiResponse:
        """Move a tenant into a unit."""
        return self._post(f"{facility_id}/move_ins", data)

    def review_move_in_cost(
        self,
        facility_id: str,
        data: Body,
        url: str | None = None,
    ) -> ApiResponse:
        """Preview the charges of a move-in without performing it.

        Document generation is always disabled for a cost review: the body
        is sent with ``should_generate_documents`` set to ``False``,
        whatever the caller passed. ``data`` itself is not modified.

        Args:
            facility_id: Facility UUID. Ignored when ``url`` is given.
            data: Move-in body.
            url: Optional URL to post to instead of the default path, used
                verbatim (absolute, or relative to the base URL).
        """
        body = {**data, "should_generate_documents": False}
        path = url if url is not None else f"{facility_id}/move_ins/review_cost"
        return self._post(path, body)

    # ------------------------------------------------------------------
    # Facility add-ons
    # ------------------------------------------------------------------

    def get_insurance_policies(self, facility_id: str) -> ApiResponse:
        """List the insurance policies offered by a facility."""
        return self._get(f"{facility_id}/insurance_policies")

    def get_generic_services(self, facility_id: str) -> ApiResponse:
        """List the generic services offered by a facility."""
        return self._get(f"{facility_id}/generic_services")

    def get_rental_center_invoiceable_items(self, facility_id: str) -> ApiResponse:
        """List the items that can be invoiced through the rental center."""
        return self._get(f"{facility_id}/invoiceable_items/rental_center")
