"""Request and response types for the storEDGE REST API.

``QueryOptions`` names the query parameters the API documents for its list
endpoints while still accepting any other key. ``ApiResponse`` is what every
request returns: the decoded body together with its HTTP status.
"""

from dataclasses import dataclass, field
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict

from .errors import HttpStatusError


class QueryOptions(BaseModel):
    """Query parameters for list and lookup endpoints.

    Unset fields are left out of the query string. Unknown keyword arguments
    are kept as extra parameters, after the declared ones.
    """

    model_config = ConfigDict(extra="allow")

    # Pagination
    page: int | None = None
    per_page: int | None = None

    # Field selection
    fields: str | None = None

    # Date filters (YYYY-MM-DD or ISO 8601, passed through as given)
    start_date: str | None = None
    end_date: str | None = None
    updated_since: str | None = None

    def to_params(self) -> dict[str, Any]:
        """Return the set parameters in declaration order, extras last."""
        return self.model_dump(exclude_none=True)


@dataclass(frozen=True)
class ApiResponse:
    """Decoded API response.

    ``body`` is the decoded JSON value, or ``None`` when the server sent an
    empty body. ``headers`` keeps repeated header values apart
    (``headers.get_list(name)``). Error statuses are returned like any other; use ``ok`` or
    ``raise_for_status`` to tell them apart.
    """

    status_code: int
    body: Any = None
    headers: httpx.Headers = field(default_factory=httpx.Headers)

    @property
    def ok(self) -> bool:
        """True for 2xx responses."""
        return 200 <= self.status_code < 300  # noqa: PLR2004

    def raise_for_status(self) -> "ApiResponse":
        """Raise ``HttpStatusError`` unless the response is 2xx.

        Returns:
            The response itself, so calls can be chained.

        Raises:
            HttpStatusError: If the status code is outside 200-299.
        """
        if not self.ok:
            msg = f"API responded with HTTP {self.status_code}: {self.body!r}"
            raise HttpStatusError(msg, status_code=self.status_code, body=self.body)
        return self
