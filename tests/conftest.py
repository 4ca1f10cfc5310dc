"""Shared fixtures: a StoredgeClient wired to an in-memory httpx transport."""

import json
from collections.abc import Callable
from urllib.parse import unquote

import httpx
import pytest

from storedge.restapi import StoredgeClient

BASE_URL = "https://api.example.com/v1"
API_KEY = "test-key"
API_SECRET = "test-secret"


class RecordingHandler:
    """MockTransport handler that records requests and returns a canned response."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.respond: Callable[[httpx.Request], httpx.Response] = lambda _: (
            httpx.Response(200, json={"ok": True})
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.respond(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def relative_target(request: httpx.Request) -> str:
    """Path and query of a request relative to the normalized base URL."""
    return str(request.url).removeprefix(BASE_URL + "/")


def json_body(request: httpx.Request):
    """Decode a recorded request's JSON body."""
    return json.loads(request.content)


def parse_oauth_header(value: str) -> dict[str, str]:
    """Split an ``Authorization: OAuth ...`` header into decoded parameters."""
    assert value.startswith("OAuth ")
    params = {}
    for part in value.removeprefix("OAuth ").split(", "):
        key, _, quoted = part.partition("=")
        params[unquote(key)] = unquote(quoted.strip('"'))
    return params


@pytest.fixture
def handler() -> RecordingHandler:
    """Request recorder answering 200 with a small JSON object by default."""
    return RecordingHandler()


@pytest.fixture
def api_client(handler: RecordingHandler):
    """StoredgeClient whose requests go to the recording handler."""
    with StoredgeClient(
        base_url=BASE_URL,
        api_key=API_KEY,
        api_secret=API_SECRET,
        transport=httpx.MockTransport(handler),
    ) as client:
        yield client
