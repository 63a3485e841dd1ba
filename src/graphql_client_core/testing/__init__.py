"""Testing utilities for GraphQL clients.

Canned responses and a recording handler for ``httpx.MockTransport``, so
client code can be tested without a server.

Example:
    ```python
    import httpx

    from graphql_client_core import GraphQLClient
    from graphql_client_core.testing import RecordingHandler, graphql_response, make_settings, token_response


    def test_reads_user():
        handler = RecordingHandler([token_response(), graphql_response({"user": {"id": "1"}})])
        client = GraphQLClient.connect(make_settings(), transport=httpx.MockTransport(handler))
        ...
        assert handler.requests[1].headers["Authorization"] == "Bearer test-token"
    ```
"""

import json
from collections.abc import Callable, Iterable
from typing import Any

import httpx

from graphql_client_core.config import Settings

TEST_API_URL = "https://api.example.com/graphql"
TEST_AUTH_URL = "https://auth.example.com/oauth/token"

Responder = httpx.Response | Callable[[httpx.Request], httpx.Response]


def graphql_response(
    data: Any = None,
    errors: list[dict[str, Any]] | None = None,
    status_code: int = 200,
    headers: dict[str, str] | None = None,
) -> httpx.Response:
    """Create a GraphQL response with ``data`` and optional ``errors`` members."""
    payload: dict[str, Any] = {"data": data}
    if errors is not None:
        payload["errors"] = errors
    return httpx.Response(status_code, json=payload, headers=headers)


def token_response(
    access_token: str = "test-token",
    token_type: str = "Bearer",
    expires_in: int | None = 3600,
    status_code: int = 200,
) -> httpx.Response:
    """Create a token endpoint success body."""
    payload: dict[str, Any] = {"access_token": access_token, "token_type": token_type}
    if expires_in is not None:
        payload["expires_in"] = expires_in
    return httpx.Response(status_code, json=payload)


def request_json(request: httpx.Request) -> Any:
    """Decode the JSON body of a recorded request."""
    return json.loads(request.content)


class RecordingHandler:
    """MockTransport handler replaying queued responses and recording requests.

    Each queued item is either a response or a callable taking the request.
    Requests beyond the queue fail the test with an AssertionError.
    """

    def __init__(self, responses: Iterable[Responder] = ()):
        self._responses = list(responses)
        self.requests: list[httpx.Request] = []

    def add(self, response: Responder) -> "RecordingHandler":
        self._responses.append(response)
        return self

    @property
    def pending(self) -> int:
        return len(self._responses)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        if not self._responses:
            raise AssertionError(f"Unexpected request {request.method} {request.url}")
        response = self._responses.pop(0)
        if callable(response):
            return response(request)
        return response


def make_settings(**overrides: Any) -> Settings:
    """Settings pointing at example URLs, with retries that never sleep."""
    values: dict[str, Any] = {
        "api_url": TEST_API_URL,
        "auth_url": TEST_AUTH_URL,
        "client_id": "test-client-id",
        "client_secret": "test-client-secret",
        "audience": "test-audience",
        "retry_max": 2,
        "retry_wait_min": 0.0,
        "retry_wait_max": 0.0,
    }
    values.update(overrides)
    return Settings(**values)


__all__ = [
    "TEST_API_URL",
    "TEST_AUTH_URL",
    "RecordingHandler",
    "graphql_response",
    "make_settings",
    "request_json",
    "token_response",
]
