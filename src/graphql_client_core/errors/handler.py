"""Error handling utilities for HTTP responses."""

import httpx

from graphql_client_core.errors.exceptions import HTTPStatusError

# Upper bound on the response dump carried in a diagnostic
MAX_DUMP_CHARS = 64 * 1024

MASKED_HEADERS = frozenset(["authorization", "proxy-authorization", "cookie", "set-cookie"])


def _dump_headers(headers: httpx.Headers) -> list[str]:
    lines = []
    for name, value in headers.multi_items():
        if name.lower() in MASKED_HEADERS:
            value = "***"
        lines.append(f"{name}: {value}")
    return lines


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return f"{text[:limit]}... [truncated {len(text) - limit} characters]"


def dump_request(request: httpx.Request, limit: int = MAX_DUMP_CHARS) -> str:
    """Render a request as wire-like text for debugging.

    Credential-bearing headers are masked.
    """
    lines = [f"{request.method} {request.url} HTTP/1.1", *_dump_headers(request.headers), ""]
    body = request.content.decode("utf-8", errors="replace") if request.content else ""
    return _truncate("\n".join(lines) + "\n" + body, limit)


def dump_response(response: httpx.Response, limit: int = MAX_DUMP_CHARS) -> str:
    """Render a received response as wire-like text for debugging."""
    lines = [
        f"{response.http_version} {response.status_code} {response.reason_phrase}".rstrip(),
        *_dump_headers(response.headers),
        "",
    ]
    return _truncate("\n".join(lines) + "\n" + response.text, limit)


def check_status(response: httpx.Response) -> None:
    """Raise HTTPStatusError unless the response status is exactly 200.

    The GraphQL endpoint signals success only with 200; any other status,
    including other 2xx codes, is a failure of the call.

    Args:
        response: HTTP response object

    Raises:
        HTTPStatusError: carrying the status code and the full response dump
    """
    if response.status_code == httpx.codes.OK:
        return

    status_code = response.status_code
    raise HTTPStatusError(
        f"HTTP Response ({status_code})",
        status_code=status_code,
        detail=f"Response: {dump_response(response)}",
        response=response,
    )
