"""Structured exceptions for GraphQL client failures.

Each exception class corresponds to one failure category. The public entry
points convert them into :class:`~graphql_client_core.errors.models.Diagnostic`
values, so callers normally see diagnostics rather than these exceptions.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

    from graphql_client_core.errors.models import Diagnostic, GraphQLError


class GraphQLClientError(Exception):
    """Base exception for GraphQL client errors."""

    kind = "error"

    def __init__(self, message: str, detail: str = ""):
        super().__init__(message)
        self.detail = detail


class ConfigurationError(GraphQLClientError):
    """Invalid configuration value."""

    kind = "configuration"


class TransportError(GraphQLClientError):
    """Connection, TLS or network failure after transport retries."""

    kind = "transport"


class AuthenticationError(GraphQLClientError):
    """Token endpoint rejected the credentials or returned an unusable body."""

    kind = "authentication"

    def __init__(self, message: str, detail: str = "", diagnostics: "list[Diagnostic] | None" = None):
        super().__init__(message, detail)
        self.diagnostics = diagnostics if diagnostics is not None else []


class HTTPStatusError(GraphQLClientError):
    """API endpoint answered with a status other than 200."""

    kind = "http_status"

    def __init__(
        self,
        message: str,
        status_code: int,
        detail: str = "",
        response: "httpx.Response | None" = None,
    ):
        super().__init__(message, detail)
        self.status_code = status_code
        self.response = response


class DecodeError(GraphQLClientError):
    """Response body is not valid JSON or does not fit the destination type."""

    kind = "decode"


class GraphQLResponseError(GraphQLClientError):
    """Response carried a non-empty ``errors`` list."""

    kind = "api"

    def __init__(self, message: str, errors: "list[GraphQLError]", detail: str = ""):
        super().__init__(message, detail)
        self.errors = errors


class NotPaginatedError(GraphQLClientError):
    """Payload type exposes no page-info structure."""

    kind = "pagination"


class OperationCancelledError(GraphQLClientError):
    """Call was cancelled or its deadline passed."""

    kind = "cancelled"


class EnvelopeError(GraphQLClientError):
    """Operation variables could not be serialized."""

    kind = "encode"


class UnsupportedOperationError(GraphQLClientError):
    """Operation kind is not valid for the requested call."""

    kind = "unsupported"


class OperationFailedError(GraphQLClientError):
    """Raised on demand from a result whose diagnostics are not empty."""

    def __init__(self, diagnostics: "list[Diagnostic]"):
        summary = diagnostics[0].summary if diagnostics else "operation failed"
        super().__init__(summary, "\n".join(d.detail for d in diagnostics if d.detail))
        self.diagnostics = diagnostics
