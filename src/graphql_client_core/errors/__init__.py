"""Error taxonomy, GraphQL error models and diagnostics."""

from graphql_client_core.errors.exceptions import (
    AuthenticationError,
    ConfigurationError,
    DecodeError,
    EnvelopeError,
    GraphQLClientError,
    GraphQLResponseError,
    HTTPStatusError,
    NotPaginatedError,
    OperationCancelledError,
    OperationFailedError,
    TransportError,
    UnsupportedOperationError,
)
from graphql_client_core.errors.handler import check_status, dump_request, dump_response
from graphql_client_core.errors.models import (
    Diagnostic,
    DiagnosticKind,
    ErrorException,
    ErrorExtensions,
    GraphQLError,
    Severity,
    format_errors,
)

__all__ = [
    "AuthenticationError",
    "ConfigurationError",
    "DecodeError",
    "Diagnostic",
    "DiagnosticKind",
    "EnvelopeError",
    "ErrorException",
    "ErrorExtensions",
    "GraphQLClientError",
    "GraphQLError",
    "GraphQLResponseError",
    "HTTPStatusError",
    "NotPaginatedError",
    "OperationCancelledError",
    "OperationFailedError",
    "Severity",
    "TransportError",
    "UnsupportedOperationError",
    "check_status",
    "dump_request",
    "dump_response",
    "format_errors",
]
