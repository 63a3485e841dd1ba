"""Diagnostics and GraphQL error models."""

import json
from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from graphql_client_core.errors.exceptions import GraphQLClientError


class Severity(StrEnum):
    ERROR = "error"
    WARNING = "warning"


class DiagnosticKind(StrEnum):
    """Failure category a diagnostic belongs to."""

    ERROR = "error"
    CONFIGURATION = "configuration"
    TRANSPORT = "transport"
    AUTHENTICATION = "authentication"
    HTTP_STATUS = "http_status"
    DECODE = "decode"
    API = "api"
    PAGINATION = "pagination"
    CANCELLED = "cancelled"
    ENCODE = "encode"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class Diagnostic:
    """One human-readable failure description.

    ``summary`` names the resource, the operation and the reason; ``detail``
    carries the raw material needed to diagnose it (status code and response
    dump, the API error list, or the underlying exception text).
    """

    summary: str
    detail: str = ""
    kind: DiagnosticKind = DiagnosticKind.ERROR
    severity: Severity = Severity.ERROR

    @classmethod
    def from_exception(cls, exc: Exception) -> "Diagnostic":
        """Build a diagnostic from any exception.

        Exceptions from this library keep their category and detail; anything
        else is reported under the generic ``error`` kind.
        """
        if isinstance(exc, GraphQLClientError):
            return cls(summary=str(exc), detail=exc.detail, kind=DiagnosticKind(exc.kind))
        return cls(summary=str(exc) or type(exc).__name__, detail=repr(exc))

    def __str__(self) -> str:
        if self.detail:
            return f"{self.summary}: {self.detail}"
        return self.summary


class ErrorException(BaseModel):
    """``extensions.exception`` block some servers attach to an error."""

    model_config = ConfigDict(extra="allow")

    message: str | None = None
    path: list[str | int] | None = None


class ErrorExtensions(BaseModel):
    model_config = ConfigDict(extra="allow")

    code: str | None = None
    exception: ErrorException | None = None


class ErrorLocation(BaseModel):
    line: int
    column: int


class GraphQLError(BaseModel):
    """One entry of a GraphQL response ``errors`` list.

    Every member except ``message`` is optional; unknown members are kept.
    """

    model_config = ConfigDict(extra="allow")

    message: str = ""
    path: list[str | int] | None = None
    locations: list[ErrorLocation] | None = None
    extensions: ErrorExtensions | None = None

    @property
    def code(self) -> str | None:
        return self.extensions.code if self.extensions else None

    @property
    def exception_message(self) -> str | None:
        if self.extensions and self.extensions.exception:
            return self.extensions.exception.message
        return None


def format_errors(errors: list[GraphQLError]) -> str:
    """Render an error list as indented JSON for diagnostic detail."""
    return json.dumps([e.model_dump(exclude_none=True) for e in errors], indent=2)
