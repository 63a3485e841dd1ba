"""Single request/response round trips against the GraphQL endpoint.

A round trip never raises for runtime failures: every failure path yields a
non-empty diagnostics list and no data. Nothing is cached; two calls with the
same inputs make two requests.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Generic, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from graphql_client_core.envelope import Operation, build_envelope
from graphql_client_core.errors.exceptions import (
    DecodeError,
    EnvelopeError,
    GraphQLClientError,
    GraphQLResponseError,
    OperationCancelledError,
    OperationFailedError,
    TransportError,
)
from graphql_client_core.errors.handler import check_status, dump_request, dump_response
from graphql_client_core.errors.models import Diagnostic, DiagnosticKind, GraphQLError, format_errors
from graphql_client_core.transport.retry import CALL_CONTEXT_EXTENSION

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CallContext:
    """Deadline and cancellation signal bound to one call.

    Attributes:
        deadline: ``time.monotonic()`` value after which the call is abandoned.
        cancel_event: Event another thread sets to cancel the call.
    """

    deadline: float | None = None
    cancel_event: threading.Event | None = None

    @classmethod
    def with_timeout(cls, seconds: float, cancel_event: threading.Event | None = None) -> "CallContext":
        return cls(deadline=time.monotonic() + seconds, cancel_event=cancel_event)

    def remaining(self) -> float | None:
        if self.deadline is None:
            return None
        return max(self.deadline - time.monotonic(), 0.0)

    @property
    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    @property
    def cancelled(self) -> bool:
        return (self.cancel_event is not None and self.cancel_event.is_set()) or self.expired

    def raise_if_cancelled(self, detail: str = "") -> None:
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise OperationCancelledError("Operation cancelled", detail=detail)
        if self.expired:
            raise OperationCancelledError("Operation deadline exceeded", detail=detail)


NO_CONTEXT = CallContext()


@dataclass
class ExecutionResult(Generic[T]):
    """Decoded data of one operation plus its diagnostics.

    ``data`` is None whenever ``diagnostics`` is not empty.
    """

    data: T | None = None
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics

    def raise_for_diagnostics(self) -> T:
        """Return the data, or raise OperationFailedError if the call failed."""
        if self.diagnostics:
            raise OperationFailedError(self.diagnostics)
        return self.data


class _ResponseEnvelope(BaseModel):
    data: Any = None
    errors: list[GraphQLError] | None = None


@lru_cache(maxsize=256)
def _cached_adapter(destination: Any) -> TypeAdapter:
    return TypeAdapter(destination)


def _adapter(destination: Any) -> TypeAdapter:
    try:
        hash(destination)
    except TypeError:
        # Unhashable, such as Annotated metadata holding a dict
        return TypeAdapter(destination)
    return _cached_adapter(destination)


def decode_data(destination: type[T], data: Any) -> T:
    """Validate the ``data`` member of a response into ``destination``.

    Raises:
        DecodeError: If the data does not fit the destination type.
    """
    try:
        return _adapter(destination).validate_python(data)
    except ValidationError as e:
        name = getattr(destination, "__name__", repr(destination))
        raise DecodeError(f"Unable to decode response data into {name}", detail=str(e)) from e


def _label(resource: str, operation: str) -> str:
    return " ".join(part for part in (resource, operation) if part)


def labelled_diagnostic(exc: GraphQLClientError, resource: str, operation: str) -> Diagnostic:
    diagnostic = Diagnostic.from_exception(exc)
    label = _label(resource, operation)
    if not label or diagnostic.kind is DiagnosticKind.API:
        return diagnostic
    return Diagnostic(summary=f"{label}: {diagnostic.summary}", detail=diagnostic.detail, kind=diagnostic.kind)


def _send(client: httpx.Client, request: httpx.Request, context: CallContext) -> httpx.Response:
    try:
        return client.send(request)
    except httpx.HTTPError as e:
        # Whatever failed once the call was abandoned is reported as the cancellation
        context.raise_if_cancelled(detail=f"{type(e).__name__}: {e}")
        if isinstance(e, httpx.TimeoutException):
            raise TransportError(f"Request to {request.url} timed out", detail=str(e)) from e
        raise TransportError(f"Request to {request.url} failed", detail=f"{type(e).__name__}: {e}") from e


def _round_trip(
    client: httpx.Client,
    url: str,
    body: bytes,
    *,
    authorization: str,
    user_agent: str,
    destination: type[T],
    resource: str,
    operation: str,
    context: CallContext,
) -> T:
    context.raise_if_cancelled()

    remaining = context.remaining()
    request = client.build_request(
        "POST",
        url,
        content=body,
        headers={
            "User-Agent": user_agent,
            "Authorization": authorization,
            "Content-Type": "application/json",
        },
        timeout=remaining if remaining is not None else httpx.USE_CLIENT_DEFAULT,
        extensions={CALL_CONTEXT_EXTENSION: context},
    )
    logger.debug(f"{resource} {operation} request: {dump_request(request)}")

    response = _send(client, request, context)
    # A result that arrives after cancellation is discarded
    context.raise_if_cancelled()
    logger.debug(f"{resource} {operation} api response: {dump_response(response)}")

    check_status(response)

    try:
        payload = response.json()
    except ValueError as e:
        raise DecodeError(
            "Unable to decode response body as JSON",
            detail=f"{e}\nResponse: {dump_response(response)}",
        ) from e

    try:
        envelope = _ResponseEnvelope.model_validate(payload)
    except ValidationError as e:
        raise DecodeError("Response body is not a GraphQL response", detail=str(e)) from e

    errors = envelope.errors or []
    logger.debug(f"Error count: {len(errors)}")
    if errors:
        raise GraphQLResponseError(
            f"{_label(resource, operation) or 'operation'} reported errors",
            errors=errors,
            detail=f"Response: {format_errors(errors)}",
        )

    if envelope.data is None:
        raise DecodeError("Response carried no data")

    data = decode_data(destination, envelope.data)
    logger.debug(f"Wrote data: {type(data).__name__}")
    return data


def round_trip(
    client: httpx.Client,
    url: str,
    body: bytes,
    *,
    authorization: str,
    user_agent: str,
    destination: type[T],
    resource: str = "",
    operation: str = "",
    context: CallContext | None = None,
) -> tuple[T | None, list[Diagnostic]]:
    """Send one serialized envelope and decode the response.

    Args:
        client: HTTP client, normally from ``create_http_client``.
        url: GraphQL endpoint.
        body: Serialized envelope from ``build_envelope``.
        authorization: Full ``Authorization`` header value.
        user_agent: ``User-Agent`` header value.
        destination: Type the response ``data`` member is decoded into.
        resource: Resource label for diagnostics.
        operation: Operation label for diagnostics.
        context: Optional deadline/cancellation.

    Returns:
        ``(data, diagnostics)``: the decoded data and an empty list on
        success, or None and a non-empty list on any failure.
    """
    try:
        data = _round_trip(
            client,
            url,
            body,
            authorization=authorization,
            user_agent=user_agent,
            destination=destination,
            resource=resource,
            operation=operation,
            context=context or NO_CONTEXT,
        )
    except GraphQLClientError as e:
        logger.debug(f"{resource} {operation} failed: {e}")
        return None, [labelled_diagnostic(e, resource, operation)]
    return data, []


def execute(
    client: httpx.Client,
    url: str,
    operation: Operation[T],
    *,
    authorization: str,
    user_agent: str,
    context: CallContext | None = None,
) -> ExecutionResult[T]:
    """Build the envelope for ``operation`` and run one round trip."""
    logger.info(f"execute called for {operation.resource} {operation.name}...")
    logger.debug(f"Received query: {operation.query}")
    logger.debug(f"Received variables: {operation.variables!r}")

    try:
        body = build_envelope(operation.kind, operation.query, operation.variables)
    except EnvelopeError as e:
        return ExecutionResult(diagnostics=[labelled_diagnostic(e, operation.resource, operation.name)])

    data, diagnostics = round_trip(
        client,
        url,
        body,
        authorization=authorization,
        user_agent=user_agent,
        destination=operation.destination,
        resource=operation.resource,
        operation=operation.name,
        context=context,
    )
    return ExecutionResult(data=data, diagnostics=diagnostics)
