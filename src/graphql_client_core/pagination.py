"""Cursor pagination over differently-shaped response payloads.

A destination type takes part in pagination in one of two ways:

- explicitly, by exposing a ``page_info`` attribute (the :class:`Paginated`
  protocol), or
- structurally, by containing a :class:`PageInfo` (or a ``pageInfo`` mapping
  with ``endCursor`` and ``hasNextPage``) anywhere in its nested objects,
  typically inside a connection wrapper such as ``users { nodes pageInfo }``.

Example:
    ```python
    class UserConnection(BaseModel):
        nodes: list[User]
        page_info: PageInfo = Field(alias="pageInfo")

    class ReadUsers(BaseModel):
        users: UserConnection

    result = walk(client, url, Operation(query=USERS, destination=ReadUsers), max_pages=5, ...)
    users = [user for page in result.pages for user in page.users.nodes]
    ```
"""

import dataclasses
import logging
import types
import typing
from collections import deque
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from graphql_client_core.envelope import Operation, OperationKind, bind_cursor
from graphql_client_core.errors.exceptions import NotPaginatedError, OperationFailedError, UnsupportedOperationError
from graphql_client_core.errors.models import Diagnostic
from graphql_client_core.execution import CallContext, execute, labelled_diagnostic

logger = logging.getLogger(__name__)

T = TypeVar("T")

PAGE_INFO_NAMES = frozenset(["pageInfo", "page_info"])

# Nesting deeper than this is not searched
MAX_SEARCH_DEPTH = 32


class PageInfo(BaseModel):
    """Pagination state of one page: ``{endCursor, hasNextPage}``."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    end_cursor: str = Field(default="", alias="endCursor")
    has_next_page: bool = Field(default=False, alias="hasNextPage")

    @field_validator("end_cursor", mode="before")
    @classmethod
    def _null_cursor(cls, v: Any) -> Any:
        return "" if v is None else v


@runtime_checkable
class Paginated(Protocol):
    """Capability of payload types that expose their page-info directly."""

    @property
    def page_info(self) -> PageInfo | None: ...


def _coerce(value: Any) -> PageInfo | None:
    if isinstance(value, PageInfo):
        return value
    try:
        if isinstance(value, Mapping):
            if "hasNextPage" in value or "has_next_page" in value:
                return PageInfo.model_validate(dict(value))
            return None
        if hasattr(value, "has_next_page"):
            return PageInfo(
                end_cursor=getattr(value, "end_cursor", "") or "",
                has_next_page=bool(value.has_next_page),
            )
    except ValidationError as e:
        raise NotPaginatedError("Malformed pageInfo in response data", detail=str(e)) from e
    return None


def _children(value: Any) -> list[tuple[str, Any]]:
    if isinstance(value, BaseModel):
        return [(name, getattr(value, name)) for name in type(value).model_fields]
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return [(f.name, getattr(value, f.name)) for f in dataclasses.fields(value)]
    if isinstance(value, Mapping):
        return [(str(k), v) for k, v in value.items()]
    return []


def _is_container(value: Any) -> bool:
    return (
        isinstance(value, (BaseModel, Mapping))
        or (dataclasses.is_dataclass(value) and not isinstance(value, type))
    )


def _search(payload: Any) -> PageInfo | None:
    """Breadth-first search, so the shallowest page-info wins."""
    queue = deque([(payload, 0)])
    seen: set[int] = set()

    while queue:
        value, depth = queue.popleft()
        if id(value) in seen or depth > MAX_SEARCH_DEPTH:
            continue
        seen.add(id(value))

        if isinstance(value, Paginated) and not isinstance(value, PageInfo):
            found = _coerce(value.page_info)
            if found is not None:
                return found

        for name, child in _children(value):
            if isinstance(child, PageInfo) or (name in PAGE_INFO_NAMES and child is not None):
                found = _coerce(child)
                if found is not None:
                    return found
            if _is_container(child):
                queue.append((child, depth + 1))

    return None


def _candidate_types(annotation: Any) -> list[Any]:
    origin = typing.get_origin(annotation)
    if origin is typing.Annotated:
        return _candidate_types(typing.get_args(annotation)[0])
    if origin is typing.Union or origin is types.UnionType:
        return [t for arg in typing.get_args(annotation) for t in _candidate_types(arg)]
    if origin is not None:
        # Containers such as list[Node] hold items, not the page's own state
        return []
    return [annotation] if isinstance(annotation, type) else []


def _field_annotations(tp: type) -> list[Any]:
    if issubclass(tp, BaseModel):
        return [f.annotation for f in tp.model_fields.values()]
    if dataclasses.is_dataclass(tp):
        try:
            return list(typing.get_type_hints(tp).values())
        except (NameError, TypeError):
            return [f.type for f in dataclasses.fields(tp)]
    return []


def _declares_page_info(tp: Any, seen: set[type] | None = None) -> bool:
    """Whether ``tp`` declares a PageInfo field anywhere, even if currently unset."""
    if not isinstance(tp, type):
        return False
    seen = seen if seen is not None else set()
    seen.add(tp)
    for annotation in _field_annotations(tp):
        for candidate in _candidate_types(annotation):
            if issubclass(candidate, PageInfo):
                return True
            if candidate not in seen and _declares_page_info(candidate, seen):
                return True
    return False


def locate_page_info(payload: Any) -> PageInfo:
    """Find the page-info of a decoded payload without knowing its shape.

    The input is not modified. A paginated type whose connection is absent
    (for example a null ``users`` field) yields an empty, exhausted PageInfo.

    Raises:
        NotPaginatedError: If the payload's type has no page-info at all, or
            the page-info found is malformed.
    """
    if isinstance(payload, PageInfo):
        return payload
    found = _search(payload)
    if found is not None:
        return found
    if _declares_page_info(type(payload)):
        return PageInfo()
    raise NotPaginatedError(
        f"{type(payload).__name__} does not support pagination",
        detail="no pageInfo {endCursor, hasNextPage} structure found in the response data",
    )


@dataclass
class PagedResult(Generic[T]):
    """Pages accumulated by one walk, in fetch order, plus its diagnostics.

    On failure, ``pages`` still holds every page decoded before the failure.
    Check ``diagnostics`` before relying on completeness.
    """

    pages: list[T] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics

    def raise_for_diagnostics(self) -> list[T]:
        if self.diagnostics:
            raise OperationFailedError(self.diagnostics)
        return self.pages


def walk(
    client: httpx.Client,
    url: str,
    operation: Operation[T],
    max_pages: int,
    *,
    authorization: str,
    user_agent: str,
    cursor_variable: str = "after",
    context: CallContext | None = None,
) -> PagedResult[T]:
    """Fetch pages one at a time, in cursor order, until exhausted.

    Stops when a page reports ``hasNextPage: false`` or after ``max_pages``
    pages, whichever comes first. ``max_pages <= 0`` fetches a single page.

    Args:
        client: HTTP client.
        url: GraphQL endpoint.
        operation: Read operation; its variables are the first page's.
        max_pages: Upper bound on the number of requests.
        authorization: Full ``Authorization`` header value.
        user_agent: ``User-Agent`` header value.
        cursor_variable: Variable the end cursor is bound to.
        context: Optional deadline/cancellation shared by every page.

    Returns:
        The accumulated pages and the diagnostics of the failure, if any.
    """
    logger.info(f"walk called for {operation.resource} {operation.name}...")
    logger.debug(f"Received maxPages: {max_pages}")
    result: PagedResult[T] = PagedResult()

    if operation.kind is not OperationKind.READ:
        exc = UnsupportedOperationError(f"operation {operation.name} not supported for paged operations")
        result.diagnostics.append(labelled_diagnostic(exc, operation.resource, operation.name))
        return result

    page_limit = max(max_pages, 1)
    cursor = ""

    while True:
        page_number = len(result.pages) + 1
        logger.debug(f"Processing page {page_number} with a maximum of {page_limit} pages")
        current = operation
        if cursor:
            current = operation.with_variables(bind_cursor(operation.variables, cursor, cursor_variable))

        executed = execute(
            client,
            url,
            current,
            authorization=authorization,
            user_agent=user_agent,
            context=context,
        )
        if not executed.ok:
            result.diagnostics.extend(executed.diagnostics)
            return result

        result.pages.append(executed.data)

        try:
            page_info = locate_page_info(executed.data)
        except NotPaginatedError as e:
            logger.debug(f"Error extracting pagination details: {e}")
            result.diagnostics.append(labelled_diagnostic(e, operation.resource, operation.name))
            return result

        logger.debug(f"Pagination details: {page_info.model_dump(by_alias=True)}")

        if not page_info.has_next_page:
            break
        if page_number >= page_limit:
            logger.debug(f"Stopping after {page_number} pages, more are available")
            break
        if not page_info.end_cursor:
            exc = NotPaginatedError(
                "Server reported another page without an end cursor",
                detail=f"page {page_number}: hasNextPage is true but endCursor is empty",
            )
            result.diagnostics.append(labelled_diagnostic(exc, operation.resource, operation.name))
            return result

        cursor = page_info.end_cursor

    return result
