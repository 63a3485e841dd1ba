"""Operations and the JSON envelope they are sent in.

Reads are sent as ``{"query": ..., "variables": {...}}``; every other kind
wraps the variables once more, ``{"query": ..., "variables": {"input": {...}}}``.
The wrapping depends on the operation kind only, never on the variables.
"""

import dataclasses
import json
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from graphql_client_core.errors.exceptions import EnvelopeError

T = TypeVar("T")

Variables = Mapping[str, Any] | BaseModel | None


class OperationKind(StrEnum):
    READ = "read"
    WRITE = "write"


class QueryVariables(BaseModel):
    """Common variables of list queries. Unset members are left out of the envelope."""

    model_config = ConfigDict(populate_by_name=True)

    query: Any = None
    id: str | None = None
    filter_by: Any = Field(default=None, alias="filterBy")
    after: str | None = None
    first: int | None = None


@dataclass(frozen=True)
class Operation(Generic[T]):
    """One logical unit of work submitted to the API.

    Attributes:
        query: GraphQL query or mutation text.
        destination: Type the response ``data`` member is decoded into: a
            pydantic model, dataclass, TypedDict or any type pydantic can
            validate.
        variables: Variables as a mapping or pydantic model.
        kind: Selects the envelope wrapping rule.
        resource: Resource label used in diagnostics and logs.
        label: Operation label used in diagnostics and logs; defaults to the kind.
    """

    query: str
    destination: type[T]
    variables: Variables = None
    kind: OperationKind = OperationKind.READ
    resource: str = ""
    label: str = ""

    @property
    def name(self) -> str:
        return self.label or self.kind.value

    def with_variables(self, variables: Variables) -> "Operation[T]":
        return dataclasses.replace(self, variables=variables)


def _plain_variables(variables: Variables) -> Any:
    if variables is None:
        return {}
    if isinstance(variables, BaseModel):
        return variables.model_dump(mode="json", by_alias=True, exclude_none=True)
    return dict(variables)


def build_envelope(kind: OperationKind, query: str, variables: Variables) -> bytes:
    """Serialize an operation into the request body.

    Returns:
        Compact UTF-8 JSON.

    Raises:
        EnvelopeError: If the variables are not JSON-serializable.
    """
    try:
        plain = _plain_variables(variables)
        if kind is not OperationKind.READ:
            plain = {"input": plain}
        return json.dumps({"query": query, "variables": plain}, separators=(",", ":"), allow_nan=False).encode()
    except (TypeError, ValueError) as e:
        raise EnvelopeError("Unable to encode operation variables", detail=str(e)) from e


def bind_cursor(variables: Variables, cursor: str, name: str = "after") -> Variables:
    """Return a copy of ``variables`` with the pagination cursor set.

    The input is never modified.
    """
    if isinstance(variables, BaseModel):
        if name in type(variables).model_fields:
            return variables.model_copy(update={name: cursor})
        return {**_plain_variables(variables), name: cursor}
    return {**(variables or {}), name: cursor}
