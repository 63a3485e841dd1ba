"""GraphQL Client Core - execution engine for authenticated GraphQL APIs.

This library provides the request path shared by GraphQL API clients:
- HTTP client factory with retries, proxy and custom CA support
- OAuth client-credentials handshake producing a session token
- Request envelopes for reads and input-wrapped writes
- Typed round trips that report failures as diagnostics
- Cursor pagination over arbitrarily nested response shapes

Example:
    ```python
    from pydantic import BaseModel

    from graphql_client_core import GraphQLClient, Operation, PageInfo, Settings

    class UserConnection(BaseModel):
        nodes: list[dict]
        pageInfo: PageInfo

    class ReadUsers(BaseModel):
        users: UserConnection

    with GraphQLClient.connect(Settings.from_env()) as client:
        result = client.paginate(Operation(query=USERS, destination=ReadUsers, resource="user"), max_pages=5)
        for diagnostic in result.diagnostics:
            print(diagnostic)
    ```
"""

from graphql_client_core.auth.session import SessionToken, authenticate
from graphql_client_core.client import GraphQLClient
from graphql_client_core.config import Credentials, Settings
from graphql_client_core.envelope import Operation, OperationKind, QueryVariables, bind_cursor, build_envelope
from graphql_client_core.errors.models import Diagnostic, DiagnosticKind, GraphQLError
from graphql_client_core.execution import CallContext, ExecutionResult, execute, round_trip
from graphql_client_core.pagination import PagedResult, PageInfo, Paginated, locate_page_info, walk
from graphql_client_core.transport.factory import create_http_client

__version__ = "0.1.0"

__all__ = [
    "CallContext",
    "Credentials",
    "Diagnostic",
    "DiagnosticKind",
    "ExecutionResult",
    "GraphQLClient",
    "GraphQLError",
    "Operation",
    "OperationKind",
    "PageInfo",
    "PagedResult",
    "Paginated",
    "QueryVariables",
    "SessionToken",
    "Settings",
    "__version__",
    "authenticate",
    "bind_cursor",
    "build_envelope",
    "create_http_client",
    "execute",
    "locate_page_info",
    "round_trip",
    "walk",
]
