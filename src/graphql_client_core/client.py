"""Session facade tying settings, token and HTTP client together."""

import logging
from types import TracebackType
from typing import TypeVar

import httpx

from graphql_client_core.auth.session import SessionToken, authenticate
from graphql_client_core.config import Settings
from graphql_client_core.envelope import Operation
from graphql_client_core.errors.exceptions import AuthenticationError
from graphql_client_core.execution import CallContext, ExecutionResult, execute
from graphql_client_core.pagination import PagedResult, walk
from graphql_client_core.transport.factory import create_http_client

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GraphQLClient:
    """An authenticated session against one GraphQL API.

    Instances are immutable after construction and safe to share between
    threads: the token is never rewritten and ``httpx.Client`` is thread-safe.
    Use :meth:`connect` to authenticate and build the HTTP client in one step.

    Example:
        ```python
        with GraphQLClient.connect(Settings.from_env()) as client:
            result = client.execute(Operation(query=QUERY, destination=ReadUser, resource="user"))
            user = result.raise_for_diagnostics()
        ```
    """

    def __init__(
        self,
        settings: Settings,
        *,
        token: SessionToken,
        http_client: httpx.Client,
        user_agent: str | None = None,
    ) -> None:
        self._settings = settings
        self._token = token
        self._http_client = http_client
        self._user_agent = user_agent or settings.user_agent

    @classmethod
    def connect(
        cls,
        settings: Settings,
        *,
        user_agent: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> "GraphQLClient":
        """Build the HTTP client and run the authentication handshake.

        Args:
            settings: Connection and credential settings.
            user_agent: Overrides ``settings.user_agent``.
            transport: Innermost transport, see ``create_http_client``.

        Raises:
            AuthenticationError: If no token could be obtained. Its
                ``diagnostics`` attribute holds the handshake diagnostics.
        """
        logger.info("GraphQLClient.connect called...")
        http_client = create_http_client(settings, transport=transport)
        token, diagnostics = authenticate(http_client, settings.credentials)
        if not token:
            http_client.close()
            summary = diagnostics[0].summary if diagnostics else "Authentication failed"
            detail = diagnostics[0].detail if diagnostics else ""
            raise AuthenticationError(summary, detail=detail, diagnostics=diagnostics)
        return cls(settings, token=token, http_client=http_client, user_agent=user_agent)

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def token(self) -> SessionToken:
        return self._token

    @property
    def http_client(self) -> httpx.Client:
        return self._http_client

    @property
    def token_expired(self) -> bool:
        return self._token.is_expired()

    def reauthenticate(self) -> "GraphQLClient":
        """Run a new handshake and return a session holding the new token.

        The HTTP client is shared with this session, which is left unchanged.

        Raises:
            AuthenticationError: If no token could be obtained.
        """
        logger.info("GraphQLClient.reauthenticate called...")
        token, diagnostics = authenticate(self._http_client, self._settings.credentials)
        if not token:
            summary = diagnostics[0].summary if diagnostics else "Authentication failed"
            raise AuthenticationError(summary, diagnostics=diagnostics)
        return type(self)(self._settings, token=token, http_client=self._http_client, user_agent=self._user_agent)

    def execute(self, operation: Operation[T], *, context: CallContext | None = None) -> ExecutionResult[T]:
        """Run a single round trip for ``operation``."""
        return execute(
            self._http_client,
            self._settings.api_url,
            operation,
            authorization=self._token.authorization,
            user_agent=self._user_agent,
            context=context,
        )

    def paginate(
        self,
        operation: Operation[T],
        max_pages: int,
        *,
        cursor_variable: str = "after",
        context: CallContext | None = None,
    ) -> PagedResult[T]:
        """Walk the pages of a read ``operation``, at most ``max_pages`` of them."""
        return walk(
            self._http_client,
            self._settings.api_url,
            operation,
            max_pages,
            authorization=self._token.authorization,
            user_agent=self._user_agent,
            cursor_variable=cursor_variable,
            context=context,
        )

    def close(self) -> None:
        self._http_client.close()

    def __enter__(self) -> "GraphQLClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
