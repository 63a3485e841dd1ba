"""OAuth client-credentials handshake producing the session token.

The handshake runs once per session. The token it yields is immutable and
shared read-only by every later request; nothing here refreshes it, but
``SessionToken.is_expired`` makes staleness detectable so the caller can open
a new session.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import httpx
from pydantic import BaseModel, ValidationError

from graphql_client_core.errors.exceptions import AuthenticationError, TransportError
from graphql_client_core.errors.handler import dump_response
from graphql_client_core.errors.models import Diagnostic

if TYPE_CHECKING:
    from graphql_client_core.config import Credentials

logger = logging.getLogger(__name__)


class TokenResponse(BaseModel):
    """Success body of the token endpoint."""

    access_token: str
    token_type: str
    scope: str | None = None
    expires_in: int | None = None


@dataclass(frozen=True)
class SessionToken:
    """Token type and value sent as ``Authorization: <type> <value>``.

    An empty token (both parts blank) means authentication failed and no API
    call may be attempted with it.
    """

    token_type: str = ""
    access_token: str = field(default="", repr=False)
    expires_in: int | None = None
    scope: str | None = None
    issued_at: float = field(default_factory=time.time)

    @classmethod
    def empty(cls) -> "SessionToken":
        return cls()

    def __bool__(self) -> bool:
        return bool(self.token_type and self.access_token)

    @property
    def authorization(self) -> str:
        return f"{self.token_type} {self.access_token}"

    @property
    def expires_at(self) -> float | None:
        if self.expires_in is None:
            return None
        return self.issued_at + self.expires_in

    def is_expired(self, leeway: float = 0.0, now: float | None = None) -> bool:
        """Whether the token has expired, or will within ``leeway`` seconds.

        Tokens issued without ``expires_in`` never report expiry.
        """
        if self.expires_at is None:
            return False
        current = time.time() if now is None else now
        return current + leeway >= self.expires_at


def _request_token(client: httpx.Client, credentials: "Credentials") -> SessionToken:
    form = {
        "grant_type": credentials.grant_type,
        "client_id": credentials.client_id,
        "client_secret": credentials.client_secret,
        "audience": credentials.audience,
    }
    logger.debug(
        f"authentication request: POST {credentials.token_url} "
        f"(grant_type={credentials.grant_type}, audience={credentials.audience}, client_secret=***)"
    )

    try:
        response = client.post(
            credentials.token_url,
            data=form,
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
    except httpx.HTTPError as e:
        raise TransportError(f"Authentication request to {credentials.token_url} failed", detail=str(e)) from e

    # The success body carries the access token, so only the status is logged
    logger.debug(f"auth response: HTTP {response.status_code}")
    response_dump = dump_response(response)

    if response.status_code != httpx.codes.OK:
        raise AuthenticationError(
            f"Authentication failed: HTTP Response ({response.status_code})",
            detail=f"Response: {response_dump}",
        )

    try:
        body = TokenResponse.model_validate_json(response.content)
    except ValidationError as e:
        raise AuthenticationError(
            "Authentication failed: unexpected token endpoint response",
            detail=f"{e}\nResponse: {response_dump}",
        ) from e

    token = SessionToken(
        token_type=body.token_type,
        access_token=body.access_token,
        expires_in=body.expires_in,
        scope=body.scope,
    )
    if not token:
        raise AuthenticationError(
            "Authentication failed: token endpoint returned an empty token",
            detail=f"Response: {response_dump}",
        )
    return token


def authenticate(client: httpx.Client, credentials: "Credentials") -> tuple[SessionToken, list[Diagnostic]]:
    """Exchange client credentials for a session token.

    Performs exactly one form-encoded POST to the token endpoint; retries are
    left to the client's transport.

    Returns:
        ``(token, diagnostics)``. On any failure the token is empty and the
        diagnostics describe why.
    """
    logger.info("authenticate called...")

    try:
        token = _request_token(client, credentials)
    except (AuthenticationError, TransportError) as e:
        logger.debug(f"Authentication failed: {e}")
        return SessionToken.empty(), [Diagnostic.from_exception(e)]

    logger.debug(f"Obtained {token.token_type} token (***), expires in {token.expires_in}s")
    return token, []
