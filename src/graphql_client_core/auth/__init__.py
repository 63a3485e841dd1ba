"""Authentication: settings resolution and the session token handshake.

Example:
    ```python
    from graphql_client_core.auth import authenticate
    from graphql_client_core.config import Settings
    from graphql_client_core.transport import create_http_client

    settings = Settings.from_env()
    client = create_http_client(settings)
    token, diagnostics = authenticate(client, settings.credentials)
    if not token:
        raise SystemExit(diagnostics)
    ```
"""

from graphql_client_core.auth.credentials import CredentialResolver
from graphql_client_core.auth.exceptions import (
    CredentialError,
    CredentialFileError,
    CredentialNotFoundError,
)
from graphql_client_core.auth.session import SessionToken, TokenResponse, authenticate

__all__ = [
    "CredentialError",
    "CredentialFileError",
    "CredentialNotFoundError",
    "CredentialResolver",
    "SessionToken",
    "TokenResponse",
    "authenticate",
]
