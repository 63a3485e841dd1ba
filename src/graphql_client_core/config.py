"""Client settings and OAuth client credentials.

Settings are plain values owned by the caller. ``Settings.from_env`` is a
convenience that resolves them through :class:`CredentialResolver`
(explicit value, environment, .env file, default).

Example:
    ```python
    from graphql_client_core.config import Settings

    settings = Settings.from_env()  # reads GRAPHQL_API_URL, GRAPHQL_AUTH_URL, ...
    credentials = settings.credentials
    ```
"""

from dataclasses import dataclass, field
from typing import Any

from graphql_client_core.auth.credentials import CredentialResolver

DEFAULT_ENV_PREFIX = "GRAPHQL_"
DEFAULT_GRANT_TYPE = "client_credentials"
DEFAULT_USER_AGENT = "graphql-client-core/0.1.0"


@dataclass(frozen=True)
class Credentials:
    """Long-lived credentials exchanged for a session token."""

    grant_type: str
    client_id: str
    client_secret: str = field(repr=False)
    audience: str
    token_url: str


@dataclass(frozen=True)
class Settings:
    """Everything needed to build a transport and open a session.

    Retry waits are in seconds. ``retry_max`` counts retries, so a request is
    attempted at most ``retry_max + 1`` times.
    """

    api_url: str
    auth_url: str
    client_id: str
    client_secret: str = field(repr=False)
    audience: str = ""
    grant_type: str = DEFAULT_GRANT_TYPE
    proxy: bool = False
    proxy_server: str = ""
    ca_chain: str = field(default="", repr=False)
    retry_max: int = 10
    retry_wait_min: float = 1.0
    retry_wait_max: float = 10.0
    max_connections_per_host: int = 10
    timeout: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT

    @property
    def credentials(self) -> Credentials:
        return Credentials(
            grant_type=self.grant_type,
            client_id=self.client_id,
            client_secret=self.client_secret,
            audience=self.audience,
            token_url=self.auth_url,
        )

    @classmethod
    def from_env(
        cls,
        prefix: str = DEFAULT_ENV_PREFIX,
        resolver: CredentialResolver | None = None,
        **overrides: Any,
    ) -> "Settings":
        """Resolve settings from overrides, the environment and a .env file.

        Args:
            prefix: Environment variable prefix, ``GRAPHQL_`` by default.
            resolver: Resolver to use; a default one loads ``.env``.
            **overrides: Explicit values, keyed by field name. They take
                precedence over every other source.

        Raises:
            CredentialNotFoundError: If api_url, auth_url, client_id or
                client_secret cannot be resolved.
            ConfigurationError: If a numeric or boolean variable is malformed.
        """
        resolver = resolver or CredentialResolver()

        def text(name: str, env: str, default: str | None = None, required: bool = False, secret: bool = False):
            return resolver.resolve(
                value=overrides.get(name),
                env_var_name=f"{prefix}{env}",
                default=default,
                required=required,
                mask_in_logs=secret,
            )

        ca_chain = text("ca_chain", "CA_CHAIN", secret=True)
        if ca_chain is None:
            ca_chain = resolver.resolve_from_file(env_var_name=f"{prefix}CA_CHAIN_FILE")

        retry_wait_min = resolver.resolve_int(
            value=overrides.get("retry_wait_min"),
            env_var_name=f"{prefix}HTTP_CLIENT_RETRY_WAIT_MIN",
            default=1,
        )
        retry_wait_max = resolver.resolve_int(
            value=overrides.get("retry_wait_max"),
            env_var_name=f"{prefix}HTTP_CLIENT_RETRY_WAIT_MAX",
            default=10,
        )

        return cls(
            api_url=text("api_url", "API_URL", required=True),
            auth_url=text("auth_url", "AUTH_URL", required=True),
            client_id=text("client_id", "AUTH_CLIENT_ID", required=True, secret=True),
            client_secret=text("client_secret", "AUTH_CLIENT_SECRET", required=True, secret=True),
            audience=text("audience", "AUTH_AUDIENCE", default=""),
            grant_type=text("grant_type", "AUTH_GRANT_TYPE", default=DEFAULT_GRANT_TYPE),
            proxy=resolver.resolve_bool(value=overrides.get("proxy"), env_var_name=f"{prefix}HTTP_PROXY"),
            proxy_server=text("proxy_server", "PROXY_SERVER", default=""),
            ca_chain=ca_chain or "",
            retry_max=resolver.resolve_int(
                value=overrides.get("retry_max"),
                env_var_name=f"{prefix}HTTP_CLIENT_RETRY_MAX",
                default=10,
            ),
            retry_wait_min=float(retry_wait_min),
            retry_wait_max=float(retry_wait_max),
            max_connections_per_host=overrides.get("max_connections_per_host", 10),
            timeout=overrides.get("timeout", 30.0),
            user_agent=text("user_agent", "USER_AGENT", default=DEFAULT_USER_AGENT),
        )
