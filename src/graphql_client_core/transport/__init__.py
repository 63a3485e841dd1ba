"""Transport layer: HTTP client factory and retry policy.

Example:
    ```python
    from graphql_client_core.config import Settings
    from graphql_client_core.transport import create_http_client

    client = create_http_client(Settings.from_env())
    ```
"""

from graphql_client_core.transport.factory import create_http_client, create_ssl_context, resolve_proxy
from graphql_client_core.transport.retry import RetryPolicy, RetryTransport

__all__ = [
    "RetryPolicy",
    "RetryTransport",
    "create_http_client",
    "create_ssl_context",
    "resolve_proxy",
]
