"""Factory for the HTTP client shared by a session.

The client is configured once and never mutated afterwards; ``httpx.Client``
and its connection pool are safe to share between threads.
"""

import logging
import ssl

import httpx

from graphql_client_core.config import Settings
from graphql_client_core.transport.retry import RetryPolicy, RetryTransport

logger = logging.getLogger(__name__)

PROXY_SCHEMES = frozenset(["http", "https", "socks5", "socks5h"])


def create_ssl_context(ca_chain: str = "") -> ssl.SSLContext:
    """Build an isolated TLS context trusting the system roots plus ``ca_chain``.

    An empty or unparsable bundle is not an error here: the context then
    trusts the system defaults only.

    Args:
        ca_chain: PEM-encoded certificates, possibly empty.
    """
    context = ssl.create_default_context()
    if not ca_chain.strip():
        return context

    try:
        context.load_verify_locations(cadata=ca_chain)
        logger.debug("Loaded trusted certificate authorities from CA chain")
    except (ssl.SSLError, ValueError) as e:
        logger.warning(f"Ignoring unusable CA chain, falling back to system trust store: {e}")
    return context


def resolve_proxy(enabled: bool, proxy_server: str) -> str | None:
    """Return the proxy URL to route through, or None for direct connections.

    An unparsable proxy URL disables proxying instead of failing.
    """
    if not enabled:
        return None

    try:
        url = httpx.URL(proxy_server)
    except (httpx.InvalidURL, TypeError) as e:
        logger.warning(f"Proxy disabled, unable to parse proxy server {proxy_server!r}: {e}")
        return None

    if url.scheme not in PROXY_SCHEMES or not url.host:
        logger.warning(f"Proxy disabled, unsupported proxy server {proxy_server!r}")
        return None

    logger.debug(f"Routing requests through proxy {url.scheme}://{url.host}")
    return str(url)


def create_http_client(
    settings: Settings,
    *,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Create an HTTP client from settings.

    Args:
        settings: TLS, proxy, connection and retry configuration.
        transport: Innermost transport to wrap with retries. Defaults to an
            ``httpx.HTTPTransport`` built from ``settings``; pass a
            ``httpx.MockTransport`` in tests.

    Returns:
        A new, independent ``httpx.Client``.
    """
    logger.info("create_http_client called...")

    if transport is None:
        limits = httpx.Limits(
            max_connections=settings.max_connections_per_host,
            max_keepalive_connections=settings.max_connections_per_host,
        )
        transport = httpx.HTTPTransport(
            verify=create_ssl_context(settings.ca_chain),
            proxy=resolve_proxy(settings.proxy, settings.proxy_server),
            limits=limits,
        )

    policy = RetryPolicy(
        max_retries=settings.retry_max,
        min_wait=settings.retry_wait_min,
        max_wait=settings.retry_wait_max,
    )

    return httpx.Client(
        transport=RetryTransport(wrapped_transport=transport, policy=policy),
        timeout=httpx.Timeout(settings.timeout),
        headers={"User-Agent": settings.user_agent},
        follow_redirects=False,
    )
