"""Tests for the HTTP client factory."""

import logging
import ssl

import httpx
import pytest

from graphql_client_core.testing import RecordingHandler, make_settings
from graphql_client_core.transport import RetryTransport, create_http_client, create_ssl_context, resolve_proxy


class TestCreateSSLContext:
    """Test the TLS trust configuration."""

    @pytest.mark.unit
    def test_default_context_verifies(self):
        context = create_ssl_context()

        assert context.verify_mode == ssl.CERT_REQUIRED
        assert context.check_hostname

    @pytest.mark.unit
    def test_invalid_chain_falls_back_to_defaults(self, caplog):
        """An unparsable bundle keeps the system trust store and logs a warning."""
        caplog.set_level(logging.WARNING)

        context = create_ssl_context("-----BEGIN CERTIFICATE-----\nnot base64\n-----END CERTIFICATE-----")

        assert context.verify_mode == ssl.CERT_REQUIRED
        assert "CA chain" in caplog.text

    @pytest.mark.unit
    def test_blank_chain_is_ignored(self, caplog):
        caplog.set_level(logging.WARNING)

        create_ssl_context("   \n")

        assert caplog.text == ""

    @pytest.mark.unit
    def test_contexts_are_independent(self):
        assert create_ssl_context() is not create_ssl_context()


class TestResolveProxy:
    """Test proxy selection."""

    @pytest.mark.unit
    def test_disabled_proxy(self):
        assert resolve_proxy(False, "http://proxy.example.com:3128") is None

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "server",
        ["http://proxy.example.com:3128", "https://proxy.example.com", "socks5://proxy.example.com:1080"],
    )
    def test_enabled_proxy(self, server):
        assert httpx.URL(resolve_proxy(True, server)) == httpx.URL(server)

    @pytest.mark.unit
    @pytest.mark.parametrize("server", ["", "proxy.example.com:3128", "ftp://proxy.example.com", "http://"])
    def test_unusable_proxy_is_disabled(self, server, caplog):
        """Unparsable or unsupported servers disable the proxy instead of failing."""
        caplog.set_level(logging.WARNING)

        assert resolve_proxy(True, server) is None
        assert "Proxy disabled" in caplog.text


class TestCreateHTTPClient:
    """Test the assembled client."""

    @pytest.mark.unit
    def test_wraps_transport_with_retries(self):
        handler = RecordingHandler([httpx.Response(503), httpx.Response(200)])
        settings = make_settings(retry_max=3)

        with create_http_client(settings, transport=httpx.MockTransport(handler)) as client:
            response = client.post(settings.api_url, content=b"{}")

        assert response.status_code == 200
        assert len(handler.requests) == 2

    @pytest.mark.unit
    def test_sends_user_agent(self):
        handler = RecordingHandler([httpx.Response(200)])
        settings = make_settings(user_agent="my-provider/1.2.3")

        with create_http_client(settings, transport=httpx.MockTransport(handler)) as client:
            client.get(settings.api_url)

        assert handler.requests[0].headers["User-Agent"] == "my-provider/1.2.3"

    @pytest.mark.unit
    def test_does_not_follow_redirects(self):
        handler = RecordingHandler([httpx.Response(302, headers={"Location": "https://elsewhere.example.com"})])
        settings = make_settings()

        with create_http_client(settings, transport=httpx.MockTransport(handler)) as client:
            response = client.post(settings.api_url, content=b"{}")

        assert response.status_code == 302
        assert len(handler.requests) == 1

    @pytest.mark.unit
    def test_default_transport_from_settings(self):
        settings = make_settings(proxy=True, proxy_server="http://proxy.example.com:3128", timeout=12.5)

        with create_http_client(settings) as client:
            assert isinstance(client._transport, RetryTransport)
            assert client._transport.policy.max_retries == settings.retry_max
            assert client.timeout.read == 12.5

    @pytest.mark.unit
    def test_clients_are_independent(self):
        settings = make_settings()

        first = create_http_client(settings)
        second = create_http_client(settings)
        try:
            assert first is not second
            assert first._transport is not second._transport
        finally:
            first.close()
            second.close()
