"""Tests for settings and credentials."""

import pytest

from graphql_client_core.auth import CredentialNotFoundError, CredentialResolver
from graphql_client_core.config import Settings
from graphql_client_core.errors import ConfigurationError


@pytest.fixture
def required_env(monkeypatch):
    monkeypatch.setenv("GRAPHQL_API_URL", "https://api.example.com/graphql")
    monkeypatch.setenv("GRAPHQL_AUTH_URL", "https://auth.example.com/oauth/token")
    monkeypatch.setenv("GRAPHQL_AUTH_CLIENT_ID", "env-client")
    monkeypatch.setenv("GRAPHQL_AUTH_CLIENT_SECRET", "env-secret")


@pytest.fixture
def resolver():
    return CredentialResolver(load_dotenv=False)


class TestSettings:
    """Test the settings value object."""

    def test_defaults(self):
        settings = Settings(api_url="a", auth_url="b", client_id="c", client_secret="d")

        assert settings.grant_type == "client_credentials"
        assert settings.retry_max == 10
        assert settings.retry_wait_min == 1.0
        assert settings.retry_wait_max == 10.0
        assert settings.max_connections_per_host == 10
        assert settings.proxy is False

    def test_credentials(self):
        settings = Settings(api_url="a", auth_url="https://auth", client_id="c", client_secret="d", audience="aud")

        credentials = settings.credentials

        assert credentials.grant_type == "client_credentials"
        assert credentials.client_id == "c"
        assert credentials.client_secret == "d"
        assert credentials.audience == "aud"
        assert credentials.token_url == "https://auth"

    def test_secrets_not_in_repr(self):
        settings = Settings(api_url="a", auth_url="b", client_id="c", client_secret="top-secret", ca_chain="PEM")

        assert "top-secret" not in repr(settings)
        assert "top-secret" not in repr(settings.credentials)
        assert "PEM" not in repr(settings)

    def test_settings_are_immutable(self):
        settings = Settings(api_url="a", auth_url="b", client_id="c", client_secret="d")

        with pytest.raises(AttributeError):
            settings.api_url = "other"


@pytest.mark.unit
class TestSettingsFromEnv:
    """Test Settings.from_env."""

    def test_required_values(self, required_env, resolver):
        settings = Settings.from_env(resolver=resolver)

        assert settings.api_url == "https://api.example.com/graphql"
        assert settings.auth_url == "https://auth.example.com/oauth/token"
        assert settings.client_id == "env-client"
        assert settings.client_secret == "env-secret"
        assert settings.audience == ""

    def test_optional_values(self, required_env, resolver, monkeypatch):
        monkeypatch.setenv("GRAPHQL_AUTH_AUDIENCE", "beyond-api")
        monkeypatch.setenv("GRAPHQL_AUTH_GRANT_TYPE", "password")
        monkeypatch.setenv("GRAPHQL_HTTP_PROXY", "true")
        monkeypatch.setenv("GRAPHQL_PROXY_SERVER", "http://proxy.example.com:3128")
        monkeypatch.setenv("GRAPHQL_HTTP_CLIENT_RETRY_MAX", "3")
        monkeypatch.setenv("GRAPHQL_HTTP_CLIENT_RETRY_WAIT_MIN", "2")
        monkeypatch.setenv("GRAPHQL_HTTP_CLIENT_RETRY_WAIT_MAX", "30")
        monkeypatch.setenv("GRAPHQL_USER_AGENT", "my-provider/2.0")

        settings = Settings.from_env(resolver=resolver)

        assert settings.audience == "beyond-api"
        assert settings.grant_type == "password"
        assert settings.proxy is True
        assert settings.proxy_server == "http://proxy.example.com:3128"
        assert settings.retry_max == 3
        assert settings.retry_wait_min == 2.0
        assert settings.retry_wait_max == 30.0
        assert settings.user_agent == "my-provider/2.0"

    def test_overrides_win(self, required_env, resolver):
        settings = Settings.from_env(resolver=resolver, client_id="explicit-client", retry_max=0, timeout=5.0)

        assert settings.client_id == "explicit-client"
        assert settings.retry_max == 0
        assert settings.timeout == 5.0

    def test_custom_prefix(self, monkeypatch, resolver):
        monkeypatch.setenv("CUSTOM_API_URL", "https://custom.example.com/graphql")
        monkeypatch.setenv("CUSTOM_AUTH_URL", "https://custom.example.com/token")
        monkeypatch.setenv("CUSTOM_AUTH_CLIENT_ID", "id")
        monkeypatch.setenv("CUSTOM_AUTH_CLIENT_SECRET", "secret")

        settings = Settings.from_env(prefix="CUSTOM_", resolver=resolver)

        assert settings.api_url == "https://custom.example.com/graphql"

    def test_missing_required_value(self, required_env, resolver, monkeypatch):
        monkeypatch.delenv("GRAPHQL_AUTH_CLIENT_SECRET")

        with pytest.raises(CredentialNotFoundError) as exc_info:
            Settings.from_env(resolver=resolver)

        assert exc_info.value.env_var_name == "GRAPHQL_AUTH_CLIENT_SECRET"

    def test_malformed_integer(self, required_env, resolver, monkeypatch):
        monkeypatch.setenv("GRAPHQL_HTTP_CLIENT_RETRY_MAX", "many")

        with pytest.raises(ConfigurationError):
            Settings.from_env(resolver=resolver)

    def test_malformed_boolean(self, required_env, resolver, monkeypatch):
        monkeypatch.setenv("GRAPHQL_HTTP_PROXY", "sometimes")

        with pytest.raises(ConfigurationError):
            Settings.from_env(resolver=resolver)

    def test_ca_chain_inline(self, required_env, resolver, monkeypatch):
        monkeypatch.setenv("GRAPHQL_CA_CHAIN", "inline-pem")

        assert Settings.from_env(resolver=resolver).ca_chain == "inline-pem"

    def test_ca_chain_from_file(self, required_env, resolver, monkeypatch, tmp_path):
        pem_file = tmp_path / "ca.pem"
        pem_file.write_text("file-pem\n")
        monkeypatch.setenv("GRAPHQL_CA_CHAIN_FILE", str(pem_file))

        assert Settings.from_env(resolver=resolver).ca_chain == "file-pem"

    def test_ca_chain_defaults_to_empty(self, required_env, resolver):
        assert Settings.from_env(resolver=resolver).ca_chain == ""
