"""Tests for settings resolution exceptions."""

import pytest

from graphql_client_core.auth.exceptions import (
    CredentialError,
    CredentialFileError,
    CredentialNotFoundError,
)
from graphql_client_core.errors import ConfigurationError, Diagnostic, DiagnosticKind


class TestCredentialError:
    """Test CredentialError base exception."""

    def test_is_configuration_error(self):
        """Test that credential problems are configuration problems."""
        with pytest.raises(ConfigurationError):
            raise CredentialError("Test error")

    def test_exception_message(self):
        """Test that the message is preserved."""
        assert str(CredentialError("Custom error message")) == "Custom error message"


class TestCredentialNotFoundError:
    """Test CredentialNotFoundError exception."""

    def test_is_credential_error(self):
        with pytest.raises(CredentialError):
            raise CredentialNotFoundError("Test error")

    def test_env_var_name_attribute(self):
        """Test that the checked variable is kept."""
        error = CredentialNotFoundError("Missing", env_var_name="GRAPHQL_API_URL")

        assert error.env_var_name == "GRAPHQL_API_URL"

    def test_env_var_name_defaults_to_none(self):
        assert CredentialNotFoundError("Missing").env_var_name is None

    def test_converts_to_configuration_diagnostic(self):
        """Test the diagnostic kind of a missing setting."""
        diagnostic = Diagnostic.from_exception(CredentialNotFoundError("Missing"))

        assert diagnostic.kind is DiagnosticKind.CONFIGURATION
        assert diagnostic.summary == "Missing"


class TestCredentialFileError:
    """Test CredentialFileError exception."""

    def test_is_credential_error(self):
        with pytest.raises(CredentialError):
            raise CredentialFileError("Test error")

    def test_not_a_not_found_error(self):
        """Test that the two credential errors can be told apart."""
        assert not isinstance(CredentialFileError("x"), CredentialNotFoundError)
