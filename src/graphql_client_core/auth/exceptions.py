"""Exceptions raised while resolving settings and credentials."""

from graphql_client_core.errors.exceptions import ConfigurationError


class CredentialError(ConfigurationError):
    """Base exception for credential resolution errors."""

    pass


class CredentialNotFoundError(CredentialError):
    """A required setting could not be resolved from any source.

    Attributes:
        env_var_name: The environment variable that was checked (if any).
    """

    def __init__(self, message: str, env_var_name: str | None = None):
        super().__init__(message)
        self.env_var_name = env_var_name


class CredentialFileError(CredentialError):
    """A file-backed setting could not be read."""

    pass
