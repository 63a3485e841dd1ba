"""Multi-source resolution of client settings and credentials.

Each setting is looked up in order, the first source holding a value wins:

1. Explicitly provided value
2. Environment variable
3. .env file (python-dotenv, loaded into the environment once)
4. Default value

Example:
    ```python
    from graphql_client_core.auth import CredentialResolver

    resolver = CredentialResolver()

    client_secret = resolver.resolve(env_var_name="GRAPHQL_AUTH_CLIENT_SECRET", required=True)
    retry_max = resolver.resolve_int(env_var_name="GRAPHQL_HTTP_CLIENT_RETRY_MAX", default=10)
    ca_chain = resolver.resolve_from_file(env_var_name="GRAPHQL_CA_CHAIN_FILE")
    ```

Security Considerations:
    - Secret values are logged as *** only
    - Logs name the source (variable name, file path), never the value
    - .env loading is guarded by a lock and attempted once
"""

import logging
import os
from pathlib import Path
from threading import Lock

from dotenv import load_dotenv

from graphql_client_core.auth.exceptions import CredentialFileError, CredentialNotFoundError
from graphql_client_core.errors.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

TRUE_VALUES = frozenset(["1", "true", "yes", "on"])
FALSE_VALUES = frozenset(["0", "false", "no", "off", ""])


class CredentialResolver:
    """Resolve settings values from multiple sources with priority ordering."""

    def __init__(self, dotenv_path: str | None = None, load_dotenv: bool = True):
        """Initialize the resolver.

        Args:
            dotenv_path: Path to .env file. If None, python-dotenv searches
                parent directories for one.
            load_dotenv: Whether to load the .env file at all. Disable in tests
                or when configuration comes only from the process environment.
        """
        self._dotenv_path = dotenv_path
        self._dotenv_lock = Lock()
        self._dotenv_loaded = False

        if load_dotenv:
            self._ensure_dotenv_loaded()

    def _ensure_dotenv_loaded(self) -> None:
        with self._dotenv_lock:
            if self._dotenv_loaded:
                return
            try:
                load_dotenv(dotenv_path=self._dotenv_path)
                logger.debug("Loaded .env file for settings resolution")
            except OSError as e:
                logger.warning(f"Unable to load .env file, using the process environment only: {e}")
            # Only ever attempted once
            self._dotenv_loaded = True

    @staticmethod
    def _mask(value: str | None) -> str:
        return "None" if value is None else "***"

    def _lookup(self, value: str | None, env_var_name: str | None, default: str | None) -> tuple[str | None, str]:
        if value is not None:
            return value, "explicit parameter"
        if env_var_name and env_var_name in os.environ:
            return os.environ[env_var_name], f"environment variable '{env_var_name}'"
        return default, "default value"

    def resolve(
        self,
        *,
        value: str | None = None,
        env_var_name: str | None = None,
        default: str | None = None,
        required: bool = False,
        mask_in_logs: bool = True,
    ) -> str | None:
        """Resolve a string value.

        Args:
            value: Explicitly provided value (highest priority).
            env_var_name: Environment variable to check.
            default: Value used when no other source has one.
            required: Raise CredentialNotFoundError when nothing resolves.
            mask_in_logs: Log the resolved value as *** only.

        Returns:
            The resolved value, or None if not found and not required.

        Raises:
            CredentialNotFoundError: If required and no source provided a value.
        """
        result, source = self._lookup(value, env_var_name, default)

        if result is None:
            if required:
                checked = f" (checked env var: {env_var_name})" if env_var_name else ""
                raise CredentialNotFoundError(f"Required credential not found{checked}", env_var_name=env_var_name)
            return None

        logger.debug(f"Resolved setting from {source}: {self._mask(result) if mask_in_logs else result}")
        return result

    def resolve_int(
        self,
        *,
        value: int | None = None,
        env_var_name: str | None = None,
        default: int,
    ) -> int:
        """Resolve an integer value, falling back to ``default``.

        Raises:
            ConfigurationError: If the environment holds a non-integer.
        """
        if value is not None:
            return value
        raw = self.resolve(env_var_name=env_var_name, mask_in_logs=False)
        if raw is None or raw.strip() == "":
            return default
        try:
            return int(raw.strip())
        except ValueError:
            raise ConfigurationError(f"{env_var_name} must be an integer, got {raw!r}") from None

    def resolve_bool(
        self,
        *,
        value: bool | None = None,
        env_var_name: str | None = None,
        default: bool = False,
    ) -> bool:
        """Resolve a boolean value (1/true/yes/on, 0/false/no/off).

        Raises:
            ConfigurationError: If the environment holds anything else.
        """
        if value is not None:
            return value
        raw = self.resolve(env_var_name=env_var_name, mask_in_logs=False)
        if raw is None:
            return default
        normalized = raw.strip().lower()
        if normalized in TRUE_VALUES:
            return True
        if normalized in FALSE_VALUES:
            return False
        raise ConfigurationError(f"{env_var_name} must be a boolean, got {raw!r}")

    def resolve_from_file(
        self,
        *,
        file_path: str | Path | None = None,
        env_var_name: str | None = None,
        required: bool = False,
    ) -> str | None:
        """Read a value from a file, such as a PEM CA bundle.

        The path may be given directly or through an environment variable and
        supports ``~`` and ``$VAR`` expansion.

        Returns:
            File contents with surrounding whitespace stripped, or None if the
            file cannot be read and is not required.

        Raises:
            CredentialFileError: If required and the file cannot be read.
        """
        raw_path = str(file_path) if file_path is not None else None
        if raw_path is None and env_var_name:
            raw_path = self.resolve(env_var_name=env_var_name, mask_in_logs=False) or None

        if raw_path is None:
            if not required:
                return None
            hint = f" (env var '{env_var_name}' not set)" if env_var_name else ""
            raise CredentialFileError(f"No file path provided for credential resolution{hint}")

        path = Path(os.path.expanduser(os.path.expandvars(raw_path)))
        try:
            content = path.read_text().strip()
        except FileNotFoundError:
            problem = f"Credential file not found: {path}"
        except PermissionError:
            problem = f"Permission denied reading credential file: {path}"
        except OSError as e:
            problem = f"Error reading credential file {path}: {e}"
        else:
            logger.debug(f"Resolved setting from file: {path} (***)")
            return content

        if required:
            raise CredentialFileError(problem)
        logger.warning(problem)
        return None
