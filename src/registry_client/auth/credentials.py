"""Registry credentials and where they come from.

A value is taken from the first source that has one: an explicit argument,
then the process environment (which a ``.env`` file loaded through
python-dotenv feeds into), then a default. Passwords may also live in a
file, e.g. a mounted Kubernetes or Docker secret.

Example:
    ```python
    from registry_client.auth import CredentialResolver

    credentials = CredentialResolver().resolve_credentials()
    if credentials.is_anonymous:
        ...
    ```

Passwords are masked as ``***`` in every log line; only their source
(environment variable or file path) is logged.
"""

import base64
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from threading import Lock

from dotenv import load_dotenv

from registry_client.auth.exceptions import CredentialFileError, CredentialNotFoundError

logger = logging.getLogger(__name__)

_MASK = "***"


@dataclass(frozen=True)
class Credentials:
    """Username and password presented to a registry and its token service.

    Both empty means anonymous access.
    """

    username: str = ""
    password: str = field(default="", repr=False)

    @property
    def is_anonymous(self) -> bool:
        return not self.username and not self.password

    def basic_auth_header(self) -> str:
        """Return the ``Authorization`` header value for HTTP Basic auth."""
        userpass = f"{self.username}:{self.password}".encode()
        return "Basic " + base64.b64encode(userpass).decode("ascii")


ANONYMOUS = Credentials()


class CredentialResolver:
    """Look up registry credentials and settings across explicit values, env and .env.

    The ``.env`` file is loaded at most once per resolver, under a lock.
    """

    def __init__(self, dotenv_path: str | None = None, load_dotenv: bool = True):
        """Set up the resolver, loading the ``.env`` file unless disabled.

        Args:
            dotenv_path: ``.env`` file to load; None lets python-dotenv search
                upwards from the working directory.
            load_dotenv: Set False to ignore ``.env`` files entirely.
        """
        self._dotenv_path = dotenv_path
        self._dotenv_lock = Lock()
        self._dotenv_loaded = False
        if load_dotenv:
            self._load_dotenv_once()

    def _load_dotenv_once(self) -> None:
        with self._dotenv_lock:
            if self._dotenv_loaded:
                return
            try:
                found = load_dotenv(dotenv_path=self._dotenv_path)
            except OSError as e:
                logger.warning(f"Could not read .env file {self._dotenv_path or ''}: {e}")
            else:
                logger.debug(f"Loaded .env file: {found}")
            self._dotenv_loaded = True

    def resolve(
        self,
        *,
        value: str | None = None,
        env_var_name: str | None = None,
        default: str | None = None,
        required: bool = False,
        mask_in_logs: bool = True,
    ) -> str | None:
        """Return the first of ``value``, ``$env_var_name`` and ``default`` that is set.

        Raises:
            CredentialNotFoundError: ``required`` is set and no source had a value.
        """
        if value is not None:
            found, origin = value, "argument"
        elif env_var_name and env_var_name in os.environ:
            found, origin = os.environ[env_var_name], f"${env_var_name}"
        else:
            found, origin = default, "default"

        if found is None:
            if required:
                where = f" (checked env var: {env_var_name})" if env_var_name else ""
                raise CredentialNotFoundError(f"Required credential not found{where}", env_var_name=env_var_name)
            return None

        logger.debug(f"Resolved value from {origin}: {_MASK if mask_in_logs else found}")
        return found

    def resolve_from_file(
        self,
        *,
        file_path: str | Path | None = None,
        env_var_name: str | None = None,
        required: bool = False,
    ) -> str | None:
        """Read a secret from ``file_path``, or from the path held in ``$env_var_name``.

        ``~`` and ``$VAR`` in the path are expanded and the contents are
        stripped of surrounding whitespace. A missing or unreadable file
        yields None unless ``required`` is set.

        Raises:
            CredentialFileError: ``required`` is set and no file could be read.
        """
        if file_path is None and env_var_name:
            file_path = self.resolve(env_var_name=env_var_name, mask_in_logs=False)

        if file_path is None:
            if not required:
                return None
            hint = f" (env var '{env_var_name}' not set)" if env_var_name else ""
            raise CredentialFileError(f"No file path provided for credential resolution{hint}")

        path = Path(os.path.expandvars(os.path.expanduser(str(file_path))))
        try:
            secret = path.read_text().strip()
        except OSError as e:
            if isinstance(e, FileNotFoundError):
                problem = f"Credential file not found: {path}"
            else:
                problem = f"Cannot read credential file {path}: {e}"
            if required:
                raise CredentialFileError(problem) from e
            logger.warning(problem)
            return None

        logger.debug(f"Resolved credential from file {path}: {_MASK}")
        return secret

    def resolve_credentials(
        self,
        *,
        username: str | None = None,
        password: str | None = None,
        username_env_var: str | None = "REGISTRY_USERNAME",
        password_env_var: str | None = "REGISTRY_PASSWORD",
        password_file_env_var: str | None = "REGISTRY_PASSWORD_FILE",
    ) -> Credentials:
        """Resolve a username/password pair.

        The password falls back to the file named by ``password_file_env_var``
        when neither an explicit value nor ``password_env_var`` provide one.
        A username without a password (or the reverse) is a configuration
        error; neither yields anonymous credentials.

        Raises:
            CredentialNotFoundError: If only one half of the pair resolved.
            CredentialFileError: If the password file is set but unreadable.
        """
        resolved_username = self.resolve(value=username, env_var_name=username_env_var, mask_in_logs=False)
        resolved_password = self.resolve(value=password, env_var_name=password_env_var)
        if resolved_password is None and password_file_env_var and password_file_env_var in os.environ:
            resolved_password = self.resolve_from_file(env_var_name=password_file_env_var, required=True)

        if resolved_username is None and resolved_password is None:
            return ANONYMOUS

        if resolved_username is None:
            raise CredentialNotFoundError("Registry password set without a username", env_var_name=username_env_var)
        if resolved_password is None:
            raise CredentialNotFoundError("Registry username set without a password", env_var_name=password_env_var)

        return Credentials(username=resolved_username, password=resolved_password)
