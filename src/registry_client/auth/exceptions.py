"""Exceptions raised while resolving registry credentials.

These are configuration failures detected before any request is sent; failed
authentication against a registry is reported as
``registry_client.errors.AuthenticationError`` instead.
"""


class CredentialError(Exception):
    """Base exception for credential configuration errors."""

    pass


class CredentialNotFoundError(CredentialError):
    """A required credential could not be resolved from any source.

    Attributes:
        env_var_name: The environment variable that was checked (if any).
    """

    def __init__(self, message: str, env_var_name: str | None = None):
        super().__init__(message)
        self.env_var_name = env_var_name


class CredentialFileError(CredentialError):
    """A credential file was configured but could not be read."""

    pass
