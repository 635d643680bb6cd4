"""Registry connection settings from explicit values, the environment and .env files.

| Variable | Meaning |
|----------|---------|
| ``REGISTRY_URL`` | Registry base URL (required) |
| ``REGISTRY_USERNAME`` | Username |
| ``REGISTRY_PASSWORD`` | Password |
| ``REGISTRY_PASSWORD_FILE`` | File holding the password |
| ``REGISTRY_INSECURE`` | ``1``/``true``/``yes`` disables TLS verification |
"""

from dataclasses import dataclass

from registry_client.auth.credentials import ANONYMOUS, CredentialResolver, Credentials

_TRUTHY = frozenset(["1", "true", "yes", "on"])


@dataclass(frozen=True)
class RegistrySettings:
    url: str
    credentials: Credentials = ANONYMOUS
    insecure: bool = False


def resolve_registry_settings(
    *,
    url: str | None = None,
    username: str | None = None,
    password: str | None = None,
    insecure: bool | None = None,
    resolver: CredentialResolver | None = None,
) -> RegistrySettings:
    """Resolve registry settings; explicit arguments win over the environment.

    Raises:
        CredentialNotFoundError: If no registry URL is configured, or only
            half of a username/password pair is.
    """
    resolver = resolver or CredentialResolver()

    resolved_url = resolver.resolve(value=url, env_var_name="REGISTRY_URL", required=True, mask_in_logs=False)
    credentials = resolver.resolve_credentials(username=username, password=password)

    if insecure is None:
        flag = resolver.resolve(env_var_name="REGISTRY_INSECURE", default="", mask_in_logs=False)
        insecure = flag.strip().lower() in _TRUTHY

    return RegistrySettings(url=resolved_url, credentials=credentials, insecure=insecure)
