"""Registry Client - authenticated HTTP client for container registry API v2.

This library provides:
- Composable httpx transport layers (error mapping, Basic auth, bearer tokens)
- Link-header pagination for list endpoints
- A structured error taxonomy (network, authentication, client, server, protocol)
- Multi-source credential resolution

Example:
    ```python
    from registry_client import RegistryClient

    with RegistryClient.connect("https://registry.example.com", "user", "secret") as registry:
        print(registry.tags("library/nginx"))
    ```
"""

from registry_client.auth import Credentials, TokenCache
from registry_client.client import RegistryClient
from registry_client.errors import (
    AuthenticationError,
    ClientError,
    ErrorKind,
    NetworkError,
    NotFoundError,
    ProtocolViolationError,
    RegistryError,
    ServerError,
)
from registry_client.hooks import log, quiet
from registry_client.pagination import Paginator
from registry_client.transport import create_transport_stack

__version__ = "0.1.0"

__all__ = [
    "AuthenticationError",
    "ClientError",
    "Credentials",
    "ErrorKind",
    "NetworkError",
    "NotFoundError",
    "Paginator",
    "ProtocolViolationError",
    "RegistryClient",
    "RegistryError",
    "ServerError",
    "TokenCache",
    "__version__",
    "create_transport_stack",
    "log",
    "quiet",
]
