"""Transport layer components for the authenticated registry pipeline.

Transport layers wrap an ``httpx.BaseTransport`` and are composed into a
single stack mounted in ``httpx.Client``:

    ErrorMappingTransport -> BasicAuthTransport -> TokenAuthTransport -> network

Modules:
    base: Wrapping transport base class
    errors: Error classification layer
    auth: Basic and bearer-token challenge layers
    factory: Factory function building the stack

Example:
    ```python
    from registry_client.transport import create_transport_stack

    transport = create_transport_stack(
        base_url="https://registry.example.com",
        credentials=Credentials("user", "secret"),
    )
    ```
"""

from registry_client.transport.auth import BasicAuthTransport, TokenAuthTransport
from registry_client.transport.base import WrappingTransport
from registry_client.transport.errors import ErrorMappingTransport
from registry_client.transport.factory import create_transport_stack

__all__ = [
    "BasicAuthTransport",
    "ErrorMappingTransport",
    "TokenAuthTransport",
    "WrappingTransport",
    "create_transport_stack",
]
