"""Factory for the registry transport stack."""

import httpx

from registry_client.auth.credentials import ANONYMOUS, Credentials
from registry_client.auth.tokens import TokenCache
from registry_client.transport.auth import BasicAuthTransport, TokenAuthTransport
from registry_client.transport.errors import ErrorMappingTransport


def create_transport_stack(
    *,
    base_url: str | None = None,
    credentials: Credentials | None = None,
    wrapped_transport: httpx.BaseTransport | None = None,
    verify: bool = True,
    token_cache: TokenCache | None = None,
    cache_tokens: bool = True,
    prefer_basic: bool = True,
) -> ErrorMappingTransport:
    """Build ``ErrorMapping -> BasicAuth -> TokenAuth -> network``.

    Args:
        base_url: Registry base URL; Basic credentials are only sent below it
        credentials: Registry credentials (anonymous if None)
        wrapped_transport: Network transport (default: ``httpx.HTTPTransport``)
        verify: Verify TLS certificates of the default network transport
        token_cache: Token cache to share (default: a new one if cache_tokens)
        cache_tokens: Cache bearer tokens between requests
        prefer_basic: Satisfy a Basic challenge rather than a Bearer one when
            a response offers both

    Returns:
        The outermost transport, ready to mount in ``httpx.Client``

    Example:
        ```python
        transport = create_transport_stack(
            base_url="https://registry.example.com",
            credentials=Credentials("user", "secret"),
        )

        with httpx.Client(transport=transport) as client:
            client.get("https://registry.example.com/v2/")
        ```
    """
    credentials = credentials or ANONYMOUS
    if wrapped_transport is None:
        wrapped_transport = httpx.HTTPTransport(verify=verify)
    if token_cache is None and cache_tokens:
        token_cache = TokenCache()

    token_transport = TokenAuthTransport(
        wrapped_transport=wrapped_transport,
        credentials=credentials,
        token_cache=token_cache,
        defer_to_basic=prefer_basic,
        base_url=base_url,
    )
    basic_transport = BasicAuthTransport(
        wrapped_transport=token_transport,
        credentials=credentials,
        base_url=base_url,
    )
    return ErrorMappingTransport(wrapped_transport=basic_transport)
