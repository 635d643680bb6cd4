"""Base class for transport layers that wrap another transport."""

import httpx


class WrappingTransport(httpx.BaseTransport):
    """Transport that delegates to a wrapped transport.

    Subclasses implement ``handle_request`` and call
    ``self._wrapped_transport.handle_request`` for the next layer.
    Context management and ``close`` are delegated down the chain so closing
    the outermost layer releases the network transport's connection pool.

    Args:
        wrapped_transport: The next (inner) transport
    """

    def __init__(self, *, wrapped_transport: httpx.BaseTransport) -> None:
        self._wrapped_transport = wrapped_transport

    @property
    def wrapped_transport(self) -> httpx.BaseTransport:
        return self._wrapped_transport

    def __enter__(self):
        """Enter context, delegating to wrapped transport."""
        self._wrapped_transport.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context, delegating to wrapped transport."""
        self._wrapped_transport.__exit__(exc_type, exc_val, exc_tb)

    def close(self) -> None:
        self._wrapped_transport.close()


def with_authorization(request: httpx.Request, authorization: str) -> httpx.Request:
    """Copy a request, replacing its ``Authorization`` header.

    The request body must already be buffered (``request.read()``) so the
    copy replays it byte for byte.
    """
    headers = request.headers.copy()
    headers["Authorization"] = authorization
    # The buffered copy is sent with Content-Length instead
    headers.pop("Transfer-Encoding", None)
    return httpx.Request(
        request.method,
        request.url,
        headers=headers,
        content=request.content,
        extensions=request.extensions,
    )


def url_in_scope(url: httpx.URL, base_url: httpx.URL | None) -> bool:
    """Whether ``url`` lies below ``base_url``: same scheme, host and port, path prefix.

    Everything is in scope when ``base_url`` is None.
    """
    if base_url is None:
        return True
    return (
        url.scheme == base_url.scheme
        and url.host == base_url.host
        and url.port == base_url.port
        and url.path.startswith(base_url.path.rstrip("/"))
    )
