"""Error classification for HTTP responses and transport failures."""

import httpx

from registry_client.errors.exceptions import (
    AuthenticationError,
    ClientError,
    NetworkError,
    NotFoundError,
    RegistryError,
    ServerError,
)
from registry_client.errors.models import RegistryErrorDetail


def _describe(request: httpx.Request | None) -> str:
    if request is None:
        return ""
    return f" for {request.method} {request.url}"


def classify_response(response: httpx.Response, request: httpx.Request | None = None) -> RegistryError | None:
    """Map an HTTP response to a classified registry error.

    The response is attached to the error unchanged, so callers can still
    inspect headers and body of a failed exchange.

    Args:
        response: HTTP response object (body already read)
        request: The request that produced the response, used in the message

    Returns:
        RegistryError subclass instance, or None for responses below 400
    """
    status_code = response.status_code
    if status_code < 400:
        return None

    if status_code == 401:
        exc_class = AuthenticationError
    elif status_code == 404:
        exc_class = NotFoundError
    elif 400 <= status_code < 500:
        exc_class = ClientError
    elif 500 <= status_code < 600:
        exc_class = ServerError
    else:
        exc_class = RegistryError

    details = RegistryErrorDetail.from_response(response)

    # Build error message
    message = f"HTTP {status_code}{_describe(request)}"
    if details:
        message += ": " + "; ".join(detail.to_message() for detail in details)
    else:
        try:
            response_text = response.text[:200]
        except httpx.ResponseNotRead:
            response_text = ""
        if response_text:
            message += f": {response_text}"

    return exc_class(
        message=message,
        status_code=status_code,
        response=response,
        details=details,
    )


def classify_transport_error(exc: httpx.TransportError, request: httpx.Request | None = None) -> NetworkError:
    """Map an httpx transport failure (connect, TLS, timeout) to NetworkError."""
    if isinstance(exc, httpx.TimeoutException):
        reason = "timed out"
    elif isinstance(exc, httpx.ConnectError):
        reason = "connection failed"
    else:
        reason = "transport failure"
    return NetworkError(f"Request{_describe(request)} {reason}: {exc}")


def raise_for_status(response: httpx.Response) -> None:
    """Raise the classified error for a failed response.

    Args:
        response: HTTP response object

    Raises:
        RegistryError subclass based on status code
    """
    try:
        request = response.request
    except RuntimeError:
        # Responses built outside a client have no request attached
        request = None

    error = classify_response(response, request)
    if error is not None:
        raise error
