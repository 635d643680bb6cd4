"""Error mapping transport.

Outermost layer of the registry transport stack. Every failure leaving the
stack is a single ``RegistryError`` subclass:

| Outcome | Raised |
|---------|--------|
| ``httpx.TransportError`` (connect, DNS, TLS, timeout) | `NetworkError` |
| HTTP 401 | `AuthenticationError` |
| HTTP 404 | `NotFoundError` (a `ClientError`) |
| other HTTP 4xx | `ClientError` |
| HTTP 5xx | `ServerError` |
| ``RegistryError`` from an inner layer | re-raised unchanged |

Server errors are never retried here.
"""

import logging

import httpx

from registry_client.errors.exceptions import RegistryError
from registry_client.errors.handler import classify_response, classify_transport_error
from registry_client.transport.base import WrappingTransport

logger = logging.getLogger(__name__)


class ErrorMappingTransport(WrappingTransport):
    """Raise classified registry errors for failed requests.

    The failed response is read before raising and attached to the error,
    so headers and body stay available to callers.

    Example:
        ```python
        transport = ErrorMappingTransport(wrapped_transport=httpx.HTTPTransport())

        with httpx.Client(transport=transport) as client:
            try:
                client.get("https://registry.example.com/v2/missing/tags/list")
            except NotFoundError as e:
                print(e.status_code, e.details)
        ```
    """

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        try:
            response = self._wrapped_transport.handle_request(request)
        except RegistryError:
            raise
        except httpx.TransportError as e:
            logger.debug(f"Request {request.method} {request.url} failed: {e!r}")
            raise classify_transport_error(e, request) from e

        if response.status_code < 400:
            return response

        try:
            response.read()
        except httpx.TransportError as e:
            raise classify_transport_error(e, request) from e
        finally:
            response.close()

        response.request = request
        error = classify_response(response, request)
        logger.debug(f"Request {request.method} {request.url} failed with {response.status_code}")
        raise error
