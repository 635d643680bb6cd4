"""Structured exceptions for registry API errors."""

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

    from registry_client.errors.models import RegistryErrorDetail


class ErrorKind(str, Enum):
    """Failure classes every layer of the transport stack reports."""

    NETWORK = "network"
    AUTHENTICATION = "authentication"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    PROTOCOL_VIOLATION = "protocol_violation"


class RegistryError(Exception):
    """Base exception for registry errors."""

    kind: ErrorKind | None = None

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response: "httpx.Response | None" = None,
        details: "list[RegistryErrorDetail] | None" = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response = response
        self.details = details if details is not None else []

    @property
    def cause(self) -> BaseException | None:
        """The underlying exception this error was raised from, if any."""
        return self.__cause__


class NetworkError(RegistryError):
    """Connection, DNS, TLS, timeout or cancellation failures."""

    kind = ErrorKind.NETWORK


class AuthenticationError(RegistryError):
    """An authentication challenge could not be satisfied."""

    kind = ErrorKind.AUTHENTICATION


class ClientError(RegistryError):
    """4xx client errors other than 401."""

    kind = ErrorKind.CLIENT_ERROR


class NotFoundError(ClientError):
    """404 Not Found."""

    pass


class ServerError(RegistryError):
    """5xx server errors."""

    kind = ErrorKind.SERVER_ERROR


class ProtocolViolationError(RegistryError):
    """Malformed server response: bad JSON, missing header, pagination cycle."""

    kind = ErrorKind.PROTOCOL_VIOLATION
