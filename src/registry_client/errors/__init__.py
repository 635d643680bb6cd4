"""Error taxonomy and classification for registry clients."""

from registry_client.errors.exceptions import (
    AuthenticationError,
    ClientError,
    ErrorKind,
    NetworkError,
    NotFoundError,
    ProtocolViolationError,
    RegistryError,
    ServerError,
)
from registry_client.errors.handler import classify_response, classify_transport_error, raise_for_status
from registry_client.errors.models import RegistryErrorDetail

__all__ = [
    "AuthenticationError",
    "ClientError",
    "ErrorKind",
    "NetworkError",
    "NotFoundError",
    "ProtocolViolationError",
    "RegistryError",
    "RegistryErrorDetail",
    "ServerError",
    "classify_response",
    "classify_transport_error",
    "raise_for_status",
]
