"""Authentication components for registry clients.

This module provides:
- ``WWW-Authenticate`` challenge parsing (Basic and Bearer)
- Bearer tokens and a thread-safe token cache
- Credentials and multi-source credential resolution
"""

from registry_client.auth.challenge import (
    BasicChallenge,
    BearerChallenge,
    Challenge,
    challenges_from_response,
    parse_challenges,
)
from registry_client.auth.credentials import ANONYMOUS, CredentialResolver, Credentials
from registry_client.auth.exceptions import (
    CredentialError,
    CredentialFileError,
    CredentialNotFoundError,
)
from registry_client.auth.tokens import Token, TokenCache

__all__ = [
    "ANONYMOUS",
    "BasicChallenge",
    "BearerChallenge",
    "Challenge",
    "CredentialError",
    "CredentialFileError",
    "CredentialNotFoundError",
    "CredentialResolver",
    "Credentials",
    "Token",
    "TokenCache",
    "challenges_from_response",
    "parse_challenges",
]
