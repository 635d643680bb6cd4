"""Bearer tokens and a thread-safe token cache.

Tokens obtained from a registry's authorization service are cached per
``(realm, service, scope)`` so concurrent and subsequent requests that are
challenged for the same scope skip the exchange round trip.

Reads are lock-free: the cache only ever stores immutable ``Token`` values and
replaces dictionary entries atomically. Writes and invalidations are
serialized with a lock.
"""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from threading import Lock
from typing import Any

logger = logging.getLogger(__name__)

# Lifetime assumed when the authorization service omits expires_in
DEFAULT_EXPIRES_IN = 60

# Upper bound on how early a token counts as expired
MAX_EXPIRY_LEEWAY = timedelta(seconds=10)

CacheKey = tuple[str, str, str]


def _parse_issued_at(value: Any) -> datetime | None:
    if not isinstance(value, str):
        return None
    try:
        issued_at = datetime.fromisoformat(value)
    except ValueError:
        return None
    if issued_at.tzinfo is None:
        issued_at = issued_at.replace(tzinfo=UTC)
    return issued_at


@dataclass(frozen=True)
class Token:
    """A bearer credential with an optional expiry.

    The token counts as expired ``leeway`` before ``expires_at``: a tenth of
    its lifetime, at most ``MAX_EXPIRY_LEEWAY``, or the full maximum when
    the issue time is unknown.
    """

    value: str = field(repr=False)
    expires_at: datetime | None = None
    issued_at: datetime | None = None

    @classmethod
    def from_response_data(cls, data: Any, now: datetime | None = None) -> "Token":
        """Build a token from an authorization service JSON document.

        Accepts both ``token`` and the OAuth2 ``access_token`` field. The
        lifetime counts from ``issued_at`` when the service sends one that
        is not later than ``now``.

        Args:
            data: Decoded JSON body of the token response
            now: Reference time for expiry (defaults to current UTC time)

        Returns:
            Token instance

        Raises:
            ValueError: If the document carries no usable token
        """
        if not isinstance(data, dict):
            raise ValueError("token response is not a JSON object")

        value = data.get("token") or data.get("access_token")
        if not isinstance(value, str) or not value:
            raise ValueError("token response carries no token")

        expires_in = data.get("expires_in")
        if expires_in is None:
            expires_in = DEFAULT_EXPIRES_IN
        if isinstance(expires_in, bool) or not isinstance(expires_in, (int, float)) or expires_in < 0:
            raise ValueError(f"invalid expires_in: {expires_in!r}")

        now = now or datetime.now(UTC)
        issued_at = _parse_issued_at(data.get("issued_at"))
        if issued_at is None or issued_at > now:
            issued_at = now

        return cls(value=value, expires_at=issued_at + timedelta(seconds=expires_in), issued_at=issued_at)

    @property
    def leeway(self) -> timedelta:
        if self.expires_at is None or self.issued_at is None:
            return MAX_EXPIRY_LEEWAY
        return min(MAX_EXPIRY_LEEWAY, (self.expires_at - self.issued_at) / 10)

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.expires_at is None:
            return False
        return (now or datetime.now(UTC)) >= self.expires_at - self.leeway


class TokenCache:
    """Cache of bearer tokens keyed by challenge ``(realm, service, scope)``.

    Example:
        ```python
        cache = TokenCache()
        cache.put(challenge.cache_key, token)
        token = cache.get(challenge.cache_key)  # None once expired
        ```
    """

    def __init__(self) -> None:
        self._tokens: dict[CacheKey, Token] = {}
        self._lock = Lock()

    def get(self, key: CacheKey) -> Token | None:
        """Return a still valid token for ``key``, or None."""
        token = self._tokens.get(key)
        if token is None or token.is_expired():
            return None
        return token

    def put(self, key: CacheKey, token: Token) -> None:
        with self._lock:
            self._tokens[key] = token
        logger.debug(f"Cached token for realm={key[0]} service={key[1]} scope={key[2]}")

    def invalidate(self, key: CacheKey, token: Token | None = None) -> None:
        """Drop the entry for ``key``.

        When ``token`` is given, the entry is only dropped if it still holds
        that token, so a token refreshed concurrently by another request
        survives.
        """
        with self._lock:
            current = self._tokens.get(key)
            if current is None:
                return
            if token is not None and current != token:
                return
            del self._tokens[key]
        logger.debug(f"Invalidated token for realm={key[0]} service={key[1]} scope={key[2]}")

    def clear(self) -> None:
        with self._lock:
            self._tokens.clear()

    def __len__(self) -> int:
        return len(self._tokens)
