"""Authentication transports for registry challenges.

Registries announce the authentication they require by answering ``401``
with a ``WWW-Authenticate`` challenge. Two layers satisfy those challenges
transparently:

- ``BasicAuthTransport``: retries once with ``Authorization: Basic ...``
- ``TokenAuthTransport``: exchanges the credentials for a bearer token at the
  challenge's realm, then retries once with ``Authorization: Bearer ...``

Each layer retries a request at most once, so a rejected credential never
loops. When a response offers both schemes, ``TokenAuthTransport`` defers to
the basic layer unless ``defer_to_basic=False`` or the URL is outside the
basic layer's ``base_url``.

See: https://distribution.github.io/distribution/spec/auth/token/

## Example

```python
import httpx

from registry_client.auth import Credentials, TokenCache
from registry_client.transport.auth import BasicAuthTransport, TokenAuthTransport

credentials = Credentials("user", "secret")
transport = BasicAuthTransport(
    wrapped_transport=TokenAuthTransport(
        wrapped_transport=httpx.HTTPTransport(),
        credentials=credentials,
        token_cache=TokenCache(),
    ),
    credentials=credentials,
    base_url="https://registry.example.com",
)
```
"""

import logging

import httpx

from registry_client.auth.challenge import (
    BasicChallenge,
    BearerChallenge,
    challenges_from_response,
    find_challenge,
)
from registry_client.auth.credentials import ANONYMOUS, Credentials
from registry_client.auth.tokens import Token, TokenCache
from registry_client.errors.exceptions import AuthenticationError
from registry_client.transport.base import WrappingTransport, url_in_scope, with_authorization

logger = logging.getLogger(__name__)


class BasicAuthTransport(WrappingTransport):
    """Answer ``Basic`` challenges with the configured credentials.

    Credentials are only sent to URLs below ``base_url`` (same scheme, host
    and port, path prefix). Responses that are not a ``401`` with a Basic
    challenge pass through unmodified.

    Args:
        wrapped_transport: The underlying transport to wrap
        credentials: Username and password to present
        base_url: Registry base URL credentials are restricted to (None: any)
    """

    def __init__(
        self,
        *,
        wrapped_transport: httpx.BaseTransport,
        credentials: Credentials | None = None,
        base_url: str | None = None,
    ) -> None:
        super().__init__(wrapped_transport=wrapped_transport)
        self.credentials = credentials or ANONYMOUS
        self._base_url = httpx.URL(base_url) if base_url else None

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        """Send the request, retrying once with Basic auth if challenged.

        Args:
            request: The HTTP request to send

        Returns:
            HTTP response (of the retry, if one was made)
        """
        request.read()
        response = self._wrapped_transport.handle_request(request)

        if response.status_code != 401 or self.credentials.is_anonymous:
            return response
        if not url_in_scope(request.url, self._base_url):
            return response

        challenge = find_challenge(challenges_from_response(response), BasicChallenge)
        if challenge is None:
            return response

        response.close()
        logger.debug(f"Basic challenge (realm={challenge.realm!r}) for {request.method} {request.url}, retrying")

        # A second 401 is passed up as-is
        return self._wrapped_transport.handle_request(
            with_authorization(request, self.credentials.basic_auth_header())
        )


class TokenAuthTransport(WrappingTransport):
    """Answer ``Bearer`` challenges with a token from the challenge's realm.

    The token is requested with ``GET <realm>?service=<service>&scope=<scope>``
    sent directly to the wrapped transport, authenticated with HTTP Basic when
    credentials are configured (anonymous otherwise). The original request
    is then retried once with the token.

    Args:
        wrapped_transport: The underlying transport to wrap
        credentials: Username and password for the token exchange
        token_cache: Shared cache of tokens (None: exchange on every challenge)
        defer_to_basic: Leave responses that also offer a Basic challenge to
            an outer ``BasicAuthTransport`` when credentials are configured
        base_url: Scope of the outer ``BasicAuthTransport``; responses for
            URLs outside it are answered here even when Basic is offered

    Raises (from ``handle_request``):
        AuthenticationError: The exchange failed, or the retried request was
            challenged again.
    """

    def __init__(
        self,
        *,
        wrapped_transport: httpx.BaseTransport,
        credentials: Credentials | None = None,
        token_cache: TokenCache | None = None,
        defer_to_basic: bool = True,
        base_url: str | None = None,
    ) -> None:
        super().__init__(wrapped_transport=wrapped_transport)
        self.credentials = credentials or ANONYMOUS
        self.token_cache = token_cache
        self.defer_to_basic = defer_to_basic
        self._base_url = httpx.URL(base_url) if base_url else None

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        """Send the request, retrying once with a bearer token if challenged.

        Args:
            request: The HTTP request to send

        Returns:
            HTTP response (of the retry, if one was made)
        """
        request.read()
        response = self._wrapped_transport.handle_request(request)
        if response.status_code != 401:
            return response

        challenges = challenges_from_response(response)
        challenge = find_challenge(challenges, BearerChallenge)
        if challenge is None:
            return response
        if (
            self.defer_to_basic
            and not self.credentials.is_anonymous
            and url_in_scope(request.url, self._base_url)
            and find_challenge(challenges, BasicChallenge) is not None
        ):
            return response

        response.close()
        logger.debug(
            f"Bearer challenge (realm={challenge.realm!r} service={challenge.service!r} "
            f"scope={challenge.scope!r}) for {request.method} {request.url}"
        )

        token = self._obtain_token(challenge, request)
        response = self._wrapped_transport.handle_request(with_authorization(request, f"Bearer {token.value}"))

        if response.status_code == 401 and find_challenge(challenges_from_response(response), BearerChallenge):
            response.read()
            response.close()
            if self.token_cache is not None:
                self.token_cache.invalidate(challenge.cache_key, token)
            raise AuthenticationError(
                f"Bearer token rejected for {request.method} {request.url} (scope={challenge.scope!r})",
                status_code=401,
                response=response,
            )

        return response

    def _obtain_token(self, challenge: BearerChallenge, request: httpx.Request) -> Token:
        if self.token_cache is not None:
            token = self.token_cache.get(challenge.cache_key)
            if token is not None:
                logger.debug(f"Using cached token for scope={challenge.scope!r}")
                return token

        token = self._exchange(challenge, request)
        if self.token_cache is not None:
            self.token_cache.put(challenge.cache_key, token)
        return token

    def _exchange(self, challenge: BearerChallenge, request: httpx.Request) -> Token:
        """Exchange credentials for a token at the challenge's realm."""
        try:
            realm = httpx.URL(challenge.realm)
        except httpx.InvalidURL as e:
            raise AuthenticationError(f"Malformed bearer challenge realm: {challenge.realm!r}") from e
        if realm.scheme not in ("http", "https") or not realm.host:
            raise AuthenticationError(f"Malformed bearer challenge realm: {challenge.realm!r}")

        params = {}
        if challenge.service:
            params["service"] = challenge.service
        if challenge.scope:
            params["scope"] = challenge.scope

        headers = {}
        if not self.credentials.is_anonymous:
            headers["Authorization"] = self.credentials.basic_auth_header()

        extensions = {}
        if "timeout" in request.extensions:
            extensions["timeout"] = request.extensions["timeout"]

        token_request = httpx.Request("GET", realm, params=params, headers=headers, extensions=extensions)
        logger.debug(f"Requesting token from {realm} service={challenge.service!r} scope={challenge.scope!r}")

        # Transport failures propagate to the error mapping layer as NetworkError
        response = self._wrapped_transport.handle_request(token_request)
        try:
            response.read()
        finally:
            response.close()

        if not response.is_success:
            logger.warning(f"Token exchange with {realm} failed with {response.status_code}")
            raise AuthenticationError(
                f"Token exchange with {realm} failed: HTTP {response.status_code}",
                status_code=response.status_code,
                response=response,
            )

        try:
            return Token.from_response_data(response.json())
        except ValueError as e:
            logger.warning(f"Malformed token response from {realm}: {e}")
            raise AuthenticationError(
                f"Malformed token response from {realm}: {e}",
                status_code=response.status_code,
                response=response,
            ) from e
