"""Parsing of ``WWW-Authenticate`` challenges.

A registry answers an unauthenticated request with ``401`` and one or more
challenges, for example::

    WWW-Authenticate: Bearer realm="https://auth.example.com/token",service="registry.example.com",scope="repository:library/nginx:pull"
    WWW-Authenticate: Basic realm="Registry Realm"

Several challenges may also share a single header, separated by commas.
Only the ``Basic`` and ``Bearer`` schemes are recognized; others are skipped.

See: https://datatracker.ietf.org/doc/html/rfc7235#section-4.1
"""

import re
from dataclasses import dataclass

import httpx

# token or key=value (quoted-string or token), optionally preceded by a comma
_TOKEN_CHARS = r"[!#$%&'*+.^_`|~0-9A-Za-z-]+"
_ELEMENT_RE = re.compile(
    rf"""
    \s*,?\s*
    (?:
        (?P<key>{_TOKEN_CHARS})\s*=\s*(?P<value>"(?:[^"\\]|\\.)*"|[^,\s]*)
      | (?P<scheme>{_TOKEN_CHARS})
    )
    """,
    re.VERBOSE,
)
_ESCAPE_RE = re.compile(r"\\(.)")


@dataclass(frozen=True)
class BasicChallenge:
    """``Basic realm="..."``."""

    realm: str = ""


@dataclass(frozen=True)
class BearerChallenge:
    """``Bearer realm="...",service="...",scope="..."``."""

    realm: str = ""
    service: str = ""
    scope: str = ""

    @property
    def cache_key(self) -> tuple[str, str, str]:
        return (self.realm, self.service, self.scope)


Challenge = BasicChallenge | BearerChallenge


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return _ESCAPE_RE.sub(r"\1", value[1:-1])
    return value


def _build_challenge(scheme: str, params: dict[str, str]) -> Challenge | None:
    scheme = scheme.lower()
    if scheme == "bearer":
        return BearerChallenge(
            realm=params.get("realm", ""),
            service=params.get("service", ""),
            scope=params.get("scope", ""),
        )
    if scheme == "basic":
        return BasicChallenge(realm=params.get("realm", ""))
    return None


def parse_challenges(header: str) -> list[Challenge]:
    """Parse one ``WWW-Authenticate`` header value into challenges.

    Args:
        header: Raw header value

    Returns:
        Recognized challenges in header order
    """
    challenges: list[Challenge] = []
    scheme: str | None = None
    params: dict[str, str] = {}

    pos = 0
    while pos < len(header):
        match = _ELEMENT_RE.match(header, pos)
        if match is None:
            break
        pos = match.end()

        if match.group("scheme"):
            if scheme is not None:
                challenge = _build_challenge(scheme, params)
                if challenge is not None:
                    challenges.append(challenge)
            scheme, params = match.group("scheme"), {}
        elif scheme is not None:
            params[match.group("key").lower()] = _unquote(match.group("value"))

    if scheme is not None:
        challenge = _build_challenge(scheme, params)
        if challenge is not None:
            challenges.append(challenge)

    return challenges


def challenges_from_response(response: httpx.Response) -> list[Challenge]:
    """Collect challenges from every ``WWW-Authenticate`` header of a response."""
    challenges: list[Challenge] = []
    for header in response.headers.get_list("www-authenticate"):
        challenges.extend(parse_challenges(header))
    return challenges


def find_challenge(challenges: list[Challenge], kind: type) -> Challenge | None:
    """Return the first challenge of the given class, if any."""
    for challenge in challenges:
        if isinstance(challenge, kind):
            return challenge
    return None
