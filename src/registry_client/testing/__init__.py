"""Testing utilities for registry clients.

Response factories for building ``httpx.MockTransport`` handlers that play
the part of a registry and its token service.

Example:
    ```python
    import httpx

    from registry_client import RegistryClient
    from registry_client.testing import create_challenge_response, create_token_response


    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "auth.example.com":
            return create_token_response("abc")
        if request.headers.get("authorization") != "Bearer abc":
            return create_challenge_response(bearer={"realm": "https://auth.example.com/token"})
        return httpx.Response(200, json={"tags": ["latest"]})


    registry = RegistryClient("https://registry.example.com", transport=httpx.MockTransport(handler))
    ```
"""

import httpx


def _format_challenge(scheme: str, params: dict[str, str]) -> str:
    rendered = ",".join(f'{key}="{value}"' for key, value in params.items())
    return f"{scheme} {rendered}" if rendered else scheme


def create_challenge_response(
    *,
    basic: dict[str, str] | None = None,
    bearer: dict[str, str] | None = None,
    separate_headers: bool = False,
) -> httpx.Response:
    """Build a ``401`` carrying Basic and/or Bearer challenges.

    Args:
        basic: Basic challenge parameters (e.g. ``{"realm": "Registry"}``)
        bearer: Bearer challenge parameters (realm, service, scope)
        separate_headers: One ``WWW-Authenticate`` header per challenge
            instead of a single comma separated header
    """
    challenges = []
    if basic is not None:
        challenges.append(_format_challenge("Basic", basic))
    if bearer is not None:
        challenges.append(_format_challenge("Bearer", bearer))

    if separate_headers:
        headers = [("WWW-Authenticate", challenge) for challenge in challenges]
    else:
        headers = [("WWW-Authenticate", ", ".join(challenges))] if challenges else []

    return httpx.Response(
        401,
        headers=headers,
        json={"errors": [{"code": "UNAUTHORIZED", "message": "authentication required", "detail": None}]},
    )


def create_token_response(token: str, expires_in: int | None = None, field: str = "token") -> httpx.Response:
    """Build a token service response."""
    body: dict[str, object] = {field: token}
    if expires_in is not None:
        body["expires_in"] = expires_in
    return httpx.Response(200, json=body)


def create_error_response(status_code: int, code: str, message: str, detail: object = None) -> httpx.Response:
    """Build a registry error response (``{"errors": [...]}`` body)."""
    return httpx.Response(
        status_code,
        json={"errors": [{"code": code, "message": message, "detail": detail}]},
    )


def create_page_response(body: object, next_url: str | None = None) -> httpx.Response:
    """Build a JSON page, with a ``Link: <next_url>; rel="next"`` header when given."""
    headers = {}
    if next_url is not None:
        headers["Link"] = f'<{next_url}>; rel="next"'
    return httpx.Response(200, headers=headers, json=body)


__all__ = [
    "create_challenge_response",
    "create_error_response",
    "create_page_response",
    "create_token_response",
]
