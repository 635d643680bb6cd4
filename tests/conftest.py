"""Pytest configuration and shared fixtures for registry-client tests."""

import httpx
import pytest

AUTH_HOST = "auth.example.com"


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    """Auto-cleanup: Clear registry environment variables before each test.

    This prevents test pollution when testing settings resolution.
    """
    import os

    for key in list(os.environ.keys()):
        if key.startswith(("REGISTRY_", "TEST_")):
            monkeypatch.delenv(key, raising=False)

    yield


@pytest.fixture
def call_log():
    """Requests seen by a mock handler, split by registry and token service."""

    class CallLog:
        def __init__(self):
            self.registry: list[httpx.Request] = []
            self.token: list[httpx.Request] = []

        def record(self, request: httpx.Request) -> None:
            if request.url.host == AUTH_HOST:
                self.token.append(request)
            else:
                self.registry.append(request)

    return CallLog()
