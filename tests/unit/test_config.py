"""Tests for registry settings resolution."""

import pytest

from registry_client.auth import ANONYMOUS, CredentialResolver, Credentials
from registry_client.auth.exceptions import CredentialNotFoundError
from registry_client.config import RegistrySettings, resolve_registry_settings


@pytest.fixture
def resolver():
    return CredentialResolver(load_dotenv=False)


@pytest.mark.unit
def test_url_is_required(resolver):
    with pytest.raises(CredentialNotFoundError) as exc_info:
        resolve_registry_settings(resolver=resolver)

    assert exc_info.value.env_var_name == "REGISTRY_URL"


@pytest.mark.unit
def test_anonymous_defaults(resolver):
    settings = resolve_registry_settings(url="https://registry.example.com", resolver=resolver)

    assert settings == RegistrySettings(url="https://registry.example.com")
    assert settings.credentials is ANONYMOUS
    assert settings.insecure is False


@pytest.mark.unit
def test_from_environment(resolver, monkeypatch):
    monkeypatch.setenv("REGISTRY_URL", "https://registry.example.com")
    monkeypatch.setenv("REGISTRY_USERNAME", "user")
    monkeypatch.setenv("REGISTRY_PASSWORD", "pass")
    monkeypatch.setenv("REGISTRY_INSECURE", "true")

    settings = resolve_registry_settings(resolver=resolver)

    assert settings.url == "https://registry.example.com"
    assert settings.credentials == Credentials("user", "pass")
    assert settings.insecure is True


@pytest.mark.unit
@pytest.mark.parametrize(("flag", "expected"), [("1", True), ("YES", True), (" on ", True), ("0", False), ("", False)])
def test_insecure_flag_parsing(resolver, monkeypatch, flag, expected):
    monkeypatch.setenv("REGISTRY_INSECURE", flag)

    settings = resolve_registry_settings(url="https://registry.example.com", resolver=resolver)

    assert settings.insecure is expected


@pytest.mark.unit
def test_explicit_insecure_wins(resolver, monkeypatch):
    monkeypatch.setenv("REGISTRY_INSECURE", "true")

    settings = resolve_registry_settings(url="https://registry.example.com", insecure=False, resolver=resolver)

    assert settings.insecure is False
