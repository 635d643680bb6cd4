"""Tests for registry credentials and multi-source credential resolution."""

import base64
import logging

import pytest

from registry_client.auth import ANONYMOUS, CredentialResolver, Credentials
from registry_client.auth.exceptions import CredentialFileError, CredentialNotFoundError


class TestCredentials:
    @pytest.mark.unit
    def test_anonymous(self):
        assert ANONYMOUS.is_anonymous
        assert Credentials().is_anonymous
        assert not Credentials("user", "pass").is_anonymous

    @pytest.mark.unit
    def test_basic_auth_header(self):
        header = Credentials("user", "p@ss:word").basic_auth_header()

        assert header.startswith("Basic ")
        assert base64.b64decode(header.removeprefix("Basic ")) == b"user:p@ss:word"

    @pytest.mark.unit
    def test_repr_hides_password(self):
        assert "hunter2" not in repr(Credentials("user", "hunter2"))


class TestCredentialResolverInit:
    def test_init_skip_dotenv(self):
        resolver = CredentialResolver(load_dotenv=False)
        assert not resolver._dotenv_loaded

    def test_init_with_custom_dotenv_path(self, tmp_path):
        dotenv_file = tmp_path / ".env"
        dotenv_file.write_text("TEST_VAR=test_value\n")

        resolver = CredentialResolver(dotenv_path=str(dotenv_file))
        assert resolver._dotenv_loaded

    def test_dotenv_values_reach_the_environment(self, tmp_path):
        dotenv_file = tmp_path / ".env"
        dotenv_file.write_text("TEST_DOTENV_USER=from-dotenv\n")

        resolver = CredentialResolver(dotenv_path=str(dotenv_file))

        assert resolver.resolve(env_var_name="TEST_DOTENV_USER") == "from-dotenv"


class TestCredentialResolverResolve:
    """Priority order: explicit value, then environment, then default."""

    def test_explicit_value_overrides_all(self, monkeypatch):
        monkeypatch.setenv("TEST_PRIORITY_KEY", "env-value")
        resolver = CredentialResolver(load_dotenv=False)

        result = resolver.resolve(value="explicit-value", env_var_name="TEST_PRIORITY_KEY", default="default-value")

        assert result == "explicit-value"

    def test_environment_overrides_default(self, monkeypatch):
        monkeypatch.setenv("TEST_PRIORITY_KEY", "env-value")
        resolver = CredentialResolver(load_dotenv=False)

        assert resolver.resolve(env_var_name="TEST_PRIORITY_KEY", default="default-value") == "env-value"

    def test_default_used_when_nothing_else_set(self):
        resolver = CredentialResolver(load_dotenv=False)

        assert resolver.resolve(env_var_name="TEST_MISSING", default="default-value") == "default-value"

    def test_returns_none_when_not_found(self):
        assert CredentialResolver(load_dotenv=False).resolve(env_var_name="TEST_MISSING") is None

    def test_raises_when_required_and_not_found(self):
        resolver = CredentialResolver(load_dotenv=False)

        with pytest.raises(CredentialNotFoundError) as exc_info:
            resolver.resolve(env_var_name="TEST_MISSING", required=True)

        assert "Required credential not found" in str(exc_info.value)
        assert exc_info.value.env_var_name == "TEST_MISSING"


class TestCredentialResolverFromFile:
    def test_explicit_path_is_stripped(self, tmp_path):
        cred_file = tmp_path / "password"
        cred_file.write_text("  s3cret  \n")

        result = CredentialResolver(load_dotenv=False).resolve_from_file(file_path=cred_file)

        assert result == "s3cret"

    def test_path_from_env_var(self, tmp_path, monkeypatch):
        cred_file = tmp_path / "password"
        cred_file.write_text("from-file")
        monkeypatch.setenv("REGISTRY_PASSWORD_FILE", str(cred_file))

        result = CredentialResolver(load_dotenv=False).resolve_from_file(env_var_name="REGISTRY_PASSWORD_FILE")

        assert result == "from-file"

    def test_tilde_expansion(self, tmp_path, monkeypatch):
        fake_home = tmp_path / "home"
        (fake_home / ".docker").mkdir(parents=True)
        (fake_home / ".docker" / "password").write_text("home-secret")
        monkeypatch.setenv("HOME", str(fake_home))

        result = CredentialResolver(load_dotenv=False).resolve_from_file(file_path="~/.docker/password")

        assert result == "home-secret"

    def test_missing_file(self):
        resolver = CredentialResolver(load_dotenv=False)

        assert resolver.resolve_from_file(file_path="/nonexistent/password") is None
        with pytest.raises(CredentialFileError, match="not found"):
            resolver.resolve_from_file(file_path="/nonexistent/password", required=True)

    def test_directory_instead_of_file(self, tmp_path):
        resolver = CredentialResolver(load_dotenv=False)

        assert resolver.resolve_from_file(file_path=tmp_path) is None
        with pytest.raises(CredentialFileError):
            resolver.resolve_from_file(file_path=tmp_path, required=True)

    def test_no_path(self):
        resolver = CredentialResolver(load_dotenv=False)

        assert resolver.resolve_from_file() is None
        with pytest.raises(CredentialFileError, match="TEST_UNSET_FILE"):
            resolver.resolve_from_file(env_var_name="TEST_UNSET_FILE", required=True)


class TestResolveCredentials:
    @pytest.mark.unit
    def test_anonymous_when_nothing_configured(self):
        assert CredentialResolver(load_dotenv=False).resolve_credentials() is ANONYMOUS

    @pytest.mark.unit
    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("REGISTRY_USERNAME", "user")
        monkeypatch.setenv("REGISTRY_PASSWORD", "pass")

        credentials = CredentialResolver(load_dotenv=False).resolve_credentials()

        assert credentials == Credentials("user", "pass")

    @pytest.mark.unit
    def test_explicit_values_win(self, monkeypatch):
        monkeypatch.setenv("REGISTRY_USERNAME", "env-user")
        monkeypatch.setenv("REGISTRY_PASSWORD", "env-pass")

        credentials = CredentialResolver(load_dotenv=False).resolve_credentials(username="me", password="mine")

        assert credentials == Credentials("me", "mine")

    @pytest.mark.unit
    def test_password_file_fallback(self, tmp_path, monkeypatch):
        password_file = tmp_path / "password"
        password_file.write_text("file-pass\n")
        monkeypatch.setenv("REGISTRY_USERNAME", "user")
        monkeypatch.setenv("REGISTRY_PASSWORD_FILE", str(password_file))

        credentials = CredentialResolver(load_dotenv=False).resolve_credentials()

        assert credentials == Credentials("user", "file-pass")

    @pytest.mark.unit
    def test_unreadable_password_file(self, tmp_path, monkeypatch):
        monkeypatch.setenv("REGISTRY_USERNAME", "user")
        monkeypatch.setenv("REGISTRY_PASSWORD_FILE", str(tmp_path / "missing"))

        with pytest.raises(CredentialFileError):
            CredentialResolver(load_dotenv=False).resolve_credentials()

    @pytest.mark.unit
    def test_username_without_password(self, monkeypatch):
        monkeypatch.setenv("REGISTRY_USERNAME", "user")

        with pytest.raises(CredentialNotFoundError) as exc_info:
            CredentialResolver(load_dotenv=False).resolve_credentials()

        assert exc_info.value.env_var_name == "REGISTRY_PASSWORD"

    @pytest.mark.unit
    def test_password_without_username(self):
        with pytest.raises(CredentialNotFoundError) as exc_info:
            CredentialResolver(load_dotenv=False).resolve_credentials(password="pass")

        assert exc_info.value.env_var_name == "REGISTRY_USERNAME"


class TestCredentialMasking:
    def test_password_is_masked_in_debug_logs(self, caplog):
        caplog.set_level(logging.DEBUG)

        CredentialResolver(load_dotenv=False).resolve_credentials(username="visible-user", password="super-secret")

        assert "super-secret" not in caplog.text
        assert "visible-user" in caplog.text
        assert "***" in caplog.text

    def test_file_credentials_are_masked(self, tmp_path, caplog):
        caplog.set_level(logging.DEBUG)
        cred_file = tmp_path / "password"
        cred_file.write_text("file-secret-xyz")

        CredentialResolver(load_dotenv=False).resolve_from_file(file_path=cred_file)

        assert "file-secret-xyz" not in caplog.text
        assert "***" in caplog.text
