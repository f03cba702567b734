"""
Tests for credential lookup and Basic auth token construction.
"""

import base64
from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from gerritclient.auth import (
    AuthProvider,
    Credentials,
    NetrcCredentialStore,
    StaticCredentialStore,
)
from gerritclient.exceptions import AuthError, ConfigurationError

HOST = "review.example.org"

# netrc tokens cannot contain whitespace or quotes
credential_text = st.text(
    min_size=1,
    max_size=40,
    alphabet=st.characters(blacklist_categories=("Cs", "Zs", "Cc")),
)


@given(username=credential_text, password=credential_text)
@settings(max_examples=100)
def test_resolve_yields_base64_of_username_colon_password(username: str, password: str) -> None:
    """For credentials (u, p) the token is exactly base64("u:p")."""
    auth = AuthProvider(StaticCredentialStore({HOST: (username, password)}))

    token = auth.token(HOST)

    expected = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    assert token == expected
    assert base64.b64decode(token).decode("utf-8") == f"{username}:{password}"


def test_authorization_header_uses_basic_scheme() -> None:
    auth = AuthProvider(StaticCredentialStore({HOST: ("alice", "s3cret")}))

    assert auth.authorization_header(HOST) == "Basic YWxpY2U6czNjcmV0"


def test_resolve_returns_credentials() -> None:
    auth = AuthProvider(StaticCredentialStore({HOST: ("alice", "s3cret")}))

    creds = auth.resolve(HOST)

    assert creds == Credentials(username="alice", password="s3cret")


def test_missing_host_raises_auth_error() -> None:
    auth = AuthProvider(StaticCredentialStore({HOST: ("alice", "s3cret")}))

    with pytest.raises(AuthError) as exc_info:
        auth.resolve("other.example.org")

    assert exc_info.value.host == "other.example.org"
    assert exc_info.value.code == "AUTH_ERROR"


def test_lookup_is_not_cached() -> None:
    """Each resolve() performs a fresh lookup."""
    store = StaticCredentialStore()
    auth = AuthProvider(store)

    with pytest.raises(AuthError):
        auth.resolve(HOST)

    store.add(HOST, "bob", "hunter2")
    assert auth.resolve(HOST).username == "bob"


def test_credentials_repr_hides_password() -> None:
    creds = Credentials(username="alice", password="s3cret")

    assert "s3cret" not in repr(creds)
    assert "alice" in repr(creds)


class TestNetrcCredentialStore:
    """Tests for the netrc-backed store."""

    def write_netrc(self, tmp_path: Path, content: str) -> Path:
        path = tmp_path / "netrc"
        path.write_text(content)
        path.chmod(0o600)
        return path

    def test_lookup_matching_machine(self, tmp_path: Path) -> None:
        path = self.write_netrc(
            tmp_path,
            f"machine other.example.org login bob password nope\n"
            f"machine {HOST} login alice password s3cret\n",
        )

        store = NetrcCredentialStore(path)

        assert store.lookup(HOST) == ("alice", "s3cret")

    def test_lookup_unknown_machine(self, tmp_path: Path) -> None:
        path = self.write_netrc(tmp_path, "machine other.example.org login bob password nope\n")

        assert NetrcCredentialStore(path).lookup(HOST) is None

    def test_missing_file_returns_none(self, tmp_path: Path) -> None:
        assert NetrcCredentialStore(tmp_path / "absent").lookup(HOST) is None

    def test_file_reread_on_every_lookup(self, tmp_path: Path) -> None:
        path = self.write_netrc(tmp_path, f"machine {HOST} login alice password one\n")
        store = NetrcCredentialStore(path)
        assert store.lookup(HOST) == ("alice", "one")

        self.write_netrc(tmp_path, f"machine {HOST} login alice password two\n")
        assert store.lookup(HOST) == ("alice", "two")

    def test_unparseable_file_raises_configuration_error(self, tmp_path: Path) -> None:
        path = self.write_netrc(tmp_path, "machine\n")

        with pytest.raises(ConfigurationError):
            NetrcCredentialStore(path).lookup(HOST)

    def test_auth_provider_with_netrc(self, tmp_path: Path) -> None:
        path = self.write_netrc(tmp_path, f"machine {HOST} login alice password s3cret\n")
        auth = AuthProvider(NetrcCredentialStore(path))

        assert auth.token(HOST) == "YWxpY2U6czNjcmV0"
