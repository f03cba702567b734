"""
Credential lookup for Gerrit hosts.

The server is accessed with HTTP Basic authentication using one static
username/password pair per host. Where the pair is stored is up to the
credential store; this module only relies on the lookup contract.
"""

import base64
import netrc
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from gerritclient.exceptions import AuthError, ConfigurationError
from gerritclient.logging import get_logger

logger = get_logger()


@dataclass(frozen=True)
class Credentials:
    """A username/password pair for one host."""

    username: str
    password: str

    def basic_token(self) -> str:
        """Return base64("username:password") for the Authorization header."""
        raw = f"{self.username}:{self.password}".encode("utf-8")
        return base64.b64encode(raw).decode("ascii")

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, password='[REDACTED]')"


class CredentialStore(Protocol):
    """Anything that can map a host to a stored username/password."""

    def lookup(self, host: str) -> tuple[str, str] | None:
        ...


class StaticCredentialStore:
    """In-memory credential store keyed by host."""

    def __init__(self, entries: dict[str, tuple[str, str]] | None = None) -> None:
        self._entries = dict(entries or {})

    def add(self, host: str, username: str, password: str) -> None:
        self._entries[host] = (username, password)

    def lookup(self, host: str) -> tuple[str, str] | None:
        return self._entries.get(host)


class NetrcCredentialStore:
    """
    Credential store backed by a netrc file.

    The file is parsed on every lookup so edits are picked up without
    restarting. Entries look like::

        machine review.example.org login alice password s3cret
    """

    def __init__(self, path: str | Path | None = None) -> None:
        if path is None:
            path = Path(os.path.expanduser("~")) / ".netrc"
        self.path = Path(path)

    def lookup(self, host: str) -> tuple[str, str] | None:
        if not self.path.exists():
            logger.debug("netrc file %s does not exist", self.path)
            return None

        try:
            parsed = netrc.netrc(str(self.path))
        except netrc.NetrcParseError as e:
            raise ConfigurationError(f"Cannot parse {self.path}: {e}") from e

        entry = parsed.authenticators(host)
        if entry is None:
            return None

        login, _account, password = entry
        if not login or password is None:
            return None
        return login, password


class AuthProvider:
    """
    Resolves stored credentials for a host into a Basic auth token.

    Every call performs a fresh lookup; nothing is cached.

    Example:
        ```python
        store = StaticCredentialStore({"review.example.org": ("alice", "s3cret")})
        auth = AuthProvider(store)
        auth.token("review.example.org")  # "YWxpY2U6czNjcmV0"
        ```
    """

    def __init__(self, store: CredentialStore) -> None:
        self.store = store

    def resolve(self, host: str) -> Credentials:
        """
        Look up the credentials stored for a host.

        Raises:
            AuthError: If no matching entry exists
        """
        entry = self.store.lookup(host)
        if entry is None:
            raise AuthError(host)
        username, password = entry
        return Credentials(username=username, password=password)

    def token(self, host: str) -> str:
        """Return the Basic auth token for a host."""
        return self.resolve(host).basic_token()

    def authorization_header(self, host: str) -> str:
        """Return the full Authorization header value for a host."""
        return f"Basic {self.token(host)}"
