"""Server configuration resource client."""

from typing import TYPE_CHECKING

from gerritclient.types.server import ServerInfo

if TYPE_CHECKING:
    from gerritclient.transport import HTTPTransport


class ServerClient:
    """Client for server-level configuration endpoints."""

    def __init__(self, transport: "HTTPTransport") -> None:
        self.transport = transport

    def version(self) -> str:
        """Return the server version string (e.g., "3.9.1")."""
        return self.transport.sync("GET", "/config/server/version")

    def info(self) -> ServerInfo:
        """Return the server configuration relevant to clients."""
        data = self.transport.sync("GET", "/config/server/info") or {}
        download = data.get("download", {})
        return ServerInfo(
            download_schemes=sorted(download.get("schemes", {})),
            default_branch=data.get("gerrit", {}).get("default_branch"),
            account_visibility=data.get("accounts", {}).get("visibility"),
            raw=data,
        )
