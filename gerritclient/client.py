"""
Gerrit client main entry point.

Provides the primary interface for interacting with a Gerrit server and for
moving changes between the server and a local workspace.
"""

import os
from collections.abc import Iterable
from typing import Any

import httpx

from gerritclient.auth import (
    AuthProvider,
    CredentialStore,
    NetrcCredentialStore,
    StaticCredentialStore,
)
from gerritclient.clients import (
    AccountDirectory,
    AccountsClient,
    ChangesClient,
    ServerClient,
    TopicsClient,
)
from gerritclient.exceptions import ConfigurationError
from gerritclient.git import GitWorkspace, Workspace, build_upload_refspec
from gerritclient.identifiers import ChangeRef
from gerritclient.logging import get_logger
from gerritclient.options import DOWNLOAD_OPTIONS
from gerritclient.reconcile import FetchReconciler
from gerritclient.transport import HTTPTransport
from gerritclient.types.changes import ChangeInfo

logger = get_logger()


class GerritClient:
    """
    Main client for interacting with a Gerrit server.

    Aggregates all resource clients and handles authentication.

    Example:
        ```python
        from gerritclient import GerritClient

        client = GerritClient(host="review.example.org")

        # Or create from environment variables
        client = GerritClient.from_env()

        change = client.changes.get(35216)
        client.changes.set_code_review(change.identifier, 2, "Looks good")
        client.topics.add_reviewers("login-rework", ["bob", "carol"])
        ```
    """

    DEFAULT_PROTOCOL = "https://"
    DEFAULT_ENDPOINT_PREFIX = "/a"
    DEFAULT_TIMEOUT = 30.0
    DEFAULT_REMOTE = "origin"

    def __init__(
        self,
        host: str,
        credentials: CredentialStore | None = None,
        protocol: str = DEFAULT_PROTOCOL,
        endpoint_prefix: str = DEFAULT_ENDPOINT_PREFIX,
        timeout: float = DEFAULT_TIMEOUT,
        http_transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize the Gerrit client.

        Args:
            host: Server host, optionally with port
            credentials: Credential store (default: ~/.netrc)
            protocol: URL scheme with separator (default: "https://")
            endpoint_prefix: REST root (default: "/a", authenticated API)
            timeout: Request timeout in seconds (default: 30.0)
            http_transport: Optional httpx transport, mainly for tests
        """
        if not host:
            raise ConfigurationError("A Gerrit host is required")

        self.host = host
        self.protocol = protocol
        self.endpoint_prefix = endpoint_prefix
        self.timeout = timeout
        self.auth = AuthProvider(credentials or NetrcCredentialStore())

        self._transport = HTTPTransport(
            host=host,
            auth=self.auth,
            protocol=protocol,
            endpoint_prefix=endpoint_prefix,
            timeout=timeout,
            http_transport=http_transport,
        )

        # Initialize resource clients
        self.server = ServerClient(self._transport)
        self.accounts = AccountsClient(self._transport)
        self.changes = ChangesClient(self._transport)
        self.topics = TopicsClient(self.changes)
        self.account_directory = AccountDirectory(self.accounts)

    @classmethod
    def from_env(
        cls,
        timeout: float = DEFAULT_TIMEOUT,
        http_transport: httpx.BaseTransport | None = None,
    ) -> "GerritClient":
        """
        Create a client from environment variables.

        Environment variables:
            GERRIT_HOST: Server host (required)
            GERRIT_PROTOCOL: URL scheme (optional, default: https://)
            GERRIT_ENDPOINT_PREFIX: REST root (optional, default: /a)
            GERRIT_USERNAME / GERRIT_PASSWORD: Static credentials (optional, set both)
            GERRIT_NETRC_FILE: netrc file used when no static credentials are set
                (optional, default: ~/.netrc)

        Raises:
            ConfigurationError: If required environment variables are missing
        """
        host = os.environ.get("GERRIT_HOST")
        protocol = os.environ.get("GERRIT_PROTOCOL", cls.DEFAULT_PROTOCOL)
        endpoint_prefix = os.environ.get("GERRIT_ENDPOINT_PREFIX", cls.DEFAULT_ENDPOINT_PREFIX)
        username = os.environ.get("GERRIT_USERNAME")
        password = os.environ.get("GERRIT_PASSWORD")
        netrc_file = os.environ.get("GERRIT_NETRC_FILE")

        if not host:
            raise ConfigurationError("GERRIT_HOST environment variable not set")

        if bool(username) != bool(password):
            raise ConfigurationError(
                "GERRIT_USERNAME and GERRIT_PASSWORD must be set together"
            )

        credentials: CredentialStore
        if username and password:
            credentials = StaticCredentialStore({host: (username, password)})
        else:
            credentials = NetrcCredentialStore(netrc_file)

        return cls(
            host=host,
            credentials=credentials,
            protocol=protocol,
            endpoint_prefix=endpoint_prefix,
            timeout=timeout,
            http_transport=http_transport,
        )

    @property
    def transport(self) -> HTTPTransport:
        """Get the underlying HTTP transport (for advanced use cases)."""
        return self._transport

    def download(
        self,
        change: ChangeRef,
        workspace: Workspace,
        remote: str = DEFAULT_REMOTE,
    ) -> str:
        """
        Fetch a change into its local review branch and check it out.

        Returns:
            Name of the local branch

        Raises:
            MetadataError: If the change has no usable current revision
            TrackingConflict: If the review branch tracks another upstream
        """
        info = self.changes.get(change, options=DOWNLOAD_OPTIONS)
        reconciler = FetchReconciler(
            workspace, remote=remote, account_directory=self.account_directory
        )
        return reconciler.reconcile(info)

    def upload(
        self,
        workspace: GitWorkspace,
        branch: str,
        remote: str = DEFAULT_REMOTE,
        topic: str | None = None,
        reviewers: Iterable[str] = (),
        assignee: str | None = None,
        wip: bool = False,
        ready: bool = False,
    ) -> list[ChangeInfo]:
        """
        Push HEAD for review and return the changes it created or updated.

        The changes are found by asking the server for the caller's changes
        at the pushed commit, then the optional assignee is set on each.
        """
        refspec = build_upload_refspec(
            branch, topic=topic, reviewers=reviewers, wip=wip, ready=ready
        )
        head = workspace.head_commit()
        workspace.push(remote, refspec)

        changes = self.changes.find_changes_for_commits([head])
        logger.info("Upload of %s matched %d change(s)", head, len(changes))

        if assignee:
            for info in changes:
                self.changes.set_assignee(info.identifier, assignee)
        return changes

    def close(self) -> None:
        """Close the client and release resources."""
        self._transport.close()

    def __enter__(self) -> "GerritClient":
        """Context manager entry."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit - closes the client."""
        self.close()
