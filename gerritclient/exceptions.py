"""Gerrit client exception classes."""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from gerritclient.clients.topics import FanoutResult


class GerritError(Exception):
    """Base exception for all Gerrit client errors."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")


class ConfigurationError(GerritError):
    """Raised when client configuration is invalid or missing."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class AuthError(GerritError):
    """Raised when no stored credentials match the host."""

    def __init__(self, host: str) -> None:
        super().__init__("AUTH_ERROR", f"No credentials found for host {host!r}")
        self.host = host


class TransportError(GerritError):
    """Raised on connection-level failures (DNS, refused, TLS, timeout)."""

    def __init__(self, method: str, url: str, message: str) -> None:
        super().__init__("TRANSPORT_ERROR", f"{method} {url}: {message}")
        self.method = method
        self.url = url


class ProtocolError(GerritError):
    """
    Raised when a response body is not a framed JSON document.

    The request and the raw response are kept verbatim so the failure can be
    diagnosed after the fact.
    """

    def __init__(
        self,
        message: str,
        method: str,
        url: str,
        headers: dict[str, str],
        body: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__("PROTOCOL_ERROR", f"{message} ({method} {url})")
        self.method = method
        self.url = url
        self.headers = headers
        self.body = body
        self.status_code = status_code


class HttpStatusError(GerritError):
    """Raised when the server answers with a non-2xx status."""

    def __init__(
        self,
        status_code: int,
        body: str,
        method: str | None = None,
        url: str | None = None,
    ) -> None:
        message = body.strip() or f"HTTP {status_code}"
        super().__init__(f"HTTP_{status_code}", message)
        self.status_code = status_code
        self.body = body
        self.method = method
        self.url = url


class AuthenticationError(HttpStatusError):
    """Raised on 401: the server rejected the credentials."""

    pass


class AuthorizationError(HttpStatusError):
    """Raised on 403: access is denied."""

    pass


class NotFoundError(HttpStatusError):
    """Raised when a resource is not found."""

    pass


class ConflictError(HttpStatusError):
    """Raised on conflicts (change closed, topic already set, etc.)."""

    pass


class ValidationError(HttpStatusError):
    """Raised on other 4xx responses."""

    pass


class ServerError(HttpStatusError):
    """Raised on server errors (5xx)."""

    pass


class MetadataError(GerritError):
    """Raised when a required field is missing from server metadata."""

    def __init__(self, field: str, context: str | None = None) -> None:
        message = f"Missing required field {field!r}"
        if context:
            message = f"{message} in {context}"
        super().__init__("METADATA_ERROR", message)
        self.field = field


class TrackingConflict(GerritError):
    """Raised when a local branch already tracks a different upstream."""

    def __init__(
        self,
        branch: str,
        expected: tuple[str, str],
        actual: tuple[str, str] | None,
    ) -> None:
        found = f"{actual[0]}/{actual[1]}" if actual else "nothing"
        super().__init__(
            "TRACKING_CONFLICT",
            f"Branch {branch!r} tracks {found}, expected "
            f"{expected[0]}/{expected[1]}; refusing to repoint it",
        )
        self.branch = branch
        self.expected = expected
        self.actual = actual


class WorkspaceError(GerritError):
    """Raised when a git command in the local workspace fails."""

    def __init__(self, command: list[str], stderr: str, returncode: int | None = None) -> None:
        super().__init__(
            "WORKSPACE_ERROR",
            f"{' '.join(command)} failed: {stderr.strip() or 'no output'}",
        )
        self.command = command
        self.stderr = stderr
        self.returncode = returncode


class TopicFanoutError(GerritError):
    """Raised by FanoutResult.raise_for_failure() when an item failed."""

    def __init__(self, result: "FanoutResult", cause: Any = None) -> None:
        failed = result.failed
        where = str(failed.identifier) if failed else "unknown change"
        super().__init__(
            "TOPIC_FANOUT_ERROR",
            f"Topic {result.topic!r} stopped at {where} after "
            f"{len(result.succeeded)} change(s): {cause}",
        )
        self.result = result
