"""
HTTP Transport for the Gerrit client.

Issues one blocking request per call, unwraps Gerrit's framed JSON responses
and turns failures into typed exceptions. There is no retry: every error
surfaces to the caller as soon as it happens.
"""

import time
from typing import Any

import httpx

from gerritclient.auth import AuthProvider
from gerritclient.envelope import FramingError, RequestSpec, ResponseEnvelope
from gerritclient.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    HttpStatusError,
    NotFoundError,
    ProtocolError,
    ServerError,
    TransportError,
    ValidationError,
)
from gerritclient.logging import log_http_request, log_http_response


class HTTPTransport:
    """
    HTTP transport layer for the Gerrit REST API.

    Handles:
    - Basic authentication resolved per request from an AuthProvider
    - Target construction (protocol + host + endpoint prefix + path)
    - Stripping the ``)]}'`` framing line before JSON decoding
    - Error response parsing into typed exceptions
    """

    def __init__(
        self,
        host: str,
        auth: AuthProvider,
        protocol: str = "https://",
        endpoint_prefix: str = "/a",
        timeout: float = 30.0,
        http_transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize HTTP transport.

        Args:
            host: Server host, optionally with port (e.g., "review.example.org")
            auth: Resolves the Basic auth token for the host
            protocol: URL scheme including separator (default: "https://")
            endpoint_prefix: REST root below the host (default: "/a", authenticated)
            timeout: Request timeout in seconds
            http_transport: Optional httpx transport (used by tests to fake the server)
        """
        self.host = host
        self.auth = auth
        self.protocol = protocol
        self.endpoint_prefix = endpoint_prefix.rstrip("/")
        self.timeout = timeout

        self._client = httpx.Client(
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            transport=http_transport,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "HTTPTransport":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def target(self, path: str) -> str:
        """Build the full request URL for an API path."""
        if not path.startswith("/"):
            path = f"/{path}"
        return f"{self.protocol}{self.host}{self.endpoint_prefix}{path}"

    def sync(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
    ) -> Any:
        """
        Make a request and decode the framed JSON response.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            path: API path including query string (e.g., "/changes/?q=is:open")
            body: JSON payload for mutating requests

        Returns:
            Decoded JSON document, or None for a 204 response

        Raises:
            AuthError: If no credentials are stored for the host
            TransportError: On connection failures
            HttpStatusError: On non-2xx responses
            ProtocolError: If the body is not a framed JSON document
        """
        spec = RequestSpec.json(method, path, body)
        headers = self._headers()
        envelope = self._send(spec, headers)

        if not envelope.has_document:
            return None

        try:
            return envelope.decode()
        except FramingError as e:
            raise ProtocolError(
                str(e),
                method=spec.method,
                url=self.target(spec.path),
                headers=headers,
                body=envelope.raw_body,
                status_code=envelope.status,
            ) from e

    def raw(self, method: str, path: str) -> str:
        """
        Make a request and return the body text without unframing it.

        Used for endpoints such as the patch download that answer with plain
        (base64) text instead of JSON.
        """
        spec = RequestSpec(method=method, path=path)
        envelope = self._send(spec, self._headers())
        return envelope.raw_body

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": self.auth.authorization_header(self.host),
        }

    def _send(self, spec: RequestSpec, headers: dict[str, str]) -> ResponseEnvelope:
        url = self.target(spec.path)
        log_http_request(spec.method, url, headers=headers, body=spec.payload())

        started = time.monotonic()
        try:
            response = self._client.request(
                spec.method, url, content=spec.body, headers=headers
            )
        except httpx.RequestError as e:
            raise TransportError(spec.method, url, str(e) or type(e).__name__) from e
        elapsed_ms = (time.monotonic() - started) * 1000

        envelope = ResponseEnvelope(
            status=response.status_code,
            headers=dict(response.headers),
            raw_body=response.text,
        )
        log_http_response(envelope.status, url, body=envelope.raw_body, elapsed_ms=elapsed_ms)

        if not envelope.ok:
            raise self._parse_error_response(envelope, spec.method, url)
        return envelope

    def _parse_error_response(
        self, envelope: ResponseEnvelope, method: str, url: str
    ) -> HttpStatusError:
        """
        Map an error response to a typed exception.

        Gerrit error bodies are plain text, so the body is carried as-is.
        """
        status_code = envelope.status
        body = envelope.raw_body

        if status_code == 401:
            return AuthenticationError(status_code, body, method, url)
        elif status_code == 403:
            return AuthorizationError(status_code, body, method, url)
        elif status_code == 404:
            return NotFoundError(status_code, body, method, url)
        elif status_code == 409:
            return ConflictError(status_code, body, method, url)
        elif status_code >= 500:
            return ServerError(status_code, body, method, url)
        elif status_code >= 400:
            return ValidationError(status_code, body, method, url)
        else:
            return HttpStatusError(status_code, body, method, url)
