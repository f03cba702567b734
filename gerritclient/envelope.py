"""
Request and response envelopes for the Gerrit REST protocol.

Gerrit prefixes every JSON response body with the line ``)]}'`` so that the
body cannot be executed when included as a script. The client must find that
line and only parse what follows it.
"""

import json
import re
from dataclasses import dataclass, field
from typing import Any

MAGIC_PREFIX = ")]}'"

_MAGIC_LINE = re.compile(r"^\)\]\}'[ \t]*\r?(?:\n|$)", re.MULTILINE)


class FramingError(ValueError):
    """The body does not contain a decodable framed JSON document."""

    pass


@dataclass
class RequestSpec:
    """A single REST request, body already encoded."""

    method: str
    path: str
    body: bytes | None = None

    @classmethod
    def json(cls, method: str, path: str, payload: dict[str, Any] | None = None) -> "RequestSpec":
        """Build a request whose body is the UTF-8 JSON encoding of payload."""
        return cls(method=method, path=path, body=encode_body(payload))

    def payload(self) -> dict[str, Any] | None:
        """Decode the body back into a dictionary (for logging)."""
        if self.body is None:
            return None
        return json.loads(self.body.decode("utf-8"))


@dataclass
class ResponseEnvelope:
    """A received response before the framing line is stripped."""

    status: int
    headers: dict[str, str] = field(default_factory=dict)
    raw_body: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def has_document(self) -> bool:
        """False only for 204; every other response must be framed."""
        return self.status != 204

    def decode(self) -> Any:
        """Strip the framing line and parse the JSON document."""
        return decode_framed(self.raw_body)


def encode_body(payload: dict[str, Any] | None) -> bytes | None:
    """Encode a request payload as compact UTF-8 JSON."""
    if payload is None:
        return None
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def strip_framing(raw_body: str) -> str:
    """
    Return the content strictly after the ``)]}'`` line.

    Raises:
        FramingError: If the magic line is not present
    """
    match = _MAGIC_LINE.search(raw_body)
    if match is None:
        raise FramingError(f"Response is missing the {MAGIC_PREFIX!r} framing line")
    return raw_body[match.end():]


def decode_framed(raw_body: str) -> Any:
    """
    Decode a framed JSON body.

    JSON null becomes None and JSON false becomes False; they stay distinct.

    Raises:
        FramingError: If the magic line is missing or the JSON is invalid
    """
    document = strip_framing(raw_body)
    try:
        return json.loads(document)
    except json.JSONDecodeError as e:
        raise FramingError(f"Invalid JSON after framing line: {e}") from e
