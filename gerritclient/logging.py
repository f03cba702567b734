"""
Gerrit client logging utilities.

Provides configurable logging for HTTP requests/responses and workspace
operations. Ensures credentials (Basic tokens, passwords) are never logged.
"""

import logging
import re
from typing import Any

# Create client-specific loggers
_sdk_logger = logging.getLogger("gerritclient")
_http_logger = logging.getLogger("gerritclient.http")
_git_logger = logging.getLogger("gerritclient.git")

# Patterns for sensitive data that should be masked
_SENSITIVE_PATTERNS = [
    # Authorization header values
    (re.compile(r"(Basic|Bearer)\s+[A-Za-z0-9+/=._-]+"), r"\1 [REDACTED]"),
    # Credentials embedded in URLs
    (re.compile(r"(https?://)[^/@\s:]+:[^/@\s]+@"), r"\1[REDACTED]@"),
    # netrc-style password fields
    (re.compile(r"(\bpassword\s+)\S+"), r"\1[REDACTED]"),
    # Secret/token patterns
    (re.compile(r"(secret|token|password|authorization)['\"]?\s*[:=]\s*['\"][^'\"]+['\"]", re.IGNORECASE), r"\1: [REDACTED]"),
]

_DEFAULT_SENSITIVE_KEYS = {"authorization", "password", "secret", "token", "cookie"}

# Response bodies are logged up to this many characters
_BODY_PREVIEW_LENGTH = 500


def configure_logging(
    level: int = logging.INFO,
    http_level: int | None = None,
    git_level: int | None = None,
    handler: logging.Handler | None = None,
    format_string: str | None = None,
) -> None:
    """
    Configure gerritclient logging.

    Args:
        level: Default log level for all client loggers (default: INFO)
        http_level: Log level for HTTP request/response logging (default: same as level)
        git_level: Log level for workspace and reconciliation logging (default: same as level)
        handler: Custom handler to use (default: StreamHandler to stderr)
        format_string: Custom format string (default: includes timestamp, level, logger name)

    Example:
        ```python
        import logging
        from gerritclient.logging import configure_logging

        # Trace every REST call
        configure_logging(level=logging.INFO, http_level=logging.DEBUG)
        ```
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    formatter = logging.Formatter(format_string)

    if handler is None:
        handler = logging.StreamHandler()

    handler.setFormatter(formatter)

    _sdk_logger.setLevel(level)
    _sdk_logger.addHandler(handler)

    _http_logger.setLevel(http_level if http_level is not None else level)

    _git_logger.setLevel(git_level if git_level is not None else level)


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a gerritclient logger.

    Args:
        name: Logger name suffix (e.g., "http", "git"). If None, returns main logger.

    Returns:
        Logger instance
    """
    if name is None:
        return _sdk_logger
    return logging.getLogger(f"gerritclient.{name}")


def mask_sensitive_data(text: str) -> str:
    """
    Mask sensitive data in a string.

    Replaces Basic/Bearer tokens, URL userinfo and password fields with
    redacted placeholders.
    """
    result = text
    for pattern, replacement in _SENSITIVE_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


def safe_log_dict(data: dict[str, Any], sensitive_keys: set[str] | None = None) -> dict[str, Any]:
    """
    Create a copy of a dictionary with sensitive values masked.

    Args:
        data: Dictionary that may contain sensitive values
        sensitive_keys: Set of keys to mask (default: authorization, password, secret, token, cookie)

    Returns:
        Dictionary with sensitive values replaced with "[REDACTED]"
    """
    if sensitive_keys is None:
        sensitive_keys = _DEFAULT_SENSITIVE_KEYS

    result: dict[str, Any] = {}
    for key, value in data.items():
        key_lower = key.lower()
        if key_lower in sensitive_keys or any(sk in key_lower for sk in sensitive_keys):
            result[key] = "[REDACTED]"
        elif isinstance(value, dict):
            result[key] = safe_log_dict(value, sensitive_keys)
        elif isinstance(value, list):
            result[key] = [
                safe_log_dict(item, sensitive_keys) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            result[key] = value

    return result


def preview_body(body: str) -> str:
    """Shorten a response body for log output."""
    if len(body) <= _BODY_PREVIEW_LENGTH:
        return body
    return f"{body[:_BODY_PREVIEW_LENGTH]}... ({len(body)} chars)"


def log_http_request(
    method: str,
    url: str,
    headers: dict[str, str] | None = None,
    body: dict[str, Any] | None = None,
) -> None:
    """Log an HTTP request at DEBUG level with sensitive data masked."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"{method} {mask_sensitive_data(url)}"]

    if headers:
        safe_headers = safe_log_dict(headers)
        log_parts.append(f"headers={safe_headers}")

    if body:
        safe_body = safe_log_dict(body)
        log_parts.append(f"body={safe_body}")

    _http_logger.debug(" | ".join(log_parts))


def log_http_response(
    status_code: int,
    url: str,
    body: str | None = None,
    elapsed_ms: float | None = None,
) -> None:
    """Log an HTTP response at DEBUG level with sensitive data masked."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"Response {status_code} from {mask_sensitive_data(url)}"]

    if elapsed_ms is not None:
        log_parts.append(f"elapsed={elapsed_ms:.2f}ms")

    if body:
        log_parts.append(f"body={mask_sensitive_data(preview_body(body))}")

    _http_logger.debug(" | ".join(log_parts))


def log_git_command(command: list[str], cwd: str | None = None) -> None:
    """Log a workspace git command at DEBUG level."""
    if not _git_logger.isEnabledFor(logging.DEBUG):
        return

    line = mask_sensitive_data(" ".join(command))
    if cwd:
        line = f"{line} (cwd={cwd})"
    _git_logger.debug(line)


__all__ = [
    "configure_logging",
    "get_logger",
    "mask_sensitive_data",
    "safe_log_dict",
    "preview_body",
    "log_http_request",
    "log_http_response",
    "log_git_command",
]
