"""Server configuration data models."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ServerInfo:
    """Subset of /config/server/info the client relies on."""

    download_schemes: list[str] = field(default_factory=list)
    default_branch: str | None = None
    account_visibility: str | None = None
    raw: dict[str, Any] = field(default_factory=dict)
