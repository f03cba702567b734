"""
Change identifiers.

A change is addressed either by its numeric id or by the triplet
``project~branch~Change-Id``. Project names contain slashes, which must be
percent-escaped before the triplet is embedded in a URL path.
"""

from dataclasses import dataclass
from urllib.parse import quote, unquote


def escape_project(project: str) -> str:
    """Percent-escape a project (or branch) name for use in an identifier."""
    return quote(project, safe="")


def unescape_project(escaped: str) -> str:
    """Reverse escape_project()."""
    return unquote(escaped)


@dataclass(frozen=True)
class ChangeIdentifier:
    """
    An already-escaped change identifier, usable as a URL path segment.

    Build one with from_number(), from_triple() or from_string(); coerce()
    also accepts an existing identifier or a change number.
    """

    value: str

    @classmethod
    def from_number(cls, number: int) -> "ChangeIdentifier":
        return cls(str(int(number)))

    @classmethod
    def from_triple(cls, project: str, branch: str, change_id: str) -> "ChangeIdentifier":
        """Build ``project~branch~Change-Id`` from unescaped parts."""
        return cls(f"{escape_project(project)}~{escape_project(branch)}~{change_id}")

    @classmethod
    def from_string(cls, text: str) -> "ChangeIdentifier":
        """
        Build an identifier from ``project~branch~Change-Id``, ``project~number``,
        a number or a bare Change-Id.

        The project and branch segments may be given escaped or unescaped;
        either way they end up escaped exactly once.

        Raises:
            ValueError: If a segment is empty or the Change-Id or number contains a slash
        """
        *names, last = text.split("~")
        if not last or any(not name for name in names):
            raise ValueError(f"Malformed change identifier: {text!r}")
        if "/" in last:
            raise ValueError(f"Unescaped slash in change identifier: {text!r}")
        escaped = [escape_project(unescape_project(name)) for name in names]
        return cls("~".join([*escaped, last]))

    @classmethod
    def coerce(cls, change: "ChangeIdentifier | int | str") -> "ChangeIdentifier":
        if isinstance(change, ChangeIdentifier):
            return change
        if isinstance(change, bool):
            raise TypeError("A change identifier cannot be a bool")
        if isinstance(change, int):
            return cls.from_number(change)
        if isinstance(change, str) and change:
            return cls.from_string(change)
        raise TypeError(f"Cannot build a change identifier from {change!r}")

    @property
    def is_number(self) -> bool:
        return self.value.isdigit()

    def parts(self) -> tuple[str, str, str] | None:
        """Return the unescaped (project, branch, change_id), or None for numbers."""
        pieces = self.value.split("~")
        if len(pieces) != 3:
            return None
        project, branch, change_id = pieces
        return unescape_project(project), unescape_project(branch), change_id

    def __str__(self) -> str:
        return self.value


ChangeRef = ChangeIdentifier | int | str
