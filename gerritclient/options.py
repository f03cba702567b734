"""Query options for change lookups.

Options are sent as repeated ``o=`` parameters. They are always emitted in
the canonical order below, whatever order the caller passed them in, so the
same request is built for the same set of options.
"""

from collections.abc import Iterable
from enum import Enum
from urllib.parse import urlencode


class QueryOption(str, Enum):
    """Recognized change query options, in canonical order."""

    DOWNLOAD_COMMANDS = "DOWNLOAD_COMMANDS"
    CURRENT_REVISION = "CURRENT_REVISION"
    ALL_REVISIONS = "ALL_REVISIONS"
    CURRENT_COMMIT = "CURRENT_COMMIT"
    ALL_COMMITS = "ALL_COMMITS"
    LABELS = "LABELS"
    DETAILED_LABELS = "DETAILED_LABELS"
    DETAILED_ACCOUNTS = "DETAILED_ACCOUNTS"
    MESSAGES = "MESSAGES"
    CURRENT_FILES = "CURRENT_FILES"
    SUBMITTABLE = "SUBMITTABLE"


_CANONICAL_ORDER = {option: index for index, option in enumerate(QueryOption)}

TOPIC_INFO_OPTIONS = (
    QueryOption.DOWNLOAD_COMMANDS,
    QueryOption.CURRENT_REVISION,
    QueryOption.CURRENT_COMMIT,
    QueryOption.DETAILED_LABELS,
    QueryOption.DETAILED_ACCOUNTS,
)

DOWNLOAD_OPTIONS = (
    QueryOption.CURRENT_REVISION,
    QueryOption.DETAILED_ACCOUNTS,
)


def compose_options(options: Iterable[QueryOption | str]) -> list[QueryOption]:
    """
    Deduplicate options and sort them into canonical order.

    Raises:
        ValueError: If an option is not a recognized token
    """
    selected: set[QueryOption] = set()
    for option in options:
        try:
            selected.add(QueryOption(option))
        except ValueError:
            raise ValueError(f"Unknown query option: {option!r}") from None
    return sorted(selected, key=_CANONICAL_ORDER.__getitem__)


def build_query_string(
    params: list[tuple[str, str]],
    options: Iterable[QueryOption | str] = (),
) -> str:
    """Encode params followed by the composed ``o=`` options, or "" if empty."""
    pairs = list(params) + [("o", option.value) for option in compose_options(options)]
    if not pairs:
        return ""
    return "?" + urlencode(pairs, safe=":")
