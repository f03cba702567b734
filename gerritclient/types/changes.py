"""Change-related data models."""

from dataclasses import dataclass, field
from datetime import datetime

from gerritclient.identifiers import ChangeIdentifier
from gerritclient.types.accounts import AccountInfo


@dataclass
class FetchInfo:
    """How to fetch a revision with one download scheme (http, ssh, ...)."""

    url: str
    ref: str
    commands: dict[str, str] = field(default_factory=dict)


@dataclass
class CommitInfo:
    """Commit details of a revision (CURRENT_COMMIT / ALL_COMMITS)."""

    subject: str
    message: str | None = None
    parents: list[str] = field(default_factory=list)
    author_name: str | None = None
    author_email: str | None = None


@dataclass
class RevisionInfo:
    """One patch set of a change."""

    revision_id: str
    ref: str
    number: int | None = None
    kind: str | None = None
    fetch: dict[str, FetchInfo] = field(default_factory=dict)
    commit: CommitInfo | None = None


@dataclass
class ApprovalInfo:
    """A single vote on a label."""

    account: AccountInfo
    value: int | None  # None when the account may vote but has not


@dataclass
class LabelInfo:
    """A review label with its votes (DETAILED_LABELS) or summary (LABELS)."""

    name: str
    all: list[ApprovalInfo] = field(default_factory=list)
    values: dict[str, str] = field(default_factory=dict)
    default_value: int | None = None
    value: int | None = None
    optional: bool = False
    approved: AccountInfo | None = None
    rejected: AccountInfo | None = None

    def votes(self) -> dict[int, int]:
        """Map account id to cast vote, skipping accounts that have not voted."""
        return {
            approval.account.account_id: approval.value
            for approval in self.all
            if approval.value is not None
        }


@dataclass
class LabelVote:
    """A vote to cast. The value range is left to the server."""

    label: str
    value: int


@dataclass
class ChangeInfo:
    """
    Change metadata as returned by the changes endpoints.

    current_revision and revisions are only populated when the query asked
    for CURRENT_REVISION or ALL_REVISIONS.
    """

    id: str
    number: int
    project: str
    branch: str
    change_id: str
    subject: str
    status: str  # "NEW", "MERGED", "ABANDONED"
    owner: AccountInfo
    topic: str | None = None
    assignee: AccountInfo | None = None
    current_revision: str | None = None
    revisions: dict[str, RevisionInfo] = field(default_factory=dict)
    labels: dict[str, LabelInfo] = field(default_factory=dict)
    work_in_progress: bool = False
    insertions: int = 0
    deletions: int = 0
    created: datetime | None = None
    updated: datetime | None = None
    more_changes: bool = False  # set on the last entry of a truncated result

    @property
    def identifier(self) -> ChangeIdentifier:
        """The escaped project~branch~Change-Id identifier for follow-up calls."""
        return ChangeIdentifier.from_triple(self.project, self.branch, self.change_id)

    @property
    def current(self) -> RevisionInfo | None:
        if self.current_revision is None:
            return None
        return self.revisions.get(self.current_revision)


@dataclass
class ChangeMessage:
    """A message posted on a change."""

    id: str
    message: str
    author: AccountInfo | None = None
    date: datetime | None = None
    revision_number: int | None = None
    tag: str | None = None


@dataclass
class CommentInfo:
    """An inline comment on a file of a change."""

    id: str
    path: str
    message: str
    author: AccountInfo | None = None
    line: int | None = None
    patch_set: int | None = None
    in_reply_to: str | None = None
    unresolved: bool = False
    updated: datetime | None = None


@dataclass
class ReviewResult:
    """Result of posting a review (votes and/or message)."""

    labels: dict[str, int] = field(default_factory=dict)
    ready: bool = False
