"""Changes resource client."""

import base64
import binascii
from collections.abc import Iterable
from datetime import datetime
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from gerritclient.clients.accounts import parse_account
from gerritclient.exceptions import MetadataError, ProtocolError
from gerritclient.identifiers import ChangeIdentifier, ChangeRef
from gerritclient.options import QueryOption, build_query_string
from gerritclient.types.accounts import AccountInfo
from gerritclient.types.changes import (
    ApprovalInfo,
    ChangeInfo,
    ChangeMessage,
    CommentInfo,
    CommitInfo,
    FetchInfo,
    LabelInfo,
    LabelVote,
    ReviewResult,
    RevisionInfo,
)

if TYPE_CHECKING:
    from gerritclient.transport import HTTPTransport

CODE_REVIEW = "Code-Review"
VERIFIED = "Verified"

WIP_MESSAGE = "Set Work In Progress"
READY_MESSAGE = "Set Ready For Review"

_CHANGE_REQUIRED = ("_number", "project", "branch", "change_id", "owner")


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse Gerrit's "2013-02-21 11:16:36.775000000" UTC timestamps."""
    if not value:
        return None
    # Nanosecond precision does not fit datetime; keep microseconds.
    head, _, fraction = value.partition(".")
    if fraction:
        head = f"{head}.{fraction[:6]}"
        return datetime.strptime(head, "%Y-%m-%d %H:%M:%S.%f")
    return datetime.strptime(head, "%Y-%m-%d %H:%M:%S")


def _parse_revision(revision_id: str, data: dict[str, Any]) -> RevisionInfo:
    if "ref" not in data:
        raise MetadataError("ref", f"revision {revision_id}")

    fetch = {
        scheme: FetchInfo(
            url=info.get("url", ""),
            ref=info.get("ref", data["ref"]),
            commands=info.get("commands", {}),
        )
        for scheme, info in data.get("fetch", {}).items()
    }

    commit = None
    if data.get("commit"):
        commit_data = data["commit"]
        author = commit_data.get("author", {})
        commit = CommitInfo(
            subject=commit_data.get("subject", ""),
            message=commit_data.get("message"),
            parents=[p["commit"] for p in commit_data.get("parents", []) if "commit" in p],
            author_name=author.get("name"),
            author_email=author.get("email"),
        )

    return RevisionInfo(
        revision_id=revision_id,
        ref=data["ref"],
        number=data.get("_number"),
        kind=data.get("kind"),
        fetch=fetch,
        commit=commit,
    )


def _parse_label(name: str, data: dict[str, Any]) -> LabelInfo:
    approvals = [
        ApprovalInfo(account=parse_account(entry), value=entry.get("value"))
        for entry in data.get("all", [])
    ]
    return LabelInfo(
        name=name,
        all=approvals,
        values=data.get("values", {}),
        default_value=data.get("default_value"),
        value=data.get("value"),
        optional=data.get("optional", False),
        approved=parse_account(data["approved"]) if data.get("approved") else None,
        rejected=parse_account(data["rejected"]) if data.get("rejected") else None,
    )


def parse_change(data: dict[str, Any]) -> ChangeInfo:
    """
    Parse a ChangeInfo object.

    Raises:
        MetadataError: If an identifying field is missing
    """
    for key in _CHANGE_REQUIRED:
        if key not in data:
            raise MetadataError(key, f"change {data.get('_number', '?')}")

    revisions = {
        revision_id: _parse_revision(revision_id, revision)
        for revision_id, revision in data.get("revisions", {}).items()
    }
    labels = {
        name: _parse_label(name, label)
        for name, label in data.get("labels", {}).items()
    }

    return ChangeInfo(
        id=data.get("id") or f"{data['project']}~{data['branch']}~{data['change_id']}",
        number=data["_number"],
        project=data["project"],
        branch=data["branch"],
        change_id=data["change_id"],
        subject=data.get("subject", ""),
        status=data.get("status", "NEW"),
        owner=parse_account(data["owner"]),
        topic=data.get("topic"),
        assignee=parse_account(data["assignee"]) if data.get("assignee") else None,
        current_revision=data.get("current_revision"),
        revisions=revisions,
        labels=labels,
        work_in_progress=data.get("work_in_progress", False),
        insertions=data.get("insertions", 0),
        deletions=data.get("deletions", 0),
        created=parse_timestamp(data.get("created")),
        updated=parse_timestamp(data.get("updated")),
        more_changes=data.get("_more_changes", False),
    )


def _parse_message(data: dict[str, Any]) -> ChangeMessage:
    return ChangeMessage(
        id=data["id"],
        message=data.get("message", ""),
        author=parse_account(data["author"]) if data.get("author") else None,
        date=parse_timestamp(data.get("date")),
        revision_number=data.get("_revision_number"),
        tag=data.get("tag"),
    )


def _parse_comment(path: str, data: dict[str, Any]) -> CommentInfo:
    return CommentInfo(
        id=data["id"],
        path=path,
        message=data.get("message", ""),
        author=parse_account(data["author"]) if data.get("author") else None,
        line=data.get("line"),
        patch_set=data.get("patch_set"),
        in_reply_to=data.get("in_reply_to"),
        unresolved=data.get("unresolved", False),
        updated=parse_timestamp(data.get("updated")),
    )


class ChangesClient:
    """Client for operations on individual changes."""

    def __init__(self, transport: "HTTPTransport") -> None:
        """
        Initialize the changes client.

        Args:
            transport: HTTP transport for making requests
        """
        self.transport = transport

    def _path(self, change: ChangeRef, suffix: str = "") -> str:
        return f"/changes/{ChangeIdentifier.coerce(change)}{suffix}"

    def get(
        self,
        change: ChangeRef,
        options: Iterable[QueryOption | str] = (),
    ) -> ChangeInfo:
        """
        Get a single change.

        Args:
            change: Change number or identifier
            options: Query options controlling which details are returned

        Raises:
            NotFoundError: If the change does not exist or is not visible
        """
        query = build_query_string([], options)
        return parse_change(self.transport.sync("GET", self._path(change) + query))

    def query(
        self,
        expression: str,
        options: Iterable[QueryOption | str] = (),
        limit: int | None = None,
        start: int | None = None,
    ) -> list[ChangeInfo]:
        """
        Search for changes.

        Args:
            expression: Gerrit search expression (e.g., "is:open topic:foo")
            options: Query options controlling which details are returned
            limit: Maximum number of results (n=)
            start: Number of results to skip (S=)

        Returns:
            Matching changes in server order
        """
        params = [("q", expression)]
        if limit is not None:
            params.append(("n", str(limit)))
        if start is not None:
            params.append(("S", str(start)))

        query = build_query_string(params, options)
        data = self.transport.sync("GET", f"/changes/{query}") or []
        return [parse_change(change) for change in data]

    def find_changes_for_commits(
        self,
        commits: Iterable[str],
        owner: str = "self",
        options: Iterable[QueryOption | str] = (QueryOption.CURRENT_REVISION,),
    ) -> list[ChangeInfo]:
        """
        Find the owner's changes whose patch sets match the given commits.

        Used after an upload to learn which changes the push created or
        updated.
        """
        commit_list = [c for c in commits if c]
        if not commit_list:
            return []
        terms = " OR ".join(f"commit:{commit}" for commit in commit_list)
        return self.query(f"owner:{owner} ({terms})", options=options)

    def set_assignee(self, change: ChangeRef, assignee: str) -> AccountInfo:
        """Set the assignee of a change; returns the new assignee."""
        data = self.transport.sync(
            "PUT", self._path(change, "/assignee"), body={"assignee": assignee}
        )
        return parse_account(data)

    def add_reviewer(self, change: ChangeRef, reviewer: str) -> list[AccountInfo]:
        """
        Add a reviewer (account or group) to a change.

        The identifier is passed through unvalidated; the server rejects
        unknown reviewers.

        Returns:
            The accounts that were added as reviewers
        """
        data = self.transport.sync(
            "POST", self._path(change, "/reviewers"), body={"reviewer": reviewer}
        ) or {}
        return [parse_account(entry) for entry in data.get("reviewers", [])]

    def remove_reviewer(self, change: ChangeRef, reviewer: str) -> None:
        """Remove a reviewer from a change."""
        self.transport.sync(
            "DELETE", self._path(change, f"/reviewers/{quote(reviewer, safe='')}")
        )

    def get_topic(self, change: ChangeRef) -> str | None:
        """Get the topic of a change, or None if it has none."""
        return self.transport.sync("GET", self._path(change, "/topic")) or None

    def set_topic(self, change: ChangeRef, topic: str) -> str:
        """Set the topic of a change; returns the new topic."""
        return self.transport.sync(
            "PUT", self._path(change, "/topic"), body={"topic": topic}
        )

    def delete_topic(self, change: ChangeRef) -> None:
        """Remove the topic of a change."""
        self.transport.sync("DELETE", self._path(change, "/topic"))

    def set_label_vote(
        self,
        change: ChangeRef,
        label: str,
        value: int,
        message: str = "",
    ) -> ReviewResult:
        """
        Vote on a label of the current revision.

        Args:
            change: Change number or identifier
            label: Label name (e.g., "Code-Review", "Verified")
            value: Vote to cast; the range is validated by the server
            message: Message posted with the vote

        Returns:
            ReviewResult with the labels the server applied
        """
        return self.set_label_votes(change, [LabelVote(label, value)], message)

    def set_label_votes(
        self,
        change: ChangeRef,
        votes: Iterable[LabelVote],
        message: str = "",
    ) -> ReviewResult:
        """
        Cast several label votes on the current revision in one review.

        A later vote on the same label replaces an earlier one.

        Raises:
            ValueError: If no votes are given
        """
        labels = {vote.label: vote.value for vote in votes}
        if not labels:
            raise ValueError("At least one label vote is required")
        return self._review(change, {"message": message, "labels": labels})

    def set_code_review(self, change: ChangeRef, value: int, message: str = "") -> ReviewResult:
        return self.set_label_vote(change, CODE_REVIEW, value, message)

    def set_verified(self, change: ChangeRef, value: int, message: str = "") -> ReviewResult:
        return self.set_label_vote(change, VERIFIED, value, message)

    def add_comment(self, change: ChangeRef, message: str) -> ReviewResult:
        """Post a change-level message on the current revision."""
        return self._review(change, {"message": message})

    def set_work_in_progress(self, change: ChangeRef, message: str = WIP_MESSAGE) -> None:
        """Mark a change as work in progress."""
        self.transport.sync("POST", self._path(change, "/wip"), body={"message": message})

    def set_ready_for_review(self, change: ChangeRef, message: str = READY_MESSAGE) -> None:
        """Mark a change as ready for review."""
        self.transport.sync("POST", self._path(change, "/ready"), body={"message": message})

    def get_messages(self, change: ChangeRef) -> list[ChangeMessage]:
        """List the messages posted on a change, oldest first."""
        data = self.transport.sync("GET", self._path(change, "/messages")) or []
        return [_parse_message(message) for message in data]

    def get_comments(self, change: ChangeRef) -> dict[str, list[CommentInfo]]:
        """List published inline comments, keyed by file path."""
        data = self.transport.sync("GET", self._path(change, "/comments")) or {}
        return {
            path: [_parse_comment(path, comment) for comment in comments]
            for path, comments in data.items()
        }

    def get_current_labels(self, change: ChangeRef) -> dict[str, LabelInfo]:
        """Return the labels of a change with every reviewer's vote."""
        info = self.get(
            change,
            options=(QueryOption.DETAILED_LABELS, QueryOption.DETAILED_ACCOUNTS),
        )
        return info.labels

    def download_patch(self, change: ChangeRef) -> bytes:
        """
        Download the current revision as a git-format patch.

        The server answers with base64 text, not framed JSON.

        Raises:
            ProtocolError: If the body is not valid base64
        """
        path = self._path(change, "/revisions/current/patch")
        text = self.transport.raw("GET", path)
        try:
            return base64.b64decode("".join(text.split()), validate=True)
        except binascii.Error as e:
            raise ProtocolError(
                f"Patch body is not valid base64: {e}",
                method="GET",
                url=self.transport.target(path),
                headers={},
                body=text,
            ) from e

    def _review(self, change: ChangeRef, body: dict[str, Any]) -> ReviewResult:
        data = self.transport.sync(
            "POST", self._path(change, "/revisions/current/review"), body=body
        ) or {}
        return ReviewResult(labels=data.get("labels", {}), ready=data.get("ready", False))
