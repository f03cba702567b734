"""
Fetch a change into a local review branch.

Each change is downloaded into ``review/<owner>/<topic-or-number>`` so that
repeated downloads of the same change or topic land on the same branch. An
existing branch is only moved if it tracks the change's target branch on the
configured remote; a branch that tracks anything else is never repointed.
"""

import re
from enum import Enum
from typing import TYPE_CHECKING

from gerritclient.exceptions import (
    GerritError,
    MetadataError,
    TrackingConflict,
    WorkspaceError,
)
from gerritclient.logging import get_logger
from gerritclient.types.changes import ChangeInfo

if TYPE_CHECKING:
    from gerritclient.clients.accounts import AccountDirectory
    from gerritclient.git import Workspace

logger = get_logger("git")

BRANCH_PREFIX = "review"

_NON_WORD = re.compile(r"\W+")


class ReconcileState(str, Enum):
    NOT_FETCHED = "not_fetched"
    FETCHED = "fetched"
    RECONCILED = "reconciled"
    CONFLICT = "conflict"
    FAILED = "failed"


VALID_TRANSITIONS: dict[ReconcileState, set[ReconcileState]] = {
    ReconcileState.NOT_FETCHED: {ReconcileState.FETCHED, ReconcileState.FAILED},
    ReconcileState.FETCHED: {
        ReconcileState.RECONCILED,
        ReconcileState.CONFLICT,
        ReconcileState.FAILED,  # branch operation failed
    },
    ReconcileState.RECONCILED: set(),  # terminal
    ReconcileState.CONFLICT: set(),  # terminal
    ReconcileState.FAILED: set(),  # terminal
}


def validate_transition(current: ReconcileState, target: ReconcileState) -> None:
    """Validate a state transition. Raises ValueError if invalid."""
    allowed = VALID_TRANSITIONS.get(current)
    if allowed is None:
        raise ValueError(f"Unknown state: {current}")
    if target not in allowed:
        raise ValueError(
            f"Invalid transition: {current.value} -> {target.value}. "
            f"Valid targets from {current.value}: {sorted(s.value for s in allowed)}"
        )


def sanitize(name: str, separator: str = "_") -> str:
    """Replace each run of non-word characters with a single separator."""
    return _NON_WORD.sub(separator, name)


def derive_refspec(change: ChangeInfo) -> str:
    """
    Return the ref of the change's current revision.

    Raises:
        MetadataError: If current_revision is missing or not in revisions
    """
    if not change.current_revision:
        raise MetadataError("current_revision", f"change {change.number}")
    revision = change.revisions.get(change.current_revision)
    if revision is None:
        raise MetadataError(
            f"revisions[{change.current_revision}]", f"change {change.number}"
        )
    return revision.ref


def derive_local_branch(change: ChangeInfo, owner_username: str) -> str:
    """Return review/<sanitized owner>/<topic or change number>."""
    suffix = change.topic or str(change.number)
    return f"{BRANCH_PREFIX}/{sanitize(owner_username)}/{suffix}"


class FetchReconciler:
    """
    Download a change into a local tracking branch.

    States run NOT_FETCHED -> FETCHED -> RECONCILED or CONFLICT. Metadata,
    fetch and git failures end in FAILED. Metadata errors, fetch errors and
    conflicts leave every local branch untouched.

    Example:
        ```python
        reconciler = FetchReconciler(GitWorkspace("."), remote="origin")
        change = client.changes.get(35216, options=DOWNLOAD_OPTIONS)
        branch = reconciler.reconcile(change)  # "review/alice/35216"
        ```
    """

    def __init__(
        self,
        workspace: "Workspace",
        remote: str = "origin",
        account_directory: "AccountDirectory | None" = None,
    ) -> None:
        """
        Initialize the reconciler.

        Args:
            workspace: Local workspace performing fetch/checkout
            remote: Remote the change is fetched from and tracked against
            account_directory: Used to find the owner's username when the
                change metadata only carries the account id
        """
        self.workspace = workspace
        self.remote = remote
        self.account_directory = account_directory
        self.state = ReconcileState.NOT_FETCHED
        self.commit: str | None = None

    def reconcile(self, change: ChangeInfo) -> str:
        """
        Fetch the change and point the local review branch at it.

        Returns:
            Name of the local branch, now checked out

        Raises:
            MetadataError: If the refspec or owner username cannot be derived
            WorkspaceError: If the fetch or a branch operation fails
            TrackingConflict: If the branch exists and tracks another upstream
        """
        self.state = ReconcileState.NOT_FETCHED
        self.commit = None

        try:
            refspec = derive_refspec(change)
            branch = derive_local_branch(change, self._owner_username(change))
            commit = self.workspace.fetch(self.remote, refspec)
        except GerritError:
            self._transition(ReconcileState.FAILED)
            raise

        self.commit = commit
        self._transition(ReconcileState.FETCHED)
        logger.debug("Fetched %s from %s as %s", refspec, self.remote, commit)

        expected = (self.remote, change.branch)
        try:
            if self.workspace.branch_exists(branch):
                upstream = self.workspace.read_upstream(branch)
                if upstream is not None:
                    upstream = tuple(upstream)
                if upstream != expected:
                    self._transition(ReconcileState.CONFLICT)
                    raise TrackingConflict(branch, expected, upstream)
                self.workspace.checkout(branch)
                self.workspace.reset_hard(branch, commit)
                logger.info("Reset %s to %s", branch, commit)
            else:
                self.workspace.create_and_checkout(branch, commit)
                self.workspace.set_upstream(branch, self.remote, change.branch)
                logger.info("Created %s at %s tracking %s/%s", branch, commit, *expected)
        except WorkspaceError:
            self._transition(ReconcileState.FAILED)
            raise

        self._transition(ReconcileState.RECONCILED)
        return branch

    def _owner_username(self, change: ChangeInfo) -> str:
        username = change.owner.username
        if not username and self.account_directory is not None:
            username = self.account_directory.username_for(change.owner.account_id)
        if not username:
            raise MetadataError("owner.username", f"change {change.number}")
        return username

    def _transition(self, target: ReconcileState) -> None:
        validate_transition(self.state, target)
        self.state = target
