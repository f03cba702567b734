"""Topic resource client.

A topic groups changes that may live in different projects. Operations on a
topic are fanned out to each open change of the topic, one after the other.
There is no transaction: when the k-th change fails, the changes before it
have already been modified and the ones after it are never touched. The
result lists exactly what happened so callers can build stricter policies
on top.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from gerritclient.exceptions import GerritError, TopicFanoutError
from gerritclient.identifiers import ChangeIdentifier
from gerritclient.logging import get_logger
from gerritclient.options import TOPIC_INFO_OPTIONS
from gerritclient.types.changes import ChangeInfo, LabelVote

if TYPE_CHECKING:
    from gerritclient.clients.changes import ChangesClient

logger = get_logger()


@dataclass
class FanoutItem:
    """Outcome of applying an operation to one change of a topic."""

    identifier: ChangeIdentifier
    result: Any = None
    error: GerritError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class FanoutResult:
    """Per-change outcomes of a topic operation, in application order."""

    topic: str
    items: list[FanoutItem] = field(default_factory=list)
    skipped: list[ChangeIdentifier] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(item.ok for item in self.items)

    @property
    def succeeded(self) -> list[FanoutItem]:
        return [item for item in self.items if item.ok]

    @property
    def failed(self) -> FanoutItem | None:
        for item in self.items:
            if not item.ok:
                return item
        return None

    def raise_for_failure(self) -> "FanoutResult":
        """Raise TopicFanoutError if an item failed, else return self."""
        failed = self.failed
        if failed is not None:
            raise TopicFanoutError(self, failed.error) from failed.error
        return self


class TopicsClient:
    """Client for operations applied to every open change of a topic."""

    def __init__(self, changes: "ChangesClient") -> None:
        """
        Initialize the topics client.

        Args:
            changes: Changes client used to query and modify member changes
        """
        self.changes = changes

    def get_topic_info(self, topic: str) -> list[ChangeInfo]:
        """
        Return the open changes of a topic with download commands, current
        revision, commit, labels and account details.
        """
        return self.changes.query(_topic_query(topic), options=TOPIC_INFO_OPTIONS)

    def changes_in_topic(self, topic: str) -> list[ChangeIdentifier]:
        """Return identifiers of the open changes of a topic, in query order."""
        return [change.identifier for change in self.changes.query(_topic_query(topic))]

    def apply(
        self,
        topic: str,
        operation: Callable[[ChangeIdentifier], Any],
    ) -> FanoutResult:
        """
        Apply an operation to each open change of a topic, sequentially.

        The first GerritError stops the run. It is recorded on the failing
        item and the remaining changes are listed as skipped. Errors from
        the topic query itself are raised.

        Args:
            topic: Topic name
            operation: Called once per change with its identifier

        Returns:
            FanoutResult with one item per attempted change
        """
        identifiers = self.changes_in_topic(topic)
        result = FanoutResult(topic=topic)

        for index, identifier in enumerate(identifiers):
            try:
                value = operation(identifier)
            except GerritError as e:
                logger.warning(
                    "Topic %s: operation failed on %s after %d change(s): %s",
                    topic, identifier, index, e,
                )
                result.items.append(FanoutItem(identifier=identifier, error=e))
                result.skipped = identifiers[index + 1:]
                return result
            result.items.append(FanoutItem(identifier=identifier, result=value))

        logger.debug("Topic %s: operation applied to %d change(s)", topic, len(identifiers))
        return result

    def set_label_vote(
        self, topic: str, label: str, value: int, message: str = ""
    ) -> FanoutResult:
        return self.apply(
            topic, lambda change: self.changes.set_label_vote(change, label, value, message)
        )

    def set_label_votes(
        self, topic: str, votes: Iterable[LabelVote], message: str = ""
    ) -> FanoutResult:
        """
        Cast the same label votes on every change of a topic.

        Raises:
            ValueError: If no votes are given; nothing is queried in that case
        """
        vote_list = list(votes)
        if not vote_list:
            raise ValueError("At least one label vote is required")
        return self.apply(
            topic, lambda change: self.changes.set_label_votes(change, vote_list, message)
        )

    def set_code_review(self, topic: str, value: int, message: str = "") -> FanoutResult:
        return self.apply(
            topic, lambda change: self.changes.set_code_review(change, value, message)
        )

    def set_verified(self, topic: str, value: int, message: str = "") -> FanoutResult:
        return self.apply(
            topic, lambda change: self.changes.set_verified(change, value, message)
        )

    def add_reviewers(self, topic: str, reviewers: Iterable[str]) -> FanoutResult:
        """
        Add every reviewer to every change of a topic.

        Reviewers are added one request at a time; a rejected reviewer stops
        the whole run at that change.
        """
        reviewer_list = list(reviewers)

        def add_all(change: ChangeIdentifier) -> list[Any]:
            return [self.changes.add_reviewer(change, reviewer) for reviewer in reviewer_list]

        return self.apply(topic, add_all)

    def set_assignee(self, topic: str, assignee: str) -> FanoutResult:
        return self.apply(topic, lambda change: self.changes.set_assignee(change, assignee))

    def add_comment(self, topic: str, message: str) -> FanoutResult:
        return self.apply(topic, lambda change: self.changes.add_comment(change, message))

    def set_work_in_progress(self, topic: str) -> FanoutResult:
        return self.apply(topic, self.changes.set_work_in_progress)

    def set_ready_for_review(self, topic: str) -> FanoutResult:
        return self.apply(topic, self.changes.set_ready_for_review)


def _topic_query(topic: str) -> str:
    if any(ch.isspace() for ch in topic):
        topic = f'"{topic}"'
    return f"is:open topic:{topic}"
