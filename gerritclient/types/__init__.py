"""Gerrit client type definitions.

This module exports all data model types used by the client.
"""

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
from gerritclient.types.server import ServerInfo

__all__ = [
    # Account types
    "AccountInfo",
    # Change types
    "ChangeInfo",
    "RevisionInfo",
    "FetchInfo",
    "CommitInfo",
    "LabelInfo",
    "ApprovalInfo",
    "LabelVote",
    "ChangeMessage",
    "CommentInfo",
    "ReviewResult",
    # Server types
    "ServerInfo",
]
