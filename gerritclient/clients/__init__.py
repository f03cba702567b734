"""Gerrit REST resource clients."""

from gerritclient.clients.accounts import AccountDirectory, AccountsClient
from gerritclient.clients.changes import ChangesClient
from gerritclient.clients.server import ServerClient
from gerritclient.clients.topics import FanoutItem, FanoutResult, TopicsClient

__all__ = [
    "AccountsClient",
    "AccountDirectory",
    "ChangesClient",
    "ServerClient",
    "TopicsClient",
    "FanoutItem",
    "FanoutResult",
]
