"""Gerrit client testing utilities.

Provides a fake REST server, an in-memory workspace and document builders
for testing code that uses the Gerrit client.
"""

from gerritclient.testing.fixtures import create_account_data, create_change_data
from gerritclient.testing.mock import (
    MockCall,
    MockGerritServer,
    MockResponse,
    MockWorkspace,
    RecordedRequest,
    frame,
)

__all__ = [
    # Mocks
    "MockGerritServer",
    "MockWorkspace",
    "MockCall",
    "MockResponse",
    "RecordedRequest",
    "frame",
    # Helper functions
    "create_change_data",
    "create_account_data",
]
