"""
Pytest fixtures for Gerrit client testing.

Provides common fixtures and builders for raw server documents, so tests
exercise the same decoding path as real responses.
"""

from typing import Any, Generator

import pytest

from gerritclient.client import GerritClient
from gerritclient.testing.mock import MockGerritServer, MockWorkspace


# ============================================================================
# Mock Fixtures
# ============================================================================


@pytest.fixture
def mock_server() -> Generator[MockGerritServer, None, None]:
    """
    Provide a MockGerritServer for testing.

    Example:
        ```python
        def test_version(mock_server):
            mock_server.add("GET", "/config/server/version", json="3.9.1")
            assert mock_server.client().server.version() == "3.9.1"
        ```
    """
    server = MockGerritServer()
    yield server
    server.reset()


@pytest.fixture
def gerrit_client(mock_server: MockGerritServer) -> Generator[GerritClient, None, None]:
    """Provide a GerritClient talking to mock_server."""
    client = mock_server.client()
    yield client
    client.close()


@pytest.fixture
def mock_workspace() -> MockWorkspace:
    """Provide an empty MockWorkspace with main checked out."""
    return MockWorkspace()


@pytest.fixture
def sample_account_data() -> dict[str, Any]:
    """Provide a raw AccountInfo document."""
    return create_account_data()


@pytest.fixture
def sample_change_data() -> dict[str, Any]:
    """Provide a raw ChangeInfo document with a current revision."""
    return create_change_data()


# ============================================================================
# Helper Functions
# ============================================================================


def create_account_data(
    account_id: int = 1000096,
    username: str | None = "alice",
    **kwargs: Any,
) -> dict[str, Any]:
    """
    Create a raw AccountInfo document.

    Args:
        account_id: Account id
        username: Username, or None to leave it out
        **kwargs: Additional fields to override
    """
    data: dict[str, Any] = {
        "_account_id": account_id,
        "name": (username or "user").title(),
        "email": f"{username or 'user'}@example.org",
    }
    if username is not None:
        data["username"] = username
    data.update(kwargs)
    return data


def create_change_data(
    number: int = 35216,
    project: str = "tools/gerrit",
    branch: str = "main",
    change_id: str = "I8473b95934b5732ac55d26311a706c9c2bde9940",
    revision: str | None = "r1",
    ref: str = "refs/changes/16/35216/2",
    **kwargs: Any,
) -> dict[str, Any]:
    """
    Create a raw ChangeInfo document.

    Args:
        number: Change number
        project: Unescaped project name
        branch: Target branch
        change_id: Change-Id
        revision: Current revision id, or None to omit revision data
        ref: Ref of the current revision
        **kwargs: Additional fields to override
    """
    data: dict[str, Any] = {
        "id": f"{project.replace('/', '%2F')}~{branch}~{change_id}",
        "_number": number,
        "project": project,
        "branch": branch,
        "change_id": change_id,
        "subject": "Implement feature X",
        "status": "NEW",
        "owner": create_account_data(),
        "created": "2024-01-15 10:30:00.000000000",
        "updated": "2024-01-15 12:45:11.775000000",
        "insertions": 34,
        "deletions": 101,
    }
    if revision is not None:
        data["current_revision"] = revision
        data["revisions"] = {revision: {"_number": 2, "ref": ref, "kind": "REWORK"}}
    data.update(kwargs)
    return data


__all__ = [
    "mock_server",
    "gerrit_client",
    "mock_workspace",
    "sample_account_data",
    "sample_change_data",
    "create_account_data",
    "create_change_data",
]
