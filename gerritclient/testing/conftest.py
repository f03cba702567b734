"""
Pytest plugin for Gerrit client testing fixtures.

This module re-exports all fixtures from fixtures.py so they can be
automatically discovered by pytest.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["gerritclient.testing.conftest"]
"""

from gerritclient.testing.fixtures import (
    gerrit_client,
    mock_server,
    mock_workspace,
    sample_account_data,
    sample_change_data,
)

__all__ = [
    "mock_server",
    "gerrit_client",
    "mock_workspace",
    "sample_account_data",
    "sample_change_data",
]
