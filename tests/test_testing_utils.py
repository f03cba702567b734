"""
Tests for the client testing utilities.

Verifies that MockGerritServer, MockWorkspace and the fixtures work correctly.
"""

import pytest

from gerritclient.client import GerritClient
from gerritclient.exceptions import NotFoundError, WorkspaceError
from gerritclient.testing import (
    MockGerritServer,
    MockWorkspace,
    create_account_data,
    create_change_data,
    frame,
)


class TestMockGerritServer:
    """Tests for MockGerritServer."""

    def test_frame_prefixes_magic_line(self) -> None:
        assert frame({"a": 1}) == ")]}'\n{\"a\": 1}"

    def test_configured_response(self) -> None:
        server = MockGerritServer()
        server.add("GET", "/config/server/version", json="3.9.1")

        with server.client() as client:
            assert client.server.version() == "3.9.1"

    def test_unrouted_request_is_not_found(self) -> None:
        server = MockGerritServer()

        with server.client() as client:
            with pytest.raises(NotFoundError) as exc_info:
                client.server.version()

        assert "GET /config/server/version" in exc_info.value.body

    def test_queued_responses_then_repeat_last(self) -> None:
        server = MockGerritServer()
        server.add("GET", "/config/server/version", json="3.8.0")
        last = server.add("GET", "/config/server/version", json="3.9.1")

        with server.client() as client:
            versions = [client.server.version() for _ in range(3)]

        assert versions == ["3.8.0", "3.9.1", "3.9.1"]
        assert last.call_count == 2

    def test_call_tracking(self) -> None:
        server = MockGerritServer()
        server.add("GET", "/changes/1/topic", json="login")

        with server.client() as client:
            client.changes.get_topic(1)
            client.changes.get_topic(1)

        assert server.was_called("GET /changes/1/topic")
        assert server.call_count("GET /changes/1/topic") == 2
        assert not server.was_called("PUT /changes/1/topic")
        assert len(server.get_calls()) == 2

    def test_requests_are_recorded_below_prefix(self) -> None:
        server = MockGerritServer(endpoint_prefix="/gerrit/a")
        server.add("PUT", "/changes/1/topic", json="login")

        with server.client() as client:
            client.changes.set_topic(1, "login")

        recorded = server.requests_to("PUT", "/changes/1/topic")
        assert len(recorded) == 1
        assert recorded[0].body == {"topic": "login"}

    def test_reset(self) -> None:
        server = MockGerritServer()
        server.add("GET", "/config/server/version", json="3.9.1")
        with server.client() as client:
            client.server.version()

        server.reset()

        assert server.requests == []
        assert server.get_calls() == []
        with server.client() as client:
            with pytest.raises(NotFoundError):
                client.server.version()


class TestMockWorkspace:
    """Tests for MockWorkspace."""

    def test_starts_on_main(self) -> None:
        workspace = MockWorkspace()

        assert workspace.current == "main"
        assert workspace.branch_exists("main")
        assert workspace.head_commit() == "0" * 40

    def test_fetch_known_and_unknown_refs(self) -> None:
        workspace = MockWorkspace()
        workspace.add_remote_ref("refs/changes/01/1/1", "abc")

        assert workspace.fetch("origin", "refs/changes/01/1/1") == "abc"
        with pytest.raises(WorkspaceError):
            workspace.fetch("origin", "refs/changes/02/2/1")
        assert workspace.call_count("fetch") == 2

    def test_create_existing_branch_raises(self) -> None:
        workspace = MockWorkspace()

        with pytest.raises(WorkspaceError):
            workspace.create_and_checkout("main", "abc")

    def test_reset_and_checkout_require_branch(self) -> None:
        workspace = MockWorkspace()

        with pytest.raises(WorkspaceError):
            workspace.reset_hard("missing", "abc")
        with pytest.raises(WorkspaceError):
            workspace.checkout("missing")

    def test_push_hook(self) -> None:
        workspace = MockWorkspace()
        seen: list[tuple[str, str]] = []
        workspace.on_push = lambda remote, refspec: seen.append((remote, refspec))

        workspace.push("origin", "HEAD:refs/for/main")

        assert workspace.pushes == seen == [("origin", "HEAD:refs/for/main")]

    def test_detached_workspace_has_no_head(self) -> None:
        with pytest.raises(WorkspaceError):
            MockWorkspace(current=None).head_commit()


class TestFixtures:
    """Tests for pytest fixtures and document builders."""

    def test_mock_server_fixture(self, mock_server: MockGerritServer) -> None:
        assert isinstance(mock_server, MockGerritServer)
        assert mock_server.host == "review.example.org"

    def test_gerrit_client_fixture(
        self, mock_server: MockGerritServer, gerrit_client: GerritClient
    ) -> None:
        mock_server.add("GET", "/config/server/version", json="3.9.1")

        assert gerrit_client.server.version() == "3.9.1"

    def test_sample_documents(self, sample_account_data: dict, sample_change_data: dict) -> None:
        assert sample_account_data["_account_id"] == 1000096
        assert sample_change_data["owner"]["username"] == "alice"
        assert sample_change_data["current_revision"] in sample_change_data["revisions"]

    def test_create_change_data_overrides(self) -> None:
        data = create_change_data(number=7, project="a/b", topic="login", revision=None)

        assert data["_number"] == 7
        assert data["id"].startswith("a%2Fb~main~")
        assert data["topic"] == "login"
        assert "revisions" not in data

    def test_create_account_data_without_username(self) -> None:
        data = create_account_data(42, username=None)

        assert "username" not in data
        assert data["_account_id"] == 42
