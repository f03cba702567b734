"""
Git workspace operations for the Gerrit client.

The reconciliation logic only needs the small Workspace protocol below.
GitWorkspace implements it by running ``git`` in a local checkout.
"""

import subprocess
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol
from urllib.parse import quote

from gerritclient.exceptions import WorkspaceError
from gerritclient.logging import log_git_command


class Workspace(Protocol):
    """The workspace operations the fetch reconciler relies on."""

    def fetch(self, remote: str, refspec: str) -> str:
        """Fetch refspec from remote and return the fetched commit."""
        ...

    def branch_exists(self, name: str) -> bool:
        ...

    def read_upstream(self, name: str) -> tuple[str, str] | None:
        """Return the (remote, branch) a local branch tracks, if any."""
        ...

    def create_and_checkout(self, name: str, commit: str) -> None:
        ...

    def set_upstream(self, name: str, remote: str, branch: str) -> None:
        ...

    def reset_hard(self, name: str, commit: str) -> None:
        """Point a branch at commit, discarding its previous history."""
        ...

    def checkout(self, name: str) -> None:
        ...


def build_upload_refspec(
    branch: str,
    topic: str | None = None,
    reviewers: Iterable[str] = (),
    wip: bool = False,
    ready: bool = False,
) -> str:
    """
    Build the push refspec that creates or updates changes for a branch.

    Example:
        ```python
        build_upload_refspec("main", topic="login", reviewers=["bob"], wip=True)
        # "HEAD:refs/for/main%topic=login,r=bob,wip"
        ```
    """
    if wip and ready:
        raise ValueError("A change cannot be uploaded as both wip and ready")

    options: list[str] = []
    if topic:
        options.append(f"topic={quote(topic, safe='')}")
    options.extend(f"r={reviewer}" for reviewer in reviewers)
    if wip:
        options.append("wip")
    if ready:
        options.append("ready")

    refspec = f"HEAD:refs/for/{branch}"
    if options:
        refspec = f"{refspec}%{','.join(options)}"
    return refspec


class GitWorkspace:
    """
    Workspace backed by a local git checkout.

    Example:
        ```python
        from gerritclient.git import GitWorkspace

        workspace = GitWorkspace("./my-repo")
        commit = workspace.fetch("origin", "refs/changes/16/35216/2")
        ```
    """

    def __init__(self, path: str | Path = ".") -> None:
        self.path = Path(path)

    def fetch(self, remote: str, refspec: str) -> str:
        self._git("fetch", remote, refspec)
        return self._git("rev-parse", "FETCH_HEAD").strip()

    def branch_exists(self, name: str) -> bool:
        result = self._run(["git", "show-ref", "--verify", "--quiet", f"refs/heads/{name}"])
        return result.returncode == 0

    def read_upstream(self, name: str) -> tuple[str, str] | None:
        remote = self._config_get(f"branch.{name}.remote")
        merge = self._config_get(f"branch.{name}.merge")
        if not remote or not merge:
            return None
        return remote, merge.removeprefix("refs/heads/")

    def create_and_checkout(self, name: str, commit: str) -> None:
        self._git("checkout", "-b", name, commit)

    def set_upstream(self, name: str, remote: str, branch: str) -> None:
        # Written directly to config: the remote-tracking ref may not exist
        # locally yet, which `git branch --set-upstream-to` would reject.
        self._git("config", f"branch.{name}.remote", remote)
        self._git("config", f"branch.{name}.merge", f"refs/heads/{branch}")

    def reset_hard(self, name: str, commit: str) -> None:
        if self.current_branch() == name:
            self._git("reset", "--hard", commit)
        else:
            self._git("branch", "--force", name, commit)

    def checkout(self, name: str) -> None:
        self._git("checkout", name)

    def current_branch(self) -> str | None:
        result = self._run(["git", "symbolic-ref", "--quiet", "--short", "HEAD"])
        if result.returncode != 0:
            return None
        return result.stdout.strip()

    def head_commit(self) -> str:
        return self._git("rev-parse", "HEAD").strip()

    def push(self, remote: str, refspec: str) -> str:
        """Push a refspec and return git's combined output."""
        result = self._run(["git", "push", remote, refspec])
        if result.returncode != 0:
            raise WorkspaceError(["git", "push", remote, refspec], result.stderr, result.returncode)
        return result.stdout + result.stderr

    def _config_get(self, key: str) -> str | None:
        result = self._run(["git", "config", "--get", key])
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def _git(self, *args: str) -> str:
        cmd = ["git", *args]
        result = self._run(cmd)
        if result.returncode != 0:
            raise WorkspaceError(cmd, result.stderr, result.returncode)
        return result.stdout

    def _run(self, cmd: list[str]) -> subprocess.CompletedProcess[str]:
        log_git_command(cmd, cwd=str(self.path))
        return subprocess.run(
            cmd,
            cwd=self.path,
            capture_output=True,
            text=True,
        )
