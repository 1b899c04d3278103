"""
Shared pytest fixtures for slippy-find tests.

Provides in-memory fakes for the repository accessor and slip store, and a
builder for real throwaway git repositories.
"""

import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest

from slippy_find.exceptions import RepositoryNotFoundError
from slippy_find.git.accessor import RepositoryAccessor
from slippy_find.models import Slip
from slippy_find.store.base import SlipStore


class FakeRepository(RepositoryAccessor):
    """In-memory RepositoryAccessor with a configurable commit graph."""

    def __init__(
        self,
        head: str = "",
        parents: Optional[Dict[str, List[str]]] = None,
        branch: str = "main",
        remotes: Optional[Dict[str, List[str]]] = None,
    ):
        self.head = head
        self.parents = parents or {}
        self.branch = branch
        self.remotes = remotes if remotes is not None else {}
        self.parent_calls: List[str] = []
        self.closed = False

    def head_commit(self) -> str:
        if not self.head:
            raise RepositoryNotFoundError("fake", "failed to resolve HEAD")
        return self.head

    def is_on_branch(self) -> bool:
        return bool(self.branch)

    def branch_name(self) -> str:
        return self.branch

    def remote_names(self) -> List[str]:
        return list(self.remotes)

    def remote_urls(self, name: str) -> List[str]:
        return list(self.remotes.get(name, []))

    def parent_of(self, commit: str) -> Optional[str]:
        self.parent_calls.append(commit)
        parents = self.parents.get(commit, [])
        return parents[0] if parents else None

    def close(self) -> None:
        self.closed = True


class FakeSlipStore(SlipStore):
    """In-memory SlipStore keyed by (repository, commit)."""

    def __init__(
        self,
        slips: Optional[Dict[Tuple[str, str], str]] = None,
        error: Optional[Exception] = None,
    ):
        self.slips = slips or {}
        self.error = error
        self.calls: List[Tuple[str, List[str]]] = []
        self.closed = False

    def find_by_commits(
        self, repository: str, commits: List[str]
    ) -> Tuple[Optional[Slip], str]:
        self.calls.append((repository, list(commits)))
        if self.error is not None:
            raise self.error
        for commit in commits:
            correlation_id = self.slips.get((repository, commit))
            if correlation_id is not None:
                return Slip(correlation_id=correlation_id), commit
        return None, ""

    def close(self) -> None:
        self.closed = True


def linear_history(count: int) -> Tuple[List[str], Dict[str, List[str]]]:
    """Commit ids head-first plus a first-parent map for a linear history."""
    commits = [f"{i:040x}" for i in range(count, 0, -1)]
    parents = {
        commit: [commits[idx + 1]]
        for idx, commit in enumerate(commits[:-1])
    }
    return commits, parents


@pytest.fixture
def fake_repository():
    """Factory for FakeRepository instances with an origin remote by default."""

    def _make(
        commit_count: int = 6,
        origin: Optional[str] = "https://github.com/TestOrg/test-repo.git",
        branch: str = "main",
    ) -> Tuple[FakeRepository, List[str]]:
        commits, parents = linear_history(commit_count)
        remotes = {"origin": [origin]} if origin is not None else {}
        repo = FakeRepository(
            head=commits[0] if commits else "",
            parents=parents,
            branch=branch,
            remotes=remotes,
        )
        return repo, commits

    return _make


@pytest.fixture
def fake_store():
    """Factory for FakeSlipStore instances."""
    return FakeSlipStore


class GitRepoBuilder:
    """Creates commits in a real git repository under a temporary directory."""

    def __init__(self, path: Path):
        self.path = path
        self.path.mkdir(parents=True, exist_ok=True)
        self.git("init", "-q")
        self.git("config", "user.email", "test@example.com")
        self.git("config", "user.name", "Test User")
        self.git("config", "commit.gpgsign", "false")
        self.git("symbolic-ref", "HEAD", "refs/heads/main")

    def git(self, *args: str) -> str:
        result = subprocess.run(
            ["git", *args],
            cwd=self.path,
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout.strip()

    def commit(self, message: str) -> str:
        """Create an empty commit and return its SHA."""
        self.git("commit", "-q", "--allow-empty", "-m", message)
        return self.git("rev-parse", "HEAD")

    def add_origin(self, url: str = "https://github.com/TestOrg/test-repo.git"):
        self.git("remote", "add", "origin", url)


@pytest.fixture
def git_repo(tmp_path):
    """A fresh git repository on branch 'main' with no commits."""
    return GitRepoBuilder(tmp_path / "repo")
