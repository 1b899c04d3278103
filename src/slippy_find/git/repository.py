"""
Git CLI backed repository accessor.

Uses run_git_command() from git_runner for all git operations so that
safe.directory handling and timeouts apply uniformly.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from ..exceptions import GitCommandError, RepositoryNotFoundError
from ..utils.git_runner import git_output, run_git_command
from .accessor import RepositoryAccessor

logger = logging.getLogger(__name__)


class GitRepository(RepositoryAccessor):
    """RepositoryAccessor implementation that shells out to git."""

    def __init__(self, path: Union[str, Path], timeout: Optional[float] = None):
        """
        Open the repository at path.

        Args:
            path: Working tree or bare repository path
            timeout: Optional per-command timeout in seconds

        Raises:
            RepositoryNotFoundError: If path is not inside a git repository
        """
        self.path = Path(path)
        self.timeout = timeout
        self._closed = False

        if not self.path.is_dir():
            raise RepositoryNotFoundError(str(path), "directory does not exist")

        try:
            run_git_command(["rev-parse", "--git-dir"], cwd=self.path, timeout=timeout)
        except GitCommandError as e:
            raise RepositoryNotFoundError(str(path), e.details) from e

        logger.debug(f"Opened git repository at {self.path}")

    def _ensure_open(self) -> None:
        if self._closed:
            raise GitCommandError(f"repository handle for {self.path} is closed")

    def _git(self, args: List[str]) -> str:
        self._ensure_open()
        return git_output(args, cwd=self.path, timeout=self.timeout)

    def head_commit(self) -> str:
        try:
            return self._git(["rev-parse", "--verify", "HEAD^{commit}"])
        except GitCommandError as e:
            raise RepositoryNotFoundError(
                str(self.path), f"failed to resolve HEAD: {e.details}"
            ) from e

    def is_on_branch(self) -> bool:
        return bool(self.branch_name())

    def branch_name(self) -> str:
        self._ensure_open()
        # symbolic-ref exits 1 when HEAD is detached
        result = run_git_command(
            ["symbolic-ref", "--quiet", "--short", "HEAD"],
            cwd=self.path,
            check=False,
            timeout=self.timeout,
        )
        if result.returncode != 0:
            return ""
        return result.stdout.strip()

    def remote_names(self) -> List[str]:
        return self._git(["remote"]).split()

    def remote_urls(self, name: str) -> List[str]:
        self._ensure_open()
        # config --get-all exits 1 when the key is unset
        result = run_git_command(
            ["config", "--get-all", f"remote.{name}.url"],
            cwd=self.path,
            check=False,
            timeout=self.timeout,
        )
        if result.returncode != 0:
            return []
        return [line for line in result.stdout.splitlines() if line.strip()]

    def parent_of(self, commit: str) -> Optional[str]:
        # Output is "<commit> <parent1> <parent2> ..."; only the first parent is used
        fields = self._git(["rev-list", "--parents", "-n", "1", commit]).split()
        if len(fields) < 2:
            return None
        return fields[1]

    def close(self) -> None:
        self._closed = True
