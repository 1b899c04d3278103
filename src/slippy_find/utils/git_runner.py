"""
Centralized git command runner with dubious ownership handling.

CI runners frequently check repositories out as a different user than the
one executing slippy-find, which makes git refuse to operate ("detected
dubious ownership"). Every git invocation goes through this module so the
repository is always marked as a safe directory.
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import Dict, List, Optional

from ..exceptions import GitCommandError

logger = logging.getLogger(__name__)


def get_git_environment(repo_path: Path) -> Dict[str, str]:
    """
    Build the environment for git commands run against repo_path.

    Adds safe.directory for the repository as config entry 0 and shifts any
    GIT_CONFIG_KEY_n/GIT_CONFIG_VALUE_n pairs already present in the calling
    environment up by one so they are preserved.

    Args:
        repo_path: Path to the repository

    Returns:
        Dictionary of environment variables for git commands
    """
    env = os.environ.copy()

    existing_count = 0
    if os.environ.get("GIT_CONFIG_COUNT", "").isdigit():
        existing_count = int(os.environ["GIT_CONFIG_COUNT"])

    for idx in range(existing_count - 1, -1, -1):
        key = os.environ.get(f"GIT_CONFIG_KEY_{idx}")
        if key is None:
            continue
        env[f"GIT_CONFIG_KEY_{idx + 1}"] = key
        env[f"GIT_CONFIG_VALUE_{idx + 1}"] = os.environ.get(
            f"GIT_CONFIG_VALUE_{idx}", ""
        )

    env["GIT_CONFIG_KEY_0"] = "safe.directory"
    env["GIT_CONFIG_VALUE_0"] = str(repo_path.resolve())
    env["GIT_CONFIG_COUNT"] = str(existing_count + 1)

    # Never block on credential or editor prompts
    env["GIT_TERMINAL_PROMPT"] = "0"

    return env


def run_git_command(
    args: List[str],
    cwd: Path,
    check: bool = True,
    timeout: Optional[float] = None,
) -> subprocess.CompletedProcess:
    """
    Run a git command with proper environment handling for dubious ownership.

    Args:
        args: Git arguments without the leading "git" (e.g., ["rev-parse", "HEAD"])
        cwd: Working directory for the command
        check: Whether to raise GitCommandError on non-zero exit
        timeout: Optional timeout in seconds, passed through to subprocess

    Returns:
        CompletedProcess instance with text stdout/stderr

    Raises:
        GitCommandError: If git is missing, times out, or exits non-zero with check=True
    """
    cmd = ["git", *args]
    command_line = " ".join(cmd)

    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            env=get_git_environment(cwd),
        )
    except subprocess.TimeoutExpired as e:
        logger.debug(f"Git command timed out after {timeout}s: {command_line}")
        raise GitCommandError(
            f"git command timed out: {command_line}", f"timeout={timeout}s"
        ) from e
    except OSError as e:
        raise GitCommandError(f"failed to execute git: {command_line}", str(e)) from e

    if check and result.returncode != 0:
        logger.debug(
            f"Git command failed (exit {result.returncode}): {command_line}: "
            f"{result.stderr.strip()}"
        )
        raise GitCommandError(
            f"git command failed: {command_line}",
            result.stderr.strip() or f"exit status {result.returncode}",
        )

    return result


def git_output(args: List[str], cwd: Path, timeout: Optional[float] = None) -> str:
    """Run a git command and return its stripped stdout."""
    return run_git_command(args, cwd=cwd, timeout=timeout).stdout.strip()
