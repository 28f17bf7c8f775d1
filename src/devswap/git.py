"""Git helpers for devswap.

Clones a remote repository into a scratch directory used as the dev
container's source mount.
"""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

from .constants import CLONE_BASE_DIR, GIT_CLONE_TIMEOUT
from .errors import GitCloneError
from .logging import get_logger

logger = get_logger(__name__)


def repo_name_from_remote(remote: str) -> str:
    """Derive the repository directory name from a clone URL.

    Examples:
        >>> repo_name_from_remote("git@github.com:org/repo.git")
        'repo'
        >>> repo_name_from_remote("https://example.com/org/tool")
        'tool'

    Raises:
        GitCloneError: If no name can be derived.
    """
    name = remote.rstrip("/")
    name = name[name.rfind("/") + 1 :]
    # scp-like remotes without a path: host:repo.git
    name = name[name.rfind(":") + 1 :]
    name = name.removesuffix(".git")
    if not name:
        raise GitCloneError(f"Cannot derive a repository name from '{remote}'")
    return name


def clone_target(remote: str, base_dir: str | Path = CLONE_BASE_DIR) -> Path:
    """Directory a remote is cloned into."""
    return Path(base_dir) / repo_name_from_remote(remote)


def clone_remote(remote: str, branch: str, *, base_dir: str | Path = CLONE_BASE_DIR) -> Path:
    """Clone ``remote`` at ``branch``, replacing any previous clone.

    Args:
        remote: Repository URL.
        branch: Branch to check out; empty for the remote's default.
        base_dir: Parent directory of the clone.

    Returns:
        Path of the fresh clone.

    Raises:
        GitCloneError: If git is missing or the clone fails.
    """
    target = clone_target(remote, base_dir)
    if target.exists():
        logger.debug("Removing previous clone: %s", target)
        shutil.rmtree(target)

    cmd = ["git", "clone", remote, str(target)]
    if branch:
        cmd.extend(["-b", branch, "--single-branch"])

    logger.debug("Running git command: %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd, check=False, timeout=GIT_CLONE_TIMEOUT)
    except FileNotFoundError as e:
        raise GitCloneError("Git not found in PATH") from e
    except subprocess.TimeoutExpired as e:
        raise GitCloneError(f"git clone timed out after {GIT_CLONE_TIMEOUT}s") from e

    if result.returncode != 0:
        raise GitCloneError(f"Failed to clone repository {remote} (exit {result.returncode})")
    logger.info("Cloned %s (%s) into %s", remote, branch or "default branch", target)
    return target
