"""Opening and creating repositories."""

import logging
from pathlib import Path

from commander.git.errors import RepositoryError
from commander.git.runner import run_git

logger = logging.getLogger(__name__)


def open_repository(path: Path) -> Path:
    """Return the top-level working directory of the repository containing path.

    Raises:
        RepositoryError: path is not inside a git working tree
    """
    result = run_git(["rev-parse", "--show-toplevel"], path)
    if not result.success:
        raise RepositoryError(f"Not a git repository: {path}", result.stderr)
    return Path(result.stdout.strip())


def init_repository(path: Path) -> Path:
    """Create (or reinitialise) a repository at path and return its worktree."""
    path.mkdir(parents=True, exist_ok=True)
    result = run_git(["init"], path)
    if not result.success:
        raise RepositoryError(f"Failed to initialise repository at {path}", result.stderr)
    logger.info(f"Initialised repository at {path}")
    return open_repository(path)
