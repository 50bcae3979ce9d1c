"""Listing cloned repositories.

Clones live at <git_dir>/<owner>/<repo>; build output directories are not
repositories and are skipped.
"""

from pathlib import Path

SKIP_DIRS = {"target", "obj", ".git", "bin"}


def list_repositories(git_dir: Path) -> list[Path]:
    """Return <git_dir>/<owner>/<repo> directories, sorted.

    Raises:
        FileNotFoundError: git_dir does not exist
    """
    if not git_dir.is_dir():
        raise FileNotFoundError(f"Directory does not exist: {git_dir}")

    repos = []
    for owner in sorted(git_dir.iterdir()):
        if not owner.is_dir() or owner.name in SKIP_DIRS:
            continue
        for repo in sorted(owner.iterdir()):
            if repo.is_dir() and repo.name not in SKIP_DIRS:
                repos.append(repo)
    return repos
