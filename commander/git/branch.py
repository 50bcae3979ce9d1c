"""Git branch operations."""

from pathlib import Path

from commander.git.runner import run_git


def get_current_branch(worktree: Path) -> str | None:
    """Get the current branch name, or None if detached HEAD."""
    result = run_git(["branch", "--show-current"], worktree)
    if result.success:
        return result.stdout.strip() or None
    return None


def get_head_sha(worktree: Path) -> str | None:
    """Get the commit HEAD points at, or None on an unborn branch."""
    result = run_git(["rev-parse", "--verify", "--quiet", "HEAD"], worktree)
    if result.success:
        return result.stdout.strip() or None
    return None
