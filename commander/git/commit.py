"""Git commit operations."""

import logging
from pathlib import Path

from commander.git.branch import get_head_sha
from commander.git.errors import CommitError
from commander.git.runner import run_git
from commander.lib.config import RepositoryContext

logger = logging.getLogger(__name__)


def signature_env(context: RepositoryContext) -> dict[str, str]:
    """Author and committer identity for git's plumbing commands."""
    return {
        "GIT_AUTHOR_NAME": context.author_name,
        "GIT_AUTHOR_EMAIL": context.author_email,
        "GIT_COMMITTER_NAME": context.author_name,
        "GIT_COMMITTER_EMAIL": context.author_email,
    }


def create_commit(worktree: Path, message: str, context: RepositoryContext) -> str:
    """
    Commit the current index on top of HEAD.

    Writes the index as a tree, creates a commit with HEAD as parent (none
    on an unborn branch) signed with the context identity, then moves HEAD.
    The index is left untouched on failure so the commit can be retried.

    Returns:
        The new commit id

    Raises:
        CommitError: any step failed
    """
    tree = run_git(["write-tree"], worktree)
    if not tree.success:
        raise CommitError("Failed to write tree from index", tree.stderr)
    tree_oid = tree.stdout.strip()

    parent = get_head_sha(worktree)
    args = ["commit-tree", tree_oid]
    if parent:
        args += ["-p", parent]
    else:
        logger.info(f"No HEAD commit in {worktree}, creating root commit")
    args += ["-F", "-"]

    commit = run_git(args, worktree, input=message, env=signature_env(context))
    if not commit.success:
        raise CommitError("Failed to create commit", commit.stderr)
    commit_oid = commit.stdout.strip()

    update = ["update-ref", "-m", "commit: " + (message.splitlines() or [""])[0], "HEAD", commit_oid]
    if parent:
        update.append(parent)
    ref = run_git(update, worktree)
    if not ref.success:
        raise CommitError("Failed to update HEAD", ref.stderr)

    logger.info(f"Created commit {commit_oid[:7]} in {worktree}")
    return commit_oid
