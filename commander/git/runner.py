"""Single entry point for running the git executable."""

import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30
GIT_NOT_FOUND = 127

# Paths are bytes to git. Undecodable bytes round-trip through str as
# lone surrogates and are re-encoded unchanged on stdin.
PATH_ERRORS = "surrogateescape"


@dataclass
class GitResult:
    """Outcome of one git invocation; callers check .success."""
    returncode: int
    stdout: str
    stderr: str
    timed_out: bool = False

    @property
    def success(self) -> bool:
        return self.returncode == 0 and not self.timed_out


def run_git(
    args: list[str],
    cwd: Path,
    timeout: int = DEFAULT_TIMEOUT,
    input: str | None = None,
    env: dict[str, str] | None = None,
) -> GitResult:
    """
    Run `git -C cwd <args>` and capture its output as text.

    Args:
        args: Git arguments (e.g., ["status", "--porcelain=v2", "-z"])
        cwd: Directory git runs in
        timeout: Seconds before the command is abandoned
        input: Text written to git's stdin (plumbing commands such as
            update-index --stdin and commit-tree -F -)
        env: Variables merged over the inherited environment

    Returns:
        GitResult; a timeout or a missing git executable is reported as a
        failed result rather than raised
    """
    cmd = ["git", "-C", str(cwd)] + args
    run_env = {**os.environ, **env} if env else None
    logger.debug(f"Running: git {' '.join(args)} (in {cwd})")

    try:
        completed = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            errors=PATH_ERRORS,
            timeout=timeout,
            input=input,
            env=run_env,
        )
    except subprocess.TimeoutExpired:
        logger.warning(f"git {args[0] if args else ''} timed out after {timeout}s")
        return GitResult(
            returncode=-1,
            stdout="",
            stderr=f"Command timed out after {timeout}s",
            timed_out=True,
        )
    except FileNotFoundError:
        return GitResult(returncode=GIT_NOT_FOUND, stdout="", stderr="git executable not found")

    return GitResult(
        returncode=completed.returncode,
        stdout=completed.stdout,
        stderr=completed.stderr,
    )
