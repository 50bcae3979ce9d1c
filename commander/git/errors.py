"""Error types raised by the git layer.

Only PathResolutionError is recoverable: callers log it and move on to the
next path. Everything else is surfaced to the command layer as a failure.
"""


class GitError(Exception):
    """Base class for git layer failures."""

    def __init__(self, message: str, stderr: str = ""):
        self.stderr = stderr.strip()
        detail = f": {self.stderr}" if self.stderr else ""
        super().__init__(f"{message}{detail}")


class RepositoryError(GitError):
    """The repository could not be opened or queried."""


class PathResolutionError(GitError):
    """The status of a single path could not be determined."""

    def __init__(self, path: str, message: str = "cannot resolve status"):
        self.path = path
        super().__init__(f"{path}: {message}")


class IndexWriteError(GitError):
    """The index could not be written to disk."""


class CommitError(GitError):
    """Creating the commit (tree, parent, signature or ref update) failed."""


class CloneError(GitError):
    """The clone transport failed."""
