"""Git working-tree operations for commander.

Return type conventions:
- Query and mutation functions raise a GitError subclass on failure
  (RepositoryError, IndexWriteError, CommitError, CloneError).
  PathResolutionError is the one non-fatal kind: callers skip the path.
- Functions returning Optional values (get_current_branch, get_head_sha)
  return None when there is nothing to report.
- run_git() returns a GitResult; callers check .success.
"""

from commander.git.errors import (
    GitError,
    RepositoryError,
    PathResolutionError,
    IndexWriteError,
    CommitError,
    CloneError,
)
from commander.git.repository import (
    open_repository,
    init_repository,
)
from commander.git.status import (
    StatusFlags,
    StatusRecord,
    StatusSnapshot,
    get_status_records,
)
from commander.git.classify import (
    StatusEntry,
    classify,
    classify_all,
    short_status,
    long_status,
    branch_header,
)
from commander.git.message import (
    CommitMessage,
    compose_message,
    compose_from_entries,
)
from commander.git.staging import (
    StagingMode,
    StagingResult,
    stage_paths,
)
from commander.git.commit import create_commit
from commander.git.branch import (
    get_current_branch,
    get_head_sha,
)
from commander.git.progress import (
    CloneProgress,
    CloneProgressState,
)
from commander.git.clone import (
    clone_repository,
    expand_clone_url,
    resolve_clone_target,
)

__all__ = [
    # errors
    "GitError",
    "RepositoryError",
    "PathResolutionError",
    "IndexWriteError",
    "CommitError",
    "CloneError",
    # repository
    "open_repository",
    "init_repository",
    # status
    "StatusFlags",
    "StatusRecord",
    "StatusSnapshot",
    "get_status_records",
    # classify
    "StatusEntry",
    "classify",
    "classify_all",
    "short_status",
    "long_status",
    "branch_header",
    # message
    "CommitMessage",
    "compose_message",
    "compose_from_entries",
    # staging
    "StagingMode",
    "StagingResult",
    "stage_paths",
    # commit
    "create_commit",
    # branch
    "get_current_branch",
    "get_head_sha",
    # clone
    "CloneProgress",
    "CloneProgressState",
    "clone_repository",
    "expand_clone_url",
    "resolve_clone_target",
]
