"""Git status operations.

Status comes from `git status --porcelain=v2 -z`, which carries everything the
classifier needs in one call: per-side change letters, the original path of
renames and the submodule state field.

Record formats (fields separated by spaces, records by NUL):
    1 XY sub mH mI mW hH hI path
    2 XY sub mH mI mW hH hI Xscore path<NUL>origPath
    u XY sub m1 m2 m3 mW h1 h2 h3 path
    ? path
    ! path
"""

import enum
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from commander.git.errors import PathResolutionError, RepositoryError
from commander.git.runner import run_git

logger = logging.getLogger(__name__)


class StatusFlags(enum.Flag):
    """Index-side and worktree-side change flags for one path."""
    CURRENT = 0
    INDEX_NEW = enum.auto()
    INDEX_MODIFIED = enum.auto()
    INDEX_DELETED = enum.auto()
    INDEX_RENAMED = enum.auto()
    INDEX_TYPECHANGE = enum.auto()
    WT_NEW = enum.auto()
    WT_MODIFIED = enum.auto()
    WT_DELETED = enum.auto()
    WT_RENAMED = enum.auto()
    WT_TYPECHANGE = enum.auto()
    IGNORED = enum.auto()


# Porcelain v2 letters; copies are staged as new files.
INDEX_LETTERS = {
    "A": StatusFlags.INDEX_NEW,
    "C": StatusFlags.INDEX_NEW,
    "M": StatusFlags.INDEX_MODIFIED,
    "D": StatusFlags.INDEX_DELETED,
    "R": StatusFlags.INDEX_RENAMED,
    "T": StatusFlags.INDEX_TYPECHANGE,
}

WORKTREE_LETTERS = {
    "A": StatusFlags.WT_NEW,
    "M": StatusFlags.WT_MODIFIED,
    "D": StatusFlags.WT_DELETED,
    "R": StatusFlags.WT_RENAMED,
    "T": StatusFlags.WT_TYPECHANGE,
}


@dataclass(frozen=True)
class DiffDelta:
    """Old and new path of one side of a change."""
    old_path: str | None
    new_path: str | None


@dataclass(frozen=True)
class SubmoduleState:
    """Submodule state from the porcelain v2 `S<c><m><u>` field."""
    new_commits: bool = False
    index_modified: bool = False
    worktree_modified: bool = False
    untracked: bool = False


@dataclass
class StatusRecord:
    """One changed path as reported by the status query."""
    path: str
    flags: StatusFlags
    head_to_index: DiffDelta | None = None
    index_to_workdir: DiffDelta | None = None
    submodule: SubmoduleState | None = None


def parse_submodule_field(field: str) -> SubmoduleState | None:
    """Parse the `<sub>` field: `N...` for plain files, `S<c><m><u>` for submodules."""
    if len(field) != 4 or field[0] != "S":
        return None
    # git reports tracked changes in a submodule as one letter; it covers
    # both the submodule's index and its worktree.
    modified = field[2] == "M"
    return SubmoduleState(
        new_commits=field[1] == "C",
        index_modified=modified,
        worktree_modified=modified,
        untracked=field[3] == "U",
    )


def _changed_record(xy: str, sub: str, path: str, orig_path: str | None = None) -> StatusRecord:
    x, y = xy[0], xy[1]
    flags = StatusFlags.CURRENT
    flags |= INDEX_LETTERS.get(x, StatusFlags.CURRENT)
    flags |= WORKTREE_LETTERS.get(y, StatusFlags.CURRENT)

    head_to_index = None
    index_to_workdir = None
    if x != ".":
        if x == "R" and orig_path is not None:
            head_to_index = DiffDelta(orig_path, path)
        else:
            head_to_index = DiffDelta(path, path)
    if y != ".":
        if y == "R" and x != "R" and orig_path is not None:
            index_to_workdir = DiffDelta(orig_path, path)
        else:
            index_to_workdir = DiffDelta(path, path)

    return StatusRecord(
        path=path,
        flags=flags,
        head_to_index=head_to_index,
        index_to_workdir=index_to_workdir,
        submodule=parse_submodule_field(sub),
    )


def parse_status_v2(output: str) -> list[StatusRecord]:
    """Parse `git status --porcelain=v2 -z` output into records, in git's order.

    Unmerged paths have no code in the status alphabet and are skipped.
    """
    records = []
    entries = output.split("\0")
    i = 0
    while i < len(entries):
        entry = entries[i]
        i += 1
        if not entry or entry.startswith("#"):
            continue

        kind = entry[0]
        if kind == "1":
            parts = entry.split(" ", 8)
            if len(parts) != 9:
                logger.warning(f"Malformed status record ignored: {entry!r}")
                continue
            records.append(_changed_record(parts[1], parts[2], parts[8]))
        elif kind == "2":
            parts = entry.split(" ", 9)
            if len(parts) != 10 or i >= len(entries):
                logger.warning(f"Malformed rename record ignored: {entry!r}")
                continue
            orig_path = entries[i]
            i += 1
            records.append(_changed_record(parts[1], parts[2], parts[9], orig_path))
        elif kind == "u":
            path = entry.split(" ", 10)[-1]
            logger.warning(f"Unmerged path skipped: {path}")
        elif kind == "?":
            path = entry[2:]
            records.append(StatusRecord(
                path=path,
                flags=StatusFlags.WT_NEW,
                index_to_workdir=DiffDelta(path, path),
            ))
        elif kind == "!":
            path = entry[2:]
            records.append(StatusRecord(
                path=path,
                flags=StatusFlags.IGNORED,
                index_to_workdir=DiffDelta(path, path),
            ))
        else:
            logger.warning(f"Unknown status record ignored: {entry!r}")

    return records


def get_status_records(
    worktree: Path,
    pathspecs: list[str] | None = None,
    include_ignored: bool = False,
) -> list[StatusRecord]:
    """
    Query the status of every changed path in the repository.

    Args:
        worktree: Repository working directory
        pathspecs: Limit the query to these path specs
        include_ignored: Also report ignored files

    Raises:
        RepositoryError: git could not read the repository
    """
    args = ["status", "--porcelain=v2", "-z", "--untracked-files=all"]
    if include_ignored:
        args.append("--ignored")
    if pathspecs:
        args += ["--"] + pathspecs

    result = run_git(args, worktree)
    if not result.success:
        raise RepositoryError(f"Cannot read status of {worktree}", result.stderr)
    return parse_status_v2(result.stdout)


class StatusSnapshot:
    """Per-path status lookups against a single status query.

    Paths missing from the query are clean when they still exist on disk.
    A path that is neither changed nor present cannot be resolved; this is
    the case for files removed between enumeration and lookup.
    """

    def __init__(self, worktree: Path, records: list[StatusRecord]):
        self.worktree = worktree
        self._flags = {r.path: r.flags for r in records}

    @classmethod
    def capture(cls, worktree: Path, pathspecs: list[str] | None = None) -> "StatusSnapshot":
        return cls(worktree, get_status_records(worktree, pathspecs))

    def status_file(self, path: str) -> StatusFlags:
        flags = self._flags.get(path)
        if flags is not None:
            return flags
        # A dangling symlink is still a tracked entry.
        if os.path.lexists(self.worktree / path):
            return StatusFlags.CURRENT
        raise PathResolutionError(path, "not found in status or on disk")
