"""Staging paths into the index.

Two modes, after `git add`:
- update-only (`add --update`): tracked paths only, and only those modified
  or new in the worktree are staged.
- add-all: tracked and untracked paths, every matched path is staged.

Staged paths are collected in memory and the index is written once, with a
single `git update-index` call, after all matches are processed.
"""

import enum
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from commander.git.errors import IndexWriteError, PathResolutionError, RepositoryError
from commander.git.runner import run_git
from commander.git.status import StatusFlags, StatusSnapshot

logger = logging.getLogger(__name__)

# Called with a root-relative path; return True to stage it.
MatchedPathCallback = Callable[[str], bool]

AFFECTED_FLAGS = (
    StatusFlags.WT_NEW
    | StatusFlags.WT_MODIFIED
    | StatusFlags.WT_RENAMED
    | StatusFlags.WT_TYPECHANGE
    | StatusFlags.WT_DELETED
)

UPDATE_FLAGS = StatusFlags.WT_MODIFIED | StatusFlags.WT_NEW


class StagingMode(str, enum.Enum):
    UPDATE_ONLY = "update-only"
    ADD_ALL = "add-all"


@dataclass
class StagingResult:
    """Outcome of one staging call."""
    attempted_paths: list[str] = field(default_factory=list)
    staged_paths: list[str] = field(default_factory=list)
    affected_count: int = 0


def is_affected(flags: StatusFlags) -> bool:
    """True when the worktree side has any change."""
    return bool(flags & AFFECTED_FLAGS)


class Index:
    """Pending index updates for one repository."""

    def __init__(self, worktree: Path, cwd: Path | None = None):
        """
        Args:
            worktree: Top-level directory of the repository
            cwd: Directory path specs are relative to (defaults to worktree)
        """
        self.worktree = worktree
        self.cwd = cwd or worktree
        self._pending: list[str] = []

    @property
    def pending(self) -> list[str]:
        return list(self._pending)

    def matched_paths(self, pathspecs: list[str], include_untracked: bool) -> list[str]:
        """Root-relative paths matched by the specs, tracked first."""
        args = ["ls-files", "-z", "--full-name", "--cached"]
        if include_untracked:
            args += ["--others", "--exclude-standard"]
        args += ["--"] + pathspecs

        result = run_git(args, self.cwd)
        if not result.success:
            raise RepositoryError(f"Cannot list files in {self.worktree}", result.stderr)

        seen = set()
        paths = []
        for path in result.stdout.split("\0"):
            # ls-files repeats paths with several index stages
            if path and path not in seen:
                seen.add(path)
                paths.append(path)
        return paths

    def _apply(self, paths: list[str], callback: MatchedPathCallback | None) -> list[str]:
        for path in paths:
            if callback is None or callback(path):
                self._pending.append(path)
        return paths

    def add_all(self, pathspecs: list[str], callback: MatchedPathCallback | None = None) -> list[str]:
        """Queue tracked and untracked matches. Returns every matched path."""
        return self._apply(self.matched_paths(pathspecs, include_untracked=True), callback)

    def update_all(self, pathspecs: list[str], callback: MatchedPathCallback | None = None) -> list[str]:
        """Queue tracked matches only. Returns every matched path."""
        return self._apply(self.matched_paths(pathspecs, include_untracked=False), callback)

    def write(self) -> None:
        """Persist all queued paths to the index in one write.

        Raises:
            IndexWriteError: git refused to update the index
        """
        payload = "".join(f"{p}\0" for p in self._pending)
        result = run_git(
            ["update-index", "--add", "--remove", "-z", "--stdin"],
            self.worktree,
            input=payload,
        )
        if not result.success:
            raise IndexWriteError(f"Failed to write index for {self.worktree}", result.stderr)
        logger.debug(f"Index written with {len(self._pending)} path(s)")
        self._pending = []


def stage_paths(
    worktree: Path,
    pathspecs: list[str] | None = None,
    mode: StagingMode = StagingMode.ADD_ALL,
    cwd: Path | None = None,
) -> StagingResult:
    """
    Stage the paths matched by pathspecs.

    Args:
        worktree: Top-level directory of the repository
        pathspecs: Path specs to match (default: ".")
        mode: StagingMode.UPDATE_ONLY or StagingMode.ADD_ALL
        cwd: Directory the path specs are relative to

    Returns:
        StagingResult with matched paths, staged paths and the number of
        matched paths that had worktree changes

    Raises:
        RepositoryError: the repository could not be read
        IndexWriteError: the index could not be written
    """
    specs = pathspecs or ["."]
    snapshot = StatusSnapshot.capture(worktree)
    index = Index(worktree, cwd)
    result = StagingResult()
    flags_by_path: dict[str, StatusFlags | None] = {}

    def lookup(path: str) -> StatusFlags | None:
        if path not in flags_by_path:
            try:
                flags_by_path[path] = snapshot.status_file(path)
            except PathResolutionError as e:
                logger.warning(f"Skipping path: {e}")
                flags_by_path[path] = None
        return flags_by_path[path]

    def update_filter(path: str) -> bool:
        flags = lookup(path)
        return flags is not None and bool(flags & UPDATE_FLAGS)

    if mode == StagingMode.UPDATE_ONLY:
        matched = index.update_all(specs, update_filter)
    else:
        matched = index.add_all(specs)

    for path in matched:
        flags = lookup(path)
        if flags is not None and is_affected(flags):
            result.affected_count += 1

    result.attempted_paths = matched
    result.staged_paths = index.pending
    index.write()
    return result
