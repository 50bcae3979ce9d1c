"""Porcelain-style classification of status records.

Turns the per-path flags from the status query into two-column status codes
(`A `, ` M`, `RM`, `!!`, ...) and renders them as short status lines, plus
the long `git status` style listing.
"""

import logging
from dataclasses import dataclass
from typing import Iterable

from commander.git.status import StatusFlags, StatusRecord, SubmoduleState

logger = logging.getLogger(__name__)

# First match wins.
INDEX_CODES = [
    (StatusFlags.INDEX_NEW, "A"),
    (StatusFlags.INDEX_MODIFIED, "M"),
    (StatusFlags.INDEX_DELETED, "D"),
    (StatusFlags.INDEX_RENAMED, "R"),
    (StatusFlags.INDEX_TYPECHANGE, "T"),
]

WORKTREE_CODES = [
    (StatusFlags.WT_NEW, "?"),
    (StatusFlags.WT_MODIFIED, "M"),
    (StatusFlags.WT_DELETED, "D"),
    (StatusFlags.WT_RENAMED, "R"),
    (StatusFlags.WT_TYPECHANGE, "T"),
]

INDEX_LABELS = [
    (StatusFlags.INDEX_NEW, "new file: "),
    (StatusFlags.INDEX_MODIFIED, "modified: "),
    (StatusFlags.INDEX_DELETED, "deleted: "),
    (StatusFlags.INDEX_RENAMED, "renamed: "),
    (StatusFlags.INDEX_TYPECHANGE, "typechange:"),
]

WORKTREE_LABELS = [
    (StatusFlags.WT_MODIFIED, "modified: "),
    (StatusFlags.WT_DELETED, "deleted: "),
    (StatusFlags.WT_RENAMED, "renamed: "),
    (StatusFlags.WT_TYPECHANGE, "typechange:"),
]


@dataclass(frozen=True)
class StatusEntry:
    """Classified status of one path."""
    index_code: str
    worktree_code: str
    old_path: str
    new_path: str | None = None
    third_path: str | None = None
    extra_annotation: str = ""

    @property
    def code(self) -> str:
        return self.index_code + self.worktree_code

    def render(self) -> str:
        """Render as a short status line."""
        if self.index_code == "R" and self.worktree_code == "R":
            return f"RR {self.old_path} {self.new_path} {self.third_path}{self.extra_annotation}"
        if self.index_code == "R" or self.worktree_code == "R":
            return f"{self.code} {self.old_path} {self.new_path}{self.extra_annotation}"
        return f"{self.code} {self.old_path}{self.extra_annotation}"


def _first_match(flags: StatusFlags, table: list[tuple[StatusFlags, str]], default: str) -> str:
    for flag, value in table:
        if flag in flags:
            return value
    return default


def classify_codes(flags: StatusFlags) -> tuple[str, str]:
    """Map flags to (index_code, worktree_code)."""
    index_code = _first_match(flags, INDEX_CODES, " ")
    worktree_code = _first_match(flags, WORKTREE_CODES, " ")
    if worktree_code == "?" and index_code == " ":
        index_code = "?"
    if StatusFlags.IGNORED in flags:
        index_code = worktree_code = "!"
    return index_code, worktree_code


def submodule_annotation(state: SubmoduleState | None) -> str:
    if state is None:
        return ""
    if state.new_commits:
        return " (new commits)"
    if state.index_modified or state.worktree_modified:
        return " (modified content)"
    if state.untracked:
        return " (untracked content)"
    return ""


def classify(record: StatusRecord) -> StatusEntry | None:
    """
    Classify one status record.

    Returns:
        The StatusEntry, or None when the record is suppressed: clean paths,
        fully untracked paths (listed separately by untracked_lines) and
        records missing the paths their line needs.
    """
    if record.flags == StatusFlags.CURRENT:
        return None

    index_code, worktree_code = classify_codes(record.flags)
    if index_code == "?" and worktree_code == "?":
        return None

    a = b = c = None
    if record.head_to_index is not None:
        a = record.head_to_index.old_path
        b = record.head_to_index.new_path
    if record.index_to_workdir is not None:
        a = a or record.index_to_workdir.old_path
        b = b or record.index_to_workdir.old_path
        c = record.index_to_workdir.new_path

    if index_code == "R" and worktree_code == "R":
        needed = (a, b, c)
    elif index_code == "R":
        needed = (a, b)
    elif worktree_code == "R":
        needed = (a, c)
        b = c
    else:
        needed = (a,)
    if any(p is None for p in needed):
        logger.warning(f"Skipping {record.path}: no diff paths for status {index_code}{worktree_code}")
        return None

    # Submodule state describes the workdir side only.
    annotation = ""
    if record.index_to_workdir is not None:
        annotation = submodule_annotation(record.submodule)

    return StatusEntry(
        index_code=index_code,
        worktree_code=worktree_code,
        old_path=a,
        new_path=b,
        third_path=c,
        extra_annotation=annotation,
    )


def classify_all(records: Iterable[StatusRecord]) -> list[StatusEntry]:
    """Classify records in query order, dropping suppressed ones."""
    entries = []
    for record in records:
        entry = classify(record)
        if entry is not None:
            entries.append(entry)
    return entries


def untracked_lines(records: Iterable[StatusRecord]) -> list[str]:
    """List fully untracked paths as `?? <path>` lines."""
    return [f"?? {r.path}" for r in records if r.flags == StatusFlags.WT_NEW]


def short_status(records: list[StatusRecord]) -> list[str]:
    """Short status: classified lines followed by the untracked listing."""
    lines = [entry.render() for entry in classify_all(records)]
    return lines + untracked_lines(records)


def branch_header(branch: str | None, long_format: bool) -> str:
    if long_format:
        return f"# On branch {branch or 'Not currently on any branch'}"
    return f"## {branch or 'HEAD (no branch)'}"


def _delta_text(old: str | None, new: str | None) -> str:
    if old and new and old != new:
        return f"{old} -> {new}"
    return old or new or ""


def long_status(records: list[StatusRecord]) -> list[str]:
    """Long status listing with section headers and command hints."""
    lines = []
    rm_in_workdir = any(StatusFlags.WT_DELETED in r.flags for r in records)

    staged = []
    for r in records:
        label = _first_match(r.flags, INDEX_LABELS, "")
        if not label or r.head_to_index is None:
            continue
        delta = r.head_to_index
        staged.append(f"#\t{label}  {_delta_text(delta.old_path, delta.new_path)}")
    if staged:
        lines += [
            "# Changes to be committed:",
            '#   (use "git reset HEAD <file>..." to unstage)',
            "#",
        ]
        lines += staged + ["#"]

    unstaged = []
    for r in records:
        label = _first_match(r.flags, WORKTREE_LABELS, "")
        if not label or r.index_to_workdir is None:
            continue
        delta = r.index_to_workdir
        unstaged.append(f"#\t{label}  {_delta_text(delta.old_path, delta.new_path)}")
    if unstaged:
        add_hint = "add/rm" if rm_in_workdir else "add"
        lines += [
            "# Changes not staged for commit:",
            f'#   (use "git {add_hint} <file>..." to update what will be committed)',
            '#   (use "git checkout -- <file>..." to discard changes in working directory)',
            "#",
        ]
        lines += unstaged + ["#"]

    untracked = [r.path for r in records if r.flags == StatusFlags.WT_NEW]
    if untracked:
        lines += [
            "# Untracked files",
            '#   (use "git add <file>..." to include in what will be committed)',
            "#",
        ]
        lines += [f"#\t{p}" for p in untracked]

    ignored = [r.path for r in records if r.flags == StatusFlags.IGNORED]
    if ignored:
        lines += [
            "# Ignored files",
            '#   (use "git add -f <file>..." to include in what will be committed)',
            "#",
        ]
        lines += [f"#\t{p}" for p in ignored]

    if not staged and unstaged:
        lines.append('no changes added to commit (use "git add" and/or "git commit -a")')

    return lines
