"""Commit message composition.

Message layout:

    <headline>

    Updated: <timestamp>          (only when change notes were given)

    Changes:                      (only when there is at least one bullet)
    - <note>

    Files Changed:
    <status line>
"""

from dataclasses import dataclass, field
from datetime import datetime

from commander.git.classify import StatusEntry

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class CommitMessage:
    """Sections of a generated commit message."""
    headline: str
    timestamp: str
    body_changes: list[str] = field(default_factory=list)
    files_changed: list[str] = field(default_factory=list)
    has_notes: bool = False

    def text(self) -> str:
        parts = [self.headline, "\n\n"]
        if self.has_notes:
            parts.append(f"Updated: {self.timestamp}\n")
            if self.body_changes:
                parts.append("\nChanges:\n")
                parts += [f"- {change}\n" for change in self.body_changes]
        parts.append("\nFiles Changed:\n")
        parts += [f"{line}\n" for line in self.files_changed]
        return "".join(parts)


def compose_message(
    changes: list[str],
    timestamp: datetime,
    status_lines: list[str],
) -> CommitMessage:
    """
    Build a commit message from change notes and status lines.

    Args:
        changes: Change notes; the first becomes the headline, empty notes
            after it are dropped
        timestamp: Time of the update
        status_lines: Rendered status lines, kept in the given order

    Returns:
        CommitMessage whose text() is ready for the commit
    """
    time_str = timestamp.strftime(TIMESTAMP_FORMAT)
    if not changes:
        return CommitMessage(
            headline=f"Updated: {time_str}",
            timestamp=time_str,
            files_changed=list(status_lines),
        )

    # A blank first note still needs a headline.
    return CommitMessage(
        headline=changes[0] or f"Updated: {time_str}",
        timestamp=time_str,
        body_changes=[c for c in changes[1:] if c],
        files_changed=list(status_lines),
        has_notes=True,
    )


def compose_from_entries(
    changes: list[str],
    timestamp: datetime,
    entries: list[StatusEntry],
) -> CommitMessage:
    """compose_message() over classified entries."""
    return compose_message(changes, timestamp, [e.render() for e in entries])
