"""Cloning repositories with live progress.

`git clone --progress` writes its progress meter to stderr, one update per
carriage return:

    Receiving objects:  45% (450/1000), 1.20 MiB | 2.00 MiB/s
    Resolving deltas:  30% (30/100)
    Updating files:  50% (5/10)

CloneMeterParser turns those lines into TransferProgress/CheckoutProgress
events that are handed to a ProgressSink as they arrive.
"""

import logging
import re
import subprocess
from collections import deque
from dataclasses import replace
from pathlib import Path

from commander.git.errors import CloneError
from commander.git.progress import CheckoutProgress, ProgressEvent, ProgressSink, TransferProgress

logger = logging.getLogger(__name__)

RECEIVING_RE = re.compile(
    r"Receiving objects:\s+\d+% \((\d+)/(\d+)\)(?:,\s+([\d.]+) (bytes|KiB|MiB|GiB))?"
)
RESOLVING_RE = re.compile(r"Resolving deltas:\s+\d+% \((\d+)/(\d+)\)")
CHECKOUT_RE = re.compile(r"(?:Updating files|Checking out files):\s+\d+% \((\d+)/(\d+)\)")

BYTE_UNITS = {
    "bytes": 1,
    "KiB": 1024,
    "MiB": 1024 ** 2,
    "GiB": 1024 ** 3,
}

SHORTHAND_RE = re.compile(r"^[\w.-]+/[\w.-]+$")
GITHUB_URL = "https://github.com/{}.git"

# Lines of git's non-progress stderr kept for error messages
STDERR_TAIL = 20


class CloneMeterParser:
    """Stateful parser for git's clone progress meter.

    Transfer events always carry the full counters seen so far, so a
    "Resolving deltas" line reports the object totals of the preceding
    "Receiving objects" lines too.
    """

    def __init__(self):
        self.transfer = TransferProgress()

    def parse(self, line: str) -> ProgressEvent | None:
        m = RECEIVING_RE.search(line)
        if m:
            received, total = int(m.group(1)), int(m.group(2))
            received_bytes = self.transfer.received_bytes
            if m.group(3):
                received_bytes = int(float(m.group(3)) * BYTE_UNITS[m.group(4)])
            # index-pack indexes objects as they arrive
            self.transfer = replace(
                self.transfer,
                received_objects=received,
                total_objects=total,
                indexed_objects=received,
                received_bytes=received_bytes,
            )
            return self.transfer

        m = RESOLVING_RE.search(line)
        if m:
            self.transfer = replace(
                self.transfer,
                indexed_deltas=int(m.group(1)),
                total_deltas=int(m.group(2)),
            )
            return self.transfer

        m = CHECKOUT_RE.search(line)
        if m:
            return CheckoutProgress(path=None, current=int(m.group(1)), total=int(m.group(2)))

        return None


def expand_clone_url(repo: str) -> str:
    """Expand `owner/repo` shorthand to a GitHub URL; other URLs pass through."""
    if SHORTHAND_RE.match(repo) and not Path(repo).exists():
        return GITHUB_URL.format(repo)
    return repo


def resolve_clone_target(url: str, git_dir: Path, dest_dir: Path | None = None) -> Path:
    """
    Work out where a clone of url should live.

    With dest_dir the repository goes to dest_dir/<repo>; otherwise to
    git_dir/<owner>/<repo>, owner and repo taken from the last two URL
    components (`:` separated for scp-style ssh URLs).
    """
    components = [c for c in re.split(r"[/:]", url.rstrip("/")) if c]
    if not components:
        raise ValueError(f"Cannot derive repository name from '{url}'")
    repo_name = components[-1]
    if repo_name.endswith(".git"):
        repo_name = repo_name[:-len(".git")]

    if dest_dir is not None:
        return dest_dir.expanduser() / repo_name

    if len(components) < 2:
        raise ValueError(f"Cannot derive repository owner from '{url}'")
    owner = components[-2]
    return git_dir.expanduser() / owner / repo_name


def clone_repository(url: str, dest: Path, sink: ProgressSink) -> Path:
    """
    Clone url into dest, reporting progress to sink.

    Events are delivered synchronously from this thread, in the order git
    writes them. No timeout is applied.

    Returns:
        dest

    Raises:
        CloneError: git could not be started or the clone failed
    """
    dest.parent.mkdir(parents=True, exist_ok=True)
    cmd = ["git", "clone", "--progress", url, str(dest)]
    logger.info(f"Cloning {url} into {dest}")

    parser = CloneMeterParser()
    tail: deque[str] = deque(maxlen=STDERR_TAIL)
    try:
        # Universal newlines turn each carriage-return update into its own line.
        process = subprocess.Popen(
            cmd,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
        )
    except OSError as e:
        raise CloneError(f"Failed to start git clone: {e}") from e

    with process:
        for line in process.stderr:
            line = line.strip()
            if not line:
                continue
            event = parser.parse(line)
            if event is not None:
                sink.on_event(event)
            else:
                tail.append(line)
        returncode = process.wait()

    if returncode != 0:
        raise CloneError(f"Clone of {url} failed (exit {returncode})", "\n".join(tail))
    return dest
