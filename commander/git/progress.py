"""Clone progress reporting.

The clone transport reports two kinds of events, transfer progress (objects
and bytes received, deltas resolved) and checkout progress (files written).
CloneProgress folds both into one state and redraws a single terminal line
after every event.

Phases, driven by a transitions state machine:

    receiving --complete_transfer--> resolving

While receiving, the line shows network, index and checkout percentages.
Once every object has been received the line is ended with a newline (once)
and only "Resolving deltas" lines are drawn from then on.
"""

import logging
import sys
from dataclasses import dataclass
from typing import Protocol, TextIO, Union

from transitions import Machine

logger = logging.getLogger(__name__)

PHASES = [
    {"name": "receiving"},
    {"name": "resolving", "on_enter": "_on_enter_resolving"},
]

TRANSITIONS = [
    {"trigger": "complete_transfer", "source": "receiving", "dest": "resolving"},
]


@dataclass(frozen=True)
class TransferProgress:
    """Network transfer counters, as totals so far."""
    received_objects: int = 0
    total_objects: int = 0
    indexed_objects: int = 0
    received_bytes: int = 0
    indexed_deltas: int = 0
    total_deltas: int = 0


@dataclass(frozen=True)
class CheckoutProgress:
    """Checkout counters; path is the file being written, if known."""
    path: str | None
    current: int
    total: int


ProgressEvent = Union[TransferProgress, CheckoutProgress]


class ProgressSink(Protocol):
    """Receives progress events from a clone, one at a time."""

    def on_event(self, event: ProgressEvent) -> None:
        ...


@dataclass
class CloneProgressState:
    """Everything the progress line is drawn from."""
    received_objects: int = 0
    total_objects: int = 0
    indexed_objects: int = 0
    indexed_deltas: int = 0
    total_deltas: int = 0
    received_bytes: int = 0
    checkout_current: int = 0
    checkout_total: int = 0
    checkout_path: str | None = None
    transfer_complete: bool = False


def percent(part: int, whole: int) -> int:
    if whole <= 0:
        return 0
    return (100 * part) // whole


class CloneProgress:
    """ProgressSink that renders one in-place progress line per event."""

    def __init__(self, out: TextIO | None = None):
        self.out = out or sys.stdout
        self.stats = CloneProgressState()
        self.machine = Machine(
            model=self,
            states=PHASES,
            transitions=TRANSITIONS,
            initial="receiving",
            auto_transitions=False,
        )

    def on_event(self, event: ProgressEvent) -> None:
        if isinstance(event, TransferProgress):
            self._on_transfer(event)
        elif isinstance(event, CheckoutProgress):
            self._on_checkout(event)
        else:
            raise TypeError(f"Unknown progress event: {event!r}")

    def _on_transfer(self, event: TransferProgress) -> None:
        stats = self.stats
        stats.received_objects = event.received_objects
        stats.total_objects = event.total_objects
        stats.indexed_objects = event.indexed_objects
        stats.received_bytes = event.received_bytes
        stats.indexed_deltas = event.indexed_deltas
        stats.total_deltas = event.total_deltas

        if (
            self.state == "receiving"
            and stats.total_objects > 0
            and stats.received_objects == stats.total_objects
        ):
            self.complete_transfer()
        self.render()

    def _on_checkout(self, event: CheckoutProgress) -> None:
        self.stats.checkout_path = event.path
        self.stats.checkout_current = event.current
        self.stats.checkout_total = event.total
        self.render()

    def _on_enter_resolving(self) -> None:
        logger.info(f"All {self.stats.total_objects} objects received")
        self.stats.transfer_complete = True
        # Keep the last receiving line; delta lines overwrite each other below it.
        self.out.write("\n")

    def format_line(self) -> str:
        s = self.stats
        if s.transfer_complete:
            return f"Resolving deltas {s.indexed_deltas}/{s.total_deltas}\r"

        network_pct = percent(s.received_objects, s.total_objects)
        index_pct = percent(s.indexed_objects, s.total_objects)
        checkout_pct = percent(s.checkout_current, s.checkout_total)
        kbytes = s.received_bytes // 1024
        return (
            f"net {network_pct:3}% ({kbytes:4} kb, {s.received_objects:5}/{s.total_objects:5})  /  "
            f"idx {index_pct:3}% ({s.indexed_objects:5}/{s.total_objects:5})  /  "
            f"chk {checkout_pct:3}% ({s.checkout_current:4}/{s.checkout_total:4}) "
            f"{s.checkout_path or ''}\r"
        )

    def render(self) -> None:
        self.out.write(self.format_line())
        self.out.flush()

    def finish(self) -> None:
        """End the progress line once the clone has returned."""
        self.out.write("\n")
        self.out.flush()
