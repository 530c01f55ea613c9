"""
Progress aggregation for parallel tasks.

Collects completions from concurrent workers and writes a single
self-overwriting progress line to a text stream:

    Progress: 3/12 files processed (25.00%)

The counter is incremented under a lock, so the count itself is exact.
Lines written by different workers may reach the terminal in any order;
that only affects what is briefly displayed, never the final count.

Usage:
    aggregator = ProgressAggregator(unit="files processed")
    aggregator.set_total(len(paths))

    # In parallel tasks:
    aggregator.complete(path)

    # After the join barrier:
    aggregator.finish()
"""

from dataclasses import dataclass
import sys
import threading
from typing import TextIO


@dataclass
class ProgressState:
    """
    Tracks progress across parallel tasks.

    Not thread-safe on its own; ProgressAggregator provides the locking.

    Attributes:
        total_tasks: Number of tasks known when processing started.
        completed_tasks: Number of tasks that have finished successfully.
    """
    total_tasks: int
    completed_tasks: int = 0

    @property
    def percentage(self) -> float:
        """Completion percentage (0.0-100.0); 0.0 when there is nothing to do."""
        if self.total_tasks == 0:
            return 0.0
        return self.completed_tasks / self.total_tasks * 100


class ProgressAggregator:
    """
    Thread-safe completion counter with a live progress line.

    Args:
        stream: Text stream for progress output (default: sys.stdout,
               resolved at write time so redirection is honored).
        unit: Label printed after the counts, e.g. "files processed".
    """

    def __init__(self, stream: TextIO | None = None, unit: str = "files processed"):
        self._stream = stream
        self.unit = unit
        self._state = ProgressState(total_tasks=0)
        self._lock = threading.Lock()

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def set_total(self, count: int) -> None:
        """Set total number of tasks and reset the counter."""
        with self._lock:
            self._state = ProgressState(total_tasks=count)

    def complete(self, task_id: str) -> int:
        """
        Mark one task as complete and redraw the progress line.

        Thread-safe: Can be called from multiple worker threads.

        Args:
            task_id: Identifier of the finished task (unused in output).

        Returns:
            The completed count after this increment.
        """
        with self._lock:
            self._state.completed_tasks += 1
            done = self._state.completed_tasks
            line = self._format_line()
        self.stream.write(line)
        self.stream.flush()
        return done

    def finish(self) -> None:
        """Terminate the progress line once all tasks are done."""
        if self.total:
            self.stream.write("\n")
            self.stream.flush()

    def _format_line(self) -> str:
        """Must be called while holding _lock."""
        return (
            f"\rProgress: {self._state.completed_tasks}/{self._state.total_tasks} "
            f"{self.unit} ({self._state.percentage:.2f}%)"
        )

    @property
    def completed(self) -> int:
        """Get number of completed tasks (thread-safe)."""
        with self._lock:
            return self._state.completed_tasks

    @property
    def total(self) -> int:
        """Get total number of tasks (thread-safe)."""
        with self._lock:
            return self._state.total_tasks
