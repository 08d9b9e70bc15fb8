"""
Search Context Module - Shared context for query execution.
"""

import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from .puzzle import Puzzle


class SearchAborted(Exception):
    """Raised inside a query when it has to stop before finishing."""


@dataclass
class SearchContext:
    """
    Shared context passed to queries containing the puzzle, cancellation,
    budgets and progress reporting.

    Attributes:
        puzzle: Puzzle to search
        cancel_flag: Threading event for cancellation
        timeout_sec: Maximum computation time in seconds (None for no deadline)
        max_steps: Maximum number of evaluated candidates (None for no budget)
        start_time: When computation started
        progress_callback: Optional callback for progress updates
        steps: Candidates evaluated so far
    """
    puzzle: Puzzle
    cancel_flag: threading.Event = field(default_factory=threading.Event)
    timeout_sec: Optional[float] = 20.0
    max_steps: Optional[int] = None
    start_time: float = field(default_factory=time.time)
    progress_callback: Optional[Callable[[float, str], None]] = None
    steps: int = 0

    def is_cancelled(self) -> bool:
        """
        Check if cancellation requested or a budget is exhausted.

        Returns:
            True if the query should stop execution
        """
        if self.cancel_flag.is_set():
            return True
        if self.timeout_sec is not None and self.elapsed_time() > self.timeout_sec:
            return True
        if self.max_steps is not None and self.steps >= self.max_steps:
            return True
        return False

    def count_step(self) -> None:
        """
        Record one evaluated candidate.

        Raises:
            SearchAborted: If the query must stop
        """
        if self.is_cancelled():
            raise SearchAborted(f"Search stopped after {self.steps} steps")
        self.steps += 1

    def report_progress(self, percent: float, message: str = "") -> None:
        """
        Report progress to the host.

        Args:
            percent: Progress from 0.0 to 1.0
            message: Optional status message
        """
        if self.progress_callback:
            self.progress_callback(percent, message)

    def elapsed_time(self) -> float:
        """
        Get seconds elapsed since computation started.

        Returns:
            Elapsed time in seconds
        """
        return time.time() - self.start_time

