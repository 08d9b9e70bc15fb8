"""
Solver Worker Module for setcubes

Provides a background QThread worker that runs a solvability query so an
interactive host stays responsive. Communicates via Qt signals for
thread-safe status updates.
"""

import logging
import threading
from typing import Optional

from PyQt5.QtCore import QThread, pyqtSignal

from setcubes.solver import Puzzle, SearchContext, SearchResult, create_query


# Configure module logger
logger = logging.getLogger(__name__)


class SolvabilityWorker(QThread):
    """
    Background worker thread for one solvability query.

    Signals:
        status_changed(str): Emitted when worker status changes
        progress_changed(float, str): Emitted with query progress
        result_ready(object): Emitted with the SearchResult when done
        error_occurred(str): Emitted when an error occurs

    Example:
        worker = SolvabilityWorker(puzzle, "exists", timeout_sec=2.0)
        worker.result_ready.connect(ui.on_pass_checked)
        worker.start()
        # ...
        worker.request_stop()
        worker.wait()
    """

    # Signals for UI updates (thread-safe)
    status_changed = pyqtSignal(str)
    progress_changed = pyqtSignal(float, str)
    result_ready = pyqtSignal(object)  # Emits SearchResult
    error_occurred = pyqtSignal(str)

    def __init__(
        self,
        puzzle: Puzzle,
        query_name: str = "exists",
        timeout_sec: Optional[float] = None,
        max_steps: Optional[int] = None
    ):
        """
        Initialize the worker.

        Args:
            puzzle: Puzzle to search
            query_name: Registered query to run
            timeout_sec: Deadline in seconds (query default when None)
            max_steps: Budget of evaluated candidates (unlimited when None)
        """
        super().__init__()
        self.puzzle = puzzle
        self.query_name = query_name
        self.timeout_sec = timeout_sec
        self.max_steps = max_steps
        self._cancel_flag = threading.Event()
        self._running = False
        self.last_result: Optional[SearchResult] = None

    def run(self):
        """
        Run the query. Called when thread starts.

        Emits result_ready with the SearchResult, or error_occurred if
        the query raised.
        """
        self._running = True
        logger.info(f"Solvability worker started: {self.query_name} on {self.puzzle.describe()}")
        self.status_changed.emit("Running")

        try:
            query = create_query(self.query_name)
            context = SearchContext(
                puzzle=self.puzzle,
                cancel_flag=self._cancel_flag,
                timeout_sec=query.timeout_sec if self.timeout_sec is None else self.timeout_sec,
                max_steps=self.max_steps,
                progress_callback=self.progress_changed.emit,
            )
            self.last_result = query.run(context)
            self.result_ready.emit(self.last_result)
            self.status_changed.emit(self.last_result.status.name.capitalize())
        except Exception as e:
            logger.exception("Error in solvability worker")
            self.error_occurred.emit(str(e))
            self.status_changed.emit("Error")
        finally:
            self._running = False
            logger.info("Solvability worker stopped")

    def request_stop(self):
        """
        Request the worker to stop gracefully.

        The running query notices the cancel flag at its next step and
        reports an aborted result. Use wait() after calling this to block
        until stopped.
        """
        logger.info("Stop requested")
        self._cancel_flag.set()

    def is_running(self) -> bool:
        """
        Check if the worker is currently running a query.

        Returns:
            True if a query is active, False otherwise
        """
        return self._running
