"""
Test script for the background solvability worker.

The worker's run() is called directly so results arrive synchronously.

Usage:
    pytest tests/test_solver_worker.py
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

QtCore = pytest.importorskip("PyQt5.QtCore")

from setcubes.solver import Puzzle, SearchStatus
from setcubes.solver_worker import SolvabilityWorker


@pytest.fixture(scope="module")
def app():
    instance = QtCore.QCoreApplication.instance()
    if instance is None:
        instance = QtCore.QCoreApplication([])
    return instance


@pytest.fixture
def puzzle():
    return Puzzle.from_codes([1, 2, 3, 4, 5, 8, 9, 10], ["red", "blue", "union", "green"], goal=5)


def collect(worker):
    """Connect to every worker signal and record emissions."""
    emitted = {"status": [], "progress": [], "result": [], "error": []}
    worker.status_changed.connect(emitted["status"].append)
    worker.progress_changed.connect(lambda p, m: emitted["progress"].append(p))
    worker.result_ready.connect(emitted["result"].append)
    worker.error_occurred.connect(emitted["error"].append)
    return emitted


def test_worker_emits_result(app, puzzle):
    worker = SolvabilityWorker(puzzle, "shortest")
    emitted = collect(worker)

    worker.run()

    assert not emitted["error"]
    assert len(emitted["result"]) == 1
    result = emitted["result"][0]
    assert result is worker.last_result
    assert result.shortest_length == 3
    assert emitted["status"] == ["Running", "Solved"]
    assert emitted["progress"][-1] == 1.0
    assert not worker.is_running()


def test_worker_stop_before_run(app, puzzle):
    worker = SolvabilityWorker(puzzle, "stats")
    emitted = collect(worker)

    worker.request_stop()
    worker.run()

    result = emitted["result"][0]
    assert result.status is SearchStatus.ABORTED
    assert result.exists is None
    assert emitted["status"][-1] == "Aborted"


def test_worker_step_budget(app, puzzle):
    worker = SolvabilityWorker(puzzle, "exists", max_steps=1)
    emitted = collect(worker)

    worker.run()

    assert emitted["result"][0].was_cancelled


def test_worker_unknown_query(app, puzzle):
    worker = SolvabilityWorker(puzzle, "longest")
    emitted = collect(worker)

    worker.run()

    assert not emitted["result"]
    assert len(emitted["error"]) == 1
    assert "Unknown query" in emitted["error"][0]
    assert emitted["status"][-1] == "Error"
    assert worker.last_result is None
