"""
Solver Package - Solvability queries over a round's cube pool.

Queries are registered by name and selected at runtime. Every query is
re-entrant: it builds its own search state from the context it is
given, so independent puzzles can be searched from several threads.

Public API:
    - Puzzle: Cards, cubes and goal of a round
    - SearchContext: Cancellation, deadline, step budget, progress
    - SearchResult / SearchMetrics / SearchStatus: Query results
    - Candidate: A concrete two-row arrangement
    - SearchQuery: Abstract base for queries
    - create_query(): Factory function
    - exists_solution() / shortest_solution_length() / solution_stats()
    - check_pass(): Answer to an in-game pass request

Usage:
    from setcubes.solver import Puzzle, exists_solution, shortest_solution_length

    puzzle = Puzzle.from_codes([1, 2, 3, 4, 5, 8, 9, 10],
                               ["red", "blue", "union", "green"], goal=5)
    exists_solution(puzzle)             # True / False / None (unknown)
    shortest_solution_length(puzzle)    # 3
"""

import threading
from typing import Callable, Optional

# Core data structures
from .puzzle import Puzzle
from .solution import Candidate, SearchMetrics, SearchResult, SearchStatus
from .context import SearchAborted, SearchContext

# Query framework
from .base import SearchQuery
from .factory import (
    create_query,
    get_query_names,
    get_query_info,
    get_default_query_name,
    register_query,
)

# Import queries to register them
from . import queries

from .pass_check import PassCheck, PassVerdict, check_pass


def run_query(
    name: str,
    puzzle: Puzzle,
    timeout_sec: Optional[float] = None,
    max_steps: Optional[int] = None,
    cancel_flag: Optional[threading.Event] = None,
    progress_callback: Optional[Callable[[float, str], None]] = None
) -> SearchResult:
    """
    Run a registered query on a puzzle.

    Args:
        name: Query name
        puzzle: Puzzle to search
        timeout_sec: Deadline in seconds (query default when None)
        max_steps: Budget of evaluated candidates (unlimited when None)
        cancel_flag: Event that stops the search when set
        progress_callback: Optional progress callback

    Returns:
        SearchResult
    """
    query = create_query(name)
    context = SearchContext(
        puzzle=puzzle,
        timeout_sec=query.timeout_sec if timeout_sec is None else timeout_sec,
        max_steps=max_steps,
        progress_callback=progress_callback,
    )
    if cancel_flag is not None:
        context.cancel_flag = cancel_flag
    return query.run(context)


def exists_solution(puzzle: Puzzle, **kwargs) -> Optional[bool]:
    """
    Check whether any arrangement of the pool hits the goal.

    Returns:
        True or False, or None when the search was aborted
    """
    return run_query("exists", puzzle, **kwargs).exists


def shortest_solution_length(puzzle: Puzzle, **kwargs) -> Optional[int]:
    """
    Fewest cubes across both rows of any solution.

    Returns:
        Cube count, or None when no solution exists

    Raises:
        SearchAborted: If the search stopped before an answer was known
    """
    result = run_query("shortest", puzzle, **kwargs)
    if result.was_cancelled:
        raise SearchAborted("Shortest solution search aborted")
    return result.shortest_length


def solution_stats(puzzle: Puzzle, **kwargs) -> SearchResult:
    """
    Count all distinct solutions and their longest length.

    Returns:
        SearchResult with solution_count and longest_length
    """
    return run_query("stats", puzzle, **kwargs)


__all__ = [
    # Data structures
    "Puzzle",
    "Candidate",
    "SearchMetrics",
    "SearchResult",
    "SearchStatus",
    "SearchAborted",
    "SearchContext",
    # Query framework
    "SearchQuery",
    "create_query",
    "get_query_names",
    "get_query_info",
    "get_default_query_name",
    "register_query",
    "run_query",
    # Convenience
    "exists_solution",
    "shortest_solution_length",
    "solution_stats",
    "PassCheck",
    "PassVerdict",
    "check_pass",
]
