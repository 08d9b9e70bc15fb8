"""
Base Query Module - Abstract base class for solvability queries.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Optional

from .context import SearchContext
from .enumeration import CandidateEnumerator
from .solution import Candidate, SearchMetrics, SearchResult, SearchStatus

logger = logging.getLogger(__name__)


class SearchQuery(ABC):
    """
    Abstract base class for all solvability queries.

    Subclasses must implement the run() method and define
    name and description class attributes.

    Attributes:
        name: Short identifier for the query
        description: Human-readable description
        timeout_sec: Default timeout for this query
    """
    name: str = "base"
    description: str = "Base query"
    timeout_sec: float = 20.0

    @abstractmethod
    def run(self, context: SearchContext) -> SearchResult:
        """
        Answer the query for the context's puzzle.

        Must stop with an ABORTED result when context.is_cancelled()
        becomes True.

        Args:
            context: Search context with puzzle, cancellation, progress

        Returns:
            SearchResult with answer and metrics
        """
        pass

    def _first_solution(self, context: SearchContext, enumerator: CandidateEnumerator) -> Optional[Candidate]:
        """
        Find a solution with the fewest cubes.

        Cube counts are tried in ascending order, so the first hit is
        also the shortest.

        Raises:
            SearchAborted: If the query must stop
        """
        lengths = range(enumerator.min_length, enumerator.max_length + 1)
        for index, total in enumerate(lengths):
            context.report_progress(index / max(1, len(lengths)), f"Trying {total} cubes")
            for candidate in enumerator.solutions(total):
                logger.debug(f"[{self.name}] Solution with {total} cubes: {candidate.describe()}")
                return candidate
        return None

    def _build_result(
        self,
        context: SearchContext,
        enumerator: CandidateEnumerator,
        start_time: float,
        status: SearchStatus,
        **fields
    ) -> SearchResult:
        """Build SearchResult object from computation results."""
        elapsed_ms = (time.perf_counter() - start_time) * 1000

        result = SearchResult(
            status=status,
            metrics=SearchMetrics(
                computation_time_ms=elapsed_ms,
                candidates_evaluated=context.steps,
                pruned_branches=enumerator.pruned,
                query_name=self.name
            ),
            **fields
        )
        logger.info(
            f"[{self.name}] {status.name} in {elapsed_ms:.1f}ms, "
            f"{context.steps} candidates, {enumerator.pruned} pruned"
        )
        return result
