"""
Shortest Query - Fewest cubes any solution needs.
"""

import logging
import time

from ..base import SearchQuery
from ..context import SearchAborted, SearchContext
from ..enumeration import CandidateEnumerator
from ..factory import register_query
from ..solution import SearchResult, SearchStatus

logger = logging.getLogger(__name__)


@register_query
class ShortestQuery(SearchQuery):
    """
    Minimal total cube count across both rows.

    Lengths are tried in ascending order and the search ends with the
    first length that has a solution.
    """
    name = "shortest"
    description = "Shortest - Fewest cubes needed to hit the goal"
    timeout_sec = 20.0

    def run(self, context: SearchContext) -> SearchResult:
        """
        Search for the shortest solution.

        Args:
            context: Search context with puzzle and cancellation

        Returns:
            SearchResult with shortest_length set, or None without solution
        """
        start_time = time.perf_counter()
        enumerator = CandidateEnumerator(context)

        try:
            witness = self._first_solution(context, enumerator)
        except SearchAborted as e:
            logger.warning(f"[{self.name}] {e}")
            return self._build_result(context, enumerator, start_time, SearchStatus.ABORTED)

        context.report_progress(1.0, "Done")
        if witness is None:
            return self._build_result(context, enumerator, start_time, SearchStatus.EXHAUSTED)

        logger.debug(f"Shortest solution: {witness.describe()}")
        return self._build_result(
            context, enumerator, start_time, SearchStatus.SOLVED,
            witness=witness,
            shortest_length=witness.token_count,
            solution_count=1,
        )
