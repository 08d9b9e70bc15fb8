"""
Exists Query - Does any arrangement of the pool hit the goal?
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
class ExistsQuery(SearchQuery):
    """
    Existence check used by the in-game pass confirmation.

    Stops at the first solution. An aborted search reports the answer
    as unknown instead of blocking the caller.
    """
    name = "exists"
    description = "Exists - Stop at the first arrangement hitting the goal"
    timeout_sec = 5.0

    def run(self, context: SearchContext) -> SearchResult:
        """
        Search for any solution.

        Args:
            context: Search context with puzzle and cancellation

        Returns:
            SearchResult whose exists property answers the query
        """
        start_time = time.perf_counter()
        enumerator = CandidateEnumerator(context)

        if not context.puzzle.pool.has_operand:
            logger.debug("Pool has no operand cube, no solution possible")
            return self._build_result(context, enumerator, start_time, SearchStatus.EXHAUSTED)

        try:
            witness = self._first_solution(context, enumerator)
        except SearchAborted as e:
            logger.warning(f"[{self.name}] {e}")
            return self._build_result(context, enumerator, start_time, SearchStatus.ABORTED)

        context.report_progress(1.0, "Done")
        if witness is None:
            return self._build_result(context, enumerator, start_time, SearchStatus.EXHAUSTED)
        return self._build_result(
            context, enumerator, start_time, SearchStatus.SOLVED,
            witness=witness,
            shortest_length=witness.token_count,
            solution_count=1,
        )
