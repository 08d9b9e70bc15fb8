"""
Stats Query - Exhaustive count of distinct solutions for difficulty rating.
"""

import logging
import time
from collections import Counter
from typing import Optional

from ..base import SearchQuery
from ..context import SearchAborted, SearchContext
from ..enumeration import CandidateEnumerator
from ..factory import register_query
from ..solution import Candidate, SearchResult, SearchStatus

logger = logging.getLogger(__name__)


@register_query
class StatsQuery(SearchQuery):
    """
    Counts every structurally distinct solution.

    Two solutions are the same when their cube values and grouping
    shapes match on both rows; the enumerator yields each one once.
    Also reports the shortest and longest
    solution lengths. Meant for offline puzzle rating, not live play.
    """
    name = "stats"
    description = "Stats - Count all solutions, shortest and longest length"
    timeout_sec = 120.0

    def run(self, context: SearchContext) -> SearchResult:
        """
        Enumerate all solutions.

        Args:
            context: Search context with puzzle and cancellation

        Returns:
            SearchResult with solution_count, shortest_length and
            longest_length (partial counts when aborted)
        """
        start_time = time.perf_counter()
        enumerator = CandidateEnumerator(context)

        per_length: Counter = Counter()
        witness: Optional[Candidate] = None
        status = SearchStatus.EXHAUSTED

        lengths = range(enumerator.min_length, enumerator.max_length + 1)
        try:
            for index, total in enumerate(lengths):
                context.report_progress(
                    index / max(1, len(lengths)),
                    f"{sum(per_length.values())} solutions, trying {total} cubes"
                )
                for candidate in enumerator.solutions(total):
                    per_length[total] += 1
                    if witness is None:
                        witness = candidate
        except SearchAborted as e:
            logger.warning(f"[{self.name}] {e}, counts are partial")
            status = SearchStatus.ABORTED

        if status is not SearchStatus.ABORTED:
            context.report_progress(1.0, f"{sum(per_length.values())} solutions")
            if per_length:
                status = SearchStatus.SOLVED

        logger.debug(f"Solutions per length: {dict(sorted(per_length.items()))}")
        return self._build_result(
            context, enumerator, start_time, status,
            witness=witness,
            shortest_length=min(per_length) if per_length else None,
            longest_length=max(per_length) if per_length else None,
            solution_count=sum(per_length.values()),
        )
