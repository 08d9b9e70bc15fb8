"""
Solution Module - Candidate arrangements and query results.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Tuple

from ..engine import Line, LineRole, Token
from ..engine.line import sizes_to_groups


@dataclass(frozen=True)
class Candidate:
    """
    One fully specified arrangement of cubes on the two rows.

    Groupings are stored as contiguous cluster sizes, so two candidates
    are equal exactly when their cube values and grouping shapes match.

    Attributes:
        set_name: Set-name row cubes in reading order
        set_name_sizes: Cluster sizes of the set-name row
        restriction: Restriction row cubes (empty without restriction)
        restriction_sizes: Cluster sizes of the restriction row
    """
    set_name: Tuple[Token, ...]
    set_name_sizes: Tuple[int, ...]
    restriction: Tuple[Token, ...] = ()
    restriction_sizes: Tuple[int, ...] = ()

    @property
    def token_count(self) -> int:
        """Total cubes used across both rows."""
        return len(self.set_name) + len(self.restriction)

    @property
    def has_restriction(self) -> bool:
        return len(self.restriction) > 0

    def set_name_line(self) -> Line:
        """Set-name row as a Line."""
        return Line(
            role=LineRole.SET_NAME,
            tokens=self.set_name,
            groups=sizes_to_groups(self.set_name_sizes),
        )

    def restriction_line(self) -> Optional[Line]:
        """Restriction row as a Line, or None without restriction."""
        if not self.restriction:
            return None
        return Line(
            role=LineRole.RESTRICTION,
            tokens=self.restriction,
            groups=sizes_to_groups(self.restriction_sizes),
        )

    def describe(self) -> str:
        """Render both rows as text."""
        text = self.set_name_line().describe()
        restriction = self.restriction_line()
        if restriction is not None:
            text = f"{restriction.describe()}  |  {text}"
        return text


class SearchStatus(Enum):
    """How a query ended."""
    SOLVED = auto()     # a solution was found
    EXHAUSTED = auto()  # the search space was fully explored
    ABORTED = auto()    # stopped by cancellation, deadline or step budget


@dataclass
class SearchMetrics:
    """
    Performance metrics for a query.

    Attributes:
        computation_time_ms: Time taken in milliseconds
        candidates_evaluated: Number of candidate evaluations
        pruned_branches: Number of prefixes abandoned by the grammar
        query_name: Name of query that produced the result
    """
    computation_time_ms: float = 0.0
    candidates_evaluated: int = 0
    pruned_branches: int = 0
    query_name: str = ""


@dataclass
class SearchResult:
    """
    Result of a query.

    Attributes:
        status: How the query ended
        witness: A solution found (exists/shortest queries)
        shortest_length: Fewest cubes among solutions found
        longest_length: Most cubes among solutions found
        solution_count: Number of distinct solutions found
        metrics: Performance statistics
    """
    status: SearchStatus = SearchStatus.EXHAUSTED
    witness: Optional[Candidate] = None
    shortest_length: Optional[int] = None
    longest_length: Optional[int] = None
    solution_count: int = 0
    metrics: SearchMetrics = field(default_factory=SearchMetrics)

    @property
    def was_cancelled(self) -> bool:
        """True if the query stopped before finishing."""
        return self.status is SearchStatus.ABORTED

    @property
    def exists(self) -> Optional[bool]:
        """
        Whether a solution exists.

        Returns:
            True if one was found, False if none exists, None if unknown
        """
        if self.witness is not None or self.solution_count > 0:
            return True
        if self.status is SearchStatus.ABORTED:
            return None
        return False
