"""
Puzzle Module - Immutable description of one round to search.
"""

from dataclasses import dataclass
from typing import Sequence

from ..engine import TokenPool, Universe


@dataclass(frozen=True)
class Puzzle:
    """
    A round: cards, dealt cubes and the number of cards to name.

    Attributes:
        universe: Round universe
        pool: Dealt cubes and restriction flag
        goal: Required number of matching cards
    """
    universe: Universe
    pool: TokenPool
    goal: int

    @classmethod
    def from_codes(
        cls,
        codes: Sequence[int],
        token_names: Sequence[str],
        goal: int,
        restrictions_enabled: bool = True
    ) -> 'Puzzle':
        """
        Create a Puzzle from card codes and cube names.

        Args:
            codes: Eight 4-bit card codes
            token_names: Cube names, e.g. ["red", "blue", "union", "green"]
            goal: Required number of matching cards
            restrictions_enabled: Whether Subset/Equals may be played

        Returns:
            Puzzle instance
        """
        return cls(
            universe=Universe.from_codes(codes),
            pool=TokenPool.from_names(token_names, restrictions_enabled),
            goal=goal,
        )

    def describe(self) -> str:
        """Short human-readable summary."""
        cubes = " ".join(token.symbol for token in self.pool)
        return f"cards={list(self.universe.codes)} cubes=[{cubes}] goal={self.goal}"
