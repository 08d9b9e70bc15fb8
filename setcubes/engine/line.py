"""
Line Module - A solution row: ordered cubes plus their grouping.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence, Tuple

from .grouping import (
    DEFAULT_TOKEN_SIZE,
    DEFAULT_TOUCH_TOLERANCE,
    Groups,
    PlacedToken,
    detect_groups,
)
from .tokens import Token


class LineRole(Enum):
    """Role a row plays in a solution."""
    RESTRICTION = "restriction"
    SET_NAME = "set_name"


def group_owner(groups: Groups, length: int) -> List[Tuple[int, ...]]:
    """
    Map every position to the group containing it.

    Args:
        groups: Partition of range(length)
        length: Number of tokens

    Returns:
        List where entry i is the group holding position i
    """
    owner: List[Tuple[int, ...]] = [()] * length
    for group in groups:
        for position in group:
            owner[position] = group
    return owner


def slice_groups(groups: Groups, start: int, stop: int) -> Groups:
    """
    Re-index the groups lying inside [start, stop) to start at zero.

    Groups reaching outside the range are dropped; callers make sure no
    group straddles the boundary.
    """
    return tuple(
        tuple(position - start for position in group)
        for group in groups
        if start <= min(group) and max(group) < stop
    )


def sizes_to_groups(sizes: Sequence[int]) -> Groups:
    """Turn a composition of a line length into contiguous groups."""
    groups = []
    start = 0
    for size in sizes:
        groups.append(tuple(range(start, start + size)))
        start += size
    return tuple(groups)


@dataclass(frozen=True)
class Line:
    """
    Immutable solution row.

    Attributes:
        role: Restriction or Set-Name
        tokens: Cubes in ascending x order
        groups: Partition of token positions into touching clusters
    """
    role: LineRole
    tokens: Tuple[Token, ...]
    groups: Groups

    def __post_init__(self):
        covered = sorted(position for group in self.groups for position in group)
        assert covered == list(range(len(self.tokens))), \
            f"Groups {self.groups} do not partition {len(self.tokens)} tokens"

    @classmethod
    def ungrouped(cls, role: LineRole, tokens: Sequence[Token]) -> 'Line':
        """Create a Line where no cubes touch."""
        tokens = tuple(tokens)
        return cls(role=role, tokens=tokens, groups=tuple((i,) for i in range(len(tokens))))

    @classmethod
    def from_sizes(cls, role: LineRole, tokens: Sequence[Token], sizes: Sequence[int]) -> 'Line':
        """
        Create a Line from contiguous cluster sizes.

        Args:
            role: Line role
            tokens: Cubes in reading order
            sizes: Cluster lengths summing to len(tokens), e.g. (2, 1, 3)

        Returns:
            Line instance
        """
        return cls(role=role, tokens=tuple(tokens), groups=sizes_to_groups(sizes))

    @classmethod
    def from_placed(
        cls,
        role: LineRole,
        placed: Sequence[PlacedToken],
        token_size: float = DEFAULT_TOKEN_SIZE,
        touch_tolerance: float = DEFAULT_TOUCH_TOLERANCE
    ) -> 'Line':
        """
        Create a Line from cubes dropped on a row.

        Cubes are ordered by x and grouped by the touch relation.

        Args:
            role: Line role
            placed: Cubes with coordinates, in any order
            token_size: Cube edge length
            touch_tolerance: Extra gap still counted as touching

        Returns:
            Line instance
        """
        ordered = sorted(placed, key=lambda p: p.x)
        groups = detect_groups(ordered, token_size, touch_tolerance)
        return cls(role=role, tokens=tuple(p.token for p in ordered), groups=groups)

    @property
    def is_empty(self) -> bool:
        """True if no cubes are on the row."""
        return len(self.tokens) == 0

    @property
    def has_restriction(self) -> bool:
        """True if any cube is a restriction operator."""
        return any(token.is_restriction for token in self.tokens)

    def with_role(self, role: LineRole) -> 'Line':
        """Copy of the line with another role."""
        return Line(role=role, tokens=self.tokens, groups=self.groups)

    def describe(self) -> str:
        """
        Render the line as text, bracketing contiguous multi-cube groups.

        Returns:
            String such as "green ∪ (red ∩ red)"
        """
        opening = {}
        closing = {}
        for group in self.groups:
            if len(group) > 1 and max(group) - min(group) + 1 == len(group):
                opening[min(group)] = opening.get(min(group), 0) + 1
                closing[max(group)] = closing.get(max(group), 0) + 1

        parts = []
        for i, token in enumerate(self.tokens):
            text = "(" * opening.get(i, 0) + token.symbol + ")" * closing.get(i, 0)
            parts.append(text)
        return " ".join(parts)

    def __len__(self) -> int:
        return len(self.tokens)
