"""
Universe Module - Immutable 8-card universe for a set-theory round.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Optional, Sequence, Tuple, Union

import numpy as np


# Every round deals exactly this many cards
UNIVERSE_SIZE = 8


class Color(Enum):
    """Colour categories a card can carry."""
    RED = "red"
    BLUE = "blue"
    GREEN = "green"
    GOLD = "gold"


# Column order of the flag matrix
COLOR_ORDER: Tuple[Color, ...] = (Color.RED, Color.BLUE, Color.GREEN, Color.GOLD)

# Bit weight of each colour in a 4-bit card code
COLOR_BITS: Dict[Color, int] = {
    Color.RED: 8,
    Color.BLUE: 4,
    Color.GREEN: 2,
    Color.GOLD: 1,
}

ColorLike = Union[Color, str]


def to_color(value: ColorLike) -> Color:
    """
    Normalize a colour name or Color to a Color.

    Raises:
        ValueError: If the name is not a known colour
    """
    if isinstance(value, Color):
        return value
    return Color(value.strip().lower())


@dataclass(frozen=True)
class Card:
    """
    One card of the universe.

    Attributes:
        index: Stable position 0..7 within the round
        flags: Colour flags in COLOR_ORDER (red, blue, green, gold)
    """
    index: int
    flags: Tuple[bool, bool, bool, bool]

    @classmethod
    def from_code(cls, index: int, code: int) -> 'Card':
        """
        Create a Card from its 4-bit code (red=8, blue=4, green=2, gold=1).

        Args:
            index: Position of the card in the universe
            code: Card code in 0..15

        Returns:
            Card instance

        Raises:
            ValueError: If code is outside 0..15
        """
        if not 0 <= code <= 15:
            raise ValueError(f"Card code must be in 0..15, got {code}")
        flags = tuple(bool(code & COLOR_BITS[color]) for color in COLOR_ORDER)
        return cls(index=index, flags=flags)

    @classmethod
    def from_colors(cls, index: int, colors: Iterable[ColorLike]) -> 'Card':
        """Create a Card carrying exactly the given colours."""
        present = {to_color(c) for c in colors}
        flags = tuple(color in present for color in COLOR_ORDER)
        return cls(index=index, flags=flags)

    def has(self, color: ColorLike) -> bool:
        """Check whether the card carries a colour."""
        return self.flags[COLOR_ORDER.index(to_color(color))]

    @property
    def code(self) -> int:
        """4-bit card code."""
        return sum(COLOR_BITS[color] for color, flag in zip(COLOR_ORDER, self.flags) if flag)

    @property
    def colors(self) -> Tuple[Color, ...]:
        """Colours carried by the card, in COLOR_ORDER."""
        return tuple(color for color, flag in zip(COLOR_ORDER, self.flags) if flag)

    def __str__(self) -> str:
        names = "+".join(c.value for c in self.colors) or "blank"
        return f"#{self.index}:{names}"


@dataclass(frozen=True)
class Universe:
    """
    Ordered, fixed-size collection of the round's cards.

    Colour membership is precomputed from a boolean numpy matrix
    (one row per card, one column per colour) so evaluation only
    performs frozenset algebra.

    Attributes:
        cards: Exactly UNIVERSE_SIZE cards, card i at position i
    """
    cards: Tuple[Card, ...]
    _color_sets: Optional[Dict[Color, FrozenSet[int]]] = field(
        default=None, init=False, repr=False, compare=False
    )

    def __post_init__(self):
        assert len(self.cards) == UNIVERSE_SIZE, \
            f"Universe must hold {UNIVERSE_SIZE} cards, got {len(self.cards)}"
        assert all(card.index == i for i, card in enumerate(self.cards)), \
            "Card indices must match their position"

        matrix = self.flag_matrix
        color_sets = {
            color: frozenset(int(i) for i in np.flatnonzero(matrix[:, col]))
            for col, color in enumerate(COLOR_ORDER)
        }
        object.__setattr__(self, "_color_sets", color_sets)

    @classmethod
    def from_codes(cls, codes: Sequence[int]) -> 'Universe':
        """
        Create a Universe from 4-bit card codes.

        Args:
            codes: Eight card codes, e.g. [1, 2, 3, 4, 5, 8, 9, 10]

        Returns:
            Universe instance
        """
        return cls(cards=tuple(Card.from_code(i, code) for i, code in enumerate(codes)))

    @classmethod
    def from_colors(cls, cards: Sequence[Iterable[ColorLike]]) -> 'Universe':
        """Create a Universe from per-card colour lists."""
        return cls(cards=tuple(Card.from_colors(i, colors) for i, colors in enumerate(cards)))

    @property
    def flag_matrix(self) -> np.ndarray:
        """Boolean matrix of shape (8, 4) in COLOR_ORDER columns."""
        return np.array([card.flags for card in self.cards], dtype=bool).reshape(
            len(self.cards), len(COLOR_ORDER)
        )

    @property
    def codes(self) -> Tuple[int, ...]:
        """Card codes in universe order."""
        return tuple(card.code for card in self.cards)

    def indices(self) -> FrozenSet[int]:
        """All card indices of the universe."""
        return frozenset(range(len(self.cards)))

    def color_set(self, color: ColorLike) -> FrozenSet[int]:
        """
        Get indices of cards carrying a colour.

        Args:
            color: Colour or colour name

        Returns:
            Frozen set of card indices
        """
        return self._color_sets[to_color(color)]

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self):
        return iter(self.cards)
