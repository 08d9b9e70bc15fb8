"""
Token Module - Cubes the player arranges into expressions.

A token is either an operand (colour category, universe constant, null
constant), an operator (binary or postfix complement) or a wildcard
cube that stands for one of the set operators once resolved.
"""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, Iterable, Optional, Sequence, Tuple

from .universe import Color, ColorLike, to_color


# Restriction cubes become available from this level on
RESTRICTION_MIN_LEVEL = 6


class TokenKind(Enum):
    """Kinds of cubes."""
    CATEGORY = auto()
    UNIVERSE = auto()
    NULL = auto()
    BINARY = auto()
    POSTFIX = auto()
    WILDCARD = auto()


class Operator(Enum):
    """Operators, valued by the symbol printed on the cube."""
    UNION = "∪"
    INTERSECT = "∩"
    DIFFERENCE = "−"
    SUBSET = "⊆"
    EQUALS = "="
    COMPLEMENT = "′"

    @property
    def is_restriction(self) -> bool:
        """True for Subset and Equals."""
        return self in (Operator.SUBSET, Operator.EQUALS)

    @property
    def is_postfix(self) -> bool:
        """True for Complement."""
        return self is Operator.COMPLEMENT

    @property
    def is_binary(self) -> bool:
        """True for every operator taking two operands."""
        return not self.is_postfix


SET_OPERATORS: Tuple[Operator, ...] = (Operator.UNION, Operator.INTERSECT, Operator.DIFFERENCE)
RESTRICTION_OPERATORS: Tuple[Operator, ...] = (Operator.SUBSET, Operator.EQUALS)

# Operators a wildcard cube may stand for
WILDCARD_RESOLUTIONS: Tuple[Operator, ...] = SET_OPERATORS + (Operator.COMPLEMENT,)

UNIVERSE_SYMBOL = "U"
NULL_SYMBOL = "∅"
WILDCARD_SYMBOL = "?"


@dataclass(frozen=True)
class Token:
    """
    Immutable cube value.

    Equality and hashing only consider the value (kind, colour,
    operator), so two red cubes are interchangeable. The required flag
    and identifier describe a particular cube of a pool.

    Attributes:
        kind: Token kind
        color: Colour for CATEGORY tokens
        operator: Operator for BINARY/POSTFIX tokens, resolution for WILDCARD
        required: True if every solution must use this cube
        token_id: Optional host identifier of the cube
    """
    kind: TokenKind
    color: Optional[Color] = None
    operator: Optional[Operator] = None
    required: bool = field(default=False, compare=False)
    token_id: Optional[str] = field(default=None, compare=False)

    @classmethod
    def category(cls, color: ColorLike, **kwargs) -> 'Token':
        """Create a colour operand."""
        return cls(kind=TokenKind.CATEGORY, color=to_color(color), **kwargs)

    @classmethod
    def universe(cls, **kwargs) -> 'Token':
        """Create the universe constant."""
        return cls(kind=TokenKind.UNIVERSE, **kwargs)

    @classmethod
    def null(cls, **kwargs) -> 'Token':
        """Create the null (empty set) constant."""
        return cls(kind=TokenKind.NULL, **kwargs)

    @classmethod
    def binary(cls, operator: Operator, **kwargs) -> 'Token':
        """Create a binary operator cube (set or restriction operator)."""
        assert operator.is_binary, f"{operator} is not a binary operator"
        return cls(kind=TokenKind.BINARY, operator=operator, **kwargs)

    @classmethod
    def complement(cls, **kwargs) -> 'Token':
        """Create the postfix complement cube."""
        return cls(kind=TokenKind.POSTFIX, operator=Operator.COMPLEMENT, **kwargs)

    @classmethod
    def wildcard(cls, resolved: Optional[Operator] = None, **kwargs) -> 'Token':
        """Create a wildcard cube, optionally already resolved."""
        if resolved is not None:
            assert resolved in WILDCARD_RESOLUTIONS, f"Wildcard cannot stand for {resolved}"
        return cls(kind=TokenKind.WILDCARD, operator=resolved, **kwargs)

    @classmethod
    def parse(cls, text: str, required: bool = False) -> 'Token':
        """
        Create a Token from a name or cube symbol.

        Accepts colour names, operator names and symbols, "U"/"universe",
        "∅"/"null", "wild"/"?" and "wild:union" style resolved wildcards.
        A trailing "!" marks the cube as required.

        Args:
            text: Token text, e.g. "red", "∪", "subset", "wild"
            required: Mark the cube as required

        Returns:
            Token instance

        Raises:
            ValueError: If the text names no known token
        """
        name = text.strip()
        if name.endswith("!"):
            name, required = name[:-1], True

        lowered = name.lower()
        if lowered.startswith("wild:"):
            resolved = _OPERATOR_NAMES.get(lowered[len("wild:"):]) or _OPERATOR_NAMES.get(name[len("wild:"):])
            if resolved is None or resolved not in WILDCARD_RESOLUTIONS:
                raise ValueError(f"Unknown wildcard resolution: {text}")
            return cls.wildcard(resolved, required=required)

        if lowered in {c.value for c in Color}:
            return cls.category(lowered, required=required)
        if name == UNIVERSE_SYMBOL or lowered == "universe":
            return cls.universe(required=required)
        if name == NULL_SYMBOL or lowered in ("null", "empty"):
            return cls.null(required=required)
        if name == WILDCARD_SYMBOL or lowered in ("wild", "wildcard"):
            return cls.wildcard(required=required)

        operator = _OPERATOR_NAMES.get(lowered) or _OPERATOR_NAMES.get(name)
        if operator is None:
            raise ValueError(f"Unknown token: {text}")
        if operator.is_postfix:
            return cls.complement(required=required)
        return cls.binary(operator, required=required)

    def resolve(self, operator: Operator) -> 'Token':
        """
        Resolve a wildcard to a concrete operator.

        Args:
            operator: One of WILDCARD_RESOLUTIONS

        Returns:
            Resolved wildcard keeping this cube's flags
        """
        assert self.kind is TokenKind.WILDCARD, "Only wildcards can be resolved"
        return Token.wildcard(operator, required=self.required, token_id=self.token_id)

    @property
    def base(self) -> 'Token':
        """The pool value of this cube (wildcards lose their resolution)."""
        if self.kind is TokenKind.WILDCARD and self.operator is not None:
            return Token.wildcard(required=self.required, token_id=self.token_id)
        return self

    @property
    def is_operand(self) -> bool:
        """True for category, universe and null tokens."""
        return self.kind in (TokenKind.CATEGORY, TokenKind.UNIVERSE, TokenKind.NULL)

    @property
    def is_unresolved_wildcard(self) -> bool:
        """True for a wildcard that has not been resolved yet."""
        return self.kind is TokenKind.WILDCARD and self.operator is None

    @property
    def effective_operator(self) -> Optional[Operator]:
        """Operator this token acts as, or None for operands and unresolved wildcards."""
        if self.is_operand:
            return None
        return self.operator

    @property
    def is_restriction(self) -> bool:
        """True for a Subset or Equals cube."""
        op = self.effective_operator
        return op is not None and op.is_restriction

    @property
    def symbol(self) -> str:
        """Printable symbol of the cube."""
        if self.kind is TokenKind.CATEGORY:
            return self.color.value
        if self.kind is TokenKind.UNIVERSE:
            return UNIVERSE_SYMBOL
        if self.kind is TokenKind.NULL:
            return NULL_SYMBOL
        if self.kind is TokenKind.WILDCARD:
            return f"{WILDCARD_SYMBOL}{self.operator.value}" if self.operator else WILDCARD_SYMBOL
        return self.operator.value

    def __str__(self) -> str:
        return self.symbol


_OPERATOR_NAMES: Dict[str, Operator] = {
    "union": Operator.UNION,
    "intersect": Operator.INTERSECT,
    "intersection": Operator.INTERSECT,
    "difference": Operator.DIFFERENCE,
    "minus": Operator.DIFFERENCE,
    "-": Operator.DIFFERENCE,
    "subset": Operator.SUBSET,
    "equals": Operator.EQUALS,
    "complement": Operator.COMPLEMENT,
    "'": Operator.COMPLEMENT,
}
_OPERATOR_NAMES.update({op.value: op for op in Operator})


def parse_tokens(texts: Iterable[str]) -> Tuple[Token, ...]:
    """Parse several token names (see Token.parse)."""
    return tuple(Token.parse(text) for text in texts)


def restrictions_enabled_for_level(level: int) -> bool:
    """Check whether restriction cubes are dealt at a level."""
    return level >= RESTRICTION_MIN_LEVEL


@dataclass(frozen=True)
class TokenPool:
    """
    Multiset of cubes dealt for a round.

    Attributes:
        tokens: Dealt cubes (values may repeat)
        restrictions_enabled: Whether Subset/Equals may be played this round
    """
    tokens: Tuple[Token, ...]
    restrictions_enabled: bool = True

    @classmethod
    def from_names(cls, names: Sequence[str], restrictions_enabled: bool = True) -> 'TokenPool':
        """
        Create a pool from token names.

        Args:
            names: Token names, e.g. ["red", "blue", "union", "green!"]
            restrictions_enabled: Whether restrictions are allowed

        Returns:
            TokenPool instance
        """
        return cls(tokens=parse_tokens(names), restrictions_enabled=restrictions_enabled)

    def counts(self) -> Counter:
        """Count of cubes per pool value."""
        return Counter(token.base for token in self.tokens)

    def required_counts(self) -> Counter:
        """Count of required cubes per pool value."""
        return Counter(token.base for token in self.tokens if token.required)

    def contains(self, tokens: Iterable[Token]) -> bool:
        """
        Check that tokens could all have been taken from this pool.

        Args:
            tokens: Played tokens (wildcards may be resolved)

        Returns:
            True if the played multiset fits inside the pool
        """
        used = Counter(token.base for token in tokens)
        available = self.counts()
        return all(available[value] >= count for value, count in used.items())

    @property
    def has_operand(self) -> bool:
        """True if at least one operand cube was dealt."""
        return any(token.is_operand for token in self.tokens)

    def __len__(self) -> int:
        return len(self.tokens)

    def __iter__(self):
        return iter(self.tokens)
