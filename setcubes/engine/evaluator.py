"""
Evaluator Module - Computes the card set named by a solution row.

Evaluation is a strict left-to-right fold without operator precedence.
Groups are evaluated first and replaced by their result at the position
of their leftmost cube. Invalid input evaluates to None.
"""

from typing import FrozenSet, Iterable, List, Optional, Sequence, Union

from .grouping import Groups
from .line import Line, group_owner
from .syntax import is_valid_expression, restriction_split
from .tokens import Operator, Token, TokenKind
from .universe import Universe


CardSet = FrozenSet[int]

_Item = Union[Token, CardSet]


def apply_binary(operator: Operator, left: CardSet, right: CardSet) -> CardSet:
    """
    Apply a set operator.

    Args:
        operator: Union, Intersect or Difference
        left: Left operand
        right: Right operand

    Returns:
        Resulting card set
    """
    if operator is Operator.UNION:
        return left | right
    if operator is Operator.INTERSECT:
        return left & right
    if operator is Operator.DIFFERENCE:
        return left - right
    raise ValueError(f"{operator} is not a set operator")


def operand_value(token: Token, universe: Universe, active: CardSet) -> CardSet:
    """Value of a single operand against the active cards."""
    if token.kind is TokenKind.CATEGORY:
        return universe.color_set(token.color) & active
    if token.kind is TokenKind.UNIVERSE:
        return active
    return frozenset()


def _fold(items: Sequence[_Item], universe: Universe, active: CardSet) -> CardSet:
    """Fold a validated flat sequence left to right."""
    if not items:
        return frozenset()

    result: Optional[CardSet] = None
    pending: Optional[Operator] = None
    current: Optional[CardSet] = None

    for item in items:
        if isinstance(item, frozenset):
            current = item
        elif item.is_operand:
            current = operand_value(item, universe, active)
        elif item.effective_operator is Operator.COMPLEMENT:
            # Complement binds to the operand just produced
            current = active - current
        else:
            result = current if pending is None else apply_binary(pending, result, current)
            pending, current = item.effective_operator, None

    if pending is None:
        return current
    return apply_binary(pending, result, current)


def evaluate_tokens(
    tokens: Sequence[Token],
    groups: Groups,
    universe: Universe,
    active: Optional[Iterable[int]] = None
) -> Optional[CardSet]:
    """
    Evaluate a grouped set expression.

    Args:
        tokens: Tokens in reading order
        groups: Partition of the token positions
        universe: Round universe
        active: Cards still in play (defaults to the whole universe)

    Returns:
        Matching card indices, or None if the expression is invalid
    """
    if not is_valid_expression(tokens, groups):
        return None

    active_set = universe.indices() if active is None else frozenset(active)
    owner = group_owner(groups, len(tokens))

    items: List[_Item] = []
    for position, token in enumerate(tokens):
        group = owner[position]
        if len(group) == 1:
            items.append(token)
        elif position == group[0]:
            items.append(_fold([tokens[i] for i in group], universe, active_set))

    return _fold(items, universe, active_set)


def evaluate_line(
    line: Line,
    universe: Universe,
    active: Optional[Iterable[int]] = None
) -> Optional[CardSet]:
    """
    Evaluate a row as a set expression.

    Args:
        line: Row to evaluate
        universe: Round universe
        active: Cards still in play (defaults to the whole universe)

    Returns:
        Matching card indices, or None if the row is invalid
    """
    return evaluate_tokens(line.tokens, line.groups, universe, active)


def evaluate_restriction(line: Line, universe: Universe) -> Optional[CardSet]:
    """
    Compute the cards a restriction row excludes.

    Both sides are evaluated against the full universe. Subset excludes
    the cards of the left side missing from the right side; Equals
    excludes the symmetric difference.

    Args:
        line: Restriction row
        universe: Round universe

    Returns:
        Violating card indices, or None if the restriction is invalid
    """
    split = restriction_split(line)
    if split is None:
        return None

    full = universe.indices()
    left = evaluate_tokens(split.left_tokens, split.left_groups, universe, full)
    right = evaluate_tokens(split.right_tokens, split.right_groups, universe, full)
    if left is None or right is None:
        return None

    if split.operator is Operator.SUBSET:
        return left - right
    return left ^ right
