"""
Syntax Module - Grammar checks for solution rows.

    Expression := Operand (BinaryOp Operand)*
    Operand    := (Category | Universe | Null | Group) (PostfixOp)*

The grammar applies to every group's internal sequence and to the row's
top-level sequence, where each multi-cube group counts as one operand.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterable, Optional, Sequence, Tuple

from .grouping import Groups
from .line import Line, LineRole, group_owner, slice_groups
from .tokens import Operator, Token


class SyntaxClass(Enum):
    """Grammar role of a token."""
    OPERAND = auto()
    BINARY = auto()
    POSTFIX = auto()
    INVALID = auto()


@dataclass(frozen=True)
class RestrictionSplit:
    """
    A restriction row split at its restriction operator.

    Attributes:
        operator: Subset or Equals
        position: Position of the operator within the row
        left_tokens: Tokens left of the operator
        left_groups: Grouping of the left side
        right_tokens: Tokens right of the operator
        right_groups: Grouping of the right side
    """
    operator: Operator
    position: int
    left_tokens: Tuple[Token, ...]
    left_groups: Groups
    right_tokens: Tuple[Token, ...]
    right_groups: Groups


def classify(token: Token) -> SyntaxClass:
    """
    Classify a token for set expressions.

    Unresolved wildcards and restriction operators are never valid
    inside a set expression.
    """
    if token.is_unresolved_wildcard:
        return SyntaxClass.INVALID
    if token.is_operand:
        return SyntaxClass.OPERAND
    operator = token.effective_operator
    if operator.is_postfix:
        return SyntaxClass.POSTFIX
    if operator.is_restriction:
        return SyntaxClass.INVALID
    return SyntaxClass.BINARY


def is_valid_sequence(classes: Iterable[SyntaxClass]) -> bool:
    """
    Check a flat sequence of grammar classes.

    Args:
        classes: Classes in reading order

    Returns:
        True for an empty sequence or one matching the grammar
    """
    expect_operand = True
    empty = True
    for cls in classes:
        empty = False
        if cls is SyntaxClass.INVALID:
            return False
        if expect_operand:
            if cls is not SyntaxClass.OPERAND:
                return False
            expect_operand = False
        elif cls is SyntaxClass.BINARY:
            expect_operand = True
        elif cls is not SyntaxClass.POSTFIX:
            # Two operands in a row
            return False
    return empty or not expect_operand


def top_level_classes(tokens: Sequence[Token], groups: Groups) -> Tuple[SyntaxClass, ...]:
    """Classes of the row with every multi-cube group collapsed to one operand."""
    owner = group_owner(groups, len(tokens))
    classes = []
    for position, token in enumerate(tokens):
        group = owner[position]
        if len(group) == 1:
            classes.append(classify(token))
        elif position == group[0]:
            classes.append(SyntaxClass.OPERAND)
    return tuple(classes)


def is_valid_expression(tokens: Sequence[Token], groups: Groups) -> bool:
    """
    Check a grouped set expression.

    Args:
        tokens: Tokens in reading order
        groups: Partition of the token positions

    Returns:
        True if every group and the collapsed top level are valid
    """
    for group in groups:
        if len(group) > 1 and not is_valid_sequence(classify(tokens[i]) for i in group):
            return False
    return is_valid_sequence(top_level_classes(tokens, groups))


def restriction_split(line: Line) -> Optional[RestrictionSplit]:
    """
    Split a restriction row at its single top-level restriction operator.

    The row must hold exactly one restriction operator, alone in its
    group, with no group reaching across it and a non-empty valid set
    expression on each side.

    Args:
        line: Row to split

    Returns:
        RestrictionSplit, or None if the row is not a valid restriction
    """
    positions = [i for i, token in enumerate(line.tokens) if token.is_restriction]
    if len(positions) != 1:
        return None
    position = positions[0]

    for group in line.groups:
        if position in group and len(group) != 1:
            return None
        if min(group) < position < max(group):
            return None

    left_tokens = line.tokens[:position]
    right_tokens = line.tokens[position + 1:]
    if not left_tokens or not right_tokens:
        return None

    left_groups = slice_groups(line.groups, 0, position)
    right_groups = slice_groups(line.groups, position + 1, len(line.tokens))
    if not is_valid_expression(left_tokens, left_groups):
        return None
    if not is_valid_expression(right_tokens, right_groups):
        return None

    return RestrictionSplit(
        operator=line.tokens[position].effective_operator,
        position=position,
        left_tokens=left_tokens,
        left_groups=left_groups,
        right_tokens=right_tokens,
        right_groups=right_groups,
    )


def is_valid_line(line: Line) -> bool:
    """
    Check a row according to its role.

    An empty row is valid (nothing placed). A Set-Name row must be a
    valid set expression; a Restriction row must split cleanly.
    """
    if line.is_empty:
        return True
    if line.role is LineRole.SET_NAME:
        return is_valid_expression(line.tokens, line.groups)
    return restriction_split(line) is not None
