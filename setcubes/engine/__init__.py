"""
Engine Package - Cards, cubes and the semantics of solution rows.

Usage:
    from setcubes.engine import Universe, Token, Operator, Line, LineRole, evaluate_line

    universe = Universe.from_codes([1, 2, 3, 4, 5, 8, 9, 10])
    line = Line.ungrouped(LineRole.SET_NAME, [
        Token.category("red"), Token.binary(Operator.UNION), Token.category("blue"),
    ])
    matches = evaluate_line(line, universe)   # frozenset of card indices, or None
"""

# Data model
from .universe import (
    UNIVERSE_SIZE,
    COLOR_ORDER,
    COLOR_BITS,
    Color,
    Card,
    Universe,
)
from .tokens import (
    RESTRICTION_MIN_LEVEL,
    SET_OPERATORS,
    RESTRICTION_OPERATORS,
    WILDCARD_RESOLUTIONS,
    TokenKind,
    Operator,
    Token,
    TokenPool,
    parse_tokens,
    restrictions_enabled_for_level,
)
from .grouping import (
    DEFAULT_TOKEN_SIZE,
    MOBILE_TOKEN_SIZE,
    DEFAULT_TOUCH_TOLERANCE,
    PlacedToken,
    detect_groups,
    place_row,
)
from .line import LineRole, Line

# Semantics
from .syntax import (
    SyntaxClass,
    RestrictionSplit,
    is_valid_expression,
    is_valid_line,
    restriction_split,
)
from .evaluator import (
    CardSet,
    evaluate_tokens,
    evaluate_line,
    evaluate_restriction,
)
from .board import (
    BoardEvaluation,
    SubmissionVerdict,
    SubmissionResult,
    evaluate_board,
    check_submission,
)

__all__ = [
    # Data model
    "UNIVERSE_SIZE",
    "COLOR_ORDER",
    "COLOR_BITS",
    "Color",
    "Card",
    "Universe",
    "RESTRICTION_MIN_LEVEL",
    "SET_OPERATORS",
    "RESTRICTION_OPERATORS",
    "WILDCARD_RESOLUTIONS",
    "TokenKind",
    "Operator",
    "Token",
    "TokenPool",
    "parse_tokens",
    "restrictions_enabled_for_level",
    "DEFAULT_TOKEN_SIZE",
    "MOBILE_TOKEN_SIZE",
    "DEFAULT_TOUCH_TOLERANCE",
    "PlacedToken",
    "detect_groups",
    "place_row",
    "LineRole",
    "Line",
    # Semantics
    "SyntaxClass",
    "RestrictionSplit",
    "is_valid_expression",
    "is_valid_line",
    "restriction_split",
    "CardSet",
    "evaluate_tokens",
    "evaluate_line",
    "evaluate_restriction",
    "BoardEvaluation",
    "SubmissionVerdict",
    "SubmissionResult",
    "evaluate_board",
    "check_submission",
]
