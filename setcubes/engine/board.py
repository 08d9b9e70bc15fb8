"""
Board Module - Live evaluation and submission checks for the two rows.

The host hands over the cubes dropped on both solution rows. Either row
may carry the restriction; the other one names the set. Results tell the
renderer which cards match, which are excluded by the restriction, and
whether each row is well formed.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, Optional, Sequence

from .evaluator import CardSet, evaluate_line, evaluate_restriction
from .grouping import DEFAULT_TOKEN_SIZE, DEFAULT_TOUCH_TOLERANCE, PlacedToken
from .line import Line, LineRole
from .syntax import is_valid_line
from .tokens import TokenPool
from .universe import Universe

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoardLines:
    """
    The two rows sorted into roles.

    Attributes:
        restriction: Row holding the restriction, if any
        set_name: Row naming the set, if any
        conflict: True when both rows are restrictions or both are set names
    """
    restriction: Optional[Line] = None
    set_name: Optional[Line] = None
    conflict: bool = False


@dataclass(frozen=True)
class BoardEvaluation:
    """
    Live evaluation of the board.

    Attributes:
        matches: Cards named by the set-name row (empty when invalid)
        violators: Cards excluded by the restriction (empty when invalid)
        active: Cards still in play for the set-name row
        restriction_valid: True if there is no restriction or it is valid
        set_name_valid: True if there is no set-name row or it is valid
        highlight: False when the board cannot be highlighted at all
    """
    matches: FrozenSet[int] = frozenset()
    violators: FrozenSet[int] = frozenset()
    active: FrozenSet[int] = frozenset()
    restriction_valid: bool = True
    set_name_valid: bool = True
    highlight: bool = True

    @property
    def is_valid(self) -> bool:
        """True if both rows are well formed and the board can be highlighted."""
        return self.highlight and self.restriction_valid and self.set_name_valid


class SubmissionVerdict(Enum):
    """Outcome of submitting the board."""
    EMPTY = "Add dice to create a solution!"
    TWO_RESTRICTIONS = "You can't have 2 restrictions!"
    TWO_SET_NAMES = "You can't have 2 set names!"
    INVALID_RESTRICTION = "Invalid restriction syntax!"
    MISSING_SET_NAME = "You can't have a restriction without a set name!"
    INVALID_SET_NAME = "Invalid set name syntax!"
    WRONG_COUNT = "wrong count"
    CORRECT = "Correct solution!"


@dataclass(frozen=True)
class SubmissionResult:
    """
    Result of a submission check.

    Attributes:
        verdict: Outcome of the check
        message: Player-facing message
        matches: Cards named by the set-name row
        violators: Cards excluded by the restriction
    """
    verdict: SubmissionVerdict
    message: str
    matches: FrozenSet[int] = field(default_factory=frozenset)
    violators: FrozenSet[int] = field(default_factory=frozenset)

    @property
    def is_correct(self) -> bool:
        return self.verdict is SubmissionVerdict.CORRECT


def build_lines(
    rows: Sequence[Sequence[PlacedToken]],
    token_size: float = DEFAULT_TOKEN_SIZE,
    touch_tolerance: float = DEFAULT_TOUCH_TOLERANCE
) -> BoardLines:
    """
    Sort the placed rows into a restriction row and a set-name row.

    The first row holding a restriction operator is the restriction row.
    Two restriction rows, or two non-empty rows without any restriction,
    are a conflict.

    Args:
        rows: Up to two rows of placed cubes
        token_size: Cube edge length
        touch_tolerance: Extra gap still counted as touching

    Returns:
        BoardLines
    """
    assert len(rows) <= 2, f"A board has two rows, got {len(rows)}"
    lines = [
        Line.from_placed(LineRole.SET_NAME, row, token_size, touch_tolerance)
        for row in rows
        if row
    ]

    restrictions = [line for line in lines if line.has_restriction]
    set_names = [line for line in lines if not line.has_restriction]

    if len(restrictions) > 1 or len(set_names) > 1:
        return BoardLines(conflict=True)

    restriction = restrictions[0].with_role(LineRole.RESTRICTION) if restrictions else None
    set_name = set_names[0] if set_names else None
    return BoardLines(restriction=restriction, set_name=set_name)


def _check_pool(lines: BoardLines, pool: Optional[TokenPool]) -> None:
    if pool is None:
        return
    played = []
    for line in (lines.restriction, lines.set_name):
        if line is not None:
            played.extend(line.tokens)
    assert pool.contains(played), "Board uses cubes that are not in the round's pool"


def _restrictions_enabled(pool: Optional[TokenPool]) -> bool:
    return pool is None or pool.restrictions_enabled


def evaluate_lines(
    universe: Universe,
    lines: BoardLines,
    flipped: Iterable[int] = (),
    restrictions_enabled: bool = True
) -> BoardEvaluation:
    """
    Evaluate already sorted rows.

    Violators of a valid restriction and cards the player flipped are
    removed from play before the set-name row is evaluated. In a round
    without restriction cubes a restriction row is never valid.

    Args:
        universe: Round universe
        lines: Rows sorted into roles
        flipped: Cards the player turned over by hand
        restrictions_enabled: Whether restrictions may be played this round

    Returns:
        BoardEvaluation
    """
    if lines.conflict:
        return BoardEvaluation(active=universe.indices(), highlight=False)

    violators: CardSet = frozenset()
    restriction_valid = True
    if lines.restriction is not None:
        restriction_valid = restrictions_enabled and is_valid_line(lines.restriction)
        if restriction_valid:
            violators = evaluate_restriction(lines.restriction, universe)

    active = universe.indices() - violators - frozenset(flipped)

    matches: CardSet = frozenset()
    set_name_valid = True
    if lines.set_name is not None:
        result = evaluate_line(lines.set_name, universe, active)
        set_name_valid = result is not None
        if set_name_valid:
            matches = result

    return BoardEvaluation(
        matches=matches,
        violators=violators,
        active=active,
        restriction_valid=restriction_valid,
        set_name_valid=set_name_valid,
    )


def evaluate_board(
    universe: Universe,
    rows: Sequence[Sequence[PlacedToken]],
    flipped: Iterable[int] = (),
    pool: Optional[TokenPool] = None,
    token_size: float = DEFAULT_TOKEN_SIZE,
    touch_tolerance: float = DEFAULT_TOUCH_TOLERANCE
) -> BoardEvaluation:
    """
    Evaluate the board for live highlighting.

    Args:
        universe: Round universe
        rows: Up to two rows of placed cubes
        flipped: Cards the player turned over by hand
        pool: Round pool; when given, played cubes must come from it
        token_size: Cube edge length
        touch_tolerance: Extra gap still counted as touching

    Returns:
        BoardEvaluation
    """
    lines = build_lines(rows, token_size, touch_tolerance)
    _check_pool(lines, pool)
    evaluation = evaluate_lines(universe, lines, flipped, _restrictions_enabled(pool))
    logger.debug(
        f"Board: matches={sorted(evaluation.matches)}, "
        f"violators={sorted(evaluation.violators)}, valid={evaluation.is_valid}"
    )
    return evaluation


def check_submission(
    universe: Universe,
    rows: Sequence[Sequence[PlacedToken]],
    goal: int,
    flipped: Iterable[int] = (),
    pool: Optional[TokenPool] = None,
    token_size: float = DEFAULT_TOKEN_SIZE,
    touch_tolerance: float = DEFAULT_TOUCH_TOLERANCE
) -> SubmissionResult:
    """
    Check a submitted board against the goal.

    Args:
        universe: Round universe
        rows: Up to two rows of placed cubes
        goal: Number of cards the solution must name
        flipped: Cards the player turned over by hand
        pool: Round pool; when given, played cubes must come from it
        token_size: Cube edge length
        touch_tolerance: Extra gap still counted as touching

    Returns:
        SubmissionResult with verdict and message
    """
    def verdict(kind: SubmissionVerdict) -> SubmissionResult:
        return SubmissionResult(verdict=kind, message=kind.value)

    placed_rows = [row for row in rows if row]
    if not placed_rows:
        return verdict(SubmissionVerdict.EMPTY)

    lines = build_lines(rows, token_size, touch_tolerance)
    if lines.conflict:
        if all(any(p.token.is_restriction for p in row) for row in placed_rows):
            return verdict(SubmissionVerdict.TWO_RESTRICTIONS)
        return verdict(SubmissionVerdict.TWO_SET_NAMES)

    _check_pool(lines, pool)

    if lines.restriction is not None:
        if not _restrictions_enabled(pool) or not is_valid_line(lines.restriction):
            return verdict(SubmissionVerdict.INVALID_RESTRICTION)
        if lines.set_name is None:
            return verdict(SubmissionVerdict.MISSING_SET_NAME)

    if lines.set_name is not None and not is_valid_line(lines.set_name):
        return verdict(SubmissionVerdict.INVALID_SET_NAME)

    evaluation = evaluate_lines(universe, lines, flipped, _restrictions_enabled(pool))
    found = len(evaluation.matches)
    if found != goal:
        return SubmissionResult(
            verdict=SubmissionVerdict.WRONG_COUNT,
            message=f"Found {found} cards, need {goal}!",
            matches=evaluation.matches,
            violators=evaluation.violators,
        )

    logger.info(f"Correct solution: {found} cards")
    return SubmissionResult(
        verdict=SubmissionVerdict.CORRECT,
        message=SubmissionVerdict.CORRECT.value,
        matches=evaluation.matches,
        violators=evaluation.violators,
    )
