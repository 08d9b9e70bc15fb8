"""
Enumeration Module - Grammar-guided generation of candidate solutions.

Cube sequences are built over distinct pool values, so interchangeable
cubes never produce duplicate orderings, and a prefix is abandoned as
soon as the grammar rules it out. Every multi-cube cluster of a grouped
row is itself a valid expression, so only sequences valid without
grouping need to be grouped.
"""

import dataclasses
import logging
from collections import Counter
from typing import Dict, FrozenSet, Iterator, List, Optional, Tuple

from ..engine import (
    SET_OPERATORS,
    Operator,
    Token,
    TokenKind,
)
from ..engine.evaluator import evaluate_tokens
from ..engine.line import sizes_to_groups
from ..engine.syntax import classify, is_valid_expression, is_valid_sequence
from .context import SearchContext
from .solution import Candidate

logger = logging.getLogger(__name__)


CardSet = FrozenSet[int]
Sizes = Tuple[int, ...]


def compositions(length: int) -> Iterator[Sizes]:
    """
    Generate every composition of length into positive parts.

    Args:
        length: Number to split

    Returns:
        Iterator of part tuples, e.g. (1, 2) and (2, 1) for 3
    """
    if length == 0:
        yield ()
        return
    for first in range(1, length + 1):
        for rest in compositions(length - first):
            yield (first,) + rest


class CandidateEnumerator:
    """
    Generates the solutions of a puzzle, one total cube count at a time.

    The enumerator keeps the remaining cube counts as backtracking state,
    so it is local to one query run.
    """

    def __init__(self, context: SearchContext):
        """
        Initialize the enumerator.

        Args:
            context: Search context with the puzzle and budgets
        """
        self.context = context
        puzzle = context.puzzle
        self.universe = puzzle.universe
        self.goal = puzzle.goal

        # Distinct cube values, stripped of per-cube flags
        values: List[Token] = []
        for token in puzzle.pool:
            value = dataclasses.replace(token.base, required=False, token_id=None)
            if value not in values:
                values.append(value)

        self.available = puzzle.pool.counts()
        self.required = puzzle.pool.required_counts()
        self.remaining = Counter(self.available)

        self.operands = [v for v in values if v.is_operand]
        wildcards = [v for v in values if v.kind is TokenKind.WILDCARD]
        self.binaries = [
            v for v in values
            if v.kind is TokenKind.BINARY and not v.operator.is_restriction
        ] + wildcards
        self.postfixes = [v for v in values if v.kind is TokenKind.POSTFIX] + wildcards
        if puzzle.pool.restrictions_enabled:
            self.restrictions = [v for v in values if v.is_restriction]
        else:
            self.restrictions = []

        self.pruned = 0
        self._groupings: Dict[Tuple[Token, ...], List[Sizes]] = {}
        self._memo: Dict[Tuple[Tuple[Token, ...], Sizes, CardSet], Optional[CardSet]] = {}

    @property
    def max_length(self) -> int:
        """Most cubes any solution can use."""
        return sum(self.available.values())

    @property
    def min_length(self) -> int:
        """Fewest cubes any solution can use (required cubes must be placed)."""
        return max(1, sum(self.required.values()))

    # ------------------------------------------------------------------
    # Cube sequences
    # ------------------------------------------------------------------

    def expressions(self, length: int) -> Iterator[Tuple[Token, ...]]:
        """
        Generate valid ungrouped expressions of an exact length.

        Cubes are taken from the remaining counts while an expression is
        being yielded and given back afterwards. Wildcards are resolved
        by position: binary operators between operands, complement after
        an operand.

        Args:
            length: Number of cubes

        Returns:
            Iterator of token tuples
        """
        if length <= 0:
            return
        yield from self._extend([], length, True)

    def _extend(self, sequence: List[Token], length: int, expect_operand: bool) -> Iterator[Tuple[Token, ...]]:
        slots = length - len(sequence)
        if slots == 0:
            if not expect_operand:
                yield tuple(sequence)
            return

        if expect_operand:
            for value in self.operands:
                if self.remaining[value] > 0:
                    yield from self._place(sequence, length, value, value, False)
            return

        for value in self.postfixes:
            if self.remaining[value] > 0:
                token = value if value.kind is TokenKind.POSTFIX else value.resolve(Operator.COMPLEMENT)
                yield from self._place(sequence, length, value, token, False)

        # A binary operator needs a slot and a cube for its right operand
        if slots < 2 or not any(self.remaining[v] > 0 for v in self.operands):
            self.pruned += 1
            return
        for value in self.binaries:
            if self.remaining[value] == 0:
                continue
            if value.kind is TokenKind.WILDCARD:
                tokens = [value.resolve(op) for op in SET_OPERATORS]
            else:
                tokens = [value]
            for token in tokens:
                yield from self._place(sequence, length, value, token, True)

    def _place(self, sequence: List[Token], length: int, value: Token, token: Token,
               expect_operand: bool) -> Iterator[Tuple[Token, ...]]:
        self.remaining[value] -= 1
        sequence.append(token)
        try:
            yield from self._extend(sequence, length, expect_operand)
        finally:
            sequence.pop()
            self.remaining[value] += 1

    def _uses_required(self) -> bool:
        """True if the cubes placed so far include every required cube."""
        return all(
            self.available[value] - self.remaining[value] >= count
            for value, count in self.required.items()
        )

    # ------------------------------------------------------------------
    # Groupings and evaluation
    # ------------------------------------------------------------------

    def groupings(self, tokens: Tuple[Token, ...]) -> List[Sizes]:
        """
        List the contiguous groupings under which a sequence stays valid.

        A single cluster spanning the whole sequence evaluates like no
        grouping and is left out.

        Args:
            tokens: Valid ungrouped expression

        Returns:
            Cluster size tuples, starting with the ungrouped shape
        """
        cached = self._groupings.get(tokens)
        if cached is not None:
            return cached

        length = len(tokens)
        result: List[Sizes] = []
        for sizes in compositions(length):
            if length > 1 and sizes == (length,):
                continue
            if self._clusters_valid(tokens, sizes) and \
                    is_valid_expression(tokens, sizes_to_groups(sizes)):
                result.append(sizes)

        # Ungrouped first
        result.sort(key=lambda s: (len(s) != length, s))
        self._groupings[tokens] = result
        return result

    @staticmethod
    def _clusters_valid(tokens: Tuple[Token, ...], sizes: Sizes) -> bool:
        start = 0
        for size in sizes:
            if size > 1 and not is_valid_sequence(classify(t) for t in tokens[start:start + size]):
                return False
            start += size
        return True

    def evaluate(self, tokens: Tuple[Token, ...], sizes: Sizes, active: CardSet) -> Optional[CardSet]:
        """
        Evaluate a grouped expression, counting one search step.

        Raises:
            SearchAborted: If the query must stop
        """
        self.context.count_step()
        key = (tokens, sizes, active)
        if key not in self._memo:
            self._memo[key] = evaluate_tokens(tokens, sizes_to_groups(sizes), self.universe, active)
        return self._memo[key]

    # ------------------------------------------------------------------
    # Solutions
    # ------------------------------------------------------------------

    def solutions(self, total: int) -> Iterator[Candidate]:
        """
        Generate every solution using exactly `total` cubes.

        Args:
            total: Cubes across both rows

        Returns:
            Iterator of distinct Candidates hitting the goal
        """
        if total < self.min_length or total > self.max_length:
            return
        # Keep the memo to one cube count
        self._memo.clear()
        yield from self._plain_solutions(total)
        if self.restrictions:
            yield from self._restricted_solutions(total)

    def _plain_solutions(self, total: int) -> Iterator[Candidate]:
        full = self.universe.indices()
        for tokens in self.expressions(total):
            if not self._uses_required():
                continue
            for sizes in self.groupings(tokens):
                matches = self.evaluate(tokens, sizes, full)
                if matches is not None and len(matches) == self.goal:
                    yield Candidate(set_name=tokens, set_name_sizes=sizes)

    def _restricted_solutions(self, total: int) -> Iterator[Candidate]:
        # Restriction row needs left side, operator and right side; set name at least one cube
        for restriction_length in range(3, total):
            set_name_length = total - restriction_length
            for op_value in self.restrictions:
                if self.remaining[op_value] == 0:
                    continue
                self.remaining[op_value] -= 1
                try:
                    for left_length in range(1, restriction_length - 1):
                        right_length = restriction_length - 1 - left_length
                        yield from self._split_solutions(op_value, left_length, right_length, set_name_length)
                finally:
                    self.remaining[op_value] += 1

    def _split_solutions(self, op_value: Token, left_length: int, right_length: int,
                         set_name_length: int) -> Iterator[Candidate]:
        full = self.universe.indices()
        for left in self.expressions(left_length):
            for right in self.expressions(right_length):
                restriction = left + (op_value,) + right

                # Restriction shapes grouped by the cards they exclude
                by_violators: Dict[CardSet, List[Sizes]] = {}
                for left_sizes in self.groupings(left):
                    left_value = self.evaluate(left, left_sizes, full)
                    for right_sizes in self.groupings(right):
                        right_value = self.evaluate(right, right_sizes, full)
                        if op_value.operator is Operator.SUBSET:
                            violators = left_value - right_value
                        else:
                            violators = left_value ^ right_value
                        by_violators.setdefault(violators, []).append(
                            left_sizes + (1,) + right_sizes
                        )

                for set_name in self.expressions(set_name_length):
                    if not self._uses_required():
                        continue
                    for set_sizes in self.groupings(set_name):
                        for violators, shapes in by_violators.items():
                            matches = self.evaluate(set_name, set_sizes, full - violators)
                            if matches is None or len(matches) != self.goal:
                                continue
                            for shape in shapes:
                                yield Candidate(
                                    set_name=set_name,
                                    set_name_sizes=set_sizes,
                                    restriction=restriction,
                                    restriction_sizes=shape,
                                )
