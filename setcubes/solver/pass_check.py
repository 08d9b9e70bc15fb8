"""
Pass Check Module - Decides how the game answers a "pass" request.

Passing is free when the dealt cubes cannot reach the goal; otherwise
the player is warned that a solution exists. When the existence search
runs out of time the answer is unknown and the host chooses.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .context import SearchContext
from .factory import create_query
from .solution import Candidate, SearchResult

logger = logging.getLogger(__name__)


class PassVerdict(Enum):
    """Answer to a pass request."""
    SOLUTION_EXISTS = "A solution exists - pass anyway?"
    NO_SOLUTION = "You're correct! There was no possible solution."
    UNKNOWN = "Could not decide in time whether a solution exists."


@dataclass(frozen=True)
class PassCheck:
    """
    Result of a pass check.

    Attributes:
        verdict: Answer to the pass request
        witness: A solution, when one exists
        result: Underlying search result
    """
    verdict: PassVerdict
    witness: Optional[Candidate]
    result: SearchResult

    @property
    def message(self) -> str:
        return self.verdict.value


def check_pass(context: SearchContext) -> PassCheck:
    """
    Run the existence search for a pass request.

    Args:
        context: Search context, usually with a short deadline

    Returns:
        PassCheck with the verdict
    """
    result = create_query("exists").run(context)
    exists = result.exists
    if exists is None:
        verdict = PassVerdict.UNKNOWN
    elif exists:
        verdict = PassVerdict.SOLUTION_EXISTS
    else:
        verdict = PassVerdict.NO_SOLUTION

    logger.info(f"Pass check: {verdict.name} ({context.puzzle.describe()})")
    return PassCheck(verdict=verdict, witness=result.witness, result=result)
