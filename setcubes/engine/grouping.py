"""
Grouping Module - Derives implicit parentheses from cube placement.

Cubes that touch each other (directly or through a chain of touching
cubes) form a group, which evaluates as one parenthesized unit. This is
the only place cube coordinates are read.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from .tokens import Token

logger = logging.getLogger(__name__)


# Cube edge length in pixels (desktop layout)
DEFAULT_TOKEN_SIZE = 80
# Cube edge length in pixels (mobile layout)
MOBILE_TOKEN_SIZE = 50
# Extra gap still counted as touching
DEFAULT_TOUCH_TOLERANCE = 15

Groups = Tuple[Tuple[int, ...], ...]


@dataclass(frozen=True)
class PlacedToken:
    """
    A cube dropped on a solution row.

    Attributes:
        token: Cube value
        x: Left coordinate of the cube
        y: Top coordinate of the cube
    """
    token: Token
    x: float
    y: float


def adjacency_matrix(
    placed: Sequence[PlacedToken],
    token_size: float = DEFAULT_TOKEN_SIZE,
    touch_tolerance: float = DEFAULT_TOUCH_TOLERANCE
) -> np.ndarray:
    """
    Build the symmetric touch relation between cubes.

    Two cubes touch when both their horizontal and vertical offsets are
    below token_size + touch_tolerance.

    Args:
        placed: Cubes of one row
        token_size: Cube edge length
        touch_tolerance: Extra gap still counted as touching

    Returns:
        Boolean (n, n) matrix with a False diagonal
    """
    n = len(placed)
    if n == 0:
        return np.zeros((0, 0), dtype=bool)

    xs = np.array([p.x for p in placed], dtype=float)
    ys = np.array([p.y for p in placed], dtype=float)
    reach = token_size + touch_tolerance

    dx = np.abs(xs[:, None] - xs[None, :])
    dy = np.abs(ys[:, None] - ys[None, :])
    touching = (dx < reach) & (dy < reach)
    np.fill_diagonal(touching, False)
    return touching


def detect_groups(
    placed: Sequence[PlacedToken],
    token_size: float = DEFAULT_TOKEN_SIZE,
    touch_tolerance: float = DEFAULT_TOUCH_TOLERANCE
) -> Groups:
    """
    Partition a row's cubes into touching clusters.

    Clusters are the connected components of the touch relation. Each
    group lists positions into `placed` in ascending order, and groups
    are ordered by their first position. Callers pass cubes sorted by x
    so that positions follow the reading order.

    Args:
        placed: Cubes of one row
        token_size: Cube edge length
        touch_tolerance: Extra gap still counted as touching

    Returns:
        Tuple of groups, each a tuple of positions
    """
    touching = adjacency_matrix(placed, token_size, touch_tolerance)
    n = len(placed)
    seen = [False] * n
    groups: List[Tuple[int, ...]] = []

    for start in range(n):
        if seen[start]:
            continue

        # BFS over the touch graph
        seen[start] = True
        component = [start]
        queue = deque([start])
        while queue:
            current = queue.popleft()
            for neighbor in np.flatnonzero(touching[current]):
                neighbor = int(neighbor)
                if not seen[neighbor]:
                    seen[neighbor] = True
                    component.append(neighbor)
                    queue.append(neighbor)

        groups.append(tuple(sorted(component)))

    if any(len(g) > 1 for g in groups):
        logger.debug(f"Detected groups: {groups}")
    return tuple(groups)


def place_row(
    text: str,
    token_size: float = DEFAULT_TOKEN_SIZE,
    touch_tolerance: float = DEFAULT_TOUCH_TOLERANCE,
    y: float = 0.0
) -> List[PlacedToken]:
    """
    Lay out a row written as text, e.g. "green ∪ (red ∩ red)".

    Cubes inside one pair of parentheses are placed touching each other;
    all other neighbours are placed too far apart to touch. Parentheses
    do not nest, as a row has a single level of clusters.

    Args:
        text: Whitespace-separated cube names with optional parentheses
        token_size: Cube edge length
        touch_tolerance: Extra gap still counted as touching
        y: Vertical coordinate of the row

    Returns:
        Placed cubes in reading order

    Raises:
        ValueError: On unknown cubes or unbalanced parentheses
    """
    parts = text.replace("(", " ( ").replace(")", " ) ").split()
    placed: List[PlacedToken] = []
    x = 0.0
    in_group = False
    touching = False

    for part in parts:
        if part == "(":
            if in_group:
                raise ValueError(f"Nested parentheses in row: {text}")
            in_group, touching = True, False
            continue
        if part == ")":
            if not in_group:
                raise ValueError(f"Unbalanced parentheses in row: {text}")
            in_group, touching = False, False
            continue

        token = Token.parse(part)
        if placed:
            x += token_size if touching else 2 * token_size + touch_tolerance
        placed.append(PlacedToken(token=token, x=x, y=y))
        touching = in_group

    if in_group:
        raise ValueError(f"Unbalanced parentheses in row: {text}")
    return placed
