"""
Queries Package - Concrete solvability queries.

Import this module to register all built-in queries.
"""

from .exists import ExistsQuery
from .shortest import ShortestQuery
from .stats import StatsQuery

__all__ = [
    "ExistsQuery",
    "ShortestQuery",
    "StatsQuery",
]
