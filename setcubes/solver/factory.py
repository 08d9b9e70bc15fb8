"""
Query Registry - Solvability queries selectable by name.

Queries register themselves on import (see the queries package). Hosts
pick one by name: the CLI lists them with their default deadlines, the
pass check always uses "exists".
"""

from typing import Dict, List, Type, Union

from .base import SearchQuery


DEFAULT_QUERY = "exists"

_QUERIES: Dict[str, Type[SearchQuery]] = {}


def register_query(cls: Type[SearchQuery]) -> Type[SearchQuery]:
    """
    Class decorator adding a query to the registry.

    Raises:
        ValueError: If another class already uses the same name
    """
    existing = _QUERIES.get(cls.name)
    if existing is not None and existing is not cls:
        raise ValueError(f"Query name {cls.name!r} already used by {existing.__name__}")
    _QUERIES[cls.name] = cls
    return cls


def create_query(name: str) -> SearchQuery:
    """
    Instantiate a registered query.

    Args:
        name: Query name ("exists", "shortest", "stats")

    Returns:
        Fresh query instance

    Raises:
        ValueError: If no query has that name
    """
    cls = _QUERIES.get(name)
    if cls is None:
        raise ValueError(f"Unknown query: {name}. Available: {', '.join(_QUERIES)}")
    return cls()


def get_query_names() -> List[str]:
    return list(_QUERIES)


def get_query_info() -> List[Dict[str, Union[str, float]]]:
    """
    Describe every registered query.

    Returns:
        Dicts with 'name', 'description' and 'timeout_sec' (default deadline)
    """
    return [
        {"name": cls.name, "description": cls.description, "timeout_sec": cls.timeout_sec}
        for cls in _QUERIES.values()
    ]


def get_default_query_name() -> str:
    """Query used when neither the caller nor the settings choose one."""
    if DEFAULT_QUERY in _QUERIES or not _QUERIES:
        return DEFAULT_QUERY
    return next(iter(_QUERIES))
