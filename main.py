"""
setcubes - Entry Point

Runs a solvability query for one round from the command line.

Example:
    python main.py --cards 1 2 3 4 5 8 9 10 --tokens red blue union green --goal 5
    python main.py --cards 1 2 3 6 8 10 12 13 --tokens green - blue red union intersect \\
        --goal 3 --query stats
    python main.py ... --level 6            # restriction cubes allowed from level 6
    python main.py ... --rows "red ⊆ blue" "(green ∪ red) ∩ red"   # check a board
"""

import sys
import logging
import argparse

from setcubes.engine import (
    check_submission,
    place_row,
    restrictions_enabled_for_level,
)
from setcubes.settings import load_settings, save_settings
from setcubes.solver import (
    Puzzle,
    SearchResult,
    SearchStatus,
    get_default_query_name,
    get_query_info,
    get_query_names,
    run_query,
)


logger = logging.getLogger(__name__)


def configure_logging(debug: bool) -> None:
    """Configure logging - output to both console and file."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        handlers=[
            logging.StreamHandler(),  # Console output
            logging.FileHandler("setcubes.log", mode='w', encoding='utf-8')  # File output
        ]
    )


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="setcubes - Solvability queries for set-theory cube puzzles"
    )
    parser.add_argument(
        "--cards", "-c",
        type=int, nargs=8, required=True, metavar="CODE",
        help="Eight 4-bit card codes (red=8, blue=4, green=2, gold=1)"
    )
    parser.add_argument(
        "--tokens", "-t",
        nargs="+", required=True, metavar="CUBE",
        help="Dealt cubes, e.g. red blue union green wild subset (suffix ! for required)"
    )
    parser.add_argument(
        "--goal", "-g",
        type=int, required=True,
        help="Number of cards the solution must name"
    )
    restriction = parser.add_mutually_exclusive_group()
    restriction.add_argument(
        "--restrictions", "-r",
        action="store_true",
        help="Allow restriction cubes (subset, equals)"
    )
    restriction.add_argument(
        "--level", "-l",
        type=int,
        help="Round level; restriction cubes are allowed from level 6"
    )
    parser.add_argument(
        "--rows",
        nargs="+", metavar="ROW",
        help="Check up to two solution rows instead of searching, e.g. \"red ⊆ blue\" \"(green ∪ red) ∩ red\""
    )
    parser.add_argument(
        "--flipped",
        type=int, nargs="*", default=[], metavar="INDEX",
        help="Cards turned over by hand (with --rows)"
    )
    parser.add_argument(
        "--query", "-q",
        choices=get_query_names(),
        help=(
            "Query to run (default from settings, else "
            f"{get_default_query_name()}): "
            + ", ".join(f"{q['name']} ({q['timeout_sec']:g}s)" for q in get_query_info())
        )
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Deadline in seconds (default: the query's own deadline)"
    )
    parser.add_argument(
        "--max-steps",
        type=int,
        help="Budget of evaluated candidates"
    )
    parser.add_argument(
        "--save-settings",
        action="store_true",
        help="Store the chosen query, timeout and step budget in config.json"
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Enable debug logging"
    )
    return parser.parse_args(argv)


def print_result(query_name: str, result: SearchResult) -> None:
    """Print a query result."""
    print(f"Query: {query_name}")
    print(f"Status: {result.status.name}")

    if result.status is SearchStatus.ABORTED:
        print("Answer: unknown (search stopped before finishing)")
    elif query_name == "exists":
        print(f"Answer: {'solvable' if result.exists else 'no solution'}")
    elif query_name == "shortest":
        print(f"Shortest: {result.shortest_length if result.exists else 'no solution'}")

    if query_name == "stats":
        print(f"Solutions: {result.solution_count}")
        print(f"Shortest: {result.shortest_length}")
        print(f"Longest: {result.longest_length}")

    if result.witness is not None:
        print(f"Example: {result.witness.describe()}")

    metrics = result.metrics
    print(f"Time: {metrics.computation_time_ms:.1f}ms, "
          f"{metrics.candidates_evaluated} candidates, {metrics.pruned_branches} pruned")


def search_options(args, settings):
    """
    Pick query name, deadline and step budget.

    Command line values win over settings. A deadline of None leaves
    each query on its own default.

    Returns:
        Tuple of (query_name, timeout_sec, max_steps)
    """
    query_name = args.query or settings.get("default_query") or get_default_query_name()
    timeout = args.timeout if args.timeout is not None else settings.get("search_timeout_sec")
    max_steps = args.max_steps if args.max_steps is not None else settings.get("search_max_steps")
    return query_name, timeout, max_steps


def check_rows(puzzle: Puzzle, rows, flipped, settings) -> int:
    """Check solution rows against the puzzle and print the verdict."""
    if len(rows) > 2:
        logger.error(f"A board has two rows, got {len(rows)}")
        return 2

    token_size = settings.get("token_size", 80)
    touch_tolerance = settings.get("touch_tolerance", 15)
    try:
        placed = [
            place_row(text, token_size, touch_tolerance, y=row * 2 * token_size)
            for row, text in enumerate(rows)
        ]
    except ValueError as e:
        logger.error(f"Invalid row: {e}")
        return 2

    if not puzzle.pool.contains(p.token for row in placed for p in row):
        logger.error("Rows use cubes that were not dealt")
        return 2

    result = check_submission(
        puzzle.universe, placed, puzzle.goal,
        flipped=flipped, pool=puzzle.pool,
        token_size=token_size, touch_tolerance=touch_tolerance,
    )
    print(result.message)
    print(f"Matches: {sorted(result.matches)}")
    if result.violators:
        print(f"Excluded by restriction: {sorted(result.violators)}")
    return 0 if result.is_correct else 1


def main(argv=None) -> int:
    """Build the puzzle and run the query."""
    args = parse_args(argv)
    settings = load_settings()
    configure_logging(args.debug or settings.get("debug_enabled", False))

    if args.level is not None:
        restrictions = restrictions_enabled_for_level(args.level)
    else:
        restrictions = args.restrictions

    query_name, timeout, max_steps = search_options(args, settings)

    try:
        puzzle = Puzzle.from_codes(args.cards, args.tokens, args.goal, restrictions)
    except ValueError as e:
        logger.error(f"Invalid puzzle: {e}")
        return 2

    if args.rows:
        return check_rows(puzzle, args.rows, args.flipped, settings)

    logger.info(f"Running {query_name} on {puzzle.describe()}")
    result = run_query(query_name, puzzle, timeout_sec=timeout, max_steps=max_steps)
    print_result(query_name, result)

    if args.save_settings:
        settings["default_query"] = query_name
        settings["search_timeout_sec"] = timeout
        settings["search_max_steps"] = max_steps
        save_settings(settings)

    return 0 if result.status is not SearchStatus.ABORTED else 1


if __name__ == "__main__":
    sys.exit(main())
