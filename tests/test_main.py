"""
Test script for command line option handling

Covers:
1. Query, deadline and step budget resolution from arguments and settings
2. Query deadlines when no deadline is configured
3. Row checking through the command line

Usage:
    python tests/test_main.py
    pytest tests/test_main.py
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import main as cli
from setcubes.settings import DEFAULT_SETTINGS
from setcubes.solver import Puzzle, SearchContext, SearchResult, run_query
from setcubes.solver import factory
from setcubes.solver.base import SearchQuery


CARDS = ["1", "2", "3", "4", "5", "8", "9", "10"]


class DeadlineQuery(SearchQuery):
    """Records the deadline it was started with."""
    name = "deadline"
    description = "Deadline - Report the context deadline"
    timeout_sec = 42.0

    def run(self, context: SearchContext) -> SearchResult:
        DeadlineQuery.seen = context.timeout_sec
        return SearchResult()


def args_for(*extra):
    return cli.parse_args(["--cards", *CARDS, "--tokens", "red", "blue", "union", "--goal", "5", *extra])


def test_search_options():
    """Test that arguments win over settings and settings over defaults."""
    print("\n" + "="*60)
    print("TEST: Search options")
    print("="*60)

    settings = dict(DEFAULT_SETTINGS)
    assert settings["search_timeout_sec"] is None

    query, timeout, max_steps = cli.search_options(args_for(), settings)
    print(f"  Defaults: {query}, {timeout}, {max_steps}")
    assert (query, timeout, max_steps) == ("exists", None, None)

    settings.update(default_query="stats", search_timeout_sec=3.0, search_max_steps=100)
    assert cli.search_options(args_for(), settings) == ("stats", 3.0, 100)

    args = args_for("--query", "shortest", "--timeout", "1.5", "--max-steps", "7")
    assert cli.search_options(args, settings) == ("shortest", 1.5, 7)

    print("  [PASS] Search option tests")


def test_query_default_deadline():
    """Test that an unset deadline falls back to the query's own."""
    print("\n" + "="*60)
    print("TEST: Query default deadline")
    print("="*60)

    puzzle = Puzzle.from_codes([1, 2, 3, 4, 5, 8, 9, 10], ["red"], goal=3)
    factory.register_query(DeadlineQuery)
    try:
        run_query("deadline", puzzle, timeout_sec=DEFAULT_SETTINGS["search_timeout_sec"])
        assert DeadlineQuery.seen == 42.0
        run_query("deadline", puzzle, timeout_sec=2.0)
        assert DeadlineQuery.seen == 2.0
    finally:
        factory._QUERIES.pop("deadline", None)

    print("  [PASS] Query default deadline tests")


def test_check_rows():
    """Test board checking exit codes."""
    print("\n" + "="*60)
    print("TEST: Check rows")
    print("="*60)

    settings = dict(DEFAULT_SETTINGS)
    puzzle = Puzzle.from_codes([1, 2, 3, 4, 5, 8, 9, 10], ["red", "blue", "union"], goal=5)
    assert cli.check_rows(puzzle, ["red ∪ blue"], [], settings) == 0
    assert cli.check_rows(puzzle, ["red"], [], settings) == 1
    assert cli.check_rows(puzzle, ["red ∪ green"], [], settings) == 2
    assert cli.check_rows(puzzle, ["(red ∪ blue"], [], settings) == 2
    assert cli.check_rows(puzzle, ["red", "blue", "red"], [], settings) == 2

    # Restriction rows are rejected in rounds without restriction cubes
    limited = Puzzle.from_codes([12, 13, 14, 15, 8, 1, 2, 4], ["red", "subset", "blue", "U"],
                                goal=7, restrictions_enabled=False)
    assert cli.check_rows(limited, ["U", "red ⊆ blue"], [], settings) == 1

    print("  [PASS] Check rows tests")


def main():
    """Run all tests."""
    print("\n" + "#"*60)
    print("# COMMAND LINE TESTS")
    print("#"*60)

    tests = [
        ("Search options", test_search_options),
        ("Query default deadline", test_query_default_deadline),
        ("Check rows", test_check_rows),
    ]

    results = []
    for name, test in tests:
        try:
            test()
            results.append((name, True))
        except AssertionError as e:
            print(f"  [FAIL] {e}")
            results.append((name, False))

    print("\n" + "="*60)
    print("SUMMARY")
    print("="*60)

    all_passed = True
    for name, passed in results:
        status = "PASS" if passed else "FAIL"
        print(f"  {name}: [{status}]")
        if not passed:
            all_passed = False

    print()
    if all_passed:
        print("All tests PASSED!")
        return 0
    else:
        print("Some tests FAILED!")
        return 1


if __name__ == "__main__":
    sys.exit(main())
