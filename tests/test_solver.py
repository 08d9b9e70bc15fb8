"""
Test script for solver validation

Covers:
1. Candidate enumeration (sequences, groupings, symmetry)
2. Exists / shortest / stats queries on known puzzles
3. Wildcards, required cubes and restrictions
4. Step budgets and cancellation
5. Query factory and pass checks

Usage:
    python tests/test_solver.py
    pytest tests/test_solver.py
"""

import sys
import threading
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from setcubes.engine import (
    Operator,
    Token,
    TokenKind,
    evaluate_line,
    evaluate_restriction,
    is_valid_line,
)
from setcubes.solver import (
    Candidate,
    PassVerdict,
    Puzzle,
    SearchAborted,
    SearchContext,
    SearchStatus,
    check_pass,
    create_query,
    exists_solution,
    get_default_query_name,
    get_query_info,
    get_query_names,
    register_query,
    run_query,
    shortest_solution_length,
    solution_stats,
)
from setcubes.solver.enumeration import CandidateEnumerator, compositions
from setcubes.solver.queries import ExistsQuery


CARDS_A = [1, 2, 3, 4, 5, 8, 9, 10]
CARDS_B = [1, 2, 3, 6, 8, 10, 12, 13]
# Exactly one red card without blue (index 4)
CARDS_D = [12, 13, 14, 15, 8, 1, 2, 4]


def evaluate_candidate(puzzle: Puzzle, candidate: Candidate):
    """Evaluate a candidate the way the board does."""
    violators = frozenset()
    restriction = candidate.restriction_line()
    if restriction is not None:
        assert is_valid_line(restriction)
        violators = evaluate_restriction(restriction, puzzle.universe)
    active = puzzle.universe.indices() - violators
    return evaluate_line(candidate.set_name_line(), puzzle.universe, active)


def enumerator_for(puzzle: Puzzle) -> CandidateEnumerator:
    return CandidateEnumerator(SearchContext(puzzle=puzzle, timeout_sec=None))


def test_compositions():
    """Test compositions of a row length."""
    print("\n" + "="*60)
    print("TEST: Compositions")
    print("="*60)

    assert list(compositions(0)) == [()]
    assert sorted(compositions(3)) == [(1, 1, 1), (1, 2), (2, 1), (3,)]
    assert len(list(compositions(8))) == 128

    print("  [PASS] Composition tests")


def test_expression_enumeration():
    """Test grammar-guided sequences and symmetry reduction."""
    print("\n" + "="*60)
    print("TEST: Expression enumeration")
    print("="*60)

    puzzle = Puzzle.from_codes(CARDS_A, ["red", "red", "union"], goal=3)
    enumerator = enumerator_for(puzzle)

    # Two interchangeable red cubes give a single ordering
    sequences = list(enumerator.expressions(3))
    print(f"  Length 3: {[' '.join(map(str, s)) for s in sequences]}")
    assert sequences == [tuple(Token.parse(t) for t in ("red", "∪", "red"))]
    assert list(enumerator.expressions(2)) == []
    assert len(list(enumerator.expressions(1))) == 1

    # Remaining counts are restored after enumeration
    assert enumerator.remaining == enumerator.available

    # Wildcards resolve by position
    wild = Puzzle.from_codes(CARDS_A, ["red", "blue", "wild"], goal=3)
    sequences = list(enumerator_for(wild).expressions(3))
    operators = sorted(s[1].operator.value for s in sequences)
    assert len(sequences) == 6
    assert set(operators) == {"∪", "∩", "−"}
    postfix = list(enumerator_for(wild).expressions(2))
    assert all(s[1].kind is TokenKind.WILDCARD and s[1].operator is Operator.COMPLEMENT
               for s in postfix)
    assert len(postfix) == 2

    print("  [PASS] Expression enumeration tests")


def test_groupings():
    """Test that only valid, non-trivial groupings are produced."""
    print("\n" + "="*60)
    print("TEST: Groupings")
    print("="*60)

    puzzle = Puzzle.from_codes(CARDS_A, ["red", "blue", "green", "union", "intersect"], goal=3)
    enumerator = enumerator_for(puzzle)

    tokens = tuple(Token.parse(t) for t in ("green", "∪", "red", "∩", "blue"))
    shapes = enumerator.groupings(tokens)
    print(f"  Shapes: {shapes}")
    assert shapes[0] == (1, 1, 1, 1, 1)
    assert set(shapes) == {(1, 1, 1, 1, 1), (3, 1, 1), (1, 1, 3)}

    short = tuple(Token.parse(t) for t in ("red", "∪", "blue"))
    assert enumerator.groupings(short) == [(1, 1, 1)]
    assert enumerator.groupings((Token.parse("red"),)) == [(1,)]

    print("  [PASS] Grouping tests")


def test_scenario_red_union_blue():
    """Cards {1,2,3,4,5,8,9,10}, cubes [red, blue, ∪, green], goal 5."""
    print("\n" + "="*60)
    print("TEST: Scenario red ∪ blue")
    print("="*60)

    puzzle = Puzzle.from_codes(CARDS_A, ["red", "blue", "union", "green"], goal=5)

    assert exists_solution(puzzle) is True
    assert shortest_solution_length(puzzle) == 3

    result = run_query("exists", puzzle)
    print(f"  Witness: {result.witness.describe()}")
    assert result.status is SearchStatus.SOLVED
    assert result.witness.token_count == 3
    assert len(evaluate_candidate(puzzle, result.witness)) == 5

    stats = solution_stats(puzzle)
    print(f"  Stats: {stats.solution_count} solutions, "
          f"shortest {stats.shortest_length}, longest {stats.longest_length}")
    # X ∪ Y for every ordered pair of distinct colours
    assert stats.solution_count == 6
    assert stats.shortest_length == 3
    assert stats.longest_length == 3
    assert stats.status is SearchStatus.SOLVED

    print("  [PASS] Scenario red ∪ blue")


def test_scenario_green_minus_blue():
    """Cards {1,2,3,6,8,10,12,13}, cubes [green, −, blue, red, ∪, ∩], goal 3."""
    print("\n" + "="*60)
    print("TEST: Scenario green − blue")
    print("="*60)

    puzzle = Puzzle.from_codes(CARDS_B, ["green", "-", "blue", "red", "union", "intersect"], goal=3)

    # blue alone already names three cards
    assert exists_solution(puzzle) is True
    assert shortest_solution_length(puzzle) == 1

    stats = solution_stats(puzzle)
    green_minus_blue = Candidate(
        set_name=tuple(Token.parse(t) for t in ("green", "−", "blue")),
        set_name_sizes=(1, 1, 1),
    )
    assert len(evaluate_candidate(puzzle, green_minus_blue)) == 3
    assert stats.solution_count > 1
    assert stats.longest_length >= 3

    print(f"  {stats.solution_count} solutions, longest {stats.longest_length}")
    print("  [PASS] Scenario green − blue")


def test_no_solution():
    """Test puzzles that cannot reach the goal."""
    print("\n" + "="*60)
    print("TEST: No solution")
    print("="*60)

    puzzle = Puzzle.from_codes(CARDS_A, ["red", "blue"], goal=5)
    assert exists_solution(puzzle) is False
    assert shortest_solution_length(puzzle) is None

    stats = solution_stats(puzzle)
    assert stats.solution_count == 0
    assert stats.longest_length is None
    assert stats.status is SearchStatus.EXHAUSTED

    assert exists_solution(Puzzle.from_codes(CARDS_A, [], goal=0)) is False
    assert exists_solution(Puzzle.from_codes(CARDS_A, ["union", "′"], goal=0)) is False

    print("  [PASS] No solution tests")


def test_complement_and_wildcard():
    """Test complement cubes and wildcards standing for it."""
    print("\n" + "="*60)
    print("TEST: Complement and wildcard")
    print("="*60)

    # blue′ names the six non-blue cards
    assert shortest_solution_length(Puzzle.from_codes(CARDS_A, ["blue", "′"], goal=6)) == 2

    puzzle = Puzzle.from_codes(CARDS_A, ["red", "blue", "wild"], goal=5)
    result = run_query("shortest", puzzle)
    witness = result.witness
    print(f"  Witness: {witness.describe()}")
    assert result.shortest_length == 2
    assert witness.set_name[1].kind is TokenKind.WILDCARD
    assert witness.set_name[1].operator is Operator.COMPLEMENT
    assert len(evaluate_candidate(puzzle, witness)) == 5

    print("  [PASS] Complement and wildcard tests")


def test_restrictions():
    """Test that restrictions are used only when enabled."""
    print("\n" + "="*60)
    print("TEST: Restrictions")
    print("="*60)

    cubes = ["red", "subset", "blue", "U"]
    enabled = Puzzle.from_codes(CARDS_D, cubes, goal=7, restrictions_enabled=True)
    disabled = Puzzle.from_codes(CARDS_D, cubes, goal=7, restrictions_enabled=False)

    result = run_query("shortest", enabled)
    witness = result.witness
    print(f"  Witness: {witness.describe()}")
    assert result.shortest_length == 4
    assert witness.has_restriction
    assert witness.restriction_sizes == (1, 1, 1)
    assert len(evaluate_candidate(enabled, witness)) == 7

    assert exists_solution(disabled) is False

    # Restriction without a set name is never a solution
    alone = Puzzle.from_codes(CARDS_D, ["red", "subset", "blue"], goal=0)
    assert solution_stats(alone).solution_count == 0

    print("  [PASS] Restriction tests")


def test_required_cubes():
    """Test that required cubes must be part of every solution."""
    print("\n" + "="*60)
    print("TEST: Required cubes")
    print("="*60)

    free = Puzzle.from_codes(CARDS_A, ["red", "blue", "gold", "union", "intersect"], goal=3)
    required = Puzzle.from_codes(CARDS_A, ["red", "blue", "gold!", "union", "intersect"], goal=3)

    assert shortest_solution_length(free) == 1
    result = run_query("shortest", required)
    print(f"  Witness: {result.witness.describe()}")
    assert result.shortest_length == 5
    assert Token.parse("gold") in result.witness.set_name

    print("  [PASS] Required cube tests")


def test_witness_round_trip():
    """Every solution counted by stats evaluates to the goal."""
    print("\n" + "="*60)
    print("TEST: Witness round trip")
    print("="*60)

    puzzle = Puzzle.from_codes(CARDS_D, ["red", "blue", "=", "U", "union", "′"], goal=2)
    context = SearchContext(puzzle=puzzle, timeout_sec=None)
    enumerator = CandidateEnumerator(context)

    found = []
    for total in range(1, enumerator.max_length + 1):
        for candidate in enumerator.solutions(total):
            assert candidate.token_count == total
            assert len(evaluate_candidate(puzzle, candidate)) == 2
            found.append(candidate)

    print(f"  Checked {len(found)} solutions")
    assert found
    # Each distinct arrangement is generated once and counted once
    assert len(set(found)) == len(found)
    assert solution_stats(puzzle).solution_count == len(found)
    print("  [PASS] Witness round trip")


def test_step_budget():
    """Test that budgets abort with an unknown answer."""
    print("\n" + "="*60)
    print("TEST: Step budget")
    print("="*60)

    puzzle = Puzzle.from_codes(CARDS_A, ["red", "blue", "union", "green"], goal=5)

    result = run_query("exists", puzzle, max_steps=1)
    print(f"  Status: {result.status.name} after {result.metrics.candidates_evaluated} steps")
    assert result.status is SearchStatus.ABORTED
    assert result.exists is None
    assert exists_solution(puzzle, max_steps=1) is None

    with pytest.raises(SearchAborted):
        shortest_solution_length(puzzle, max_steps=1)

    stats = solution_stats(puzzle, max_steps=1)
    assert stats.was_cancelled

    # A deadline already in the past stops the search at its first step
    late = run_query("exists", puzzle, timeout_sec=-1.0)
    assert late.status is SearchStatus.ABORTED
    assert late.metrics.candidates_evaluated == 0

    context = SearchContext(puzzle=puzzle, timeout_sec=None)
    assert not context.is_cancelled()
    assert context.elapsed_time() >= 0.0

    print("  [PASS] Step budget tests")


def test_cancellation():
    """Test that a set cancel flag stops a query."""
    print("\n" + "="*60)
    print("TEST: Cancellation")
    print("="*60)

    puzzle = Puzzle.from_codes(CARDS_A, ["red", "blue", "union", "green"], goal=5)
    cancel = threading.Event()
    cancel.set()

    assert run_query("stats", puzzle, cancel_flag=cancel).status is SearchStatus.ABORTED

    progress = []
    run_query("stats", puzzle, progress_callback=lambda p, m: progress.append(p))
    assert progress and progress[-1] == 1.0

    print("  [PASS] Cancellation tests")


def test_concurrent_queries():
    """Test that queries on different threads do not share state."""
    print("\n" + "="*60)
    print("TEST: Concurrent queries")
    print("="*60)

    puzzles = {
        "union": Puzzle.from_codes(CARDS_A, ["red", "blue", "union", "green"], goal=5),
        "difference": Puzzle.from_codes(CARDS_B, ["green", "-", "blue", "red", "union", "intersect"], goal=3),
        "restriction": Puzzle.from_codes(CARDS_D, ["red", "subset", "blue", "U"], goal=7),
    }
    sequential = {name: solution_stats(puzzle) for name, puzzle in puzzles.items()}

    results = {}

    def worker(name):
        results[name] = solution_stats(puzzles[name])

    threads = [threading.Thread(target=worker, args=(name,)) for name in puzzles]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    for name, expected in sequential.items():
        actual = results[name]
        print(f"  {name}: {actual.solution_count} solutions")
        assert actual.status is expected.status
        assert actual.solution_count == expected.solution_count
        assert actual.shortest_length == expected.shortest_length
        assert actual.longest_length == expected.longest_length
        assert actual.witness == expected.witness

    print("  [PASS] Concurrent query tests")


def test_determinism():
    """Test that repeated queries agree."""
    puzzle = Puzzle.from_codes(CARDS_B, ["green", "-", "blue", "red", "union"], goal=4)
    first = solution_stats(puzzle)
    second = solution_stats(puzzle)
    assert first.solution_count == second.solution_count
    assert first.witness == second.witness
    print("  [PASS] Determinism test")


def test_query_factory():
    """Test the query registry."""
    print("\n" + "="*60)
    print("TEST: Query factory")
    print("="*60)

    names = get_query_names()
    print(f"  Queries: {names}")
    assert {"exists", "shortest", "stats"} <= set(names)
    assert get_default_query_name() == "exists"
    info = {entry["name"]: entry for entry in get_query_info()}
    assert all(entry["description"] for entry in info.values())
    assert info["exists"]["timeout_sec"] == 5.0
    assert info["stats"]["timeout_sec"] == 120.0
    assert create_query("stats").name == "stats"
    assert create_query("stats") is not create_query("stats")

    with pytest.raises(ValueError):
        create_query("longest")

    # Re-registering a class is harmless, reusing its name is not
    assert register_query(ExistsQuery) is ExistsQuery

    class OtherExists(ExistsQuery):
        pass

    with pytest.raises(ValueError):
        register_query(OtherExists)
    assert create_query("exists").__class__ is ExistsQuery

    print("  [PASS] Query factory tests")


def test_pass_check():
    """Test the answers to a pass request."""
    print("\n" + "="*60)
    print("TEST: Pass check")
    print("="*60)

    solvable = Puzzle.from_codes(CARDS_A, ["red", "blue", "union"], goal=5)
    unsolvable = Puzzle.from_codes(CARDS_A, ["red", "blue"], goal=5)

    check = check_pass(SearchContext(puzzle=solvable))
    print(f"  Solvable: {check.message}")
    assert check.verdict is PassVerdict.SOLUTION_EXISTS
    assert check.witness is not None

    assert check_pass(SearchContext(puzzle=unsolvable)).verdict is PassVerdict.NO_SOLUTION
    assert check_pass(SearchContext(puzzle=solvable, max_steps=1)).verdict is PassVerdict.UNKNOWN

    print("  [PASS] Pass check tests")


def main():
    """Run all tests."""
    print("\n" + "#"*60)
    print("# SOLVER VALIDATION TESTS")
    print("#"*60)

    tests = [
        ("Compositions", test_compositions),
        ("Expression enumeration", test_expression_enumeration),
        ("Groupings", test_groupings),
        ("Scenario red ∪ blue", test_scenario_red_union_blue),
        ("Scenario green − blue", test_scenario_green_minus_blue),
        ("No solution", test_no_solution),
        ("Complement and wildcard", test_complement_and_wildcard),
        ("Restrictions", test_restrictions),
        ("Required cubes", test_required_cubes),
        ("Witness round trip", test_witness_round_trip),
        ("Step budget", test_step_budget),
        ("Cancellation", test_cancellation),
        ("Concurrent queries", test_concurrent_queries),
        ("Determinism", test_determinism),
        ("Query factory", test_query_factory),
        ("Pass check", test_pass_check),
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
