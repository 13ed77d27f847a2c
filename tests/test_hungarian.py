import itertools
import random

import pytest

from festsolve.hungarian import HungarianSolver, solve_assignment


def _brute_force(cost):
    n = len(cost)
    return min(
        (sum(cost[i][p[i]] for i in range(n)) for p in itertools.permutations(range(n))),
        default=0,
    )


def _random_matrix(seed, n, high=20):
    rng = random.Random(seed)
    return [[rng.randint(0, high) for _ in range(n)] for _ in range(n)]


def _check_solution(cost, sol):
    n = len(cost)
    assert sorted(sol.match_v) == list(range(n))
    for i, j in enumerate(sol.match_v):
        assert sol.match_u[j] == i
        assert sol.v[i] + sol.u[j] == cost[i][j]
    for i in range(n):
        for j in range(n):
            assert sol.v[i] + sol.u[j] <= cost[i][j]
    assert sol.weight == sum(cost[i][j] for i, j in enumerate(sol.match_v))
    assert sum(sol.v) + sum(sol.u) == sol.weight


def test_small_known_problem():
    sol = solve_assignment([[1, 2], [2, 1]])
    assert sol.weight == 2
    assert sol.match_v == (0, 1)


def test_empty_problem():
    sol = solve_assignment([])
    assert sol.weight == 0
    assert sol.match_v == ()


@pytest.mark.parametrize("seed", range(12))
def test_matches_brute_force(seed):
    n = 1 + seed % 6
    cost = _random_matrix(seed, n)
    sol = solve_assignment(cost)
    assert sol.weight == _brute_force(cost)
    _check_solution(cost, sol)


def test_infinite_entries():
    big = 1000000
    cost = [[big, 3, big], [2, big, big], [big, big, 5]]
    sol = solve_assignment(cost)
    assert sol.weight == _brute_force(cost)
    _check_solution(cost, sol)


def test_non_square_rejected():
    with pytest.raises(ValueError):
        solve_assignment([[1, 2], [3]])


def test_same_problem_returns_cached_solution():
    solver = HungarianSolver()
    cost = _random_matrix(99, 5)
    first = solver.solve(cost)
    second = solver.solve([row[:] for row in cost])
    assert second == first


@pytest.mark.parametrize("seed", range(10))
def test_one_row_change_reuses_and_stays_optimal(seed):
    solver = HungarianSolver()
    n = 2 + seed % 5
    cost = _random_matrix(seed, n)
    solver.solve(cost)
    rng = random.Random(1000 + seed)
    changed = [row[:] for row in cost]
    row = rng.randrange(n)
    changed[row] = [rng.randint(0, 20) for _ in range(n)]
    sol = solver.solve(changed)
    assert sol.weight == _brute_force(changed)
    assert sol.weight == solve_assignment(changed).weight
    _check_solution(changed, sol)


def test_variation_does_not_replace_cached_base():
    solver = HungarianSolver()
    base = _random_matrix(7, 4)
    base_sol = solver.solve(base)
    variation = [row[:] for row in base]
    variation[1] = [0, 0, 0, 0]
    solver.solve(variation)
    assert solver.solve(base) == base_sol


def test_different_size_solves_fresh():
    solver = HungarianSolver()
    solver.solve(_random_matrix(3, 3))
    cost = _random_matrix(4, 4)
    sol = solver.solve(cost)
    assert sol.weight == _brute_force(cost)
    _check_solution(cost, sol)