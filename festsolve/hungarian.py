"""Minimum-cost assignment of boxes to targets with the Hungarian method.

A solver remembers the last problem it solved from scratch.  When the next
problem differs from it in a single row, the previous potentials and
matching are reused and only that row is matched again.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

_BIG = 10_000_000


@dataclass(frozen=True)
class HungarianSolution:
    """An optimal assignment with its dual potentials.

    ``match_v[i]`` is the column assigned to row ``i``; ``match_u[j]`` the row
    assigned to column ``j``.  ``v`` and ``u`` are the row and column
    potentials, with ``v[i] + u[j] <= cost[i][j]`` everywhere and equality on
    the matched pairs.
    """

    v: tuple[int, ...]
    u: tuple[int, ...]
    match_v: tuple[int, ...]
    match_u: tuple[int, ...]
    weight: int


def _square(cost: Sequence[Sequence[int]]) -> list[list[int]]:
    matrix = [[int(value) for value in row] for row in cost]
    n = len(matrix)
    for row in matrix:
        if len(row) != n:
            raise ValueError("cost matrix must be square")
    return matrix


class _Assignment:
    """Working state of one run of the Hungarian method."""

    def __init__(self, cost: list[list[int]]):
        self.cost = cost
        self.n = n = len(cost)
        self.v = [0] * n
        self.u = [0] * n
        self.matched_v = [-1] * n
        self.matched_u = [-1] * n
        self.src_of_v = [-1] * n
        self.src_of_u = [-1] * n
        self.visited_v = [False] * n
        self.visited_u = [False] * n
        self.v_list: list[int] = []
        self.u_list: list[int] = []

    @classmethod
    def fresh(cls, cost: list[list[int]]) -> "_Assignment":
        state = cls(cost)
        state._init_potentials()
        state._init_match()
        return state

    @classmethod
    def resume(
        cls, cost: list[list[int]], previous: HungarianSolution, row: int
    ) -> "_Assignment":
        """Start from a previous solution whose problem differed in ``row``."""
        state = cls(cost)
        state.v = list(previous.v)
        state.u = list(previous.u)
        state.matched_v = list(previous.match_v)
        state.matched_u = list(previous.match_u)
        state.matched_u[state.matched_v[row]] = -1
        state.matched_v[row] = -1
        state.v[row] = min([_BIG, *(c - u for c, u in zip(cost[row], state.u))])
        state._verify_invariant()
        return state

    def _tight(self, i: int, j: int) -> bool:
        return self.v[i] + self.u[j] == self.cost[i][j]

    def _init_potentials(self) -> None:
        for i, row in enumerate(self.cost):
            self.v[i] = min([_BIG, *row])
        for j in range(self.n):
            self.u[j] = min([_BIG, *(self.cost[i][j] - self.v[i] for i in range(self.n))])

    def _init_match(self) -> None:
        for i in range(self.n):
            for j in range(self.n):
                if self.matched_u[j] != -1:
                    continue
                if self._tight(i, j):
                    self.matched_v[i] = j
                    self.matched_u[j] = i
                    break

    def _init_bfs(self) -> None:
        n = self.n
        self.src_of_v = [-1] * n
        self.src_of_u = [-1] * n
        self.visited_v = [False] * n
        self.visited_u = [False] * n
        self.v_list = [i for i in range(n) if self.matched_v[i] == -1]
        for i in self.v_list:
            self.visited_v[i] = True

    def _bfs_v_side(self) -> bool:
        self.u_list = []
        for i in self.v_list:
            for j in range(self.n):
                if self.visited_u[j]:
                    continue
                if self._tight(i, j):
                    self.visited_u[j] = True
                    self.src_of_u[j] = i
                    self.u_list.append(j)
        return bool(self.u_list)

    def _bfs_u_side(self) -> bool:
        self.v_list = []
        for j in self.u_list:
            i = self.matched_u[j]
            if i == -1 or self.visited_v[i]:
                continue
            self.v_list.append(i)
            self.visited_v[i] = True
            self.src_of_v[i] = j
        return bool(self.v_list)

    def _alternate(self, from_u_side: bool) -> None:
        while True:
            if from_u_side:
                if not self.u_list:
                    raise RuntimeError("bad hungarian u side")
                progressed = self._bfs_u_side()
            else:
                if not self.v_list:
                    raise RuntimeError("bad hungarian v side")
                progressed = self._bfs_v_side()
            from_u_side = not from_u_side
            if not progressed:
                return

    def _try_augment(self) -> bool:
        for j in range(self.n):
            if self.matched_u[j] != -1 or not self.visited_u[j]:
                continue
            while j != -1:
                i = self.src_of_u[j]
                self.matched_u[j] = i
                self.matched_v[i] = j
                j = self.src_of_v[i]
            return True
        return False

    def _add_new_edges(self) -> None:
        n = self.n
        delta = min(
            [
                _BIG,
                *(
                    self.cost[i][j] - self.v[i] - self.u[j]
                    for i in range(n)
                    if self.visited_v[i]
                    for j in range(n)
                    if not self.visited_u[j]
                ),
            ]
        )
        for k in range(n):
            if self.visited_v[k]:
                self.v[k] += delta
            if self.visited_u[k]:
                self.u[k] -= delta

        self.u_list = []
        for j in range(n):
            if self.visited_u[j]:
                continue
            for i in range(n):
                if self.visited_v[i] and self._tight(i, j):
                    self.visited_u[j] = True
                    self.src_of_u[j] = i
                    self.u_list.append(j)
                    break

    def _add_edge_to_match(self) -> None:
        self._init_bfs()
        self._alternate(from_u_side=False)
        while not self._try_augment():
            self._add_new_edges()
            self._alternate(from_u_side=True)

    def _verify_invariant(self) -> None:
        for i in range(self.n):
            for j in range(self.n):
                if self.v[i] + self.u[j] > self.cost[i][j]:
                    raise RuntimeError("invariant failed")

    def _verify_solution(self) -> None:
        self._verify_invariant()
        for i in range(self.n):
            j = self.matched_v[i]
            if j == -1 or self.matched_u[j] != i:
                raise RuntimeError("not perm")
            if not self._tight(i, j):
                raise RuntimeError("match problem")

    def run(self) -> None:
        while -1 in self.matched_v:
            self._add_edge_to_match()
            self._verify_invariant()
        self._verify_solution()

    def solution(self) -> HungarianSolution:
        weight = sum(self.cost[i][j] for i, j in enumerate(self.matched_v))
        return HungarianSolution(
            v=tuple(self.v),
            u=tuple(self.u),
            match_v=tuple(self.matched_v),
            match_u=tuple(self.matched_u),
            weight=weight,
        )


class HungarianSolver:
    """Solves assignment problems, reusing work across one-row variations."""

    def __init__(self) -> None:
        self._prev_cost: list[list[int]] | None = None
        self._prev_solution: HungarianSolution | None = None

    def _changed_row(self, cost: list[list[int]]) -> int | None:
        """Return the single changed row, len(cost) if unchanged, else None."""
        previous = self._prev_cost
        if previous is None or len(previous) != len(cost):
            return None
        changed = [i for i, (new, old) in enumerate(zip(cost, previous)) if new != old]
        if not changed:
            return len(cost)
        if len(changed) > 1:
            return None
        return changed[0]

    def solve(self, cost: Sequence[Sequence[int]]) -> HungarianSolution:
        """Return a minimum-weight perfect matching of the square cost matrix."""
        matrix = _square(cost)
        row = self._changed_row(matrix)

        if row is None:
            state = _Assignment.fresh(matrix)
        elif row == len(matrix):
            assert self._prev_solution is not None
            return self._prev_solution
        else:
            assert self._prev_solution is not None
            state = _Assignment.resume(matrix, self._prev_solution, row)

        state.run()
        solution = state.solution()

        if row is None:
            self._prev_cost = matrix
            self._prev_solution = solution
        return solution


def solve_assignment(cost: Sequence[Sequence[int]]) -> HungarianSolution:
    """Solve one assignment problem without any caching."""
    return HungarianSolver().solve(cost)