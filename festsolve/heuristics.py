"""Heuristics for the base (packing) search: pull priorities and base components."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from festsolve.board import Board, Cell
from festsolve.graph import PushGraph

BIG_DISTANCE = 6

Position = tuple[int, int]


@dataclass
class PullCandidate:
    """Features that rank a pull when no base move exists."""

    kill_zone: int = -1
    connectivity: int = 0
    room_connectivity: int = 0
    pull_len: int = 0
    target_hole: int = 2


@dataclass
class BasePriority:
    """Features that rank a move onto a base."""

    hole: int = 2
    connectivity: int = 0
    dist: int = 0


def is_better_pull_candidate(old: PullCandidate, new: PullCandidate) -> bool:
    """Fewer target holes, then kill zone, lower connectivities, longer pull."""
    criteria = [
        (new.target_hole, old.target_hole, True),
        (new.kill_zone, old.kill_zone, False),
        (new.connectivity, old.connectivity, True),
        (new.room_connectivity, old.room_connectivity, True),
        (new.pull_len, old.pull_len, False),
    ]
    for new_value, old_value, smaller in criteria:
        if new_value == old_value:
            continue
        return new_value < old_value if smaller else new_value > old_value
    return False


def is_better_base_priority(new: BasePriority, old: BasePriority) -> bool:
    """Fewer holes, then lower connectivity, then longer distance."""
    if new.hole != old.hole:
        return new.hole < old.hole
    if new.connectivity != old.connectivity:
        return new.connectivity < old.connectivity
    return new.dist > old.dist


def kill_zone(
    board: Board, bases: Iterable[Position], bfs_distance: Sequence[Sequence[int]]
) -> set[Position]:
    """The first inner square far from every base, as a one-square zone.

    A square is far when its distance to each base is at least
    ``BIG_DISTANCE``.  The zone is empty when no square is far.
    """
    base_indices = [board.index_of(y, x) for y, x in sorted(set(bases))]
    for index, pos in enumerate(board.inner_squares()):
        if all(bfs_distance[index][base] >= BIG_DISTANCE for base in base_indices):
            return {pos}
    return set()


def bases_scc(board: Board) -> set[Position]:
    """The bases of the largest group of mutually reachable bases.

    Boxes are treated as walls.  Bases i and j belong together when a box
    can be pushed from each to the other.
    """
    walled = board.without_sokoban()
    for y, x, value in board.cells():
        if value & Cell.BOX:
            walled[y, x] = Cell.WALL

    bases = [(y, x) for y, x, value in walled.cells() if value & Cell.BASE]
    if not bases:
        return set()

    graph = PushGraph(walled)
    reach = []
    for y, x in bases:
        targets = graph.targets_of_place(y, x)
        if (y, x) not in targets:
            raise RuntimeError("no self")
        reach.append([pos in targets for pos in bases])

    count = len(bases)
    scc = [-1] * count
    current = 0
    for i in range(count):
        if scc[i] != -1:
            continue
        scc[i] = current
        for j in range(i, count):
            if reach[i][j] and reach[j][i]:
                scc[j] = current
        current += 1

    sizes = [sum(1 for j in range(i, count) if scc[j] == scc[i]) for i in range(count)]
    biggest = max(sizes)

    result: set[Position] = set()
    for i in range(count):
        if sizes[i] != biggest:
            continue
        result.update(bases[j] for j in range(i, count) if scc[j] == scc[i])
    return result


def unreachable_area_contains(board: Board, elim: Iterable[Position]) -> bool:
    """True when some square of ``elim`` is not reached by the player."""
    return any(not board[pos] & Cell.SOKOBAN for pos in elim)