"""Lower bounds on pushes via minimum-cost matching of boxes to goals.

Each function returns the matching weight of the board and, for every
given move, the weight after that move.  ``distance[a][b]`` is the push
distance between inner indices ``a`` and ``b``.
"""

from __future__ import annotations

from typing import Callable, Iterable, Sequence

from festsolve.board import Board, Cell, Move
from festsolve.hungarian import HungarianSolver

DistanceTable = Sequence[Sequence[int]]


def _indices(board: Board, flag: int) -> list[int]:
    return [board.index_of(y, x) for y, x, value in board.cells() if value & flag]


def _evaluate(
    boxes: list[int],
    columns: list[int],
    cost: Callable[[int, int], int],
    moves: Iterable[Move],
) -> tuple[int, list[int]]:
    if len(boxes) != len(columns):
        raise ValueError(f"box num mismatch: {len(boxes)} boxes, {len(columns)} goals")

    solver = HungarianSolver()
    matrix = [[cost(box, column) for column in columns] for box in boxes]
    base = solver.solve(matrix).weight
    row_of = {box: i for i, box in enumerate(boxes)}

    results = []
    for move in moves:
        if move.from_index == move.to_index:
            results.append(base)
            continue
        try:
            row = row_of[move.from_index]
        except KeyError:
            raise ValueError(f"no box at index {move.from_index}") from None
        changed = [list(r) for r in matrix]
        changed[row] = [cost(move.to_index, column) for column in columns]
        results.append(solver.solve(changed).weight)
    return base, results


def match_distance(
    board: Board, distance: DistanceTable, moves: Iterable[Move] = ()
) -> tuple[int, list[int]]:
    """Matching weight of boxes to targets, now and after each move."""
    return _evaluate(
        _indices(board, Cell.BOX),
        _indices(board, Cell.TARGET),
        lambda box, target: distance[box][target],
        moves,
    )


def base_distance(
    board: Board, distance: DistanceTable, moves: Iterable[Move] = ()
) -> tuple[int, list[int]]:
    """Matching weight from the board's base squares to its boxes."""
    return _evaluate(
        _indices(board, Cell.BOX),
        _indices(board, Cell.BASE),
        lambda box, base: distance[base][box],
        moves,
    )


def rev_distance(
    board: Board,
    base_board: Board,
    distance: DistanceTable,
    moves: Iterable[Move] = (),
) -> tuple[int, list[int]]:
    """Matching weight from the boxes of ``base_board`` to the boxes of ``board``."""
    return _evaluate(
        _indices(board, Cell.BOX),
        _indices(base_board, Cell.BOX),
        lambda box, base: distance[base][box],
        moves,
    )