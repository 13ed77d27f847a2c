"""Target holes: targets enclosed by walls on three sides, and semi holes."""

from __future__ import annotations

from typing import Iterable

from festsolve.board import DELTA_X, DELTA_Y, Board, Cell


def is_target_hole(board: Board, y: int, x: int) -> bool:
    """A target with exactly three wall neighbours."""
    if not board[y, x] & Cell.TARGET:
        return False
    walls = sum(
        1 for dy, dx in zip(DELTA_Y, DELTA_X) if board[y + dy, x + dx] == Cell.WALL
    )
    return walls == 3


def _empty_copy(board: Board) -> Board:
    return board.without_boxes().without_sokoban()


def _fill_holes_in_place(board: Board) -> set[tuple[int, int]]:
    holes: set[tuple[int, int]] = set()
    changed = True
    while changed:
        changed = False
        for y in range(board.height):
            for x in range(board.width):
                if is_target_hole(board, y, x):
                    board[y, x] = Cell.WALL
                    holes.add((y, x))
                    changed = True
    return holes


def find_target_holes(board: Board) -> set[tuple[int, int]]:
    """Return the target holes, treating filled holes as walls repeatedly."""
    return _fill_holes_in_place(_empty_copy(board))


def find_semi_holes(board: Board) -> set[tuple[int, int]]:
    """Return targets with walls on two adjacent sides, once holes are filled."""
    empty = _empty_copy(board)
    _fill_holes_in_place(empty)
    semi = set()
    for y, x, value in empty.cells():
        if not value & Cell.TARGET:
            continue
        for k in range(4):
            n = (k + 1) & 3
            first = empty[y + DELTA_Y[k], x + DELTA_X[k]]
            second = empty[y + DELTA_Y[n], x + DELTA_X[n]]
            if first == Cell.WALL and second == Cell.WALL:
                semi.add((y, x))
    return semi


def fill_target_holes(board: Board, holes: Iterable[tuple[int, int]]) -> None:
    """Turn the given hole squares of the board into walls."""
    for y, x in holes:
        board[y, x] = Cell.WALL