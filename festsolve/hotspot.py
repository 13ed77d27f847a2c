"""Hotspots: boxes that block other boxes from reaching every target.

A box on square ``q`` blocks a box on square ``p`` when, with ``q`` made a
wall, fewer targets can be reached by pushing from ``p`` than on the empty
board.  The table of such pairs is built once per level.  A board position
is then scored by how many of its boxes block another of its boxes.
"""

from __future__ import annotations

import time
from collections import Counter
from typing import Iterable

from festsolve.board import Board, Cell
from festsolve.graph import PushGraph

Position = tuple[int, int]


class HotspotTable:
    """Blocking relations between squares of a level.

    Squares are those inside the walls of the level without boxes and
    player; an index refers to that order of squares.
    """

    def __init__(
        self,
        board: Board,
        impossible: Iterable[Position] = (),
        time_budget: float | None = None,
    ):
        start = time.monotonic()
        self._empty = board.without_boxes().without_sokoban()
        self._squares = self._empty.inner_squares()
        self._targets = {pos for pos in self._squares if board[pos] & Cell.TARGET}
        # (blocked square, blocker square) -> number of targets lost
        self._blocks: dict[tuple[Position, Position], int] = {}
        self._complete: set[tuple[Position, Position]] = set()
        self.aborted = False
        impossible = set(impossible)

        graph = PushGraph(self._empty)
        reachable = {
            pos: len(graph.targets_of_place(*pos) & self._targets)
            for pos in self._squares
        }

        for blocker in self._squares:
            if time_budget is not None and time.monotonic() - start >= time_budget:
                self._blocks.clear()
                self._complete.clear()
                self.aborted = True
                return
            if blocker in impossible:
                continue
            if board[blocker] & Cell.TARGET:
                continue  # a box that reached a target is not a blocker

            walled = self._empty.copy()
            walled[blocker] = Cell.WALL
            graph = PushGraph(walled)

            for pos in self._squares:
                if pos in impossible or pos == blocker:
                    continue
                if board[pos] & Cell.TARGET:
                    continue  # a box on a target is not considered blocked
                remaining = len(graph.targets_of_place(*pos) & self._targets)
                lost = reachable[pos] - remaining
                if lost:
                    self._blocks[(pos, blocker)] = lost
                if remaining == 0:
                    self._complete.add((pos, blocker))

    def find_hotspots(self, board: Board) -> tuple[set[Position], dict[Position, int]]:
        """Return the boxes that block another box, and how many each blocks."""
        boxes = [pos for pos in self._squares if board[pos] & Cell.BOX]
        hotspots: set[Position] = set()
        weights: Counter[Position] = Counter()
        for blocker in boxes:
            for blocked in boxes:
                if blocked == blocker:
                    continue
                if self._blocks.get((blocked, blocker)):
                    hotspots.add(blocker)
                    weights[blocker] += 1
        return hotspots, dict(weights)

    def score(self, board: Board) -> int:
        """Number of boxes of the board that are active hotspots."""
        hotspots, _ = self.find_hotspots(board)
        return len(hotspots)

    def double_blocking(self, index1: int, index2: int) -> bool:
        """True when each of the two squares cuts the other off every target."""
        first = self._squares[index1]
        second = self._squares[index2]
        return (first, second) in self._complete and (second, first) in self._complete