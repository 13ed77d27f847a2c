"""The push graph: one vertex per (box square, player side) pair.

A vertex ``4 * index + side`` stands for a single box on the inner square
``index`` with the player on the neighbouring square in direction ``side``
(up, right, down, left).  Shift edges move the player around the box.
Push and pull edges move the box one square.  Breadth-first iterations
over the graph give push counts, reachable squares and reversibility.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Container, Iterable

from festsolve.board import DELTA_X, DELTA_Y, OCCUPIED, Board, Cell, Move, MoveAttr

INFINITY = 1_000_000


@dataclass
class Vertex:
    """State of one (box square, player side) vertex."""

    shift: list[int | None] = field(default_factory=lambda: [None] * 4)
    push: int | None = None
    pull: int | None = None
    weight: int = INFINITY
    active: bool = False
    src: int = -1
    reversible: bool = False


class PushGraph:
    """The graph of single-box moves on a board without boxes."""

    def __init__(self, board: Board, pull_mode: bool = False):
        if any(value & Cell.BOX for _, _, value in board.cells()):
            raise ValueError("boxes in board")
        self.board = board.copy()
        self.pull_mode = bool(pull_mode)
        self.squares = self.board.inner_squares()
        self._index = {pos: i for i, pos in enumerate(self.squares)}
        self.vertices = [Vertex() for _ in range(4 * len(self.squares))]
        self._init_active()
        self._init_shift()
        self._init_push_pull()

    def _cell_index(self, pos: tuple[int, int]) -> int:
        try:
            return self._index[pos]
        except KeyError:
            raise ValueError(f"square {pos} is not an inner square") from None

    def _init_active(self) -> None:
        for i, (y, x) in enumerate(self.squares):
            for d in range(4):
                side = self.board[y + DELTA_Y[d], x + DELTA_X[d]]
                self.vertices[4 * i + d].active = not side & Cell.WALL

    @staticmethod
    def _component(
        start: tuple[int, int], blocked: tuple[int, int], passable: set[tuple[int, int]]
    ) -> set[tuple[int, int]]:
        seen = {start}
        queue = deque([start])
        while queue:
            y, x = queue.popleft()
            for dy, dx in zip(DELTA_Y, DELTA_X):
                nxt = (y + dy, x + dx)
                if nxt == blocked or nxt in seen or nxt not in passable:
                    continue
                seen.add(nxt)
                queue.append(nxt)
        return seen

    def _init_shift(self) -> None:
        passable = {pos for pos in self.squares if not self.board[pos] & OCCUPIED}
        for i, (y, x) in enumerate(self.squares):
            neighbours = [(y + DELTA_Y[d], x + DELTA_X[d]) for d in range(4)]
            zones: dict[tuple[int, int], int] = {}
            for d, pos in enumerate(neighbours):
                if pos not in passable or pos in zones:
                    continue
                component = self._component(pos, (y, x), passable)
                for other in neighbours:
                    if other in component:
                        zones[other] = d
            for frm in range(4):
                vertex = self.vertices[4 * i + frm]
                if not vertex.active or neighbours[frm] not in zones:
                    continue
                for to in range(4):
                    if to == frm or not self.vertices[4 * i + to].active:
                        continue
                    if zones.get(neighbours[to]) == zones[neighbours[frm]]:
                        vertex.shift[to] = 4 * i + to

    def _init_push_pull(self) -> None:
        for i, (y, x) in enumerate(self.squares):
            for d in range(4):
                vertex = self.vertices[4 * i + d]
                if not vertex.active:
                    continue
                dy, dx = DELTA_Y[d], DELTA_X[d]

                push_pos = (y - dy, x - dx)
                push_index = self._index.get(push_pos)
                if self.board[push_pos] & OCCUPIED or push_index is None:
                    vertex.push = None
                else:
                    vertex.push = 4 * push_index + d

                pull_pos = (y + dy, x + dx)
                pull_index = self._index.get(pull_pos)
                if self.board[y + 2 * dy, x + 2 * dx] & OCCUPIED or pull_index is None:
                    vertex.pull = None
                else:
                    vertex.pull = 4 * pull_index + d

    def reset_weights(self) -> None:
        """Set every weight to infinity and forget sources and reversibility."""
        for vertex in self.vertices:
            vertex.weight = INFINITY
            vertex.src = -1
            vertex.reversible = False

    def clear_weight_around_cell(self, index: int) -> None:
        """Make the active vertices of a square starting points (weight 0)."""
        for vertex in self.vertices[4 * index: 4 * index + 4]:
            if vertex.active:
                vertex.weight = 0

    def iterate(self, pull_mode: bool | None = None) -> None:
        """Spread weights from the weight-0 vertices, one push or pull per step."""
        if pull_mode is None:
            pull_mode = self.pull_mode
        vertices = self.vertices
        visited = [False] * len(vertices)
        frontier = []
        for i, vertex in enumerate(vertices):
            if vertex.weight == 0:
                vertex.src = -1
                frontier.append(i)
                visited[i] = True

        while frontier:
            following = []
            for current in frontier:
                vertex = vertices[current]
                for target in vertex.shift:
                    if target is None:
                        continue
                    if not vertices[target].active:
                        raise RuntimeError("shift to an inactive vertex")
                    if visited[target]:
                        continue
                    visited[target] = True
                    vertices[target].weight = vertex.weight
                    vertices[target].src = current
                    following.append(target)

                target = vertex.pull if pull_mode else vertex.push
                if target is None:
                    continue
                if not vertices[target].active:
                    raise RuntimeError("move to an inactive vertex")
                if visited[target]:
                    continue
                visited[target] = True
                vertices[target].weight = vertex.weight + 1
                vertices[target].src = current
                following.append(target)
            frontier = following

    def mark_reversible(self) -> None:
        """Mark the vertices from which the starting vertices can be reached.

        Weights left by the backward iteration are cleared again; the
        starting vertices keep weight 0.
        """
        self.iterate(not self.pull_mode)
        for vertex in self.vertices:
            if vertex.weight < INFINITY:
                vertex.reversible = True
            if vertex.weight != 0:
                vertex.weight = INFINITY

    def weight_around_cell(self, index: int) -> int:
        """The smallest weight among the active vertices of a square."""
        return min(
            [INFINITY]
            + [v.weight for v in self.vertices[4 * index: 4 * index + 4] if v.active]
        )

    def make_holes_inactive(self, board: Board) -> None:
        """Forbid placing the player in a dead-end hole closed by a box.

        A hole is a free square with three wall neighbours.  The player can
        not stand in it next to a box unless the player already stands in
        both the hole and the box square.
        """
        for y, x in self.squares:
            if board[y, x] & OCCUPIED:
                continue
            walls = sum(
                1 for dy, dx in zip(DELTA_Y, DELTA_X) if board[y + dy, x + dx] == Cell.WALL
            )
            if walls != 3:
                continue
            hole_has_sokoban = bool(board[y, x] & Cell.SOKOBAN)
            for i in range(4):
                box_pos = (y + DELTA_Y[i], x + DELTA_X[i])
                if board[box_pos] == Cell.WALL or box_pos not in self._index:
                    continue
                vertex = self.vertices[4 * self._index[box_pos] + ((i + 2) & 3)]
                if hole_has_sokoban:
                    if board[box_pos] & Cell.SOKOBAN:
                        vertex.active = False
                else:
                    vertex.active = False

    def box_moves(
        self, start_index: int, impossible: Container[tuple[int, int]] = ()
    ) -> list[Move]:
        """List the moves of a box from ``start_index`` found by the last iteration.

        A move is produced for each reached vertex whose last step was a push
        or pull, except on the squares in ``impossible``.
        """
        moves = []
        for i, pos in enumerate(self.squares):
            if pos in impossible:
                continue
            for side in range(4):
                vertex = self.vertices[4 * i + side]
                if vertex.weight in (INFINITY, 0):
                    continue
                if vertex.src // 4 == i:
                    continue  # reached by walking around the box, not by a move
                moves.append(
                    Move(
                        from_index=start_index,
                        to_index=i,
                        sokoban_position=side,
                        attr=MoveAttr(reversible=vertex.reversible),
                    )
                )
        return moves

    def targets_of_place(self, y: int, x: int) -> set[tuple[int, int]]:
        """Squares a box on (y, x) can be pushed to, including (y, x) itself."""
        start = self._cell_index((y, x))
        self.reset_weights()
        self.clear_weight_around_cell(start)
        self.iterate(False)
        targets = {
            self.squares[i // 4]
            for i, vertex in enumerate(self.vertices)
            if vertex.weight != INFINITY
        }
        targets.add((y, x))
        return targets


def _reach_of_group(
    board: Board, group: Iterable[tuple[int, int]], pull_mode: bool
) -> set[tuple[int, int]]:
    graph = PushGraph(board, pull_mode)
    members = set(group)
    for pos in members:
        graph.clear_weight_around_cell(graph._cell_index(pos))
    graph.iterate(pull_mode)
    return {
        pos
        for i, pos in enumerate(graph.squares)
        if graph.weight_around_cell(i) != INFINITY or pos in members
    }


def find_sources_of_group(
    board: Board, group: Iterable[tuple[int, int]]
) -> set[tuple[int, int]]:
    """Squares from which a box can be pushed onto some square of ``group``."""
    return _reach_of_group(board, group, True)


def find_targets_of_group(
    board: Board, group: Iterable[tuple[int, int]]
) -> set[tuple[int, int]]:
    """Squares a box on some square of ``group`` can be pushed to."""
    return _reach_of_group(board, group, False)


def distance_from_group(
    board: Board, group: Iterable[tuple[int, int]], pull_mode: bool
) -> dict[tuple[int, int], int]:
    """Fewest pushes (or pulls) from ``group`` to each inner square.

    Unreachable squares get ``INFINITY``.
    """
    graph = PushGraph(board, pull_mode)
    for pos in set(group):
        graph.clear_weight_around_cell(graph._cell_index(pos))
    graph.iterate(pull_mode)
    return {pos: graph.weight_around_cell(i) for i, pos in enumerate(graph.squares)}