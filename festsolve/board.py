"""Board representation, cell flags and move records for the Sokoban solver."""

from __future__ import annotations

import enum
from collections import deque
from dataclasses import dataclass, field
from typing import Iterable, Iterator

MAX_SIZE = 51
MAX_BOXES = 200
MAX_SOL_LEN = 1500
MAX_INNER = MAX_SIZE * MAX_SIZE
MAX_ROOMS = 70

# Directions: up, right, down, left.
DELTA_Y = (-1, 0, 1, 0)
DELTA_X = (0, 1, 0, -1)

# Eight neighbours, clockwise from up.
DELTA_Y_8 = (-1, -1, 0, 1, 1, 1, 0, -1)
DELTA_X_8 = (0, 1, 1, 1, 0, -1, -1, -1)

DEFAULT_TIME_LIMIT = 600
SOLVER_NAME = "Festival 3.1"


class Cell(enum.IntFlag):
    """Bit flags that make up the content of a board square."""

    SPACE = 0
    WALL = 1
    BOX = 2
    TARGET = 4
    SOKOBAN = 8
    BASE = 16
    DEADLOCK_ZONE = 32


OCCUPIED = int(Cell.WALL | Cell.BOX)
PACKED_BOX = int(Cell.BOX | Cell.TARGET)
SOKOBAN_ON_TARGET = int(Cell.SOKOBAN | Cell.TARGET)


class SearchMode(enum.IntEnum):
    """The kinds of search the solver runs."""

    NORMAL = 0
    DEADLOCK_SEARCH = 1
    BASE_SEARCH = 2
    K_DIST_SEARCH = 3
    MINI_SEARCH = 4
    FORWARD_WITH_BASES = 5
    GIRL_SEARCH = 6
    REV_SEARCH = 7
    DRAGONFLY = 8
    WOBBLERS_SEARCH = 9
    HF_SEARCH = 10
    ROOMS_DEADLOCK_SEARCH = 11
    NAIVE_SEARCH = 12
    XY_SEARCH = 13
    MINI_CORRAL = 14
    IGNORE_CORRAL = 15
    BICON_SEARCH = 16
    MAX_DIST_SEARCH = 17
    MAX_DIST_SEARCH2 = 18
    SNAIL_SEARCH = 19
    NETLOCK_SEARCH = 20


@dataclass
class MoveAttr:
    """Advisory attributes attached to a move."""

    advisor: int = 0
    weight: int = 0  # the perimeter sets it to a negative value
    reversible: bool = False


@dataclass
class Move:
    """A box move: the box goes from one inner index to another."""

    from_index: int
    to_index: int
    sokoban_position: int = 0
    kill: bool = False
    base: bool = False
    pull: bool = False
    attr: MoveAttr = field(default_factory=MoveAttr)


class Board:
    """A rectangular grid of cell flags.

    Squares outside the grid read as empty space.  The inner squares are
    numbered row by row; that number is the square's index.
    """

    def __init__(self, rows: Iterable[Iterable[int]]):
        grid = [[int(value) for value in row] for row in rows]
        self.height = len(grid)
        self.width = max((len(row) for row in grid), default=0)
        if self.height > MAX_SIZE or self.width > MAX_SIZE:
            raise ValueError(
                f"board of {self.height}x{self.width} exceeds {MAX_SIZE}x{MAX_SIZE}"
            )
        for row in grid:
            row.extend([0] * (self.width - len(row)))
        self._grid = grid
        self._inner: tuple[tuple[int, int], ...] | None = None
        self._index: dict[tuple[int, int], int] = {}
        self._inner_anchored = False

    def __getitem__(self, pos: tuple[int, int]) -> int:
        y, x = pos
        if 0 <= y < self.height and 0 <= x < self.width:
            return self._grid[y][x]
        return 0

    def __setitem__(self, pos: tuple[int, int], value: int) -> None:
        y, x = pos
        if not (0 <= y < self.height and 0 <= x < self.width):
            raise IndexError(f"square ({y}, {x}) is outside the board")
        value = int(value)
        old = self._grid[y][x]
        self._grid[y][x] = value
        changed = old ^ value
        if changed & Cell.WALL or (
            value & Cell.SOKOBAN and not self._inner_anchored
        ):
            self._inner = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._grid == other._grid

    def __repr__(self) -> str:
        return f"Board(height={self.height}, width={self.width})"

    @property
    def rows(self) -> tuple[tuple[int, ...], ...]:
        return tuple(tuple(row) for row in self._grid)

    def copy(self) -> "Board":
        """Return an independent copy of the board."""
        return Board(self._grid)

    def cells(self) -> Iterator[tuple[int, int, int]]:
        """Yield (y, x, value) for every square, row by row."""
        for y, row in enumerate(self._grid):
            for x, value in enumerate(row):
                yield y, x, value

    def _find_sokoban(self) -> tuple[int, int] | None:
        for y, x, value in self.cells():
            if value & Cell.SOKOBAN:
                return y, x
        return None

    def _flood(self, starts: Iterable[tuple[int, int]], blocked: int) -> set[tuple[int, int]]:
        seen = set()
        queue = deque()
        for start in starts:
            if start not in seen:
                seen.add(start)
                queue.append(start)
        while queue:
            y, x = queue.popleft()
            for dy, dx in zip(DELTA_Y, DELTA_X):
                ny, nx = y + dy, x + dx
                if not (0 <= ny < self.height and 0 <= nx < self.width):
                    continue
                if (ny, nx) in seen or self._grid[ny][nx] & blocked:
                    continue
                seen.add((ny, nx))
                queue.append((ny, nx))
        return seen

    def inner_squares(self) -> tuple[tuple[int, int], ...]:
        """Return the squares inside the walls, row by row.

        With a player on the board these are the squares it could reach if
        no box were in the way; without one, the non-wall squares that are
        not connected to the board edge.
        """
        if self._inner is None:
            sokoban = self._find_sokoban()
            if sokoban is not None:
                region = self._flood([sokoban], Cell.WALL)
                self._inner_anchored = True
            else:
                border = [
                    (y, x)
                    for y, x, value in self.cells()
                    if (y in (0, self.height - 1) or x in (0, self.width - 1))
                    and not value & Cell.WALL
                ]
                outside = self._flood(border, Cell.WALL)
                region = {
                    (y, x)
                    for y, x, value in self.cells()
                    if not value & Cell.WALL and (y, x) not in outside
                }
                self._inner_anchored = False
            self._inner = tuple(sorted(region))
            self._index = {pos: i for i, pos in enumerate(self._inner)}
        return self._inner

    def index_of(self, y: int, x: int) -> int:
        """Return the index of an inner square."""
        self.inner_squares()
        try:
            return self._index[(y, x)]
        except KeyError:
            raise ValueError(f"square ({y}, {x}) is not an inner square") from None

    def position_of(self, index: int) -> tuple[int, int]:
        """Return the (y, x) of an inner index."""
        inner = self.inner_squares()
        if not 0 <= index < len(inner):
            raise IndexError(f"index {index} is out of range")
        return inner[index]

    def box_positions(self) -> list[tuple[int, int]]:
        return [(y, x) for y, x, value in self.cells() if value & Cell.BOX]

    def target_positions(self) -> list[tuple[int, int]]:
        return [(y, x) for y, x, value in self.cells() if value & Cell.TARGET]

    def sokoban_position(self) -> tuple[int, int]:
        """Return the first square, row by row, that holds the player."""
        pos = self._find_sokoban()
        if pos is None:
            raise ValueError("no sokoban on board")
        return pos

    def without_boxes(self) -> "Board":
        result = self.copy()
        for y, x, value in self.cells():
            if value & Cell.BOX:
                result[y, x] = value & ~Cell.BOX
        return result

    def without_sokoban(self) -> "Board":
        result = self.copy()
        for y, x, value in self.cells():
            if value & Cell.SOKOBAN:
                result[y, x] = value & ~Cell.SOKOBAN
        return result

    def expand_sokoban_cloud(self) -> None:
        """Mark every square the player can walk to as holding the player."""
        starts = [(y, x) for y, x, value in self.cells() if value & Cell.SOKOBAN]
        for y, x in self._flood(starts, OCCUPIED):
            self._grid[y][x] |= Cell.SOKOBAN