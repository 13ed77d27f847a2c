"""Reading, writing and displaying Sokoban levels in the .sok text format."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from festsolve.board import MAX_SIZE, Board, Cell

LEGAL_CHARACTERS = "_- #$.*@+"
TOO_BIG = "Size is too big"

_CHAR_TO_CELL = {
    "_": Cell.SPACE,
    "-": Cell.SPACE,
    " ": Cell.SPACE,
    "#": Cell.WALL,
    "$": Cell.BOX,
    ".": Cell.TARGET,
    "*": Cell.BOX | Cell.TARGET,
    "@": Cell.SOKOBAN,
    "+": Cell.SOKOBAN | Cell.TARGET,
}

_CELL_TO_CHAR = {
    int(Cell.SPACE): " ",
    int(Cell.WALL): "#",
    int(Cell.BOX): "$",
    int(Cell.TARGET): ".",
    int(Cell.BOX | Cell.TARGET): "*",
    int(Cell.SOKOBAN): "@",
    int(Cell.SOKOBAN | Cell.TARGET): "+",
}

BLACK = 0
BLUE = 1
GREEN = 2
CYAN = 3
RED = 4
MAGENTA = 5
BROWN = 6
LIGHTGRAY = 7
DARKGRAY = 8
LIGHTBLUE = 9
LIGHTGREEN = 10
LIGHTCYAN = 11
LIGHTRED = 12
LIGHTMAGENTA = 13
YELLOW = 14
WHITE = 15

_TERMINAL_CODES = {
    BLACK: 30,
    BLUE: 34,
    GREEN: 32,
    CYAN: 36,
    RED: 31,
    MAGENTA: 35,
    BROWN: 33,
    LIGHTGRAY: 37,
    DARKGRAY: 90,
    LIGHTBLUE: 94,
    LIGHTGREEN: 92,
    LIGHTCYAN: 96,
    LIGHTRED: 91,
    LIGHTMAGENTA: 95,
    YELLOW: 93,
    WHITE: 97,
}

BOX_GLYPH = "\u25ae"

_W, _B, _T, _S, _BASE = Cell.WALL, Cell.BOX, Cell.TARGET, Cell.SOKOBAN, Cell.BASE
_RENDER = {
    0: (WHITE, WHITE, " "),
    int(_W): (CYAN, CYAN, " "),
    int(_B): (DARKGRAY, WHITE, BOX_GLYPH),
    int(_T): (RED, RED, " "),
    int(_S): (BLUE, WHITE, "."),
    int(_T | _B): (DARKGRAY, RED, BOX_GLYPH),
    int(_T | _S): (BLUE, RED, "."),
    int(_BASE): (BLUE, BLUE, " "),
    int(_BASE | _S): (LIGHTBLUE, BLUE, "."),
    int(_BASE | _B): (DARKGRAY, BLUE, BOX_GLYPH),
    int(_BASE | _T | _B): (DARKGRAY, MAGENTA, BOX_GLYPH),
    int(_BASE | _T): (DARKGRAY, MAGENTA, " "),
    int(_BASE | _T | _S): (LIGHTBLUE, MAGENTA, "."),
}


class LevelError(Exception):
    """A level file cannot be read or does not hold the requested level."""


@dataclass
class Level:
    """One level of a level file; board is None when the level is too large."""

    number: int
    title: str
    board: Board | None
    fail_reason: str | None = None


def has_only_legal_characters(s: str) -> bool:
    return all(c in LEGAL_CHARACTERS for c in s)


def has_whitespaces(s: str) -> bool:
    return " " in s or "\t" in s


def is_empty_row(s: str) -> bool:
    """A row without walls used as a decoration inside some levels."""
    if len(s) < 5:
        return False
    return has_only_legal_characters(s) and not has_whitespaces(s)


def is_sokoban_line(s: str) -> bool:
    if len(s) < 3:
        return False
    if "#" not in s and not is_empty_row(s):
        return False
    return has_only_legal_characters(s)


def board_from_text(rows: Iterable[str]) -> Board:
    """Build a board from level text rows; unknown characters become space."""
    rows = list(rows)
    width = max((len(row) for row in rows), default=0)
    cells = []
    for row in rows:
        for pos, char in enumerate(row):
            if ord(char) < 32:
                row = row[:pos]
                break
        row = row.ljust(width)
        cells.append([_CHAR_TO_CELL.get(char, Cell.SPACE) for char in row])
    return Board(cells)


def _split_lines(text: str) -> list[str]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line.rstrip("\r\n") for line in lines]


def parse_levels(text: str) -> list[Level]:
    """Parse every level of a .sok or .txt level collection."""
    levels: list[Level] = []
    rows: list[str] = []
    in_level = False
    ok = True
    reason: str | None = None
    # The pending title is never reset between levels; each level gets the
    # title it would get if it were the one being loaded.
    title = "None"

    def finish() -> None:
        board = board_from_text(rows) if ok else None
        levels.append(Level(len(levels) + 1, title, board, None if ok else reason))

    for line in _split_lines(text):
        if "'" in line:
            title = line

        if is_sokoban_line(line):
            if not in_level:
                in_level = True
                rows = []
                ok = True
                reason = None
            if len(line) >= MAX_SIZE:
                line = line[: MAX_SIZE - 1]
                ok = False
                reason = TOO_BIG
            if len(rows) < MAX_SIZE - 1:
                rows.append(line)
            else:
                ok = False
                reason = TOO_BIG
        else:
            if in_level:
                if line.startswith(";"):
                    title = line[1:].lstrip(" ")
                finish()
            in_level = False

        if levels and line.startswith("Title:"):
            levels[-1].title = line[7:]
        if levels and line.startswith("Title :"):
            levels[-1].title = line[8:]

    if in_level:
        finish()
    return levels


def load_level(path: str | Path, number: int) -> Level:
    """Load level `number` (one-based) from a level file."""
    if number <= 0:
        raise ValueError("Level number must be positive")
    try:
        text = Path(path).read_bytes().decode("latin-1")
    except OSError as exc:
        raise LevelError(f"can't open {path}") from exc
    levels = parse_levels(text)
    if number > len(levels):
        raise LevelError(f"level {number} not found; {path} has {len(levels)} levels")
    return levels[number - 1]


def board_to_text(board: Board) -> str:
    """Write a board in level text; squares with other flags are left out."""
    lines = []
    for row in board.rows:
        lines.append("".join(_CELL_TO_CHAR.get(value, "") for value in row))
    return "".join(line + "\n" for line in lines)


def color_code(color: int, background: int) -> int:
    """Return the ANSI code of a color, as foreground (0) or background (1)."""
    try:
        return _TERMINAL_CODES[color] + background * 10
    except KeyError:
        raise ValueError("unsupported color") from None


def _set_color(foreground: int, background: int) -> str:
    return f"\x1b[{color_code(foreground, 0)};{color_code(background, 1)}m"


def render_board(board: Board) -> str:
    """Render a board as colored terminal text with coordinate headers."""
    out = ["  ", "".join(str(i % 10) for i in range(board.width)), "\n"]
    for y, row in enumerate(board.rows):
        out.append(f"{y % 10} ")
        for value in row:
            if value & Cell.DEADLOCK_ZONE:
                value = (value & ~Cell.DEADLOCK_ZONE) | Cell.BASE
            try:
                fg, bg, glyph = _RENDER[value]
            except KeyError:
                raise ValueError(f"unknown board value {value}") from None
            out.append(_set_color(fg, bg))
            out.append(glyph)
        out.append(_set_color(WHITE, BLACK))
        out.append("\n")
    out.append(_set_color(WHITE, BLACK))
    out.append("\n")
    return "".join(out)


def _resolve_level_path(name: str, directory: str) -> Path:
    if "." in name or "\\" in name or "/" in name:
        return Path(name)
    return Path(directory) / "levels" / f"{name}.sok"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Show a level from a level file.")
    parser.add_argument("level_set", nargs="?", default="XSokoban",
                        help="level file, or the name of a set under DIR/levels")
    parser.add_argument("-l", "--level", type=int, default=1, help="one-based level number")
    parser.add_argument("-d", "--dir", default=".", help="base directory of level sets")
    parser.add_argument("--plain", action="store_true", help="print plain level text")
    args = parser.parse_args(argv)

    path = _resolve_level_path(args.level_set, args.dir)
    try:
        level = load_level(path, args.level)
    except (LevelError, ValueError) as exc:
        print(exc, file=sys.stderr)
        return 1

    print(f"Level {level.number}: {level.title}")
    if level.board is None:
        print(level.fail_reason or TOO_BIG)
        return 1
    sys.stdout.write(board_to_text(level.board) if args.plain else render_board(level.board))
    return 0


if __name__ == "__main__":
    sys.exit(main())