# festsolve

Building blocks for Sokoban solvers: reading and showing levels, modelling
boards, finding where a box can be pushed or pulled, measuring how far a
position is from its goal with minimum-cost matchings, finding boxes that
block other boxes, and keeping a plan of the order in which boxes are parked.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Command line

The package installs one command, `festsolve-show`, which reads a level
from a level file (`.sok` or plain text, one or more levels per file,
numbered from 1) and shows it in the terminal with ANSI colours:

```
festsolve-show LEVELS.sok --level 1
festsolve-show LEVELS.sok --level 3 --plain
```

Options:

- `level_set` – a level file, or, if the name holds no `.`, `/` or `\`, the
  name of a set looked up as `DIR/levels/NAME.sok` (default `XSokoban`).
- `-l`, `--level` – one-based level number (default 1).
- `-d`, `--dir` – base directory for named level sets (default `.`).
- `--plain` – print the level as plain level text instead of in colour.

The command prints `Level N: TITLE` followed by the board. It exits with
status 1 if the file cannot be read, the level does not exist, or the level
is too large (more than 50 rows or columns).

## Library overview

- `festsolve.board` – `Board`, a grid of `Cell` flags (`WALL`, `BOX`,
  `TARGET`, `SOKOBAN`, `BASE`, `DEADLOCK_ZONE`). Squares outside the grid
  read as empty. Inner squares are numbered row by row; `index_of()` and
  `position_of()` convert between indices and `(y, x)`. Other helpers:
  `cells()`, `inner_squares()`, `box_positions()`, `target_positions()`,
  `sokoban_position()`, `without_boxes()`, `without_sokoban()`,
  `expand_sokoban_cloud()` and `copy()`. `Move` and `MoveAttr` describe a
  single box move; `SearchMode` names the search variants.
- `festsolve.levels` – `parse_levels()` turns a level collection into a list
  of `Level` records (number, title, board, and a fail reason when the level
  is too large, in which case its board is `None`). `load_level()` reads one
  level from a file and raises `LevelError` (or `ValueError` for a number
  below 1). Also `board_from_text()`, `board_to_text()`, `render_board()`,
  `color_code()` and the line tests `is_sokoban_line()`, `is_empty_row()`,
  `has_only_legal_characters()` and `has_whitespaces()`.
- `festsolve.holes` – target holes (targets with walls on three sides,
  found repeatedly as holes are filled) and semi holes (targets with walls on
  two adjacent sides): `is_target_hole()`, `find_target_holes()`,
  `find_semi_holes()`, `fill_target_holes()`.
- `festsolve.hungarian` – minimum-cost assignment. `solve_assignment(cost)`
  solves a square cost matrix and returns a `HungarianSolution` (potentials,
  matching and weight). `HungarianSolver` remembers the last problem solved
  from scratch and reuses it when the next matrix differs in one row.
- `festsolve.match_distance` – `match_distance()`, `base_distance()` and
  `rev_distance()` return the matching weight of a board and a list of the
  weights after each given move, from a table of push distances between
  inner indices.
- `festsolve.graph` – `PushGraph`, the graph of (box square, player side)
  vertices on a board without boxes, with shift, push and pull edges and
  breadth-first `iterate()`, `mark_reversible()`, `box_moves()` and
  `targets_of_place()`. The functions `find_sources_of_group()`,
  `find_targets_of_group()` and `distance_from_group()` work on sets of
  `(y, x)` squares.
- `festsolve.hotspot` – `HotspotTable`, built once per level, records which
  squares cut other squares off targets. `find_hotspots()`, `score()` and
  `double_blocking()` query it; with a `time_budget` the build may stop
  early and leave the table empty (`aborted` is then true).
- `festsolve.park_order` – `ParkingPlan`, a list of `ParkStep`s, with
  `recompute_until()`, `fix_consecutive_pushes()`,
  `move_mandatory_boxes_to_beginning()`, `keep_only_permanent()`,
  `score_parked_boxes()`, `next_parking_place()`, `overlap_score()` and
  `render()`. `plan_from_moves()` builds a plan from the final position of a
  pull search and the pulls that led to it.
- `festsolve.heuristics` – `PullCandidate` and `BasePriority` with their
  comparisons `is_better_pull_candidate()` and `is_better_base_priority()`,
  `kill_zone()`, `bases_scc()` (the largest group of mutually reachable
  bases) and `unreachable_area_contains()`.

## Example

```python
from festsolve.levels import parse_levels
from festsolve.hungarian import solve_assignment

with open("LEVELS.sok") as handle:
    level = parse_levels(handle.read())[0]
if level.board is not None:
    print(len(level.board.box_positions()), "boxes")

solution = solve_assignment([[4, 1, 3], [2, 0, 5], [3, 2, 2]])
print(solution.weight)  # 5
```

## What the package does not do

The package does not solve levels. It has no search driver, no deadlock
detection beyond what is listed above, no scoring of positions for a
search, and no command that searches for or writes out a solution; the
only command shows a level.