"""Parking plans: the order in which boxes are put on their final squares.

A plan is a list of steps.  Each step puts a box on the square ``to_index``
and says where that box came from.  ``from_index`` is an inner index, or
``FROM_INITIAL`` for a box that is already in place at the start, or
``FROM_SINK`` for a box that comes from no particular square.  ``until`` is
the number of the later step that moves the box away again, or
``UNTIL_END`` when the box stays to the end.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Sequence

from festsolve.board import MAX_SOL_LEN, Board, Cell, Move

FROM_INITIAL = -2
FROM_SINK = -1
UNTIL_END = -1


@dataclass
class ParkStep:
    """One step of a parking plan."""

    from_index: int
    to_index: int
    until: int = UNTIL_END

    @property
    def permanent(self) -> bool:
        return self.until == UNTIL_END

    @property
    def initial(self) -> bool:
        return self.from_index == FROM_INITIAL


class ParkingPlan:
    """An ordered list of parking steps with the operations that refine it."""

    def __init__(self, steps: Iterable[ParkStep] = ()):
        self.steps: list[ParkStep] = [replace(step) for step in steps]

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self):
        return iter(self.steps)

    def __repr__(self) -> str:
        return f"ParkingPlan({self.steps!r})"

    def recompute_until(self) -> None:
        """Set each step's ``until`` to the first later step that moves its box."""
        steps = self.steps
        for step in steps:
            step.until = UNTIL_END
        for i, step in enumerate(steps):
            for j in range(i + 1, len(steps)):
                if steps[j].from_index == step.to_index:
                    step.until = j
                    break

    def fix_consecutive_pushes(self) -> bool:
        """Merge a step into the next one when the next moves the same box.

        Steps that move a box in place are dropped.  Returns whether the plan
        changed; ``until`` values are recomputed either way.
        """
        steps = self.steps
        fixed = False
        i = 0
        while i < len(steps) - 1:
            if steps[i].from_index == FROM_INITIAL:
                i += 1
                continue

            if steps[i].to_index == steps[i].from_index:
                del steps[i]
                i = 0
                fixed = True

            if i + 1 < len(steps) and steps[i].to_index == steps[i + 1].from_index:
                steps[i].to_index = steps[i + 1].to_index
                del steps[i + 1]
                i = 0
                fixed = True

            i += 1

        self.recompute_until()
        return fixed

    def move_mandatory_boxes_to_beginning(self) -> None:
        """Put initial boxes that never move ahead of all other steps."""
        mandatory = [s for s in self.steps if s.initial and s.permanent]
        others = [s for s in self.steps if not (s.initial and s.permanent)]
        self.steps = mandatory + others

    def keep_only_permanent(self) -> None:
        """Forget intermediate moves; keep only the final squares of the boxes."""
        kept = []
        for step in self.steps:
            if step.permanent:
                if not step.initial:
                    step.from_index = FROM_SINK
                kept.append(step)
        self.steps = kept

    def _has_boxes(self, board: Board) -> list[bool]:
        return [bool(board[board.position_of(s.to_index)] & Cell.BOX) for s in self.steps]

    def _initial_count(self) -> int:
        return sum(1 for s in self.steps if s.initial)

    def _first_unpacked(self, has_box: list[bool], init_num: int) -> int:
        packed = len(self.steps)
        for i in range(len(self.steps) - 1, init_num - 1, -1):
            if has_box[i]:
                continue
            until = self.steps[i].until
            if until == UNTIL_END or until >= packed:
                packed = i
        return packed

    def score_parked_boxes(self, board: Board) -> int:
        """Number of plan steps that the board already fulfils."""
        has_box = self._has_boxes(board)
        init_num = self._initial_count()
        steps = self.steps

        missing = any(
            steps[i].permanent and not has_box[i] for i in range(init_num)
        )
        if missing:
            return sum(1 for i in range(init_num) if steps[i].permanent and has_box[i])

        packed = self._first_unpacked(has_box, init_num)
        good_init = sum(
            1 for i in range(init_num) if has_box[i] or steps[i].until < packed
        )
        return packed - (init_num - good_init)

    def next_parking_place(self, board: Board) -> int | None:
        """Index of the next square to park a box on, or None."""
        has_box = self._has_boxes(board)
        for step, boxed in zip(self.steps, has_box):
            if step.initial and step.permanent and not boxed:
                return None

        init_num = 0
        while init_num < len(self.steps) and self.steps[init_num].initial:
            init_num += 1

        packed = self._first_unpacked(has_box, init_num)
        if packed == len(self.steps):
            return None
        return self.steps[packed].to_index

    def overlap_score(self, board: Board) -> int:
        """Best number of plan squares holding boxes over all prefixes of the plan."""
        if not self.steps:
            return 0
        score = 0
        best = -1
        for step in self.steps:
            if board[board.position_of(step.to_index)] & Cell.BOX:
                score += 1
            if step.from_index >= 0:
                if board[board.position_of(step.from_index)] & Cell.BOX:
                    score -= 1
            best = max(best, score)
        return best

    def render(self, board: Board) -> str:
        """Draw the plan on the board: step k is shown as a letter."""
        inner = set(board.inner_squares())
        first_step: dict[int, int] = {}
        for k, step in enumerate(self.steps):
            first_step.setdefault(step.to_index, k)

        lines = []
        for y, row in enumerate(board.rows):
            chars = []
            for x, value in enumerate(row):
                wall = "#" if value & Cell.WALL else " "
                if (y, x) not in inner:
                    chars.append(wall)
                    continue
                k = first_step.get(board.index_of(y, x))
                if k is None:
                    chars.append(wall)
                elif k < 26:
                    chars.append(chr(ord("A") + k))
                else:
                    chars.append(chr(ord("a") + k - 26))
            lines.append("".join(chars))
        return "".join(line + "\n" for line in lines)


def plan_from_moves(final_board: Board, moves: Sequence[Move]) -> ParkingPlan:
    """Build a parking plan from a pull search.

    ``final_board`` is the position the pull search ended in and ``moves``
    the pulls that led there, in the order they were played.  The plan
    lists the boxes of ``final_board`` as initial boxes, then the pulls
    undone from last to first as pushes.
    """
    steps: list[ParkStep] = []
    for y in range(final_board.height - 1, -1, -1):
        for x in range(final_board.width - 1, -1, -1):
            if final_board[y, x] & Cell.BOX:
                steps.append(ParkStep(FROM_INITIAL, final_board.index_of(y, x)))

    for move in reversed(moves):
        source = move.from_index
        dest = FROM_SINK if move.base else move.to_index
        if source == dest:
            continue
        steps.append(ParkStep(dest, source))
        if len(steps) >= MAX_SOL_LEN:
            raise ValueError("plan is too long")

    plan = ParkingPlan(steps)
    plan.recompute_until()
    plan.fix_consecutive_pushes()
    plan.move_mandatory_boxes_to_beginning()
    return plan