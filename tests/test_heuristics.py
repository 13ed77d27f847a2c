import pytest

from festsolve.board import Cell
from festsolve.heuristics import (
    BIG_DISTANCE,
    BasePriority,
    PullCandidate,
    bases_scc,
    is_better_base_priority,
    is_better_pull_candidate,
    kill_zone,
    unreachable_area_contains,
)
from festsolve.levels import board_from_text


def _corridor():
    return board_from_text(["#########", "#       #", "#########"])


def _distances(n):
    return [[abs(i - j) for j in range(n)] for i in range(n)]


def _room(bases=(), boxes=()):
    board = board_from_text(["#######", "#     #", "#     #", "#     #", "#######"])
    for pos in bases:
        board[pos] = board[pos] | Cell.BASE
    for pos in boxes:
        board[pos] = board[pos] | Cell.BOX
    return board


def test_pull_candidate_ordering():
    old = PullCandidate(kill_zone=0, connectivity=2, room_connectivity=1, pull_len=3, target_hole=0)
    assert is_better_pull_candidate(old, PullCandidate(0, 2, 1, 3, 0)) is False
    assert is_better_pull_candidate(old, PullCandidate(1, 2, 1, 3, 0)) is True
    assert is_better_pull_candidate(old, PullCandidate(1, 2, 1, 3, 1)) is False
    assert is_better_pull_candidate(old, PullCandidate(0, 1, 1, 3, 0)) is True
    assert is_better_pull_candidate(old, PullCandidate(0, 2, 2, 3, 0)) is False
    assert is_better_pull_candidate(old, PullCandidate(0, 2, 1, 4, 0)) is True


def test_default_pull_candidate_loses_to_anything_without_hole():
    assert is_better_pull_candidate(PullCandidate(), PullCandidate(target_hole=1, kill_zone=0))


def test_base_priority_ordering():
    old = BasePriority(hole=1, connectivity=2, dist=3)
    assert is_better_base_priority(BasePriority(0, 5, 0), old) is True
    assert is_better_base_priority(BasePriority(1, 1, 0), old) is True
    assert is_better_base_priority(BasePriority(1, 2, 4), old) is True
    assert is_better_base_priority(BasePriority(1, 2, 3), old) is False
    assert is_better_base_priority(BasePriority(2, 0, 9), old) is False


def test_kill_zone_is_first_far_square():
    board = _corridor()
    assert kill_zone(board, {(1, 1)}, _distances(7)) == {(1, 1 + BIG_DISTANCE)}


def test_kill_zone_empty_when_bases_cover_everything():
    board = _corridor()
    assert kill_zone(board, {(1, 1), (1, 7)}, _distances(7)) == set()


def test_kill_zone_without_bases_holds_one_square():
    board = _corridor()
    zone = kill_zone(board, set(), _distances(7))
    assert zone == {board.position_of(0)}


def test_bases_scc_keeps_largest_mutual_group():
    board = _room(bases=[(1, 1), (2, 2), (2, 4)])
    assert bases_scc(board) == {(2, 2), (2, 4)}


def test_bases_scc_ignores_bases_under_boxes():
    board = _room(bases=[(1, 1), (2, 2), (2, 4)], boxes=[(2, 4)])
    assert bases_scc(board) == {(1, 1), (2, 2)}


def test_bases_scc_single_and_none():
    assert bases_scc(_room(bases=[(2, 3)])) == {(2, 3)}
    assert bases_scc(_room()) == set()


def test_bases_scc_result_is_subset_of_bases():
    bases = {(1, 1), (1, 5), (3, 1), (3, 5), (2, 3)}
    result = bases_scc(_room(bases=bases))
    assert result
    assert result <= bases


def test_unreachable_area_contains():
    board = _corridor()
    board[1, 1] = Cell.SOKOBAN
    board.expand_sokoban_cloud()
    board[1, 7] = board[1, 7] & ~Cell.SOKOBAN
    assert unreachable_area_contains(board, {(1, 3)}) is False
    assert unreachable_area_contains(board, {(1, 3), (1, 7)}) is True
    assert unreachable_area_contains(board, set()) is False


@pytest.mark.parametrize("pos", [(1, 2), (1, 6)])
def test_unreachable_area_without_player(pos):
    assert unreachable_area_contains(_corridor(), {pos}) is True