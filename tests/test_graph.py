import pytest

from festsolve.board import Board
from festsolve.graph import (
    INFINITY,
    PushGraph,
    distance_from_group,
    find_sources_of_group,
    find_targets_of_group,
)
from festsolve.levels import board_from_text

CORRIDOR = ["#######", "#@    #", "#######"]
ROOM3 = ["#####", "#   #", "# @ #", "#   #", "#####"]
ROOM5 = [
    "#######",
    "#     #",
    "#     #",
    "#  @  #",
    "#     #",
    "#     #",
    "#######",
]
PILLARS = ["#######", "#     #", "# # # #", "#  @  #", "#######"]
HOLE = ["#####", "## ##", "#   #", "# @ #", "#####"]
HOLE_WITH_PLAYER = ["#####", "##@##", "#   #", "#   #", "#####"]


def board(rows) -> Board:
    return board_from_text(rows)


def test_boxes_in_board_are_rejected():
    with pytest.raises(ValueError, match="boxes"):
        PushGraph(board(["#####", "#@$ #", "#####"]), False)


def test_four_vertices_per_inner_square():
    b = board(ROOM3)
    graph = PushGraph(b, False)
    assert len(graph.vertices) == 4 * len(b.inner_squares())


def test_wall_sides_are_inactive():
    b = board(CORRIDOR)
    graph = PushGraph(b, False)
    i = b.index_of(1, 3)
    actives = [graph.vertices[4 * i + d].active for d in range(4)]
    assert actives == [False, True, False, True]


def test_shift_edges_are_symmetric():
    b = board(PILLARS)
    graph = PushGraph(b, False)
    for i in range(len(b.inner_squares())):
        for a in range(4):
            for c in range(4):
                forward = graph.vertices[4 * i + a].shift[c] == 4 * i + c
                backward = graph.vertices[4 * i + c].shift[a] == 4 * i + a
                assert forward == backward


def test_box_at_corridor_end_cannot_move():
    assert find_targets_of_group(board(CORRIDOR), {(1, 1)}) == {(1, 1)}


def test_group_is_part_of_its_targets_and_sources():
    b = board(PILLARS)
    group = {(1, 1), (3, 5)}
    assert group <= find_targets_of_group(b, group)
    assert group <= find_sources_of_group(b, group)


@pytest.mark.parametrize("rows", [CORRIDOR, ROOM3, PILLARS])
def test_sources_and_targets_are_dual(rows):
    b = board(rows)
    squares = b.inner_squares()
    for goal in squares:
        sources = find_sources_of_group(b, {goal})
        for start in squares:
            reaches = goal in find_targets_of_group(b, {start})
            assert (start in sources) == reaches


def test_targets_of_place_matches_group_targets():
    b = board(PILLARS)
    graph = PushGraph(b, False)
    for y, x in b.inner_squares():
        assert graph.targets_of_place(y, x) == find_targets_of_group(b, {(y, x)})


def test_unknown_square_in_group_is_rejected():
    with pytest.raises(ValueError):
        find_targets_of_group(board(CORRIDOR), {(0, 0)})


def test_distance_agrees_with_reachability():
    b = board(PILLARS)
    group = {(3, 3)}
    dist = distance_from_group(b, group, False)
    targets = find_targets_of_group(b, group)
    for pos, d in dist.items():
        assert (d < INFINITY) == (pos in targets)


def test_clear_weight_and_reset():
    b = board(ROOM3)
    graph = PushGraph(b, False)
    center = b.index_of(2, 2)
    graph.clear_weight_around_cell(center)
    assert graph.weight_around_cell(center) == 0
    graph.iterate(False)
    assert graph.weight_around_cell(b.index_of(1, 2)) < INFINITY
    graph.reset_weights()
    assert all(v.weight == INFINITY and v.src == -1 for v in graph.vertices)


def test_box_moves_follow_reachability():
    b = board(ROOM3)
    graph = PushGraph(b, False)
    center = b.index_of(2, 2)
    graph.clear_weight_around_cell(center)
    graph.iterate(False)
    moves = graph.box_moves(center)
    targets = find_targets_of_group(b, {(2, 2)})
    destinations = {b.position_of(m.to_index) for m in moves}
    assert destinations
    assert destinations <= targets
    assert (2, 2) not in destinations
    for m in moves:
        assert m.from_index == center
        assert graph.vertices[4 * m.to_index + m.sokoban_position].weight < INFINITY

    limited = graph.box_moves(center, {(1, 2)})
    assert (1, 2) not in {b.position_of(m.to_index) for m in limited}
    assert len(limited) < len(moves)


def test_reversible_moves():
    b = board(ROOM5)
    graph = PushGraph(b, False)
    center = b.index_of(3, 3)
    graph.clear_weight_around_cell(center)
    graph.mark_reversible()
    graph.iterate(False)
    moves = graph.box_moves(center)
    assert any(m.attr.reversible for m in moves)
    for m in moves:
        if m.attr.reversible:
            assert (3, 3) in find_targets_of_group(b, {b.position_of(m.to_index)})
    corner_moves = [m for m in moves if b.position_of(m.to_index) == (1, 1)]
    assert corner_moves
    assert not any(m.attr.reversible for m in corner_moves)


def test_hole_without_player_becomes_inactive():
    b = board(HOLE)
    graph = PushGraph(b, False)
    vertex = graph.vertices[4 * b.index_of(2, 2) + 0]
    assert vertex.active
    graph.make_holes_inactive(b)
    assert not vertex.active


def test_hole_with_player_stays_active():
    b = board(HOLE_WITH_PLAYER)
    graph = PushGraph(b, False)
    vertex = graph.vertices[4 * b.index_of(2, 2) + 0]
    graph.make_holes_inactive(b)
    assert vertex.active


def test_pull_graph_sources_match_function():
    b = board(PILLARS)
    graph = PushGraph(b, True)
    start = b.index_of(1, 1)
    graph.clear_weight_around_cell(start)
    graph.iterate()
    reached = {
        pos
        for i, pos in enumerate(b.inner_squares())
        if graph.weight_around_cell(i) < INFINITY
    }
    reached.add((1, 1))
    assert reached == find_sources_of_group(b, {(1, 1)})