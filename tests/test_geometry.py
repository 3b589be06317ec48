import itertools

from hexmap.shared.geometry import EPSILON_A, EPSILON_B, HexGeometry, distance, is_line_of_sight, trace_line
from hexmap.shared.hex_math import CubeCoordinate, cube_lerp, cube_round
from hex_test_utils import at, filled_grid


def coords(tiles):
    return [(t.x, t.y, t.z) for t in tiles]


# --- distance ---

def test_distance_symmetric_and_zero(open_grid):
    tiles = list(open_grid)
    for a, b in itertools.combinations(tiles, 2):
        assert distance(a, b) == distance(b, a)
    for a in tiles:
        assert distance(a, a) == 0


def test_distance_adds_up_along_a_straight_line(open_grid):
    a, b, c = at(open_grid, 0, 3), at(open_grid, 2, 3), at(open_grid, 5, 3)
    assert distance(a, c) == distance(a, b) + distance(b, c) == 5


# --- trace_line ---

def test_trace_single_tile(open_grid):
    a = at(open_grid, 3, 3)
    line = trace_line(open_grid, a, a)
    assert len(line) == 1
    assert line[0] is a


def test_trace_straight_row(walled_row):
    line = trace_line(walled_row, at(walled_row, 0, 0), at(walled_row, 4, 0))
    assert line == [at(walled_row, col, 0) for col in range(5)]


def test_trace_includes_endpoints_for_every_pair():
    grid = filled_grid(5, 5)
    for a, b in itertools.permutations(list(grid), 2):
        line = trace_line(grid, a, b)
        assert line[0] is a
        assert line[-1] is b
        # Lines hugging the map edge may round into cells off the map
        assert len(line) <= distance(a, b) + 1


def test_trace_away_from_the_edge_has_no_gaps():
    grid = filled_grid(13, 13)
    inner = [at(grid, col, row) for row in range(4, 9) for col in range(4, 9)]
    for a, b in itertools.combinations(inner, 2):
        line = trace_line(grid, a, b)
        assert len(line) == distance(a, b) + 1
        assert line[0] is a and line[-1] is b


def test_trace_skips_missing_cells():
    grid = filled_grid(5, 1, missing={(2, 0)})
    line = trace_line(grid, at(grid, 0, 0), at(grid, 4, 0))
    assert coords(line) == [(0, 0, 0), (0, -1, 1), (0, -3, 3), (0, -4, 4)]


def test_trace_through_an_edge_midpoint(open_grid):
    # (0,0,0) -> (1,-2,1) crosses the edge between (1,-1,0) and (0,-1,1)
    a, b = at(open_grid, 0, 0), at(open_grid, 1, 1)
    assert coords(trace_line(open_grid, a, b)) == [(0, 0, 0), (1, -1, 0), (1, -2, 1)]


# --- is_line_of_sight ---

def test_sight_to_self(walled_row):
    a = at(walled_row, 2, 0)
    assert is_line_of_sight(walled_row, a, a)


def test_occlusion_in_a_row(walled_row):
    t = [at(walled_row, col, 0) for col in range(5)]
    assert not is_line_of_sight(walled_row, t[0], t[4])
    assert not is_line_of_sight(walled_row, t[4], t[0])
    assert not is_line_of_sight(walled_row, t[0], t[3])
    assert is_line_of_sight(walled_row, t[0], t[1])
    # The wall itself is visible; only tiles beyond it are hidden
    assert is_line_of_sight(walled_row, t[0], t[2])
    assert is_line_of_sight(walled_row, t[3], t[4])


def test_opaque_endpoints_never_block():
    grid = filled_grid(5, 1, opaque={(0, 0), (4, 0)})
    assert is_line_of_sight(grid, at(grid, 0, 0), at(grid, 4, 0))


def test_missing_cells_do_not_block():
    grid = filled_grid(5, 1, missing={(2, 0)})
    assert is_line_of_sight(grid, at(grid, 0, 0), at(grid, 4, 0))


def test_edge_ambiguity_needs_both_sides_opaque():
    # Sight line from (0,0,0) to (1,-2,1) runs along the edge shared by
    # (1,-1,0) at offset (0,1) and (0,-1,1) at offset (1,0)
    one_side = filled_grid(4, 4, opaque={(0, 1)})
    other_side = filled_grid(4, 4, opaque={(1, 0)})
    both_sides = filled_grid(4, 4, opaque={(0, 1), (1, 0)})

    for grid in (one_side, other_side):
        a, b = at(grid, 0, 0), at(grid, 1, 1)
        assert is_line_of_sight(grid, a, b)
        assert is_line_of_sight(grid, b, a)

    a, b = at(both_sides, 0, 0), at(both_sides, 1, 1)
    assert not is_line_of_sight(both_sides, a, b)


def test_edge_ambiguity_rays_split_across_the_edge():
    a, b = CubeCoordinate(0, 0, 0), CubeCoordinate(1, -2, 1)
    for eps, expected in ((EPSILON_A, CubeCoordinate(1, -1, 0)), (EPSILON_B, CubeCoordinate(0, -1, 1))):
        start = tuple(c + e for c, e in zip(a.as_tuple(), eps))
        end = tuple(c + e for c, e in zip(b.as_tuple(), eps))
        assert cube_round(*cube_lerp(start, end, 0.5)) == expected


# --- HexGeometry ---

def test_bound_geometry_matches_functions(walled_row):
    geometry = HexGeometry(walled_row)
    a, b = at(walled_row, 0, 0), at(walled_row, 4, 0)
    assert geometry.get(CubeCoordinate(0, -2, 2)) is at(walled_row, 2, 0)
    assert geometry.distance(a, b) == 4
    assert geometry.trace_line(a, b) == trace_line(walled_row, a, b)
    assert geometry.is_line_of_sight(a, b) is False


def test_visible_from_stops_at_the_wall(walled_row):
    geometry = HexGeometry(walled_row)
    seen = geometry.visible_from(at(walled_row, 0, 0), 4)
    assert sorted(coords(seen)) == sorted([(0, 0, 0), (0, -1, 1), (0, -2, 2)])


def test_visible_from_radius_zero(open_grid):
    origin = at(open_grid, 3, 3)
    assert HexGeometry(open_grid).visible_from(origin, 0) == [origin]


def test_visible_from_open_ground(open_grid):
    origin = at(open_grid, 2, 2)
    assert len(HexGeometry(open_grid).visible_from(origin, 1)) == 7
