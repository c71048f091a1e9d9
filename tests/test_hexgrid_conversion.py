import math

import pytest

from hexgrid import (
    ORIGIN,
    SQRT3,
    CubeCoord,
    InvalidCoordinate,
    LogicalPoint,
    center,
    corner_offsets,
    cube_round,
    distance,
    hex_polygon,
    hexes_within,
    nearest_coordinate,
)


def test_center_roundtrip():
    for q in range(-6, 7):
        for r in range(-6, 7):
            coord = CubeCoord.from_axial(q, r)
            assert nearest_coordinate(center(coord)) == coord


def test_nearest_coordinate_inside_hex():
    # Point slightly offset from the center should still map to the same hex
    coord = CubeCoord(2, 3, -5)
    c = center(coord)
    for dx, dy in ((0.3, 0.3), (-0.4, 0.2), (0.0, -0.8), (0.8, 0.0)):
        p = LogicalPoint(c.x + dx, c.y + dy)
        assert nearest_coordinate(p) == coord


def test_center_formula():
    c = center(CubeCoord(1, 0, -1))
    assert c.x == pytest.approx(1.5)
    assert c.y == pytest.approx(SQRT3 / 2)
    assert center(ORIGIN).x == 0 and center(ORIGIN).y == 0


def test_invalid_coordinate_rejected():
    with pytest.raises(InvalidCoordinate):
        CubeCoord(1, 1, 1)
    with pytest.raises(ValueError):
        CubeCoord(0, 0, 1)


def test_every_construction_path_keeps_sum_zero():
    coords = [CubeCoord.from_axial(3, -7), cube_round(0.4, 1.7, -2.1), cube_round(-2.49, 0.51, 1.98)]
    coords += [nearest_coordinate(LogicalPoint(x * 0.37, y * 0.41)) for x in range(-9, 9) for y in range(-9, 9)]
    for c in coords:
        assert c.q + c.r + c.s == 0


def test_cube_round_q_wins_tie_with_r():
    # q and r both sit half a step from an integer; q is rebuilt
    assert cube_round(0.5, 0.5, -1.0) == CubeCoord(0, 1, -1)


def test_nearest_coordinate_edge_midpoint_is_q_r_tie():
    # midpoint of the edge shared by (0, 1, -1) and (1, 0, -1): q and r are both
    # exactly half a step out, and rebuilding q picks (0, 1, -1)
    assert nearest_coordinate(LogicalPoint(0.75, SQRT3 * 0.75)) == CubeCoord(0, 1, -1)
    assert nearest_coordinate(LogicalPoint(-0.75, -SQRT3 * 0.75)) == CubeCoord(0, -1, 1)


def test_cube_round_largest_delta_rebuilt():
    assert cube_round(0.5, -0.25, -0.25) == ORIGIN
    assert cube_round(0.1, 0.7, -0.8) == CubeCoord(0, 1, -1)
    assert cube_round(0.2, -0.7, 0.5) == CubeCoord(0, -1, 1)


def test_cube_round_r_s_tie_rebuilds_s():
    assert cube_round(0.0, 0.5, -0.5) == CubeCoord(0, 1, -1)
    assert cube_round(0.0, -0.5, 0.5) == CubeCoord(0, -1, 1)


def test_cube_round_halves_round_away_from_zero():
    assert cube_round(2.5, -2.5, 0.0) == CubeCoord(3, -3, 0)


def test_corner_offsets_unit_radius():
    offsets = corner_offsets()
    assert len(offsets) == 6
    assert (offsets[0].x, offsets[0].y) == pytest.approx((1.0, 0.0))
    for v in offsets:
        assert math.hypot(v.x, v.y) == pytest.approx(1.0)
    assert corner_offsets() is offsets


def test_hex_polygon_corners_around_center():
    coord = CubeCoord(-1, 2, -1)
    c = center(coord)
    for p in hex_polygon(coord):
        assert math.hypot(p.x - c.x, p.y - c.y) == pytest.approx(1.0)


def test_neighbors_and_distance():
    c = CubeCoord(2, -1, -1)
    ns = c.neighbors()
    assert len(set(ns)) == 6
    assert all(distance(c, n) == 1 for n in ns)
    assert distance(ORIGIN, CubeCoord(3, -5, 2)) == 5


def test_hexes_within_counts():
    for radius in range(4):
        cells = list(hexes_within(ORIGIN, radius))
        assert len(cells) == 1 + 3 * radius * (radius + 1)
        assert len(set(cells)) == len(cells)
        assert all(distance(ORIGIN, c) <= radius for c in cells)
    with pytest.raises(ValueError):
        list(hexes_within(ORIGIN, -1))


def test_coordinates_are_keys_and_ordered():
    a = CubeCoord(0, 1, -1)
    b = CubeCoord.from_axial(0, 1)
    assert a == b and hash(a) == hash(b)
    assert {a: "x"}[b] == "x"
    assert sorted([CubeCoord(1, 0, -1), CubeCoord(0, 1, -1), CubeCoord(0, 0, 0)]) == [
        CubeCoord(0, 0, 0), CubeCoord(0, 1, -1), CubeCoord(1, 0, -1)
    ]
    assert a.axial() == (0, 1)
