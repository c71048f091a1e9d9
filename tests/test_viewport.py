import numpy as np
import pytest

from hexgrid import CubeCoord, LogicalPoint, LogicalVector, center
from viewport import Bounds, DisplayPoint, NonInvertibleTransform, SpaceTransform


def test_transform_from_bounds():
    t = SpaceTransform.for_bounds(Bounds(800, 600))
    assert t.scale == pytest.approx(30.0)
    assert t.origin == DisplayPoint(400, 300)


def test_forward_and_inverse():
    t = SpaceTransform.for_bounds(Bounds(640, 480))
    p = LogicalPoint(-2.25, 3.5)
    d = t.to_display(p)
    assert (d.x, d.y) == pytest.approx((320 - 2.25 * 24, 240 + 3.5 * 24))
    back = t.to_logical(d)
    assert (back.x, back.y) == pytest.approx((p.x, p.y))
    v = t.to_display_vector(LogicalVector(1.0, -0.5))
    assert (v.x, v.y) == pytest.approx((24.0, -12.0))


def test_zero_area_not_invertible():
    t = SpaceTransform.for_bounds(Bounds(0, 600))
    assert not t.invertible
    with pytest.raises(NonInvertibleTransform):
        t.to_logical(DisplayPoint(0, 10))
    # forward mapping still collapses onto the center
    assert t.to_display(LogicalPoint(5, 5)) == DisplayPoint(0, 300)


def test_array_transform_matches_scalar():
    t = SpaceTransform.for_bounds(Bounds(1000, 700))
    coords = [CubeCoord(0, 0, 0), CubeCoord(2, -1, -1), CubeCoord(-3, 4, -1)]
    pts = np.array([(center(c).x, center(c).y) for c in coords])
    out = t.to_display_array(pts)
    for row, c in zip(out, coords):
        d = t.to_display(center(c))
        assert tuple(row) == pytest.approx((d.x, d.y))


def test_bounds_position_in():
    b = Bounds(100, 50)
    assert b.position_in(DisplayPoint(10, 10)) == DisplayPoint(10, 10)
    assert b.position_in(DisplayPoint(101, 10)) is None
    assert b.position_in(DisplayPoint(10, -1)) is None
    assert b.position_in(None) is None
    with pytest.raises(ValueError):
        Bounds(-1, 10)
