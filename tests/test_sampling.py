"""Tests for fixed-density point sampling."""

import numpy as np
import pytest

from lemlibpath.config.path_config import PathConfig
from lemlibpath.core.geometry import Control, EndControl, Segment
from lemlibpath.core.path import Path, SpeedKeyframe
from lemlibpath.core.sampling import flatten_segment, get_path_points
from lemlibpath.core.units import Quantity, UnitOfLength


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _density(value: float) -> Quantity:
    return Quantity(value, UnitOfLength.INCH)


@pytest.fixture
def vertical_path() -> Path:
    """Straight 24 inch cubic segment along Y."""
    seg = Segment(
        EndControl(0, 0), Control(0, 8), Control(0, 16), EndControl(0, 24),
    )
    return Path(PathConfig(), seg)


@pytest.fixture
def corner_path() -> Path:
    """Two linear segments with a right-angle corner at (10, 0)."""
    return Path(
        PathConfig(),
        Segment(EndControl(0, 0), EndControl(10, 0)),
        Segment(EndControl(10, 0), EndControl(10, 10)),
    )


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestFlatten:
    def test_linear_is_end_points(self):
        seg = Segment(EndControl(1, 2), EndControl(3, 4))
        assert flatten_segment(seg).tolist() == [[1, 2], [3, 4]]

    def test_cubic_starts_and_ends_on_end_controls(self):
        seg = Segment(EndControl(0, 0), Control(5, 10), Control(15, 10), EndControl(20, 0))
        pts = flatten_segment(seg, steps=32)
        assert pts.shape == (33, 2)
        assert np.allclose(pts[0], [0, 0])
        assert np.allclose(pts[-1], [20, 0])


class TestSampling:
    def test_empty_path(self):
        result = get_path_points(Path(PathConfig()), _density(2))
        assert result.points == []
        assert len(result) == 0

    def test_vertical_spacing(self, vertical_path):
        result = get_path_points(vertical_path, _density(2))
        # 0, 2, ... 22, the end point, and its terminal duplicate
        assert len(result.points) == 14
        for i, pt in enumerate(result.points[:13]):
            assert pt.x == pytest.approx(0, abs=1e-9)
            assert pt.y == pytest.approx(2 * i)
            assert pt.distance == pytest.approx(2 * i)
        assert result.total_length == pytest.approx(24)

    def test_terminal_duplicate(self, vertical_path):
        points = get_path_points(vertical_path, _density(2)).points
        assert (points[-1].x, points[-1].y) == (points[-2].x, points[-2].y)
        assert points[-1].speed == 0

    def test_distance_non_decreasing(self, corner_path):
        points = get_path_points(corner_path, _density(0.7)).points
        d = [p.distance for p in points]
        assert d == sorted(d)

    def test_linear_remainder(self):
        path = Path(PathConfig(), Segment(EndControl(0, 0), EndControl(10, 0)))
        points = get_path_points(path, _density(3)).points
        assert [p.x for p in points] == pytest.approx([0, 3, 6, 9, 10, 10])

    def test_segment_index(self, corner_path):
        points = get_path_points(corner_path, _density(1)).points
        assert points[0].segment_index == 0
        assert points[5].segment_index == 0
        assert points[15].segment_index == 1
        assert points[-1].segment_index == 1

    def test_zero_length_path(self):
        seg = Segment(EndControl(5, 5), Control(5, 5), Control(5, 5), EndControl(5, 5))
        points = get_path_points(Path(PathConfig(), seg), _density(2)).points
        assert len(points) == 2

    def test_rejects_non_positive_density(self, vertical_path):
        with pytest.raises(ValueError):
            get_path_points(vertical_path, _density(0))


class TestSpeeds:
    def test_straight_path_runs_at_max_speed(self, vertical_path):
        points = get_path_points(vertical_path, _density(2), default_follow_bent_rate=True).points
        assert all(p.speed == pytest.approx(100) for p in points[:-1])

    def test_corner_slows_down(self, corner_path):
        points = get_path_points(corner_path, _density(1), default_follow_bent_rate=True).points
        corner = points[10]
        assert (corner.x, corner.y) == pytest.approx((10, 0))
        assert corner.bent_rate == pytest.approx(0.5)
        assert corner.speed == pytest.approx(20)
        assert points[5].speed == pytest.approx(100)

    def test_corner_ignored_without_bent_rate(self, corner_path):
        points = get_path_points(corner_path, _density(1), default_follow_bent_rate=False).points
        assert points[10].speed == pytest.approx(100)

    def test_bent_rate_inside_range_interpolates(self, corner_path):
        corner_path.pc.bent_rate_applicable_range.update(from_=0, to=1)
        points = get_path_points(corner_path, _density(1), default_follow_bent_rate=True).points
        # bent rate 0.5 is halfway through [0, 1]
        assert points[10].speed == pytest.approx(60)

    def test_speed_keyframe(self, vertical_path):
        vertical_path.speed_keyframes.append(
            SpeedKeyframe(x_pos=0.5, y_pos=0.25, follow_bent_rate=False)
        )
        points = get_path_points(vertical_path, _density(2), default_follow_bent_rate=True).points
        assert points[5].speed == pytest.approx(100)   # y = 10
        assert points[6].speed == pytest.approx(40)    # y = 12
        assert points[12].speed == pytest.approx(40)
