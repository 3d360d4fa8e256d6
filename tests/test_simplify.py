"""Tests for Douglas-Peucker simplification and viewport normalization."""

import numpy as np
import pytest

from inkshape.models import Point, Stroke
from inkshape.strokes.normalize import calculate_bounding_box, normalize_strokes
from inkshape.strokes.simplify import simplify_stroke, simplify_strokes


def _points(coords):
    return [Point(x=x, y=y, timestamp=i) for i, (x, y) in enumerate(coords)]


def _xy(points):
    return [(p.x, p.y) for p in points]


class TestSimplify:
    """Tests for single-stroke simplification."""

    def test_short_input_unchanged(self):
        """Test that fewer than 3 points are returned as is."""
        points = _points([(0, 0), (5, 5)])

        assert simplify_stroke(points, 1.0) == points
        assert simplify_stroke([], 1.0) == []

    def test_small_zigzag_collapses(self):
        """Test that wobble below epsilon collapses to the endpoints."""
        points = _points([(0, 0), (1, 0.1), (2, 0), (3, 0.1), (4, 0)])

        simplified = simplify_stroke(points, 0.5)

        assert _xy(simplified) == [(0, 0), (4, 0)]

    def test_corner_is_kept(self):
        """Test that the corner of an L survives simplification."""
        points = _points([(0, 0), (5, 0), (10, 0), (10, 5), (10, 10)])

        simplified = simplify_stroke(points, 1.0)

        assert _xy(simplified) == [(0, 0), (10, 0), (10, 10)]

    def test_closed_square_keeps_corners(self):
        """Test that a stroke ending where it began still keeps its corners."""
        points = _points([(0, 0), (10, 0), (10, 10), (0, 10), (0, 0)])

        simplified = simplify_stroke(points, 1.0)

        assert _xy(simplified) == _xy(points)

    def test_endpoints_preserved_and_subsequence(self):
        """Test the endpoint and subsequence guarantees on noisy input."""
        rng = np.random.RandomState(42)
        coords = np.cumsum(rng.normal(0, 3, size=(300, 2)), axis=0)
        points = _points(coords.tolist())

        for epsilon in (0.5, 2.0, 10.0, 100.0):
            simplified = simplify_stroke(points, epsilon)

            assert simplified[0] is points[0]
            assert simplified[-1] is points[-1]
            assert len(simplified) <= len(points)
            indices = [points.index(p) for p in simplified]
            assert indices == sorted(indices)

    def test_deterministic(self):
        """Test that the same input and epsilon give the same output."""
        rng = np.random.RandomState(3)
        points = _points(rng.uniform(0, 100, size=(80, 2)).tolist())

        first = simplify_stroke(points, 5.0)
        second = simplify_stroke(points, 5.0)

        assert _xy(first) == _xy(second)

    def test_long_stroke_does_not_hit_recursion_limit(self):
        """Test a spiral with thousands of points."""
        t = np.linspace(0, 60 * np.pi, 5000)
        coords = np.column_stack([t * np.cos(t), t * np.sin(t)])
        points = _points(coords.tolist())

        simplified = simplify_stroke(points, 0.01)

        assert simplified[0] is points[0]
        assert simplified[-1] is points[-1]


class TestSimplifyStrokes:
    """Tests for batch simplification."""

    def test_returns_new_strokes(self, make_stroke):
        """Test that batch simplification leaves the input untouched."""
        stroke = make_stroke([(0, 0), (1, 0.1), (2, 0), (3, 0.1), (4, 0)])

        result = simplify_strokes([stroke], 0.5)

        assert len(stroke.points) == 5
        assert len(result[0].points) == 2
        assert result[0].id == stroke.id
        assert result[0].color == stroke.color


class TestBoundingBox:
    """Tests for the union bounding box."""

    def test_bounding_box(self, make_stroke):
        """Test union box over two strokes."""
        strokes = [make_stroke([(10, 20), (100, 200)]), make_stroke([(-5, 50), (0, 0)], "s2")]

        assert calculate_bounding_box(strokes) == (-5.0, 0.0, 100.0, 200.0)

    def test_empty_is_none(self):
        """Test that no strokes give None."""
        assert calculate_bounding_box([]) is None

    def test_strokes_without_points_is_none(self):
        """Test that strokes with no points give None."""
        assert calculate_bounding_box([Stroke(id="empty")]) is None


class TestNormalize:
    """Tests for viewport normalization."""

    def test_preserves_aspect_ratio(self, make_stroke):
        """Test that width/height of the union box is unchanged."""
        strokes = [make_stroke([(10, 20), (60, 45)]), make_stroke([(110, 70), (30, 30)], "s2")]
        before = calculate_bounding_box(strokes)

        normalized = normalize_strokes(strokes, 800, 600, 20)
        after = calculate_bounding_box(normalized)

        ratio_before = (before[2] - before[0]) / (before[3] - before[1])
        ratio_after = (after[2] - after[0]) / (after[3] - after[1])
        assert ratio_after == pytest.approx(ratio_before, rel=1e-12)

    def test_fits_and_centers(self, make_stroke):
        """Test uniform scale into the padded area, centered on the short axis."""
        strokes = [make_stroke([(10, 20), (110, 70)], width=2.0)]

        normalized = normalize_strokes(strokes, 800, 600, 20)

        min_x, min_y, max_x, max_y = calculate_bounding_box(normalized)
        assert (min_x, max_x) == (pytest.approx(20.0), pytest.approx(780.0))
        assert (min_y, max_y) == (pytest.approx(110.0), pytest.approx(490.0))
        assert normalized[0].width == pytest.approx(2.0 * 7.6)

    def test_pressure_and_timestamp_pass_through(self, make_stroke):
        """Test that only coordinates and width change."""
        stroke = make_stroke([(0, 0), (10, 10), (20, 5)])

        normalized = normalize_strokes([stroke], 400, 400, 0)[0]

        assert [p.pressure for p in normalized.points] == [p.pressure for p in stroke.points]
        assert [p.timestamp for p in normalized.points] == [p.timestamp for p in stroke.points]
        assert normalized.id == stroke.id
        assert normalized.tool == stroke.tool

    def test_input_not_mutated(self, make_stroke):
        """Test that the original strokes keep their coordinates."""
        stroke = make_stroke([(0, 0), (10, 10)])
        original = stroke.model_dump()

        normalize_strokes([stroke], 400, 400, 10)

        assert stroke.model_dump() == original

    def test_degenerate_box_unchanged(self, make_stroke):
        """Test that a zero-height drawing is not scaled."""
        stroke = make_stroke([(0, 5), (10, 5), (20, 5)])

        normalized = normalize_strokes([stroke], 400, 400, 10)

        assert normalized[0].model_dump() == stroke.model_dump()
        assert normalized[0] is not stroke

    def test_empty_input(self):
        """Test that no strokes give no strokes."""
        assert normalize_strokes([], 400, 400, 10) == []
