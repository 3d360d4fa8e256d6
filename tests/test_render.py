"""Tests for raster rendering of strokes."""

import numpy as np

from inkshape.config import CanvasConfig
from inkshape.recognition.classifier import detect_shapes
from inkshape.render.raster import draw_shape_overlay, parse_color, render_strokes_to_image


class TestParseColor:
    """Tests for hex color parsing."""

    def test_rgb(self):
        """Test a plain #rrggbb color."""
        assert parse_color("#ff8000") == (255, 128, 0)

    def test_alpha_dropped(self):
        """Test that an alpha channel is ignored."""
        assert parse_color("#ff800080") == (255, 128, 0)

    def test_garbage_is_black(self):
        """Test that unparseable channels fall back to 0."""
        assert parse_color("zz") == (0, 0, 0)


class TestRenderStrokes:
    """Tests for stroke rasterization."""

    def test_canvas_size_and_background(self):
        """Test an empty canvas filled with the background color."""
        config = CanvasConfig(width=50, height=40, background_color="#102030")

        img = render_strokes_to_image([], config)

        assert img.shape == (40, 50, 3)
        assert img.dtype == np.uint8
        assert tuple(img[0, 0]) == (16, 32, 48)

    def test_stroke_drawn_in_its_color(self, make_stroke):
        """Test that a thick red stroke colors the pixels it covers."""
        stroke = make_stroke([(5, 20), (45, 20)], width=3.0, color="#ff0000")

        img = render_strokes_to_image([stroke], CanvasConfig(width=50, height=40))

        assert img[20, 25, 0] > 200
        assert img[20, 25, 1] < 50
        assert tuple(img[5, 5]) == (255, 255, 255)

    def test_single_point_stroke_skipped(self, make_stroke):
        """Test that a stroke with one point draws nothing."""
        stroke = make_stroke([(10, 10)])

        img = render_strokes_to_image([stroke], CanvasConfig(width=30, height=30))

        assert np.all(img == 255)


class TestShapeOverlay:
    """Tests for drawing detected shapes over a render."""

    def test_overlay_is_a_copy(self, square_stroke):
        """Test that the overlay draws boxes without touching the base image."""
        config = CanvasConfig(width=200, height=200)
        base = render_strokes_to_image([], config)
        shapes = detect_shapes([square_stroke.model_copy(update={
            "points": [p.model_copy(update={"x": p.x + 50, "y": p.y + 50}) for p in square_stroke.points],
        })])

        overlay = draw_shape_overlay(base, shapes)

        assert np.all(base == 255)
        assert tuple(overlay[100, 50]) == (0, 0, 255)
