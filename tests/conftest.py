"""Pytest fixtures for InkShape tests."""

import math
import tempfile

import pytest

from inkshape.models import Point, Stroke


def _build_stroke(coords, stroke_id="s1", width=2.0, color="#000000"):
    points = [
        Point(x=float(x), y=float(y), pressure=0.5, timestamp=i)
        for i, (x, y) in enumerate(coords)
    ]
    return Stroke(id=stroke_id, points=points, color=color, width=width, tool="pen")


def _polyline(vertices, spacing=10.0):
    """Sample a polyline through vertices with roughly uniform spacing."""
    coords = []
    for (ax, ay), (bx, by) in zip(vertices, vertices[1:]):
        steps = max(int(round(math.hypot(bx - ax, by - ay) / spacing)), 1)
        for k in range(steps):
            t = k / steps
            coords.append((ax + (bx - ax) * t, ay + (by - ay) * t))
    coords.append(vertices[-1])
    return coords


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def make_stroke():
    """Factory turning (x, y) pairs into a Stroke."""
    return _build_stroke


@pytest.fixture
def polyline():
    """Factory sampling a polyline through a list of vertices."""
    return _polyline


@pytest.fixture
def square_stroke():
    """Closed square drawn through its four corners."""
    return _build_stroke([(0, 0), (100, 0), (100, 100), (0, 100), (0, 0)], "square")


@pytest.fixture
def midpoint_square_stroke():
    """Closed square that also passes through each edge midpoint."""
    return _build_stroke(
        [(0, 0), (50, 0), (100, 0), (100, 50), (100, 100), (50, 100), (0, 100), (0, 50), (0, 0)],
        "midsquare",
    )


@pytest.fixture
def circle_stroke():
    """360 samples on a circle of radius 50 around (100, 100)."""
    coords = [
        (100 + 50 * math.cos(2 * math.pi * i / 360), 100 + 50 * math.sin(2 * math.pi * i / 360))
        for i in range(360)
    ]
    return _build_stroke(coords, "circle")


@pytest.fixture
def line_stroke():
    """Ten colinear points from (0, 0) to (90, 90)."""
    return _build_stroke([(i * 10, i * 10) for i in range(10)], "line")


@pytest.fixture
def arrow_stroke():
    """Horizontal shaft of length 300 ending in a short barb back toward the shaft."""
    coords = [(i * 10, 0) for i in range(31)] + [(297, 3)]
    return _build_stroke(coords, "arrow")


@pytest.fixture
def triangle_stroke():
    """Equilateral triangle of side 100 starting mid-way along its base."""
    apex = (50, 50 * math.sqrt(3))
    return _build_stroke(_polyline([(50, 0), (100, 0), apex, (0, 0), (50, 0)]), "triangle")


@pytest.fixture
def arc_stroke():
    """Open half circle of radius 50."""
    coords = [
        (50 * math.cos(math.pi + math.pi * i / 49), 50 * math.sin(math.pi + math.pi * i / 49))
        for i in range(50)
    ]
    return _build_stroke(coords, "arc")


@pytest.fixture
def default_config():
    """Create default pipeline configuration."""
    from inkshape.config import PipelineConfig
    return PipelineConfig()
