"""
Geometry primitives shared by the simplifier and the recognizers.

Functions accept Point models or plain (x, y) pairs. All of them are total;
callers guard divisions by zero-length segments or zero-area boxes.
"""

import math

import numpy as np

from inkshape.models import ShapeBounds


def as_array(points):
    """Convert a sequence of points into an (N, 2) float array."""
    if len(points) == 0:
        return np.zeros((0, 2), dtype=float)
    if isinstance(points, np.ndarray):
        return points.astype(float).reshape(-1, 2)
    return np.array([_xy(p) for p in points], dtype=float)


def _xy(p):
    if hasattr(p, "x"):
        return (p.x, p.y)
    return (p[0], p[1])


def bounding_box(points):
    """
    Compute the bounding box of a point sequence.

    Returns (min_x, min_y, max_x, max_y); all zeros for no points.
    """
    arr = as_array(points)
    if len(arr) == 0:
        return (0.0, 0.0, 0.0, 0.0)
    min_x, min_y = arr.min(axis=0)
    max_x, max_y = arr.max(axis=0)
    return (float(min_x), float(min_y), float(max_x), float(max_y))


def calculate_bounds(points):
    """Axis-aligned ShapeBounds of a point sequence."""
    min_x, min_y, max_x, max_y = bounding_box(points)
    return ShapeBounds(x=min_x, y=min_y, width=max_x - min_x, height=max_y - min_y, rotation=0.0)


def centroid(points):
    """Arithmetic mean of x and y."""
    arr = as_array(points)
    if len(arr) == 0:
        return (0.0, 0.0)
    cx, cy = arr.mean(axis=0)
    return (float(cx), float(cy))


def distance(a, b):
    """Euclidean distance between two points."""
    ax, ay = _xy(a)
    bx, by = _xy(b)
    return math.hypot(bx - ax, by - ay)


def perpendicular_distance(point, line_start, line_end):
    """
    Distance from point to the infinite line through line_start and line_end.

    Falls back to the point-to-point distance when the line points coincide.
    """
    px, py = _xy(point)
    ax, ay = _xy(line_start)
    bx, by = _xy(line_end)
    dx = bx - ax
    dy = by - ay
    length = math.hypot(dx, dy)
    if length == 0:
        return math.hypot(px - ax, py - ay)
    return abs(dy * (px - ax) - dx * (py - ay)) / length


def perpendicular_distances(points, line_start, line_end):
    """Vectorized perpendicular_distance for an (N, 2) array."""
    arr = as_array(points)
    start = np.asarray(_xy(line_start), dtype=float)
    end = np.asarray(_xy(line_end), dtype=float)
    line_vec = end - start
    length = np.linalg.norm(line_vec)
    if length == 0:
        return np.linalg.norm(arr - start, axis=1)
    rel = arr - start
    cross = line_vec[1] * rel[:, 0] - line_vec[0] * rel[:, 1]
    return np.abs(cross) / length


def point_to_segment_distance(point, seg_start, seg_end):
    """Distance from point to the closed segment seg_start-seg_end."""
    px, py = _xy(point)
    ax, ay = _xy(seg_start)
    bx, by = _xy(seg_end)
    dx = bx - ax
    dy = by - ay
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return math.hypot(px - ax, py - ay)

    t = ((px - ax) * dx + (py - ay) * dy) / length_sq
    t = min(max(t, 0.0), 1.0)
    return math.hypot(px - (ax + t * dx), py - (ay + t * dy))


def polygon_area(points):
    """
    Absolute shoelace area of the polygon traced in stroke order.

    The sequence is closed implicitly (last point joins the first) and may be
    non-convex or self-intersecting.
    """
    arr = as_array(points)
    if len(arr) < 3:
        return 0.0
    x = arr[:, 0]
    y = arr[:, 1]
    x_next = np.roll(x, -1)
    y_next = np.roll(y, -1)
    return float(abs(np.sum(x * y_next - x_next * y)) / 2.0)


def path_length(points):
    """Total length of the polyline."""
    arr = as_array(points)
    if len(arr) < 2:
        return 0.0
    return float(np.sum(np.linalg.norm(np.diff(arr, axis=0), axis=1)))


def heading(a, b):
    """Direction of travel from a to b in radians, in (-pi, pi]."""
    ax, ay = _xy(a)
    bx, by = _xy(b)
    return math.atan2(by - ay, bx - ax)
