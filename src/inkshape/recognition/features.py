"""
Geometric features of a single stroke.

Each score is a plain function over the stroke's points so it can be tested
on its own; extract_features bundles the ones the classifier needs.
"""

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from inkshape.geometry import (
    as_array, calculate_bounds, centroid, distance, heading, path_length,
    point_to_segment_distance, polygon_area,
)
from inkshape.models import ShapeBounds

# Sector centers in screen coordinates (y grows downward): up, right, down, left
CARDINAL_ANGLES = (-math.pi / 2, 0.0, math.pi / 2, math.pi)


@dataclass(frozen=True)
class StrokeFeatures:
    """Bounds, center and closedness computed once per stroke."""
    bounds: ShapeBounds
    center: Tuple[float, float]
    closed: bool


def extract_features(points, closed_ratio=0.1):
    """Compute the features every branch of the classifier starts from."""
    bounds = calculate_bounds(points)
    center = centroid(points)
    return StrokeFeatures(
        bounds=bounds,
        center=center,
        closed=is_closed(points, bounds, closed_ratio),
    )


def is_closed(points, bounds, ratio=0.1):
    """
    Check whether a stroke ends near where it started.

    The threshold is relative: ratio times the longer side of the bounds.
    """
    if len(points) < 3:
        return False
    threshold = max(bounds.width, bounds.height) * ratio
    return distance(points[0], points[-1]) < threshold


def _radii(points, center):
    arr = as_array(points)
    return np.hypot(arr[:, 0] - center[0], arr[:, 1] - center[1])


def average_radius(points, center):
    """Mean distance of the points from center."""
    if len(points) == 0:
        return 0.0
    return float(np.mean(_radii(points, center)))


def circularity(points, center):
    """
    1 minus the coefficient of variation of the radii, clamped to [0, 1].

    Zero when every point sits on the center.
    """
    if len(points) == 0:
        return 0.0
    radii = _radii(points, center)
    mean = float(np.mean(radii))
    if mean == 0:
        return 0.0
    cv = float(np.std(radii)) / mean
    return min(max(1.0 - cv, 0.0), 1.0)


def corner_score(points, bounds, ratio=0.15):
    """
    Fraction of bounding box corners with a stroke point nearby.

    Returns 0, 0.25, 0.5, 0.75 or 1.
    """
    corners = np.array([
        (bounds.x, bounds.y),
        (bounds.x + bounds.width, bounds.y),
        (bounds.x + bounds.width, bounds.y + bounds.height),
        (bounds.x, bounds.y + bounds.height),
    ])
    threshold = max(bounds.width, bounds.height) * ratio
    arr = as_array(points)
    if len(arr) == 0:
        return 0.0

    found = 0
    for corner in corners:
        if np.any(np.linalg.norm(arr - corner, axis=1) < threshold):
            found += 1
    return found / 4.0


def rectangularity(points, bounds, corner_ratio=0.15):
    """
    Blend of area fill and corner coverage.

    0.6 * polygon_area / bbox_area + 0.4 * corner_score, capped at 1. A
    zero-area bounding box scores 0.
    """
    box_area = bounds.width * bounds.height
    if box_area == 0:
        return 0.0
    fill = polygon_area(points) / box_area
    return min(fill * 0.6 + corner_score(points, bounds, corner_ratio) * 0.4, 1.0)


def _angle_between(a, b):
    """Smallest absolute difference between two angles, in [0, pi]."""
    diff = abs(a - b) % (2 * math.pi)
    return min(diff, 2 * math.pi - diff)


def check_diamond(points, center, half_width=math.pi / 6):
    """
    Check that all four cardinal sectors around center contain a point.

    Each sector spans half_width either side of up, right, down and left.
    """
    hits = [False, False, False, False]
    for p in as_array(points):
        angle = math.atan2(p[1] - center[1], p[0] - center[0])
        for i, target in enumerate(CARDINAL_ANGLES):
            if _angle_between(angle, target) < half_width:
                hits[i] = True
    return all(hits)


def find_prominent_corners(points, count):
    """
    Pick the count interior points with the sharpest turn.

    The turn at point i is abs(heading(i, i+1) - heading(i-1, i)), without
    wrapping. Ties keep drawing order.
    """
    points = list(points)
    if len(points) < 3:
        return points

    changes = []
    for i in range(1, len(points) - 1):
        incoming = heading(points[i - 1], points[i])
        outgoing = heading(points[i], points[i + 1])
        changes.append((i, abs(outgoing - incoming)))

    changes.sort(key=lambda item: item[1], reverse=True)
    return [points[i] for i, _ in changes[:count]]


def triangle_score(points, edge_distance=10.0):
    """
    Fraction of points lying near the triangle spanned by the 3 sharpest corners.

    edge_distance is in drawing units and does not scale with the stroke, so
    small triangles score higher than large ones drawn with the same wobble.
    """
    corners = find_prominent_corners(points, 3)
    if len(corners) < 3 or len(points) == 0:
        return 0.0

    edges = [(corners[i], corners[(i + 1) % 3]) for i in range(3)]
    on_edge = 0
    for p in points:
        if any(point_to_segment_distance(p, a, b) < edge_distance for a, b in edges):
            on_edge += 1
    return on_edge / len(points)


def straightness(points):
    """
    Ratio of endpoint distance to path length, capped at 1.

    A single point counts as perfectly straight; coincident endpoints score 0.
    """
    if len(points) < 2:
        return 1.0
    direct = distance(points[0], points[-1])
    if direct == 0:
        return 0.0
    return min(direct / path_length(points), 1.0)
