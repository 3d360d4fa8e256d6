"""
Stroke simplification using the Ramer-Douglas-Peucker algorithm.

Reduces the number of points while preserving shape within tolerance. The
result is always a subsequence of the input that keeps both endpoints.
"""

import numpy as np

from inkshape.geometry import as_array, perpendicular_distances
from inkshape.tracer import get_tracer, trace


def simplify_stroke(points, epsilon):
    """
    Simplify a point sequence with Douglas-Peucker.

    Args:
        points: list of Point (or [x, y]) in drawing order
        epsilon: maximum perpendicular distance a dropped point may have

    Returns:
        new list holding a subsequence of the original point objects
    """
    points = list(points)
    if len(points) < 3:
        return points

    keep = rdp_mask(as_array(points), epsilon)
    result = [p for p, kept in zip(points, keep) if kept]

    if len(result) < 2:
        result = [points[0], points[-1]]

    return result


def rdp_mask(arr, epsilon):
    """
    Douglas-Peucker over an (N, 2) array.

    Each sub-range is split at its interior point farthest from the chord
    when that distance exceeds epsilon, otherwise collapsed to its two
    endpoints. Sub-ranges are processed from an explicit stack so long
    strokes cannot exhaust the interpreter's recursion limit; the kept set
    is the same as the recursive formulation.

    Returns:
        boolean array, True for points that survive
    """
    n = len(arr)
    keep = np.zeros(n, dtype=bool)
    if n == 0:
        return keep
    keep[0] = True
    keep[-1] = True

    stack = [(0, n - 1)]
    while stack:
        start, end = stack.pop()
        if end - start < 2:
            continue

        distances = perpendicular_distances(arr[start + 1:end], arr[start], arr[end])
        offset = int(np.argmax(distances))
        max_dist = distances[offset]

        if max_dist > epsilon:
            split = start + 1 + offset
            keep[split] = True
            stack.append((split, end))
            stack.append((start, split))

    return keep


@trace(label="simplify_strokes")
def simplify_strokes(strokes, epsilon):
    """
    Simplify every stroke in a batch.

    Returns new Stroke objects; the input strokes are left untouched.
    """
    tracer = get_tracer()

    simplified = []
    total_points_before = 0
    total_points_after = 0

    for stroke in strokes:
        points = simplify_stroke(stroke.points, epsilon)
        total_points_before += len(stroke.points)
        total_points_after += len(points)
        simplified.append(stroke.model_copy(update={"points": points}))

    reduction = 1 - (total_points_after / total_points_before) if total_points_before > 0 else 0
    tracer.event(f"Simplified: {total_points_before} -> {total_points_after} points ({reduction:.1%} reduction)")

    return simplified
