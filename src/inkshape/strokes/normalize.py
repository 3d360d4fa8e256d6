"""
Viewport normalization for batches of strokes.

Fits the union bounding box of a drawing into a padded target area with a
single uniform scale, so aspect ratio is preserved.
"""

from inkshape.models import Point
from inkshape.tracer import get_tracer, trace


def calculate_bounding_box(strokes):
    """
    Union bounding box over all stroke points.

    Returns (min_x, min_y, max_x, max_y), or None when there are no strokes
    or none of them has a point.
    """
    xs = [p.x for stroke in strokes for p in stroke.points]
    ys = [p.y for stroke in strokes for p in stroke.points]
    if not xs:
        return None
    return (min(xs), min(ys), max(xs), max(ys))


@trace(label="normalize_strokes")
def normalize_strokes(strokes, target_width, target_height, padding):
    """
    Rescale and recenter strokes into a target viewport.

    Args:
        strokes: list of Stroke
        target_width, target_height: size of the viewport
        padding: margin kept free on every side

    Returns:
        list of new Stroke objects; unchanged copies when the input is empty
        or its bounding box has zero width or height
    """
    tracer = get_tracer()

    bbox = calculate_bounding_box(strokes)
    if bbox is None:
        return [s.model_copy(deep=True) for s in strokes]

    min_x, min_y, max_x, max_y = bbox
    width = max_x - min_x
    height = max_y - min_y

    if width == 0 or height == 0:
        tracer.event("Degenerate bounding box, skipping normalization", level="DEBUG")
        return [s.model_copy(deep=True) for s in strokes]

    inner_width = target_width - 2 * padding
    inner_height = target_height - 2 * padding
    scale = min(inner_width / width, inner_height / height)

    offset_x = padding + (inner_width - width * scale) / 2
    offset_y = padding + (inner_height - height * scale) / 2

    tracer.event(f"Normalizing {len(strokes)} strokes", scale=scale)

    normalized = []
    for stroke in strokes:
        points = [
            Point(
                x=(p.x - min_x) * scale + offset_x,
                y=(p.y - min_y) * scale + offset_y,
                pressure=p.pressure,
                timestamp=p.timestamp,
            )
            for p in stroke.points
        ]
        normalized.append(stroke.model_copy(update={"points": points, "width": stroke.width * scale}))

    return normalized
