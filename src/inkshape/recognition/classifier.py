"""
Per-stroke shape classification.

A fixed decision tree over the stroke features: closed strokes are tried as
circle, rectangle/diamond, triangle and fall back to freeform; open strokes
become an arrow, a line or a connector. The first matching branch wins.
"""

from inkshape.config import DetectionConfig
from inkshape.models import DetectedShape, ShapeProperties, ShapeType, generate_shape_id
from inkshape.recognition.arrows import detect_arrow_head
from inkshape.recognition.features import (
    average_radius, check_diamond, circularity, extract_features,
    rectangularity, straightness, triangle_score,
)
from inkshape.tracer import get_tracer, trace


@trace(label="detect_shapes")
def detect_shapes(strokes, config=None):
    """
    Classify every stroke that has enough points.

    Args:
        strokes: list of Stroke
        config: DetectionConfig, defaults when omitted

    Returns:
        list of DetectedShape, one per qualifying stroke, in stroke order
    """
    tracer = get_tracer()
    config = config or DetectionConfig()

    shapes = []
    skipped = 0
    for stroke in strokes:
        shape = classify_stroke(stroke, config)
        if shape is None:
            skipped += 1
            continue
        shapes.append(shape)

    compound = detect_compound_shapes(shapes, strokes)
    result = merge_shapes(shapes, compound)

    tracer.event(f"Detected {len(result)} shapes from {len(strokes)} strokes ({skipped} skipped)")
    return result


def classify_stroke(stroke, config=None):
    """
    Run the decision tree on one stroke.

    Returns None when the stroke has fewer than config.min_points points.
    """
    config = config or DetectionConfig()
    points = stroke.points
    if len(points) < max(config.min_points, 1):
        return None

    features = extract_features(points, config.closed_ratio)

    if features.closed:
        shape_type, confidence = _classify_closed(points, features, config)
        arrow_head = None
    else:
        shape_type, confidence, arrow_head = _classify_open(points, config)

    radius = None
    if shape_type == ShapeType.CIRCLE:
        radius = average_radius(points, features.center)

    properties = ShapeProperties(
        center_x=features.center[0],
        center_y=features.center[1],
        radius=radius,
        start_point=(points[0].x, points[0].y),
        end_point=(points[-1].x, points[-1].y),
        corner_radius=None,
        arrow_head=arrow_head,
    )

    get_tracer().event(
        f"Stroke {stroke.id}: {shape_type.value}",
        level="DEBUG",
        confidence=confidence,
        closed=features.closed,
    )

    return DetectedShape(
        id=generate_shape_id(),
        shape_type=shape_type,
        bounds=features.bounds,
        confidence=min(max(confidence, 0.0), 1.0),
        stroke_ids=[stroke.id],
        properties=properties,
    )


def _classify_closed(points, features, config):
    circ = circularity(points, features.center)
    if circ > config.circularity_threshold:
        return ShapeType.CIRCLE, circ

    rect = rectangularity(points, features.bounds, config.corner_proximity_ratio)
    if rect > config.rectangularity_threshold:
        if check_diamond(points, features.center):
            return ShapeType.DIAMOND, rect * config.diamond_confidence_factor
        return ShapeType.RECTANGLE, rect

    tri = triangle_score(points, config.triangle_edge_distance)
    if tri > config.triangle_threshold:
        return ShapeType.TRIANGLE, tri

    return ShapeType.FREEFORM, config.freeform_confidence


def _classify_open(points, config):
    straight = straightness(points)
    if straight > config.line_straightness_threshold:
        arrow_head = detect_arrow_head(
            points,
            angle_tolerance=config.arrow_angle_tolerance,
            lookback=config.arrow_lookback,
            barb_window=config.arrow_barb_window,
            head_size=config.arrow_head_size,
        )
        if arrow_head is not None:
            return ShapeType.ARROW, straight * config.arrow_confidence_factor, arrow_head
        return ShapeType.LINE, straight, None

    # curved open strokes usually join two shapes
    return ShapeType.CONNECTOR, config.connector_confidence, None


def detect_compound_shapes(shapes, strokes):
    """
    Extension point for grouping several strokes into one shape.

    Multi-stroke grouping is not implemented; always returns an empty list.
    """
    return []


def merge_shapes(individual, compound):
    """Append compound shapes after the per-stroke ones."""
    return list(individual) + list(compound)
