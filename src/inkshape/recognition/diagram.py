"""
Diagram-type classification from the full set of detected shapes.

Counts shapes per family and scans the recognized text for flow-control and
object-oriented keywords, then walks a fixed rule order.
"""

from collections import Counter

from inkshape.config import DiagramConfig
from inkshape.models import ShapeType
from inkshape.tracer import get_tracer, trace

# Shape types counted together when classifying a diagram
_FAMILY = {
    ShapeType.RECTANGLE: "rectangle",
    ShapeType.DIAMOND: "diamond",
    ShapeType.ARROW: "arrow",
    ShapeType.LINE: "arrow",
    ShapeType.CIRCLE: "circle",
    ShapeType.ELLIPSE: "circle",
    ShapeType.CONNECTOR: "connector",
}


def count_shape_families(shapes):
    """Count shapes by family; triangles and freeform shapes are not counted."""
    counts = Counter()
    for shape in shapes:
        family = _FAMILY.get(shape.shape_type)
        if family:
            counts[family] += 1
    return counts


def keyword_hits(text, keywords):
    """Number of distinct keywords occurring anywhere in text."""
    return sum(1 for keyword in keywords if keyword in text)


@trace(label="classify_diagram")
def classify_diagram(shapes, text_regions, config=None):
    """
    Label the diagram as a whole.

    Args:
        shapes: list of DetectedShape
        text_regions: list of TextRegion (or plain strings)
        config: DiagramConfig, defaults when omitted

    Returns:
        (diagram_type, confidence)
    """
    tracer = get_tracer()
    config = config or DiagramConfig()

    counts = count_shape_families(shapes)
    rectangles = counts["rectangle"]
    diamonds = counts["diamond"]
    arrows = counts["arrow"]
    circles = counts["circle"]
    connectors = counts["connector"]

    text = " ".join(
        (region if isinstance(region, str) else region.text).lower()
        for region in text_regions
    )
    flow_hits = keyword_hits(text, config.flow_keywords)
    oo_hits = keyword_hits(text, config.oo_keywords)

    total_shapes = max(len(shapes), 1)

    if diamonds > 0 and arrows > 0 and rectangles > 0:
        confidence = min(
            config.flowchart_base
            + flow_hits * config.flowchart_keyword_weight
            + (diamonds + arrows) / total_shapes * config.flowchart_shape_weight,
            config.flowchart_cap,
        )
        result = ("flowchart", confidence)
    elif rectangles >= config.uml_min_rectangles and arrows > 0 and oo_hits > 0:
        result = ("uml_class", min(config.uml_base + oo_hits * config.uml_keyword_weight, config.uml_cap))
    elif circles > rectangles and connectors > 0:
        result = ("state_diagram", config.state_confidence)
    elif rectangles > 0 and arrows > 0:
        result = ("block_diagram", config.block_confidence)
    else:
        result = ("freeform", config.freeform_confidence)

    tracer.event(
        f"Diagram classified as {result[0]}",
        confidence=result[1],
        flow_hits=flow_hits,
        oo_hits=oo_hits,
    )
    return result
