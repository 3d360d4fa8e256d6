"""
SVG emission for InkShape.

Renders detected shapes as clean primitives, optionally on top of the raw
strokes, so recognition results can be inspected in any browser.
"""

import svgwrite

from inkshape.models import ShapeType
from inkshape.tracer import get_tracer, trace


@trace(label="emit_shapes_svg")
def emit_shapes_svg(shapes, width, height, strokes=None, stroke_color="black", stroke_width=1.5):
    """
    Create an SVG document for the detected shapes.

    Args:
        shapes: list of DetectedShape
        width, height: canvas size in pixels
        strokes: optional list of Stroke drawn underneath in light grey
        stroke_color: color of the recognized primitives
        stroke_width: line width of the recognized primitives

    Returns:
        svgwrite.Drawing object
    """
    tracer = get_tracer()

    dwg = svgwrite.Drawing(size=(f"{width}px", f"{height}px"))
    dwg.viewbox(0, 0, width, height)

    marker = dwg.marker(id="arrowhead", insert=(10, 5), size=(10, 10), orient="auto")
    marker.add(dwg.path(d="M0,0 L10,5 L0,10 z", fill=stroke_color))
    dwg.defs.add(marker)

    if strokes:
        ink_group = dwg.g(id="ink", fill="none", stroke="#c8c8c8", stroke_width=1)
        for stroke in strokes:
            if len(stroke.points) < 2:
                continue
            ink_group.add(dwg.polyline([(p.x, p.y) for p in stroke.points], id=f"ink-{stroke.id}"))
        dwg.add(ink_group)

    shape_group = dwg.g(id="shapes", fill="none", stroke=stroke_color, stroke_width=stroke_width)
    for shape in shapes:
        element = shape_to_element(dwg, shape, marker)
        element["id"] = f"shape-{shape.id}"
        element["class"] = shape.shape_type.value
        shape_group.add(element)
    dwg.add(shape_group)

    tracer.event(f"SVG emitted with {len(shapes)} shapes")

    return dwg


def shape_to_element(dwg, shape, marker):
    """Build the SVG element that best represents one detected shape."""
    b = shape.bounds
    props = shape.properties
    kind = shape.shape_type

    if kind == ShapeType.CIRCLE:
        radius = props.radius if props.radius is not None else max(b.width, b.height) / 2
        return dwg.circle(center=(props.center_x, props.center_y), r=radius)

    if kind == ShapeType.ELLIPSE:
        return dwg.ellipse(center=(props.center_x, props.center_y), r=(b.width / 2, b.height / 2))

    if kind == ShapeType.RECTANGLE:
        return dwg.rect(insert=(b.x, b.y), size=(b.width, b.height))

    if kind == ShapeType.DIAMOND:
        cx = b.x + b.width / 2
        cy = b.y + b.height / 2
        return dwg.polygon([(cx, b.y), (b.x + b.width, cy), (cx, b.y + b.height), (b.x, cy)])

    if kind == ShapeType.TRIANGLE:
        return dwg.polygon([
            (b.x + b.width / 2, b.y),
            (b.x + b.width, b.y + b.height),
            (b.x, b.y + b.height),
        ])

    if kind in (ShapeType.LINE, ShapeType.ARROW, ShapeType.CONNECTOR) and props.start_point and props.end_point:
        line = dwg.line(start=props.start_point, end=props.end_point)
        if kind == ShapeType.ARROW:
            line["marker-end"] = marker.get_funciri()
        if kind == ShapeType.CONNECTOR:
            line["stroke-dasharray"] = "4,3"
        return line

    # freeform, or an open shape without endpoints
    return dwg.rect(insert=(b.x, b.y), size=(b.width, b.height), stroke_dasharray="2,2")
