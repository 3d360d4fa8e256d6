"""
Rasterization of strokes for debug artifacts.

Images are uint8 RGB arrays (H, W, 3); save_image converts to BGR on write.
"""

import cv2
import numpy as np

from inkshape.config import CanvasConfig
from inkshape.tracer import get_tracer, trace


def parse_color(color):
    """
    Parse "#rrggbb" or "#rrggbbaa" into an (r, g, b) tuple.

    Unparseable channels fall back to 0; alpha is dropped.
    """
    color = color.strip().lstrip("#")
    channels = []
    for start in (0, 2, 4):
        try:
            channels.append(int(color[start:start + 2], 16))
        except ValueError:
            channels.append(0)
    return tuple(channels)


@trace(label="render_strokes")
def render_strokes_to_image(strokes, config=None):
    """
    Draw strokes onto a blank canvas.

    Each stroke is drawn as a polyline in its own color and width (at least
    one pixel). Strokes with fewer than two points are skipped.

    Returns:
        uint8 RGB image of config.height x config.width
    """
    tracer = get_tracer()
    config = config or CanvasConfig()

    img = np.empty((config.height, config.width, 3), dtype=np.uint8)
    img[:] = parse_color(config.background_color)

    drawn = 0
    for stroke in strokes:
        if len(stroke.points) < 2:
            continue
        pts = np.array([[round(p.x), round(p.y)] for p in stroke.points], dtype=np.int32)
        thickness = max(int(stroke.width), 1)
        cv2.polylines(img, [pts], isClosed=False, color=parse_color(stroke.color),
                      thickness=thickness, lineType=cv2.LINE_AA)
        drawn += 1

    tracer.event(f"Rendered {drawn} strokes onto {config.width}x{config.height} canvas")
    return img


def draw_shape_overlay(base_img, shapes, color=(0, 0, 255)):
    """
    Draw detected shape bounds and type names over a rendered canvas.

    Returns a new RGB image; base_img is not modified.
    """
    overlay = base_img.copy()
    font = cv2.FONT_HERSHEY_SIMPLEX
    for shape in shapes:
        b = shape.bounds
        pt1 = (int(b.x), int(b.y))
        pt2 = (int(b.x + b.width), int(b.y + b.height))
        cv2.rectangle(overlay, pt1, pt2, color, 1)
        label = f"{shape.shape_type.value} {shape.confidence:.2f}"
        cv2.putText(overlay, label, (pt1[0], max(pt1[1] - 4, 10)), font, 0.4, color, 1)
    return overlay
