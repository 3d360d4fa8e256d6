"""
Writers for run artifacts: JSON results, SVG overlays and rendered images.

Parent directories are created as needed; every write is reported to the
tracer.
"""

import json
import os

import cv2
from pydantic import BaseModel

from inkshape.tracer import get_tracer


def ensure_dir(path):
    """Create directory if it does not exist."""
    if path:
        os.makedirs(path, exist_ok=True)


def save_image(img, path):
    """
    Write a uint8 image. Three-channel input is RGB and is converted to the
    BGR order OpenCV writes.

    Raises:
        OSError: OpenCV could not encode or write the file
    """
    if img.ndim == 3:
        img = cv2.cvtColor(img, cv2.COLOR_RGB2BGR)

    ensure_dir(os.path.dirname(path))
    if not cv2.imwrite(path, img):
        raise OSError(f"Could not write image: {path}")
    get_tracer().event(f"Saved image: {path}", shape=img.shape)


def save_json(data, path, indent=2):
    """Write a pydantic model or plain data as JSON."""
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json")

    ensure_dir(os.path.dirname(path))
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=indent)
    get_tracer().event(f"Saved JSON: {path}")


def save_svg(drawing, path):
    """Write an svgwrite Drawing, or markup already rendered to a string."""
    markup = drawing if isinstance(drawing, str) else drawing.tostring()

    ensure_dir(os.path.dirname(path))
    with open(path, "w", encoding="utf-8") as f:
        f.write(markup)
    get_tracer().event(f"Saved SVG: {path}", size=len(markup))
