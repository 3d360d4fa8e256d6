"""
Reading and writing stroke and text-region files.

Strokes are stored as a JSON list (or an object with a "strokes" key). Paths
ending in ".gz" are gzip-compressed, matching the canvas backup format.
"""

import gzip
import json
import os
from typing import List

from pydantic import TypeAdapter

from inkshape.io.save_artifacts import ensure_dir
from inkshape.models import Stroke, TextRegion
from inkshape.tracer import get_tracer

_STROKES = TypeAdapter(List[Stroke])
_TEXT_REGIONS = TypeAdapter(List[TextRegion])


def _open(path, mode):
    if path.endswith(".gz"):
        return gzip.open(path, mode + "t", encoding="utf-8")
    return open(path, mode, encoding="utf-8")


def _read_json(path):
    if not os.path.exists(path):
        raise FileNotFoundError(f"Input file not found: {path}")
    with _open(path, "r") as f:
        return json.load(f)


def load_strokes(path):
    """
    Load strokes from a JSON or gzip JSON file.

    Raises:
        FileNotFoundError: path does not exist
        pydantic.ValidationError: the file does not describe strokes
    """
    data = _read_json(path)
    if isinstance(data, dict):
        data = data.get("strokes", [])
    strokes = _STROKES.validate_python(data)
    get_tracer().event(f"Loaded {len(strokes)} strokes from {path}")
    return strokes


def save_strokes(strokes, path):
    """Write strokes as JSON, gzip-compressed when path ends in .gz."""
    ensure_dir(os.path.dirname(path))
    with _open(path, "w") as f:
        json.dump(_STROKES.dump_python(list(strokes), mode="json"), f)
    get_tracer().event(f"Saved {len(strokes)} strokes to {path}")


def load_text_regions(path):
    """
    Load OCR text regions from a JSON list.

    Plain strings in the list are accepted as text without position.
    """
    data = _read_json(path)
    if isinstance(data, dict):
        data = data.get("text_regions", [])
    data = [{"text": item} if isinstance(item, str) else item for item in data]
    return _TEXT_REGIONS.validate_python(data)
