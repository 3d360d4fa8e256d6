"""
Hierarchical runtime tracing for the InkShape recognition pipeline.

Nested, timed spans and one-off events go to stderr, optionally mirrored to a
file and as JSON lines, so a batch of strokes can be followed stage by stage
without a debugger. Settings come from the TracingConfig section of the
pipeline configuration.
"""

import functools
import hashlib
import json
import sys
import time
from collections import namedtuple
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime

import numpy as np
from pydantic import BaseModel

from inkshape.config import TracingConfig

LEVELS = {"ERROR": 0, "WARN": 1, "INFO": 2, "DEBUG": 3}

_OpenSpan = namedtuple("_OpenSpan", ["name", "module", "started"])


class Tracer:
    """
    Process-wide tracer.

    Spans report their wall time on exit and indent everything logged inside
    them; events attach to the innermost open span. A disabled tracer does
    no formatting at all.
    """

    def __init__(self):
        self.settings = TracingConfig()
        self._sink = None
        self._open = []

    @property
    def enabled(self):
        return self.settings.enabled

    @property
    def depth(self):
        """Number of spans currently open."""
        return len(self._open)

    def apply(self, settings):
        """Switch to new settings, reopening the trace file when one is named."""
        self.close()
        self.settings = replace(settings, level=settings.level.upper())
        if settings.enabled and settings.file_path:
            self._sink = open(settings.file_path, "w", encoding="utf-8")

    def close(self):
        """Close the trace file if one is open."""
        if self._sink is not None:
            self._sink.close()
            self._sink = None

    def wants(self, level):
        """Check whether a record at level would be written."""
        if not self.settings.enabled:
            return False
        threshold = LEVELS.get(self.settings.level, LEVELS["INFO"])
        return LEVELS.get(level, LEVELS["INFO"]) <= threshold

    def _emit(self, level, module, func, message, meta=None):
        if not self.wants(level):
            return

        clock = _clock()
        where = f"{module}:{func}" if func else module
        lines = [f"{clock} {level:<5} {'  ' * self.depth}{where}  {message}"]

        if self.settings.json_output:
            lines.append(json.dumps({
                "timestamp": clock,
                "level": level,
                "depth": self.depth,
                "module": module,
                "function": func,
                "message": message,
                "meta": {k: summarize(v) for k, v in (meta or {}).items()},
            }))

        for line in lines:
            print(line, file=sys.stderr)
            if self._sink is not None:
                self._sink.write(line + "\n")
        if self._sink is not None:
            self._sink.flush()

    @contextmanager
    def span(self, name, module="", **meta):
        """
        Trace the enclosed block as one named step.

        A failure inside the block is logged at ERROR level with its elapsed
        time and re-raised.
        """
        if not self.settings.enabled:
            yield
            return

        self._emit("INFO", module, name, f"start {_format_meta(meta)}".strip(), meta)
        self._open.append(_OpenSpan(name, module, time.perf_counter()))
        try:
            yield
        except Exception as exc:
            opened = self._open.pop()
            self._emit(
                "ERROR", module, name,
                f"failed dt={_elapsed_ms(opened):.0f}ms error={type(exc).__name__}: {str(exc)[:100]}",
            )
            raise
        opened = self._open.pop()
        self._emit("INFO", module, name, f"end ok dt={_elapsed_ms(opened):.0f}ms")

    def event(self, message, level="INFO", **meta):
        """Log a one-off record inside the current span."""
        if not self.wants(level):
            return

        func, module = "", ""
        if self._open:
            func, module = self._open[-1].name, self._open[-1].module
        self._emit(level, module, func, f"{message} {_format_meta(meta)}".strip(), meta)


def _clock():
    now = datetime.now()
    return f"{now:%H:%M:%S}.{now.microsecond // 1000:03d}"


def _elapsed_ms(opened):
    return (time.perf_counter() - opened.started) * 1000


def _format_meta(meta):
    return " ".join(f"{k}={summarize(v)}" for k, v in meta.items())


def _digest(data):
    return hashlib.md5(data).hexdigest()[:8]


def summarize(obj, max_len=200):
    """
    Compact, length-capped description of obj for trace lines.

    Arrays show dtype, shape and a short content hash; strokes show their id
    and point count; detected shapes their type and confidence.
    """
    try:
        text = _describe(obj)
    except Exception:
        text = f"<{type(obj).__name__}>"
    if len(text) > max_len:
        return text[:max_len - 3] + "..."
    return text


def _describe(obj):
    kind = type(obj).__name__

    if obj is None:
        return "None"

    if isinstance(obj, np.ndarray):
        dims = "x".join(str(s) for s in obj.shape)
        payload = obj.tobytes() if 0 < obj.size < 1000 else str(obj.shape).encode()
        return f"ndarray({obj.dtype},{dims},h={_digest(payload)})"

    if isinstance(obj, BaseModel):
        return _describe_model(obj, kind)

    if isinstance(obj, str):
        if len(obj) <= 50:
            return repr(obj)
        return f"str(len={len(obj)},h={_digest(obj.encode())})"

    if isinstance(obj, bytes):
        return f"bytes(len={len(obj)},h={_digest(obj)})"

    if isinstance(obj, (list, tuple)):
        first = f",first={type(obj[0]).__name__}" if obj else ""
        return f"{kind}(len={len(obj)}{first})"

    if isinstance(obj, dict):
        keys = ",".join(str(k) for k in list(obj)[:5])
        return f"dict(len={len(obj)},keys=[{keys}])"

    if isinstance(obj, float):
        return f"{obj:.4g}"

    if isinstance(obj, int):
        return str(obj)

    return f"<{kind}>"


def _describe_model(model, kind):
    points = getattr(model, "points", None)
    if isinstance(points, list):
        return f"{kind}(id={getattr(model, 'id', '?')},points={len(points)})"
    shape_type = getattr(model, "shape_type", None)
    if shape_type is not None:
        return f"{kind}({shape_type.value},conf={model.confidence:.2f})"
    names = list(type(model).model_fields)[:3]
    return f"{kind}(fields={names}...)"


def trace(label=None):
    """
    Decorator running the wrapped function inside a span.

    The span is named label (default: the function name) and tagged with the
    last component of the function's module.
    """
    def decorator(func):
        module = (func.__module__ or "").rsplit(".", 1)[-1]
        name = label or func.__name__

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            if not _tracer.enabled:
                return func(*args, **kwargs)
            with _tracer.span(name, module=module):
                return func(*args, **kwargs)

        return wrapper
    return decorator


_tracer = Tracer()


def get_tracer():
    """Get the global tracer instance."""
    return _tracer


def configure_tracer(enabled=False, level="INFO", file_path=None, json_output=False):
    """Configure the global tracer from keyword settings."""
    _tracer.apply(TracingConfig(
        enabled=enabled,
        level=level,
        file_path=file_path,
        json_output=json_output,
    ))
