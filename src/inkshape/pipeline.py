"""
Main pipeline orchestrator for InkShape.

Runs the optional stroke pre-passes, per-stroke shape detection, diagram
classification and output validation, and writes the run artifacts.
"""

import os

from inkshape.config import PipelineConfig, load_config
from inkshape.export.svg_overlay import emit_shapes_svg
from inkshape.io.save_artifacts import ensure_dir, save_image, save_json, save_svg
from inkshape.io.stroke_files import load_strokes, load_text_regions
from inkshape.models import ProcessingResult, TextRegion
from inkshape.recognition.classifier import detect_shapes
from inkshape.recognition.diagram import classify_diagram
from inkshape.render.raster import draw_shape_overlay, render_strokes_to_image
from inkshape.strokes.normalize import normalize_strokes
from inkshape.strokes.simplify import simplify_strokes
from inkshape.tracer import get_tracer, trace
from inkshape.validate.rules import run_validation


def prepare_strokes(strokes, config):
    """
    Apply the enabled pre-passes (simplify, then normalize).

    Always returns new Stroke objects.
    """
    tracer = get_tracer()
    prepared = [s.model_copy(deep=True) for s in strokes]

    if config.simplify.enabled:
        with tracer.span("simplify", module="pipeline"):
            prepared = simplify_strokes(prepared, config.simplify.epsilon)

    if config.normalize.enabled:
        with tracer.span("normalize", module="pipeline"):
            prepared = normalize_strokes(
                prepared,
                config.normalize.target_width,
                config.normalize.target_height,
                config.normalize.padding,
            )

    return prepared


@trace(label="process_strokes")
def process_strokes(strokes, text_regions=None, config=None):
    """
    Recognize shapes and classify the diagram for one batch of strokes.

    Args:
        strokes: list of Stroke, left unmodified
        text_regions: list of TextRegion or plain strings from OCR
        config: PipelineConfig (defaults when omitted)

    Returns:
        (ProcessingResult, prepared strokes the shapes refer to)
    """
    tracer = get_tracer()
    config = config or PipelineConfig()
    text_regions = [
        TextRegion(text=t) if isinstance(t, str) else t
        for t in (text_regions or [])
    ]

    prepared = prepare_strokes(strokes, config)

    with tracer.span("detect_shapes", module="pipeline", strokes=len(prepared)):
        shapes = detect_shapes(prepared, config.detection)

    # diagram pass needs the complete shape set
    with tracer.span("classify_diagram", module="pipeline"):
        diagram_type, confidence = classify_diagram(shapes, text_regions, config.diagram)

    with tracer.span("validate", module="pipeline"):
        report = run_validation(shapes, prepared)

    result = ProcessingResult(
        shapes=shapes,
        text_regions=text_regions,
        suggested_diagram_type=diagram_type,
        confidence=confidence,
        validation=report,
    )
    return result, prepared


@trace(label="run_pipeline")
def run_pipeline(strokes_path, out_dir, text_path=None, config=None, config_path=None, render=None):
    """
    Run recognition on a stroke file and write the artifacts.

    Writes result.json, validation_report.json and shapes.svg to out_dir,
    plus strokes.png and shapes_overlay.png when rendering is enabled.

    Raises:
        FileNotFoundError: a stroke or text file does not exist
        pydantic.ValidationError: an input file is malformed
    """
    tracer = get_tracer()

    if config is None:
        config = load_config(config_path)
    if render is None:
        render = config.render_enabled

    with tracer.span("load_inputs", module="pipeline"):
        strokes = load_strokes(strokes_path)
        text_regions = load_text_regions(text_path) if text_path else []

    ensure_dir(out_dir)

    result, prepared = process_strokes(strokes, text_regions, config)

    with tracer.span("write_artifacts", module="pipeline"):
        save_json(result, os.path.join(out_dir, "result.json"))
        save_json(result.validation, os.path.join(out_dir, "validation_report.json"))

        width, height = _canvas_size(config)
        dwg = emit_shapes_svg(result.shapes, width, height, strokes=prepared)
        save_svg(dwg, os.path.join(out_dir, "shapes.svg"))

        if render:
            img = render_strokes_to_image(prepared, config.canvas)
            save_image(img, os.path.join(out_dir, "strokes.png"))
            overlay = draw_shape_overlay(img, result.shapes)
            save_image(overlay, os.path.join(out_dir, "shapes_overlay.png"))

    tracer.event(
        f"Run complete: {len(result.shapes)} shapes, diagram={result.suggested_diagram_type}",
        confidence=result.confidence,
    )
    return result


def _canvas_size(config):
    if config.normalize.enabled:
        return config.normalize.target_width, config.normalize.target_height
    return config.canvas.width, config.canvas.height
