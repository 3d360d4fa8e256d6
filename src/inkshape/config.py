"""
Configuration management for InkShape.

Every recognition threshold and fixed confidence is a named default on a
frozen dataclass. Configs are plain values handed to each entry point; there
is no process-wide configuration state. YAML files override any subset of
the defaults.
"""

import os
from dataclasses import asdict, dataclass, field, fields, replace
from typing import Optional, Tuple

import yaml


@dataclass(frozen=True)
class DetectionConfig:
    """Thresholds for per-stroke shape classification."""
    min_points: int = 5
    circularity_threshold: float = 0.85
    rectangularity_threshold: float = 0.80
    line_straightness_threshold: float = 0.95
    arrow_angle_tolerance: float = 30.0  # degrees
    triangle_threshold: float = 0.75
    closed_ratio: float = 0.1  # endpoint gap relative to the longer bbox side
    corner_proximity_ratio: float = 0.15
    triangle_edge_distance: float = 10.0  # absolute units, not scale normalized
    diamond_confidence_factor: float = 0.95
    arrow_confidence_factor: float = 0.95
    freeform_confidence: float = 0.5
    connector_confidence: float = 0.6
    arrow_lookback: int = 10
    arrow_barb_window: int = 5
    arrow_head_size: float = 10.0


@dataclass(frozen=True)
class DiagramConfig:
    """Keyword sets and scoring constants for diagram-type classification."""
    flow_keywords: Tuple[str, ...] = ("start", "end", "if", "yes", "no", "begin", "process")
    oo_keywords: Tuple[str, ...] = ("class", "interface", "extends", "implements", "public", "private")
    flowchart_base: float = 0.3
    flowchart_keyword_weight: float = 0.1
    flowchart_shape_weight: float = 0.3
    flowchart_cap: float = 0.95
    uml_base: float = 0.3
    uml_keyword_weight: float = 0.15
    uml_cap: float = 0.9
    uml_min_rectangles: int = 3
    state_confidence: float = 0.6
    block_confidence: float = 0.5
    freeform_confidence: float = 0.3


@dataclass(frozen=True)
class SimplifyConfig:
    """Douglas-Peucker pre-pass over incoming strokes."""
    enabled: bool = False
    epsilon: float = 2.0


@dataclass(frozen=True)
class NormalizeConfig:
    """Rescale the whole drawing into a target viewport before recognition."""
    enabled: bool = False
    target_width: float = 1920.0
    target_height: float = 1080.0
    padding: float = 20.0


@dataclass(frozen=True)
class CanvasConfig:
    """Raster canvas used for debug renders of the strokes."""
    width: int = 1920
    height: int = 1080
    background_color: str = "#ffffff"


@dataclass(frozen=True)
class TracingConfig:
    """Configuration for runtime tracing."""
    enabled: bool = False
    level: str = "INFO"
    file_path: Optional[str] = None
    json_output: bool = False


@dataclass(frozen=True)
class PipelineConfig:
    """Complete pipeline configuration."""
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    diagram: DiagramConfig = field(default_factory=DiagramConfig)
    simplify: SimplifyConfig = field(default_factory=SimplifyConfig)
    normalize: NormalizeConfig = field(default_factory=NormalizeConfig)
    canvas: CanvasConfig = field(default_factory=CanvasConfig)
    tracing: TracingConfig = field(default_factory=TracingConfig)
    render_enabled: bool = False


_SECTIONS = ("detection", "diagram", "simplify", "normalize", "canvas", "tracing")


def load_config(config_path=None):
    """
    Load configuration from YAML file.

    Falls back to defaults for any missing values.
    """
    config = PipelineConfig()

    if config_path and os.path.exists(config_path):
        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f) or {}

        config = merge_config(config, yaml_data)

    return config


def merge_config(config, data):
    """
    Return a copy of config with the known keys of data applied.

    Unknown sections and keys are ignored. Lists become tuples so keyword
    sets stay hashable.
    """
    updates = {}
    for section in _SECTIONS:
        if section not in data or not data[section]:
            continue
        current = getattr(config, section)
        known = {f.name for f in fields(current)}
        overrides = {
            key: tuple(value) if isinstance(value, list) else value
            for key, value in data[section].items()
            if key in known
        }
        updates[section] = replace(current, **overrides)

    if "render_enabled" in data:
        updates["render_enabled"] = bool(data["render_enabled"])

    return replace(config, **updates)


def config_to_dict(config):
    """Plain-data view of a PipelineConfig, suitable for YAML or JSON."""
    data = asdict(config)
    for key, value in data["diagram"].items():
        if isinstance(value, tuple):
            data["diagram"][key] = list(value)
    return data


def save_default_config(path):
    """Save default configuration to YAML file for reference."""
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(config_to_dict(PipelineConfig()), f, default_flow_style=False, sort_keys=False)
