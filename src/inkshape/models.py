"""
Pydantic data models for InkShape.

Strokes come in from the drawing canvas, text regions from the OCR
collaborator; detected shapes and processing results go out to the export
layer. Every model forbids unknown fields so JSON round-trips are lossless.
"""

import uuid
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class ShapeType(str, Enum):
    """Closed set of primitives the shape classifier can emit."""
    RECTANGLE = "rectangle"
    CIRCLE = "circle"
    ELLIPSE = "ellipse"
    TRIANGLE = "triangle"
    DIAMOND = "diamond"
    ARROW = "arrow"
    LINE = "line"
    CONNECTOR = "connector"
    FREEFORM = "freeform"


class Severity(str, Enum):
    """Severity levels for validation checks."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"


class Point(BaseModel):
    """A single sampled pen position."""
    x: float
    y: float
    pressure: Optional[float] = None
    timestamp: int = Field(default=0, ge=0)

    model_config = ConfigDict(extra="forbid")


class Stroke(BaseModel):
    """One continuous pen-down to pen-up sequence of points."""
    id: str
    points: List[Point] = Field(default_factory=list)
    color: str = "#000000"
    width: float = 2.0
    tool: str = "pen"

    model_config = ConfigDict(extra="forbid")


class ShapeBounds(BaseModel):
    """Axis-aligned bounding box of a stroke. Rotation is reserved and always 0."""
    x: float
    y: float
    width: float
    height: float
    rotation: float = 0.0

    model_config = ConfigDict(extra="forbid")

    def contains(self, px, py, tolerance=1e-9):
        """Check whether (px, py) lies inside the box, edges included, up to float rounding."""
        return (self.x - tolerance <= px <= self.x + self.width + tolerance
                and self.y - tolerance <= py <= self.y + self.height + tolerance)


class ArrowHead(BaseModel):
    """Arrow head found at the tip of an open stroke."""
    style: str = "classic"
    size: float = 10.0
    direction: float = 0.0  # degrees

    model_config = ConfigDict(extra="forbid")


class ShapeProperties(BaseModel):
    """Per-shape geometric details consumed by the export layer."""
    center_x: float
    center_y: float
    radius: Optional[float] = None
    start_point: Optional[Tuple[float, float]] = None
    end_point: Optional[Tuple[float, float]] = None
    corner_radius: Optional[float] = None
    arrow_head: Optional[ArrowHead] = None

    model_config = ConfigDict(extra="forbid")


class DetectedShape(BaseModel):
    """A classified primitive derived from one (or, later, several) strokes."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    shape_type: ShapeType
    bounds: ShapeBounds
    confidence: float = Field(..., ge=0.0, le=1.0)
    stroke_ids: List[str] = Field(..., min_length=1)
    properties: ShapeProperties

    model_config = ConfigDict(extra="forbid", frozen=True)


class TextBounds(BaseModel):
    """Bounding box of a recognized text fragment."""
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    model_config = ConfigDict(extra="forbid")


class TextRegion(BaseModel):
    """A text fragment recognized by OCR."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    text: str
    bounds: TextBounds = Field(default_factory=TextBounds)
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)
    font_size_estimate: float = 0.0

    model_config = ConfigDict(extra="forbid")


class DiagramClassification(BaseModel):
    """Label for the diagram as a whole."""
    diagram_type: str
    confidence: float = Field(..., ge=0.0, le=1.0)

    model_config = ConfigDict(extra="forbid")

    def as_tuple(self):
        return self.diagram_type, self.confidence


class CheckResult(BaseModel):
    """Result of a single validation check."""
    rule_id: str
    severity: Severity
    passed: bool
    message: str
    evidence: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")


class ValidationReport(BaseModel):
    """Collection of validation check results."""
    checks: List[CheckResult] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    @property
    def has_errors(self):
        """Check if any errors exist."""
        return any(c.severity == Severity.ERROR and not c.passed for c in self.checks)

    @property
    def error_count(self):
        """Count of failed error-level checks."""
        return sum(1 for c in self.checks if c.severity == Severity.ERROR and not c.passed)

    @property
    def warning_count(self):
        """Count of failed warning-level checks."""
        return sum(1 for c in self.checks if c.severity == Severity.WARN and not c.passed)


class ProcessingResult(BaseModel):
    """Everything one recognition run produces for the export layer."""
    shapes: List[DetectedShape] = Field(default_factory=list)
    text_regions: List[TextRegion] = Field(default_factory=list)
    suggested_diagram_type: str = "freeform"
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    validation: ValidationReport = Field(default_factory=ValidationReport)

    model_config = ConfigDict(extra="forbid")


def generate_shape_id():
    """Fresh unique identifier for a detected shape."""
    return str(uuid.uuid4())
