"""
Validation rules for InkShape.

Checks detected shapes against the strokes they came from. Rules never
raise; every outcome lands in the ValidationReport.
"""

from inkshape.models import CheckResult, Severity, ValidationReport
from inkshape.tracer import get_tracer, trace

# Slack for float rounding when comparing points against bounds
_BOUNDS_TOLERANCE = 1e-9


@trace(label="run_validation")
def run_validation(shapes, strokes):
    """
    Run all validation checks on a set of detected shapes.

    Returns ValidationReport with all check results.
    """
    tracer = get_tracer()

    checks = [
        check_bounds_contain_points(shapes, strokes),
        check_confidence_range(shapes),
        check_stroke_references(shapes, strokes),
        check_unique_ids(shapes),
    ]

    report = ValidationReport(checks=checks)

    tracer.event(f"Validation complete: {report.error_count} errors, {report.warning_count} warnings")

    return report


def check_bounds_contain_points(shapes, strokes):
    """Every point of a source stroke must lie inside its shape's bounds."""
    by_id = {s.id: s for s in strokes}
    violations = []

    for shape in shapes:
        b = shape.bounds
        for stroke_id in shape.stroke_ids:
            stroke = by_id.get(stroke_id)
            if stroke is None:
                continue
            outside = sum(1 for p in stroke.points if not b.contains(p.x, p.y, _BOUNDS_TOLERANCE))
            if outside:
                violations.append({"shape_id": shape.id, "stroke_id": stroke_id, "outside": outside})

    passed = not violations
    return CheckResult(
        rule_id="bounds_contain_points",
        severity=Severity.ERROR,
        passed=passed,
        message="All stroke points lie within their shape bounds" if passed
        else f"{len(violations)} shapes do not contain all of their stroke points",
        evidence={"violations": violations[:10]},
    )


def check_confidence_range(shapes):
    """Confidence must be a number in [0, 1]."""
    bad = [s.id for s in shapes if not (0.0 <= s.confidence <= 1.0)]
    passed = not bad
    return CheckResult(
        rule_id="confidence_range",
        severity=Severity.ERROR,
        passed=passed,
        message="All confidences within [0, 1]" if passed else f"{len(bad)} confidences out of range",
        evidence={"shape_ids": bad[:10]},
    )


def check_stroke_references(shapes, strokes):
    """Each shape must name at least one stroke, and only known ones."""
    known = {s.id for s in strokes}
    empty = [s.id for s in shapes if not s.stroke_ids]
    dangling = [
        {"shape_id": s.id, "stroke_id": sid}
        for s in shapes for sid in s.stroke_ids if sid not in known
    ]

    if empty:
        return CheckResult(
            rule_id="stroke_references",
            severity=Severity.ERROR,
            passed=False,
            message=f"{len(empty)} shapes reference no strokes",
            evidence={"shape_ids": empty[:10]},
        )

    passed = not dangling
    return CheckResult(
        rule_id="stroke_references",
        severity=Severity.WARN,
        passed=passed,
        message="All stroke references resolve" if passed
        else f"{len(dangling)} stroke references do not resolve",
        evidence={"dangling": dangling[:10]},
    )


def check_unique_ids(shapes):
    """Shape ids must not repeat."""
    seen = set()
    duplicates = []
    for shape in shapes:
        if shape.id in seen:
            duplicates.append(shape.id)
        seen.add(shape.id)

    passed = not duplicates
    return CheckResult(
        rule_id="unique_ids",
        severity=Severity.ERROR,
        passed=passed,
        message="All shape ids are unique" if passed else f"{len(duplicates)} duplicate shape ids",
        evidence={"duplicates": duplicates[:10]},
    )
