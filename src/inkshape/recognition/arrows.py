"""
Arrow-head detection at the tip of an open stroke.

A heuristic: an arrow drawn in one stroke ends with a short barb that
leaves the shaft at a clear angle. No barb, no arrow head.
"""

import math

from inkshape.geometry import heading
from inkshape.models import ArrowHead


def detect_arrow_head(points, angle_tolerance=30.0, lookback=10, barb_window=5, head_size=10.0):
    """
    Look for a barb among the last segments before the tip.

    The main direction runs from the point lookback samples before the tip
    (the first point for shorter strokes) to the tip. A segment is a barb
    when its heading differs from the main direction, folded into
    [0, 180) degrees, by more than angle_tolerance and less than
    180 - angle_tolerance.

    Args:
        points: stroke points in drawing order; the last one is the tip
        angle_tolerance: degrees a barb must deviate from the shaft
        lookback: samples before the tip used for the main direction
        barb_window: number of trailing points inspected for barbs
        head_size: size reported on the detected arrow head

    Returns:
        ArrowHead or None
    """
    n = len(points)
    if n < 5:
        return None

    tip = points[-1]
    tail_start = max(n - lookback, 0)
    main_direction = heading(points[tail_start], tip)

    barb_start = max(n - barb_window, 0)
    for i in range(barb_start, n - 1):
        segment_angle = heading(points[i], points[i + 1])
        angle_diff = math.degrees(abs(segment_angle - main_direction)) % 180.0
        if angle_tolerance < angle_diff < 180.0 - angle_tolerance:
            return ArrowHead(style="classic", size=head_size, direction=math.degrees(main_direction))

    return None
