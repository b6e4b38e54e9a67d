from __future__ import annotations

from .errors import InvalidOptionError
from .geometry import Point, Vector

# ============================================================================
# Cubic Bezier math for spline edge routing
# ============================================================================

# Segments shorter than this get no curvature at all.
_MIN_SEGMENT_LENGTH = 0.001


def bezier_point(t: float, p0: Point, p1: Point, p2: Point, p3: Point) -> Point:
    """Evaluate B(t) = (1-t)^3 P0 + 3(1-t)^2 t P1 + 3(1-t) t^2 P2 + t^3 P3.

    ``t`` is clamped to [0, 1].
    """
    t = min(max(t, 0.0), 1.0)
    u = 1.0 - t
    uu = u * u
    tt = t * t
    a = uu * u
    b = 3 * uu * t
    c = 3 * u * tt
    d = tt * t
    return Point(
        x=a * p0.x + b * p1.x + c * p2.x + d * p3.x,
        y=a * p0.y + b * p1.y + c * p2.y + d * p3.y,
    )


def calculate_curve(
    start: Point,
    end: Point,
    control1: Point,
    control2: Point,
    segments: int = 20,
) -> list[Point]:
    """Sample exactly ``segments`` points along the curve, both endpoints included."""
    if segments < 2:
        raise InvalidOptionError(
            f"Spline needs at least 2 sample points, got {segments}",
            option="spline.segments",
            value=segments,
        )
    last = segments - 1
    points = [bezier_point(i / last, start, control1, control2, end) for i in range(segments)]
    # Pin the endpoints exactly; the blend can drift by an ulp.
    points[0] = start
    points[-1] = end
    return points


def calculate_control_points(
    start: Point, end: Point, curvature: float = 0.5
) -> tuple[Point, Point]:
    """Control points at 1/3 and 2/3 of the chord, pushed off it on opposite sides.

    The perpendicular offset is ``curvature * distance / 3``.
    """
    chord = Vector.between(start, end)
    distance = chord.magnitude()
    if distance < _MIN_SEGMENT_LENGTH:
        return start, end

    offset = curvature * distance / 3
    normal = chord.perpendicular().normalize() * offset
    control1 = start + chord / 3 + normal
    control2 = start + chord * (2 / 3) - normal
    return control1, control2


def horizontal_control_points(
    start: Point, end: Point, offset_ratio: float = 0.5
) -> tuple[Point, Point]:
    """Controls for a curve that leaves and enters horizontally."""
    offset = abs(end.x - start.x) * offset_ratio
    if end.x < start.x:
        offset = -offset
    return Point(x=start.x + offset, y=start.y), Point(x=end.x - offset, y=end.y)


def vertical_control_points(
    start: Point, end: Point, offset_ratio: float = 0.5
) -> tuple[Point, Point]:
    """Controls for a curve that leaves and enters vertically."""
    offset = abs(end.y - start.y) * offset_ratio
    if end.y < start.y:
        offset = -offset
    return Point(x=start.x, y=start.y + offset), Point(x=end.x, y=end.y - offset)
