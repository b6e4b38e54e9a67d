from __future__ import annotations

import math
from dataclasses import dataclass

# ============================================================================
# Geometry primitives -- immutable value types shared by every layout phase
# ============================================================================


@dataclass(frozen=True, slots=True)
class Point:
    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Point | Vector) -> Point:
        return Point(x=self.x + other.x, y=self.y + other.y)

    def __sub__(self, other: Point | Vector) -> Point:
        return Point(x=self.x - other.x, y=self.y - other.y)

    def __mul__(self, scalar: float) -> Point:
        return Point(x=self.x * scalar, y=self.y * scalar)

    def __truediv__(self, scalar: float) -> Point:
        return Point(x=self.x / scalar, y=self.y / scalar)

    def distance_to(self, other: Point) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def to_vector(self) -> Vector:
        return Vector(x=self.x, y=self.y)

    def as_tuple(self) -> tuple[float, float]:
        return self.x, self.y

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


@dataclass(frozen=True, slots=True)
class Vector:
    x: float = 0.0
    y: float = 0.0

    @staticmethod
    def between(start: Point, end: Point) -> Vector:
        return Vector(x=end.x - start.x, y=end.y - start.y)

    def __add__(self, other: Vector) -> Vector:
        return Vector(x=self.x + other.x, y=self.y + other.y)

    def __sub__(self, other: Vector) -> Vector:
        return Vector(x=self.x - other.x, y=self.y - other.y)

    def __mul__(self, scalar: float) -> Vector:
        return Vector(x=self.x * scalar, y=self.y * scalar)

    def __truediv__(self, scalar: float) -> Vector:
        return Vector(x=self.x / scalar, y=self.y / scalar)

    def __neg__(self) -> Vector:
        return Vector(x=-self.x, y=-self.y)

    def magnitude(self) -> float:
        return math.hypot(self.x, self.y)

    def normalize(self) -> Vector:
        """Unit vector in the same direction; the zero vector stays zero."""
        mag = self.magnitude()
        if mag == 0:
            return Vector(0.0, 0.0)
        return Vector(x=self.x / mag, y=self.y / mag)

    def dot(self, other: Vector) -> float:
        return self.x * other.x + self.y * other.y

    def perpendicular(self) -> Vector:
        """Counter-clockwise perpendicular (-y, x)."""
        return Vector(x=-self.y, y=self.x)

    def angle(self) -> float:
        return math.atan2(self.y, self.x)

    def __str__(self) -> str:
        return f"<{self.x}, {self.y}>"


@dataclass(frozen=True, slots=True)
class Dimension:
    width: float = 0.0
    height: float = 0.0

    def area(self) -> float:
        return self.width * self.height

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass(frozen=True, slots=True)
class Rectangle:
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @staticmethod
    def bounding(rects: list[Rectangle]) -> Rectangle:
        """Smallest rectangle enclosing all given rectangles (empty -> zero rect)."""
        if not rects:
            return Rectangle()
        min_x = min(r.x for r in rects)
        min_y = min(r.y for r in rects)
        max_x = max(r.right for r in rects)
        max_y = max(r.bottom for r in rects)
        return Rectangle(x=min_x, y=min_y, width=max_x - min_x, height=max_y - min_y)

    @property
    def left(self) -> float:
        return self.x

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def position(self) -> Point:
        return Point(x=self.x, y=self.y)

    @property
    def size(self) -> Dimension:
        return Dimension(width=self.width, height=self.height)

    def center(self) -> Point:
        return Point(x=self.x + self.width / 2, y=self.y + self.height / 2)

    def area(self) -> float:
        return self.width * self.height

    def contains(self, point: Point) -> bool:
        return self.left <= point.x <= self.right and self.top <= point.y <= self.bottom

    def intersects(self, other: Rectangle) -> bool:
        return not (
            self.right < other.left
            or self.left > other.right
            or self.bottom < other.top
            or self.top > other.bottom
        )

    def union(self, other: Rectangle) -> Rectangle:
        return Rectangle.bounding([self, other])

    def translate(self, dx: float, dy: float) -> Rectangle:
        return Rectangle(x=self.x + dx, y=self.y + dy, width=self.width, height=self.height)

    def segment_exit(self, inside: Point, outside: Point) -> Point:
        """Point where the segment inside -> outside leaves this rectangle.

        Falls back to ``inside`` for degenerate segments.
        """
        dx = outside.x - inside.x
        dy = outside.y - inside.y
        candidates: list[float] = []
        if dx > 0:
            candidates.append((self.right - inside.x) / dx)
        elif dx < 0:
            candidates.append((self.left - inside.x) / dx)
        if dy > 0:
            candidates.append((self.bottom - inside.y) / dy)
        elif dy < 0:
            candidates.append((self.top - inside.y) / dy)
        if not candidates:
            return inside
        t = min(max(min(candidates), 0.0), 1.0)
        return Point(x=inside.x + dx * t, y=inside.y + dy * t)

    def __str__(self) -> str:
        return f"({self.x}, {self.y}, {self.width}x{self.height})"
