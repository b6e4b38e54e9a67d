"""Tests for the geometry value types -- Point, Vector, Rectangle, Dimension."""
from __future__ import annotations

import math

import pytest

from layerflow.geometry import Dimension, Point, Rectangle, Vector


class TestPoint:
    def test_arithmetic(self):
        p = Point(x=1, y=2)
        assert p + Point(x=3, y=4) == Point(x=4, y=6)
        assert p - Point(x=1, y=1) == Point(x=0, y=1)
        assert p * 2 == Point(x=2, y=4)
        assert p / 2 == Point(x=0.5, y=1)

    def test_distance_is_euclidean(self):
        assert Point(0, 0).distance_to(Point(3, 4)) == pytest.approx(5.0)

    def test_to_vector(self):
        assert Point(2, -1).to_vector() == Vector(2, -1)

    def test_is_immutable(self):
        p = Point(1, 1)
        with pytest.raises(AttributeError):
            p.x = 5  # type: ignore[misc]


class TestVector:
    def test_magnitude_and_normalize(self):
        v = Vector(3, 4)
        assert v.magnitude() == pytest.approx(5.0)
        n = v.normalize()
        assert n.x == pytest.approx(0.6)
        assert n.y == pytest.approx(0.8)

    def test_zero_vector_normalizes_to_zero(self):
        assert Vector(0, 0).normalize() == Vector(0, 0)

    def test_dot_and_perpendicular(self):
        v = Vector(2, 3)
        assert v.dot(Vector(4, -1)) == pytest.approx(5.0)
        assert v.perpendicular() == Vector(-3, 2)
        assert v.dot(v.perpendicular()) == pytest.approx(0.0)

    def test_angle(self):
        assert Vector(0, 1).angle() == pytest.approx(math.pi / 2)

    def test_between(self):
        assert Vector.between(Point(1, 1), Point(4, 5)) == Vector(3, 4)

    def test_operators(self):
        assert Vector(1, 2) + Vector(1, 1) == Vector(2, 3)
        assert Vector(1, 2) - Vector(1, 1) == Vector(0, 1)
        assert Vector(1, 2) * 3 == Vector(3, 6)
        assert Vector(2, 4) / 2 == Vector(1, 2)
        assert -Vector(1, -2) == Vector(-1, 2)


class TestRectangle:
    def test_edges_and_center(self):
        r = Rectangle(x=10, y=20, width=30, height=40)
        assert (r.left, r.top, r.right, r.bottom) == (10, 20, 40, 60)
        assert r.center() == Point(25, 40)
        assert r.size == Dimension(30, 40)

    def test_contains_includes_boundary(self):
        r = Rectangle(0, 0, 10, 10)
        assert r.contains(Point(10, 5))
        assert not r.contains(Point(10.5, 5))

    def test_intersects(self):
        a = Rectangle(0, 0, 10, 10)
        assert a.intersects(Rectangle(5, 5, 10, 10))
        assert not a.intersects(Rectangle(20, 20, 5, 5))

    def test_union(self):
        u = Rectangle(0, 0, 10, 10).union(Rectangle(20, 5, 10, 10))
        assert u == Rectangle(0, 0, 30, 15)

    def test_bounding_of_nothing_is_empty(self):
        assert Rectangle.bounding([]) == Rectangle()

    def test_segment_exit_on_right_edge(self):
        r = Rectangle(0, 0, 100, 50)
        exit_point = r.segment_exit(Point(50, 25), Point(150, 25))
        assert exit_point == Point(100, 25)

    def test_segment_exit_diagonal(self):
        r = Rectangle(0, 0, 100, 100)
        exit_point = r.segment_exit(Point(50, 50), Point(50, -50))
        assert exit_point.x == pytest.approx(50)
        assert exit_point.y == pytest.approx(0)

    def test_segment_exit_degenerate(self):
        r = Rectangle(0, 0, 10, 10)
        assert r.segment_exit(Point(5, 5), Point(5, 5)) == Point(5, 5)


class TestDimension:
    def test_area(self):
        assert Dimension(3, 4).area() == 12
