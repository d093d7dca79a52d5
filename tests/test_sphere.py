"""Unit tests for sphere intersection.

Tests cover:
- Ray hitting sphere from outside (front face)
- Ray missing sphere
- Ray starting inside sphere (back face)
- Interval bounds: (t_min, t_max]
- Construction validation
"""

import math

import pytest

from src.pathtracer.core.ray import Ray
from src.pathtracer.core.vec3 import Color, Point3, Vec3
from src.pathtracer.geometry.sphere import Sphere
from src.pathtracer.materials.lambertian import Lambertian


@pytest.fixture
def gray():
    return Lambertian(Color(0.5, 0.5, 0.5))


@pytest.fixture
def unit_sphere(gray):
    """Sphere at the origin with radius 1."""
    return Sphere(Point3(0.0, 0.0, 0.0), 1.0, gray)


class TestSphereIntersection:
    """Tests for ray-sphere intersection."""

    def test_direct_hit_from_outside(self, unit_sphere, gray):
        """Test ray hitting sphere head-on from outside."""
        ray = Ray(Point3(0.0, 0.0, 5.0), Vec3(0.0, 0.0, -1.0))
        rec = unit_sphere.hit(ray, 0.001, math.inf)

        assert rec is not None
        # Should hit at z=1 (front of sphere), so t=4
        assert abs(rec.t - 4.0) < 1e-12
        assert rec.point.isclose(Point3(0.0, 0.0, 1.0))
        assert rec.normal.isclose(Vec3(0.0, 0.0, 1.0))
        assert rec.front_face is True
        assert rec.material is gray

    def test_miss(self, unit_sphere):
        ray = Ray(Point3(0.0, 2.0, 5.0), Vec3(0.0, 0.0, -1.0))
        assert unit_sphere.hit(ray, 0.001, math.inf) is None

    def test_ray_pointing_away_misses(self, unit_sphere):
        ray = Ray(Point3(0.0, 0.0, 5.0), Vec3(0.0, 0.0, 1.0))
        assert unit_sphere.hit(ray, 0.001, math.inf) is None

    def test_hit_from_inside_reports_back_face(self, unit_sphere):
        """A ray starting at the center exits at t=1 with the normal flipped inward."""
        ray = Ray(Point3(0.0, 0.0, 0.0), Vec3(1.0, 0.0, 0.0))
        rec = unit_sphere.hit(ray, 0.001, math.inf)

        assert rec is not None
        assert abs(rec.t - 1.0) < 1e-12
        assert rec.front_face is False
        assert rec.normal.isclose(Vec3(-1.0, 0.0, 0.0))

    def test_normal_opposes_ray(self, unit_sphere):
        for direction in (Vec3(0.0, 0.0, -1.0), Vec3(0.1, 0.2, -1.0)):
            ray = Ray(Point3(0.0, 0.0, 5.0), direction)
            rec = unit_sphere.hit(ray, 0.001, math.inf)
            assert rec.normal.dot(ray.direction) <= 0.0
            assert abs(rec.normal.length() - 1.0) < 1e-12

    def test_unnormalized_direction(self, unit_sphere):
        """t scales inversely with the direction length."""
        ray = Ray(Point3(0.0, 0.0, 5.0), Vec3(0.0, 0.0, -2.0))
        rec = unit_sphere.hit(ray, 0.001, math.inf)
        assert abs(rec.t - 2.0) < 1e-12

    def test_near_root_behind_t_min_uses_far_root(self, unit_sphere):
        """Origin just past the entry point: the exit point is reported."""
        ray = Ray(Point3(0.0, 0.0, 5.0), Vec3(0.0, 0.0, -1.0))
        rec = unit_sphere.hit(ray, 4.5, math.inf)
        assert rec is not None
        assert abs(rec.t - 6.0) < 1e-12
        assert rec.front_face is False

    def test_t_max_is_inclusive(self, unit_sphere):
        ray = Ray(Point3(0.0, 0.0, 5.0), Vec3(0.0, 0.0, -1.0))
        rec = unit_sphere.hit(ray, 0.001, 4.0)
        assert rec is not None
        assert rec.t == 4.0

    def test_t_max_excludes_farther_hits(self, unit_sphere):
        ray = Ray(Point3(0.0, 0.0, 5.0), Vec3(0.0, 0.0, -1.0))
        assert unit_sphere.hit(ray, 0.001, 3.9) is None

    def test_t_min_is_exclusive(self, unit_sphere):
        """Both roots at or below t_min means no hit."""
        ray = Ray(Point3(0.0, 0.0, 5.0), Vec3(0.0, 0.0, -1.0))
        assert unit_sphere.hit(ray, 6.0, math.inf) is None

    def test_both_roots_behind_origin(self, unit_sphere):
        ray = Ray(Point3(0.0, 0.0, -5.0), Vec3(0.0, 0.0, -1.0))
        assert unit_sphere.hit(ray, 0.001, math.inf) is None


class TestSphereValidation:
    """Tests for sphere construction checks."""

    @pytest.mark.parametrize("radius", [0.0, -1.0, math.inf, math.nan])
    def test_invalid_radius(self, gray, radius):
        with pytest.raises(ValueError, match="radius"):
            Sphere(Point3(0.0, 0.0, 0.0), radius, gray)

    def test_material_must_be_a_material(self):
        with pytest.raises(TypeError):
            Sphere(Point3(0.0, 0.0, 0.0), 1.0, Color(0.5, 0.5, 0.5))
