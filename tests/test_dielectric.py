"""Unit tests for the Dielectric material.

Tests cover:
- Schlick reflectance values
- Refraction entering and exiting glass
- Total internal reflection
- Attenuation is always white, the material never absorbs
- IOR validation
"""

import math

import numpy as np
import pytest

from src.pathtracer.core.ray import Ray
from src.pathtracer.core.vec3 import Color, Point3, Vec3
from src.pathtracer.geometry.hittable import HitRecord
from src.pathtracer.materials.dielectric import Dielectric, schlick_reflectance


class FixedDraw:
    """Stand-in generator whose random() always returns the same value."""

    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value


def make_record(material, normal=Vec3(0.0, 1.0, 0.0), front_face=True):
    return HitRecord(
        point=Point3(0.0, 0.0, 0.0),
        normal=normal,
        material=material,
        t=1.0,
        front_face=front_face,
    )


class TestSchlick:
    """Tests for Schlick's Fresnel approximation."""

    def test_normal_incidence_glass(self):
        """r0 = ((1 - 1.5) / (1 + 1.5))^2 = 0.04."""
        assert abs(schlick_reflectance(1.0, 1.5) - 0.04) < 1e-12

    def test_grazing_incidence_is_total(self):
        assert abs(schlick_reflectance(0.0, 1.5) - 1.0) < 1e-12

    def test_monotonic_in_angle(self):
        values = [schlick_reflectance(c, 1.0 / 1.5) for c in (1.0, 0.8, 0.5, 0.2, 0.0)]
        assert values == sorted(values)


class TestDielectricScatter:
    """Tests for reflection and refraction decisions."""

    def test_never_absorbs_and_is_transparent(self, rng):
        material = Dielectric(1.5)
        rec = make_record(material)
        ray_in = Ray(Point3(-1.0, 1.0, 0.0), Vec3(1.0, -1.0, 0.0))

        for _ in range(200):
            result = material.scatter(ray_in, rec, rng)
            assert result is not None
            assert result.attenuation == Color(1.0, 1.0, 1.0)
            assert result.scattered.origin == rec.point

    def test_head_on_refracts_straight_through(self):
        """A draw above the 4% reflectance refracts without bending."""
        material = Dielectric(1.5)
        rec = make_record(material)
        ray_in = Ray(Point3(0.0, 1.0, 0.0), Vec3(0.0, -1.0, 0.0))

        result = material.scatter(ray_in, rec, FixedDraw(0.5))
        assert result.scattered.direction.isclose(Vec3(0.0, -1.0, 0.0), tol=1e-12)

    def test_head_on_reflects_on_low_draw(self):
        """A draw below the 4% reflectance reflects."""
        material = Dielectric(1.5)
        rec = make_record(material)
        ray_in = Ray(Point3(0.0, 1.0, 0.0), Vec3(0.0, -1.0, 0.0))

        result = material.scatter(ray_in, rec, FixedDraw(0.01))
        assert result.scattered.direction.isclose(Vec3(0.0, 1.0, 0.0), tol=1e-12)

    def test_entering_glass_bends_toward_normal(self):
        material = Dielectric(1.5)
        rec = make_record(material)
        theta_i = math.radians(45.0)
        ray_in = Ray(Point3(0.0, 1.0, 0.0), Vec3(math.sin(theta_i), -math.cos(theta_i), 0.0))

        out = material.scatter(ray_in, rec, FixedDraw(0.99)).scattered.direction
        sin_t = out.x / out.length()
        assert abs(sin_t - math.sin(theta_i) / 1.5) < 1e-9
        assert out.y < 0.0

    def test_total_internal_reflection(self):
        """Leaving glass beyond the critical angle always reflects."""
        material = Dielectric(1.5)
        # Inside the glass: the normal faces the incoming ray, front_face False
        rec = make_record(material, front_face=False)
        theta_i = math.radians(60.0)  # critical angle for 1.5 is ~41.8 degrees
        ray_in = Ray(Point3(0.0, 1.0, 0.0), Vec3(math.sin(theta_i), -math.cos(theta_i), 0.0))

        out = material.scatter(ray_in, rec, FixedDraw(0.999)).scattered.direction
        expected = Vec3(math.sin(theta_i), math.cos(theta_i), 0.0)
        assert out.isclose(expected, tol=1e-12)

    def test_exiting_below_critical_angle_refracts(self):
        material = Dielectric(1.5)
        rec = make_record(material, front_face=False)
        theta_i = math.radians(20.0)
        ray_in = Ray(Point3(0.0, 1.0, 0.0), Vec3(math.sin(theta_i), -math.cos(theta_i), 0.0))

        out = material.scatter(ray_in, rec, FixedDraw(0.999)).scattered.direction
        assert abs(out.x / out.length() - 1.5 * math.sin(theta_i)) < 1e-9

    def test_reflection_probability_matches_schlick(self):
        material = Dielectric(1.5)
        rec = make_record(material)
        theta_i = math.radians(75.0)
        ray_in = Ray(Point3(0.0, 1.0, 0.0), Vec3(math.sin(theta_i), -math.cos(theta_i), 0.0))
        expected = schlick_reflectance(math.cos(theta_i), 1.0 / 1.5)

        rng = np.random.default_rng(21)
        n = 4000
        reflected = sum(
            material.scatter(ray_in, rec, rng).scattered.direction.y > 0.0 for _ in range(n)
        )
        assert abs(reflected / n - expected) < 0.03


class TestDielectricValidation:
    """Tests for index of refraction checks."""

    @pytest.mark.parametrize("ior", [0.0, -1.5, math.nan, math.inf])
    def test_invalid_ior(self, ior):
        with pytest.raises(ValueError, match="refraction"):
            Dielectric(ior)

    def test_ior_below_one_is_allowed(self):
        assert Dielectric(0.75).ior == 0.75
