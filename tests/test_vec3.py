"""Unit tests for the Vec3 type and vector utilities.

Tests cover:
- Arithmetic operators and scalar forms
- Dot, cross, length and normalization
- Reflection and refraction
- Random sampling helpers stay inside their domains
"""

import math

import numpy as np
import pytest

from src.pathtracer.core.vec3 import (
    Color,
    Point3,
    Vec3,
    degrees_to_radians,
    random_in_unit_disk,
    random_in_unit_sphere,
    random_unit_vector,
    reflect,
    refract,
)


class TestVec3Arithmetic:
    """Tests for component-wise and scalar operators."""

    def test_add_and_subtract(self):
        a = Vec3(1.0, 2.0, 3.0)
        b = Vec3(4.0, -5.0, 0.5)
        assert a + b == Vec3(5.0, -3.0, 3.5)
        assert a - b == Vec3(-3.0, 7.0, 2.5)

    def test_negate(self):
        assert -Vec3(1.0, -2.0, 0.0) == Vec3(-1.0, 2.0, -0.0)

    def test_component_wise_multiply(self):
        """Multiplying two vectors is the Hadamard product, used to tint colors."""
        assert Color(0.5, 0.5, 1.0) * Color(0.2, 0.4, 0.6) == Color(0.1, 0.2, 0.6)

    def test_scalar_multiply_both_sides(self):
        v = Vec3(1.0, -2.0, 3.0)
        assert v * 2.0 == Vec3(2.0, -4.0, 6.0)
        assert 2.0 * v == Vec3(2.0, -4.0, 6.0)

    def test_numpy_scalar_multiply_returns_vec3(self):
        v = Vec3(1.0, -2.0, 3.0)
        for product in (np.float64(2.0) * v, v * np.float64(2.0), np.float32(2.0) * v):
            assert isinstance(product, Vec3)
            assert product == Vec3(2.0, -4.0, 6.0)

    def test_divide_by_scalar(self):
        assert Vec3(2.0, 4.0, 8.0) / 2.0 == Vec3(1.0, 2.0, 4.0)

    def test_operators_do_not_mutate(self):
        a = Vec3(1.0, 1.0, 1.0)
        _ = a + Vec3(1.0, 1.0, 1.0)
        _ = a * 3.0
        assert a == Vec3(1.0, 1.0, 1.0)

    def test_aliases_are_the_same_type(self):
        assert Point3 is Vec3
        assert Color is Vec3

    def test_indexing_and_iteration(self):
        v = Vec3(1.0, 2.0, 3.0)
        assert v[0] == 1.0 and v[1] == 2.0 and v[2] == 3.0
        assert list(v) == [1.0, 2.0, 3.0]
        assert len(v) == 3
        assert v.to_tuple() == (1.0, 2.0, 3.0)

    def test_components_are_floats(self):
        v = Vec3(1, 2, 3)
        assert isinstance(v.x, float)

    def test_hash_matches_equality(self):
        assert hash(Vec3(1.0, 2.0, 3.0)) == hash(Vec3(1.0, 2.0, 3.0))


class TestVec3Products:
    """Tests for dot, cross and norms."""

    def test_dot(self):
        assert Vec3(1.0, 2.0, 3.0).dot(Vec3(4.0, -5.0, 6.0)) == 12.0

    def test_cross_of_basis_vectors(self):
        x = Vec3(1.0, 0.0, 0.0)
        y = Vec3(0.0, 1.0, 0.0)
        assert x.cross(y) == Vec3(0.0, 0.0, 1.0)
        assert y.cross(x) == Vec3(0.0, 0.0, -1.0)

    def test_cross_is_perpendicular(self):
        a = Vec3(1.0, 2.0, 3.0)
        b = Vec3(-2.0, 0.5, 4.0)
        c = a.cross(b)
        assert abs(c.dot(a)) < 1e-12
        assert abs(c.dot(b)) < 1e-12

    def test_length(self):
        v = Vec3(3.0, 4.0, 12.0)
        assert v.length_squared() == 169.0
        assert v.length() == 13.0

    def test_unit_vector(self):
        u = Vec3(0.0, 3.0, 4.0).unit_vector()
        assert abs(u.length() - 1.0) < 1e-12
        assert u.isclose(Vec3(0.0, 0.6, 0.8))

    def test_unit_vector_of_random_vectors(self):
        rng = np.random.default_rng(5)
        for _ in range(200):
            v = Vec3.random_range(rng, -10.0, 10.0)
            u = v.unit_vector()
            assert abs(u.length() - 1.0) < 1e-12
            # Same direction as the input
            assert abs(u.dot(v) - v.length()) < 1e-9

    def test_unit_vector_of_zero_raises(self):
        with pytest.raises(ValueError, match="zero-length"):
            Vec3(0.0, 0.0, 0.0).unit_vector()

    def test_near_zero(self):
        assert Vec3(1e-9, -1e-9, 0.0).near_zero()
        assert not Vec3(1e-9, 1e-7, 0.0).near_zero()


class TestReflectRefract:
    """Tests for mirror reflection and Snell refraction."""

    def test_reflect_off_floor(self):
        n = Vec3(0.0, 1.0, 0.0)
        assert reflect(Vec3(1.0, -1.0, 0.0), n) == Vec3(1.0, 1.0, 0.0)

    def test_reflect_head_on_reverses(self):
        n = Vec3(0.0, 0.0, 1.0)
        assert reflect(Vec3(0.0, 0.0, -1.0), n) == Vec3(0.0, 0.0, 1.0)

    def test_reflect_flips_normal_component(self):
        """reflect(v, n) . n == -(v . n) for unit v, n facing each other."""
        rng = np.random.default_rng(11)
        for _ in range(200):
            v = random_unit_vector(rng)
            n = random_unit_vector(rng)
            if v.dot(n) > 0.0:
                n = -n
            r = reflect(v, n)
            assert abs(r.dot(n) + v.dot(n)) < 1e-12
            assert abs(r.length() - 1.0) < 1e-12

    def test_refract_with_unit_ratio_passes_straight_through(self):
        uv = Vec3(1.0, -1.0, 0.0).unit_vector()
        n = Vec3(0.0, 1.0, 0.0)
        assert refract(uv, n, 1.0).isclose(uv, tol=1e-12)

    def test_refract_head_on_is_undeflected(self):
        uv = Vec3(0.0, -1.0, 0.0)
        n = Vec3(0.0, 1.0, 0.0)
        assert refract(uv, n, 1.0 / 1.5).isclose(uv, tol=1e-12)

    def test_refract_obeys_snell(self):
        """sin(theta_t) = ratio * sin(theta_i) for a unit incident ray."""
        theta_i = math.radians(30.0)
        uv = Vec3(math.sin(theta_i), -math.cos(theta_i), 0.0)
        n = Vec3(0.0, 1.0, 0.0)
        ratio = 1.0 / 1.5

        out = refract(uv, n, ratio)
        assert abs(out.length() - 1.0) < 1e-12
        assert abs(out.x - ratio * math.sin(theta_i)) < 1e-12
        assert out.y < 0.0

    def test_degrees_to_radians(self):
        assert abs(degrees_to_radians(180.0) - math.pi) < 1e-15


class TestRandomSampling:
    """Tests that rejection samplers stay inside their domains."""

    def test_random_in_unit_sphere(self):
        rng = np.random.default_rng(0)
        for _ in range(500):
            assert random_in_unit_sphere(rng).length_squared() < 1.0

    def test_random_in_unit_disk_lies_in_plane(self):
        rng = np.random.default_rng(1)
        for _ in range(500):
            p = random_in_unit_disk(rng)
            assert p.z == 0.0
            assert p.length_squared() < 1.0

    def test_random_unit_vector_has_unit_length(self):
        rng = np.random.default_rng(2)
        for _ in range(200):
            assert abs(random_unit_vector(rng).length() - 1.0) < 1e-12

    def test_random_range(self):
        rng = np.random.default_rng(3)
        for _ in range(200):
            v = Vec3.random_range(rng, 0.5, 1.0)
            assert all(0.5 <= c < 1.0 for c in v)

    def test_same_seed_same_samples(self):
        a = [random_unit_vector(np.random.default_rng(9)) for _ in range(3)]
        b = [random_unit_vector(np.random.default_rng(9)) for _ in range(3)]
        assert a == b
