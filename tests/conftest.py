"""Pytest configuration for path tracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import numpy as np
import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture
def rng():
    """A seeded random stream so material and camera sampling is repeatable."""
    return np.random.default_rng(42)


@pytest.fixture
def clear_gpu_scene():
    """Clear the taichi scene fields and accumulation buffer around a test."""
    # Import here so Taichi is initialized first
    from src.pathtracer.gpu.kernels import clear_render_target
    from src.pathtracer.gpu.scene_fields import clear_scene

    clear_scene()
    clear_render_target()
    yield
    clear_scene()
    clear_render_target()
