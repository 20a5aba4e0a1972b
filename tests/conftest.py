"""Pytest configuration and shared fixtures."""

import os
import random

# numba's TBB threading layer does not survive a later fork (the
# multiprocessing backend), which hangs the test process at exit.
os.environ.setdefault("NUMBA_THREADING_LAYER_PRIORITY", "omp workqueue tbb")

import pytest

from spheretracer.camera.camera import Camera
from spheretracer.core.vector import Vector3
from spheretracer.geometry.sphere import Sphere
from spheretracer.geometry.world import HittableList


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep the caller's SPHERETRACER_* settings out of the tests."""
    for name in ("SPHERETRACER_WIDTH", "SPHERETRACER_ASPECT_RATIO", "SPHERETRACER_SAMPLES",
                 "SPHERETRACER_MAX_DEPTH", "SPHERETRACER_SEED", "SPHERETRACER_WORKERS",
                 "SPHERETRACER_BACKEND"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def unit_sphere_ahead():
    """Sphere of radius 0.5 one unit down the -z axis."""
    return Sphere(Vector3(0, 0, -1), 0.5)


@pytest.fixture
def ground_world():
    return HittableList([
        Sphere(Vector3(0, 0, -1), 0.5),
        Sphere(Vector3(0, -100.5, -1), 100),
    ])


@pytest.fixture
def pair_world():
    return HittableList([
        Sphere(Vector3(0, 0, -1), 0.5),
        Sphere(Vector3(0, 0, -2), 0.5),
    ])


@pytest.fixture
def empty_world():
    return HittableList()


@pytest.fixture
def wide_camera():
    """Aspect 2: viewport 4 x 2, lower-left corner at (-2, -1, -1)."""
    return Camera(2.0)
