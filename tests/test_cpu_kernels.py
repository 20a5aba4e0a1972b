"""Tests for the numba-compiled backend."""

import math

import numpy as np
import pytest

pytest.importorskip("numba")

from spheretracer.camera.camera import Camera
from spheretracer.core.ray import Ray
from spheretracer.core.vector import Vector3
from spheretracer.geometry.hittable import Hittable
from spheretracer.geometry.sphere import Sphere
from spheretracer.geometry.world import HittableList
from spheretracer.renderer.cpu_kernels import (
    ray_sphere_intersect,
    row_seed,
    scene_arrays,
    trace_ray,
)
from spheretracer.renderer.raytracer import Renderer


class TestSceneArrays:

    def test_flattens_in_order(self, ground_world):
        centers, radii = scene_arrays(ground_world)
        assert centers.shape == (2, 3)
        np.testing.assert_array_equal(centers[1], [0, -100.5, -1])
        np.testing.assert_array_equal(radii, [0.5, 100])

    def test_nested_lists_and_bare_sphere(self, pair_world):
        centers, radii = scene_arrays(HittableList([pair_world, Sphere(Vector3(1, 1, 1), 2)]))
        assert radii.tolist() == [0.5, 0.5, 2.0]
        _, radii = scene_arrays(Sphere(Vector3(0, 0, 0), 3))
        assert radii.tolist() == [3.0]

    def test_empty_world(self, empty_world):
        centers, radii = scene_arrays(empty_world)
        assert centers.shape == (0, 3)
        assert radii.shape == (0,)

    def test_rejects_other_hittables(self):
        with pytest.raises(TypeError):
            scene_arrays(HittableList([Hittable()]))


class TestKernelFunctions:

    def test_intersection_matches_sphere_hit(self, unit_sphere_ahead):
        for t_min, t_max in [(0.0, math.inf), (0.6, math.inf), (0.0, 0.4)]:
            ok, t = ray_sphere_intersect(0.0, 0.0, 0.0, 0.0, 0.0, -1.0,
                                         0.0, 0.0, -1.0, 0.5, t_min, t_max)
            rec = unit_sphere_ahead.hit(Ray(Vector3(0, 0, 0), Vector3(0, 0, -1)), t_min, t_max)
            assert ok == (rec is not None)
            if ok:
                assert t == pytest.approx(rec.t)

    def test_row_seeds_are_distinct_32_bit_values(self):
        seeds = [row_seed(17, j) for j in range(512)]
        assert len(set(seeds)) == 512
        assert all(0 <= s <= 0xFFFFFFFF for s in seeds)

    def test_zero_depth_is_black(self, ground_world):
        centers, radii = scene_arrays(ground_world)
        assert trace_ray(0.0, 0.0, 0.0, 0.0, 0.0, -1.0, centers, radii, 0, 0.0, False) == (0.0, 0.0, 0.0)

    def test_background(self, empty_world):
        centers, radii = scene_arrays(empty_world)
        up = trace_ray(0.0, 0.0, 0.0, 0.0, 2.0, 0.0, centers, radii, 5, 0.0, False)
        down = trace_ray(0.0, 0.0, 0.0, 0.0, -2.0, 0.0, centers, radii, 5, 0.0, False)
        assert up == pytest.approx((0.5, 0.7, 1.0))
        assert down == pytest.approx((1.0, 1.0, 1.0))

    def test_debug_normals(self, unit_sphere_ahead):
        centers, radii = scene_arrays(unit_sphere_ahead)
        color = trace_ray(0.0, 0.0, 0.0, 0.0, 0.0, -1.0, centers, radii, 5, 0.0, True)
        assert color == pytest.approx((0.5, 0.5, 1.0))

    def test_single_bounce_budget_makes_hits_black(self, unit_sphere_ahead):
        centers, radii = scene_arrays(unit_sphere_ahead)
        assert trace_ray(0.0, 0.0, 0.0, 0.0, 0.0, -1.0, centers, radii, 1, 0.0, False) == (0.0, 0.0, 0.0)


class TestNumbaRenderer:

    def make(self, **kwargs):
        params = dict(width=8, height=4, samples_per_pixel=4, max_depth=5,
                      t_min=0.001, seed=17, backend="numba")
        params.update(kwargs)
        return Renderer(**params)

    def test_output_layout(self, ground_world, wide_camera):
        image = self.make().render(wide_camera, ground_world)
        assert image.shape == (4, 8, 3)
        assert image.dtype == np.uint8

    def test_zero_depth_renders_black(self, ground_world, wide_camera):
        assert not self.make(max_depth=0).render(wide_camera, ground_world).any()

    def test_seeded_single_thread_is_reproducible(self, ground_world, wide_camera):
        first = self.make().render(wide_camera, ground_world)
        second = self.make().render(wide_camera, ground_world)
        np.testing.assert_array_equal(first, second)

    def test_background_matches_python_backend(self, empty_world, wide_camera):
        compiled = self.make(samples_per_pixel=1, jitter=False).render(wide_camera, empty_world)
        python = self.make(samples_per_pixel=1, jitter=False, backend="python").render(
            wide_camera, empty_world)
        assert np.abs(compiled.astype(int) - python.astype(int)).max() <= 1

    def test_debug_normals_match_python_backend(self, ground_world):
        camera = Camera(2.0)
        compiled = self.make(samples_per_pixel=1, jitter=False, debug_normals=True).render(
            camera, ground_world)
        python = self.make(samples_per_pixel=1, jitter=False, debug_normals=True,
                           backend="python").render(camera, ground_world)
        assert np.abs(compiled.astype(int) - python.astype(int)).max() <= 1

    @pytest.mark.slow
    def test_statistically_matches_python_backend(self, ground_world, wide_camera):
        compiled = self.make(samples_per_pixel=32).render(wide_camera, ground_world)
        python = self.make(samples_per_pixel=32, backend="python").render(wide_camera, ground_world)
        assert abs(compiled.astype(float).mean() - python.astype(float).mean()) < 6.0

    def test_threads_match_single_thread(self, ground_world, wide_camera):
        serial = self.make(width=32, height=16).render(wide_camera, ground_world)
        for _ in range(2):
            threaded = self.make(width=32, height=16, workers=4).render(wide_camera, ground_world)
            np.testing.assert_array_equal(serial, threaded)

    def test_seed_changes_image(self, ground_world, wide_camera):
        first = self.make(width=32, height=16).render(wide_camera, ground_world)
        second = self.make(width=32, height=16, seed=18).render(wide_camera, ground_world)
        assert (first != second).any()
