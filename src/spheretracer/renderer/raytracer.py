# renderer/raytracer.py
import logging
import math
import random
import time
from multiprocessing import Pool
from typing import Optional

import numpy as np

from spheretracer.camera.camera import Camera
from spheretracer.core.ray import Ray
from spheretracer.core.utils import random_in_unit_sphere
from spheretracer.core.vector import Vector3
from spheretracer.geometry.hittable import Hittable
from spheretracer.renderer.image_io import write_color

logger = logging.getLogger(__name__)

INFINITY = math.inf
DIFFUSE_ALBEDO = 0.5

BLACK = Vector3(0, 0, 0)
WHITE = Vector3(1.0, 1.0, 1.0)
SKY_BLUE = Vector3(0.5, 0.7, 1.0)

def background_color(ray: Ray) -> Vector3:
    """
    Vertical sky gradient: white looking straight down, sky blue straight up.
    """
    unit_direction = ray.direction.normalize()
    t = 0.5 * (unit_direction.y + 1.0)
    return WHITE * (1.0 - t) + SKY_BLUE * t

def ray_color(ray: Ray, world: Hittable, depth: int, rng: random.Random,
              t_min: float = 0.0, debug_normals: bool = False) -> Vector3:
    """
    Radiance carried back along ray, following at most depth diffuse bounces.

    Each bounce scatters toward a random point in the unit sphere tangent to
    the hit point and keeps DIFFUSE_ALBEDO of the light. A path that runs out
    of bounces contributes nothing.
    """
    if depth <= 0:
        return BLACK

    rec = world.hit(ray, t_min, INFINITY)
    if rec is None:
        return background_color(ray)

    if debug_normals:
        return (rec.normal + WHITE) * 0.5

    target = rec.p + rec.normal + random_in_unit_sphere(rng)
    scattered = Ray(rec.p, target - rec.p)
    return ray_color(scattered, world, depth - 1, rng, t_min) * DIFFUSE_ALBEDO

def scanline_rng(seed: int, j: int) -> random.Random:
    """
    Independent, reproducible random stream for scanline j of a render.
    """
    return random.Random(f"{seed}:{j}")

# Per-process state for the worker pool, set once by _init_worker.
_worker_state = None

def _init_worker(renderer, camera, world, seed):
    global _worker_state
    _worker_state = (renderer, camera, world, seed)

def _render_scanline_worker(j: int):
    renderer, camera, world, seed = _worker_state
    return j, renderer.render_scanline(camera, world, j, seed)

class Renderer:
    """
    Sampler loop: traces samples_per_pixel jittered camera rays per pixel and
    averages them into an 8-bit RGB image.
    """
    def __init__(self, width: int, height: int, samples_per_pixel: int = 100,
                 max_depth: int = 50, t_min: float = 0.0, seed: Optional[int] = None,
                 workers: int = 1, jitter: bool = True, debug_normals: bool = False,
                 backend: str = "python"):
        self.width = width
        self.height = height
        self.samples_per_pixel = samples_per_pixel
        self.max_depth = max_depth
        self.t_min = t_min
        self.seed = seed
        self.workers = workers
        self.jitter = jitter
        self.debug_normals = debug_normals
        self.backend = backend
        self.last_seed = None

    @classmethod
    def from_settings(cls, settings) -> "Renderer":
        return cls(
            settings.image_width,
            settings.image_height,
            samples_per_pixel=settings.samples_per_pixel,
            max_depth=settings.max_depth,
            t_min=settings.t_min,
            seed=settings.seed,
            workers=settings.workers,
            jitter=settings.jitter,
            debug_normals=settings.debug_normals,
            backend=settings.backend,
        )

    def _resolve_seed(self) -> int:
        if self.seed is not None:
            return self.seed
        return random.SystemRandom().randrange(2 ** 63)

    def pixel_uv(self, i: int, j: int, rng: random.Random):
        """
        Viewport coordinates of one sample in pixel (i, j), jittered inside
        the pixel footprint when antialiasing is on.
        """
        if self.jitter:
            du, dv = rng.random(), rng.random()
        else:
            du = dv = 0.0
        u = (i + du) / max(self.width - 1, 1)
        v = (j + dv) / max(self.height - 1, 1)
        return u, v

    def render_scanline(self, camera: Camera, world: Hittable, j: int,
                        seed: int) -> np.ndarray:
        """
        Renders scanline j (0 is the bottom row) into a (width, 3) uint8 array.
        """
        rng = scanline_rng(seed, j)
        row = np.empty((self.width, 3), dtype=np.uint8)
        for i in range(self.width):
            pixel_color = BLACK
            for _ in range(self.samples_per_pixel):
                u, v = self.pixel_uv(i, j, rng)
                ray = camera.get_ray(u, v)
                pixel_color = pixel_color + ray_color(
                    ray, world, self.max_depth, rng, self.t_min, self.debug_normals)
            row[i] = write_color(pixel_color, self.samples_per_pixel)
        return row

    def render(self, camera: Camera, world: Hittable) -> np.ndarray:
        """
        Renders the full image as a (height, width, 3) uint8 array whose
        first row is the top scanline.
        """
        seed = self._resolve_seed()
        self.last_seed = seed
        logger.info("Rendering %dx%d, %d samples/pixel, max depth %d, seed %d (%s backend)",
                    self.width, self.height, self.samples_per_pixel, self.max_depth,
                    seed, self.backend)
        start = time.perf_counter()

        if self.backend == "numba":
            from spheretracer.renderer.cpu_kernels import render_numba
            image = render_numba(self, camera, world, seed)
        elif self.workers > 1:
            image = self._render_parallel(camera, world, seed)
        else:
            image = self._render_serial(camera, world, seed)

        logger.info("Done! Rendered in %.2f seconds", time.perf_counter() - start)
        return image

    def _render_serial(self, camera: Camera, world: Hittable, seed: int) -> np.ndarray:
        image = np.empty((self.height, self.width, 3), dtype=np.uint8)
        for j in range(self.height - 1, -1, -1):
            logger.debug("Scanlines remaining: %d", j)
            image[self.height - 1 - j] = self.render_scanline(camera, world, j, seed)
        return image

    def _render_parallel(self, camera: Camera, world: Hittable, seed: int) -> np.ndarray:
        image = np.empty((self.height, self.width, 3), dtype=np.uint8)
        rows = range(self.height - 1, -1, -1)
        with Pool(processes=self.workers, initializer=_init_worker,
                  initargs=(self, camera, world, seed)) as pool:
            for done, (j, row) in enumerate(pool.imap(_render_scanline_worker, rows), start=1):
                logger.debug("Scanlines remaining: %d", self.height - done)
                image[self.height - 1 - j] = row
        return image
