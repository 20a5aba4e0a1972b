# renderer/cpu_kernels.py

import logging
import math

import numpy as np
from numba import config as numba_config
from numba import njit, prange, set_num_threads

from spheretracer.geometry.sphere import Sphere
from spheretracer.geometry.world import HittableList
from spheretracer.renderer.image_io import quantize

logger = logging.getLogger(__name__)

DIFFUSE_ALBEDO = 0.5

def scene_arrays(world):
    """
    Flattens the world into (n, 3) sphere centers and (n,) radii, in scene order.
    """
    spheres = list(_iter_spheres(world))
    centers = np.array([[s.center.x, s.center.y, s.center.z] for s in spheres],
                       dtype=np.float64).reshape(-1, 3)
    radii = np.array([s.radius for s in spheres], dtype=np.float64)
    return centers, radii

def _iter_spheres(obj):
    if isinstance(obj, Sphere):
        yield obj
    elif isinstance(obj, HittableList):
        for child in obj.objects:
            yield from _iter_spheres(child)
    else:
        raise TypeError(f"numba backend can only render spheres, got {type(obj).__name__}")

@njit(cache=True)
def ray_sphere_intersect(ox, oy, oz, dx, dy, dz, cx, cy, cz, radius, t_min, t_max):
    """Nearest root of the ray/sphere quadratic inside [t_min, t_max]."""
    ocx = ox - cx
    ocy = oy - cy
    ocz = oz - cz
    a = dx * dx + dy * dy + dz * dz
    half_b = ocx * dx + ocy * dy + ocz * dz
    c = ocx * ocx + ocy * ocy + ocz * ocz - radius * radius
    discriminant = half_b * half_b - a * c

    if discriminant < 0:
        return False, 0.0

    sqrtd = math.sqrt(discriminant)
    root = (-half_b - sqrtd) / a
    if root < t_min or root > t_max:
        root = (-half_b + sqrtd) / a
        if root < t_min or root > t_max:
            return False, 0.0

    return True, root

@njit(cache=True)
def trace_ray(ox, oy, oz, dx, dy, dz, centers, radii, max_depth, t_min, debug_normals):
    """
    Iterative form of ray_color: the recursion becomes a loop that carries
    the product of the per-bounce albedos.
    """
    attenuation = 1.0
    for _ in range(max_depth):
        closest = np.inf
        hit_index = -1
        for k in range(radii.shape[0]):
            ok, t = ray_sphere_intersect(ox, oy, oz, dx, dy, dz,
                                         centers[k, 0], centers[k, 1], centers[k, 2],
                                         radii[k], t_min, closest)
            if ok:
                closest = t
                hit_index = k

        if hit_index < 0:
            length = math.sqrt(dx * dx + dy * dy + dz * dz)
            unit_y = dy / length if length > 0 else 0.0
            t = 0.5 * (unit_y + 1.0)
            return (attenuation * ((1.0 - t) + t * 0.5),
                    attenuation * ((1.0 - t) + t * 0.7),
                    attenuation * ((1.0 - t) + t * 1.0))

        px = ox + closest * dx
        py = oy + closest * dy
        pz = oz + closest * dz
        radius = radii[hit_index]
        nx = (px - centers[hit_index, 0]) / radius
        ny = (py - centers[hit_index, 1]) / radius
        nz = (pz - centers[hit_index, 2]) / radius
        if dx * nx + dy * ny + dz * nz >= 0:
            nx, ny, nz = -nx, -ny, -nz

        if debug_normals:
            return (attenuation * 0.5 * (nx + 1.0),
                    attenuation * 0.5 * (ny + 1.0),
                    attenuation * 0.5 * (nz + 1.0))

        while True:
            rx = np.random.random() * 2.0 - 1.0
            ry = np.random.random() * 2.0 - 1.0
            rz = np.random.random() * 2.0 - 1.0
            if rx * rx + ry * ry + rz * rz < 1.0:
                break

        ox, oy, oz = px, py, pz
        dx, dy, dz = nx + rx, ny + ry, nz + rz
        attenuation *= DIFFUSE_ALBEDO

    return 0.0, 0.0, 0.0

@njit(cache=True)
def row_seed(seed, j):
    """Seed for scanline j, mixed so neighbouring rows get unrelated streams."""
    return (seed ^ (j * 0x9E3779B1)) & 0xFFFFFFFF

def _render_rows(width, height, samples_per_pixel, max_depth, t_min, jitter, debug_normals,
                 origin, lower_left, horizontal, vertical, centers, radii, seed, accum):
    u_scale = max(width - 1, 1)
    v_scale = max(height - 1, 1)
    for row in prange(height):
        j = height - 1 - row
        # numba keeps one generator per thread; reseeding per row keeps the
        # image independent of which thread renders it.
        np.random.seed(row_seed(seed, j))
        for i in range(width):
            r = 0.0
            g = 0.0
            b = 0.0
            for _ in range(samples_per_pixel):
                du = 0.0
                dv = 0.0
                if jitter:
                    du = np.random.random()
                    dv = np.random.random()
                u = (i + du) / u_scale
                v = (j + dv) / v_scale
                dx = lower_left[0] + u * horizontal[0] + v * vertical[0] - origin[0]
                dy = lower_left[1] + u * horizontal[1] + v * vertical[1] - origin[1]
                dz = lower_left[2] + u * horizontal[2] + v * vertical[2] - origin[2]
                cr, cg, cb = trace_ray(origin[0], origin[1], origin[2], dx, dy, dz,
                                       centers, radii, max_depth, t_min, debug_normals)
                r += cr
                g += cg
                b += cb
            accum[row, i, 0] = r
            accum[row, i, 1] = g
            accum[row, i, 2] = b

render_rows = njit(_render_rows)
render_rows_parallel = njit(parallel=True)(_render_rows)

def _as_array(v):
    return np.array([v.x, v.y, v.z], dtype=np.float64)

def render_numba(renderer, camera, world, seed: int) -> np.ndarray:
    """
    Renders with the compiled kernel. Output layout matches Renderer.render.

    Each scanline reseeds the generator, so a given seed gives the same
    image for any number of workers.
    """
    centers, radii = scene_arrays(world)
    logger.debug("Uploaded %d spheres to the compiled kernel", radii.shape[0])
    accum = np.zeros((renderer.height, renderer.width, 3), dtype=np.float64)

    args = (renderer.width, renderer.height, renderer.samples_per_pixel, renderer.max_depth,
            float(renderer.t_min), renderer.jitter, renderer.debug_normals,
            _as_array(camera.origin), _as_array(camera.lower_left_corner),
            _as_array(camera.horizontal), _as_array(camera.vertical),
            centers, radii, seed & 0xFFFFFFFF, accum)
    if renderer.workers > 1:
        set_num_threads(min(renderer.workers, numba_config.NUMBA_NUM_THREADS))
        render_rows_parallel(*args)
    else:
        render_rows(*args)

    return quantize(accum, renderer.samples_per_pixel)
