"""Diffuse sphere ray tracer."""

from spheretracer.camera.camera import Camera
from spheretracer.core.ray import Ray
from spheretracer.core.vector import Vector3
from spheretracer.geometry.hittable import HitRecord, Hittable
from spheretracer.geometry.sphere import Sphere
from spheretracer.geometry.world import HittableList
from spheretracer.renderer.raytracer import Renderer, ray_color

__version__ = "0.1.0"

__all__ = [
    "Camera",
    "HitRecord",
    "Hittable",
    "HittableList",
    "Ray",
    "Renderer",
    "Sphere",
    "Vector3",
    "ray_color",
]
