# geometry/sphere.py
import math
from typing import Optional
from spheretracer.core.vector import Vector3
from spheretracer.core.ray import Ray
from spheretracer.geometry.hittable import Hittable, HitRecord

class Sphere(Hittable):
    """
    Represents a sphere defined by its center and radius.

    The radius must be positive; it is not validated.
    """
    def __init__(self, center: Vector3, radius: float):
        self.center = center
        self.radius = radius

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        oc = ray.origin - self.center
        a = ray.direction.length_squared()
        half_b = oc.dot(ray.direction)
        c = oc.length_squared() - self.radius * self.radius
        discriminant = half_b * half_b - a * c

        if discriminant < 0:
            return None

        sqrt_disc = math.sqrt(discriminant)
        # Find the nearest root that lies in the acceptable range
        root = (-half_b - sqrt_disc) / a
        if root < t_min or root > t_max:
            root = (-half_b + sqrt_disc) / a
            if root < t_min or root > t_max:
                return None

        p = ray.at(root)
        outward_normal = (p - self.center) / self.radius
        return HitRecord.from_outward_normal(ray, root, p, outward_normal)

    def __repr__(self) -> str:
        return f"Sphere({self.center!r}, {self.radius})"
