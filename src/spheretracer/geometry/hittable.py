# geometry/hittable.py
from typing import Optional
from spheretracer.core.vector import Vector3
from spheretracer.core.ray import Ray

class HitRecord:
    """
    Records details of a ray-object intersection.
    """
    __slots__ = ("p", "normal", "t", "front_face")

    def __init__(self, p: Vector3, normal: Vector3, t: float, front_face: bool):
        self.p = p                    # Intersection point
        self.normal = normal          # Unit normal, always against the ray
        self.t = t                    # Ray parameter at intersection
        self.front_face = front_face  # Whether the ray came from outside

    @classmethod
    def from_outward_normal(cls, ray: Ray, t: float, p: Vector3,
                            outward_normal: Vector3) -> "HitRecord":
        """
        Builds a record whose normal points against the incoming ray,
        flipping the outward normal when the ray hits from inside.
        """
        front_face = ray.direction.dot(outward_normal) < 0
        normal = outward_normal if front_face else -outward_normal
        return cls(p, normal, t, front_face)

    def __repr__(self) -> str:
        return (f"HitRecord(p={self.p!r}, normal={self.normal!r}, "
                f"t={self.t}, front_face={self.front_face})")

class Hittable:
    """
    Abstract class for objects that can be hit by a ray.
    """
    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        raise NotImplementedError("hit() must be implemented by subclasses.")
