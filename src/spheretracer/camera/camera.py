# camera/camera.py
from spheretracer.core.vector import Vector3
from spheretracer.core.ray import Ray

class Camera:
    """
    Pinhole camera looking down -z, with a viewport placed focal_length
    in front of the origin.
    """
    def __init__(self, aspect_ratio: float, viewport_height: float = 2.0,
                 focal_length: float = 1.0, origin: Vector3 = Vector3(0, 0, 0)):
        self.aspect_ratio = aspect_ratio
        self.viewport_height = viewport_height
        self.viewport_width = aspect_ratio * viewport_height
        self.focal_length = focal_length

        self.origin = origin
        self.horizontal = Vector3(self.viewport_width, 0, 0)
        self.vertical = Vector3(0, viewport_height, 0)
        self.lower_left_corner = (self.origin -
                                  self.horizontal * 0.5 -
                                  self.vertical * 0.5 -
                                  Vector3(0, 0, focal_length))

    def get_ray(self, u: float, v: float) -> Ray:
        """
        Ray through the viewport point at (u, v), both in [0, 1]:
        u runs left to right, v bottom to top.
        """
        direction = (self.lower_left_corner +
                     self.horizontal * u +
                     self.vertical * v -
                     self.origin)
        return Ray(self.origin, direction)

    def __repr__(self) -> str:
        return (f"Camera(aspect_ratio={self.aspect_ratio}, "
                f"viewport_height={self.viewport_height}, "
                f"focal_length={self.focal_length})")
