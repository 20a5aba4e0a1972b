# core/utils.py
import random
from spheretracer.core.vector import Vector3

def random_in_unit_sphere(rng: random.Random) -> Vector3:
    """
    Returns a random point strictly inside the unit sphere.

    Rejection sampling: candidates on or outside the boundary are redrawn,
    never clamped, so the distribution stays uniform over the ball.
    """
    while True:
        p = Vector3(rng.uniform(-1, 1),
                    rng.uniform(-1, 1),
                    rng.uniform(-1, 1))
        if p.length_squared() < 1.0:
            return p
