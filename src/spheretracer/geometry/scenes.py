# geometry/scenes.py
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Tuple, Union

from spheretracer.core.vector import Vector3
from spheretracer.exceptions import SceneError
from spheretracer.geometry.sphere import Sphere
from spheretracer.geometry.world import HittableList

logger = logging.getLogger(__name__)

CAMERA_KEYS = ("aspect_ratio", "viewport_height", "focal_length")

# Sphere descriptors for the built-in scenes.
PRESETS = {
    "single": [
        {"center": (0, 0, -1), "radius": 0.5},
    ],
    "ground": [
        {"center": (0, 0, -1), "radius": 0.5},
        {"center": (0, -100.5, -1), "radius": 100},
    ],
    "pair": [
        {"center": (0, 0, -1), "radius": 0.5},
        {"center": (0, 0, -2), "radius": 0.5},
    ],
}
DEFAULT_PRESET = "ground"

def sphere_from_descriptor(descriptor: Dict[str, Any]) -> Sphere:
    """
    Builds a Sphere from {"center": [x, y, z], "radius": r}.
    """
    try:
        center = descriptor["center"]
        radius = descriptor["radius"]
    except (KeyError, TypeError):
        raise SceneError(f"sphere needs 'center' and 'radius': {descriptor!r}") from None
    try:
        x, y, z = (float(c) for c in center)
        radius = float(radius)
    except (TypeError, ValueError):
        raise SceneError(f"sphere center must be 3 numbers and radius a number: {descriptor!r}") from None
    return Sphere(Vector3(x, y, z), radius)

def build_world(descriptors: Iterable[Dict[str, Any]]) -> HittableList:
    world = HittableList()
    for descriptor in descriptors:
        world.add(sphere_from_descriptor(descriptor))
    return world

def preset_world(name: str = DEFAULT_PRESET) -> HittableList:
    try:
        descriptors = PRESETS[name]
    except KeyError:
        raise SceneError(f"unknown scene preset {name!r}, expected one of {sorted(PRESETS)}") from None
    return build_world(descriptors)

def load_scene(path: Union[str, Path]) -> Tuple[HittableList, Dict[str, float]]:
    """
    Reads a JSON scene: either a list of sphere descriptors, or an object
    with a "spheres" list and an optional "camera" object.

    Returns the world and the camera overrides found in the file.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
    except OSError as e:
        raise SceneError(f"cannot read scene file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise SceneError(f"scene file {path} is not valid JSON: {e}") from e
    except UnicodeDecodeError as e:
        raise SceneError(f"scene file {path} is not UTF-8 text: {e}") from e

    camera: Dict[str, float] = {}
    if isinstance(data, list):
        spheres = data
    elif isinstance(data, dict):
        spheres = data.get("spheres")
        if not isinstance(spheres, list):
            raise SceneError(f"scene file {path} needs a 'spheres' list")
        raw_camera = data.get("camera", {})
        if not isinstance(raw_camera, dict):
            raise SceneError(f"'camera' in {path} must be an object")
        unknown = set(raw_camera) - set(CAMERA_KEYS)
        if unknown:
            raise SceneError(f"unknown camera settings in {path}: {sorted(unknown)}")
        try:
            camera = {key: float(value) for key, value in raw_camera.items()}
        except (TypeError, ValueError):
            raise SceneError(f"camera settings in {path} must be numbers") from None
    else:
        raise SceneError(f"scene file {path} must hold a list or an object")

    world = build_world(spheres)
    logger.info("Loaded %d spheres from %s", len(world), path)
    return world, camera

def resolve_scene(scene: str) -> Tuple[HittableList, Dict[str, float]]:
    """
    A preset name, or a path to a JSON scene file.
    """
    if scene in PRESETS:
        return preset_world(scene), {}
    if scene.endswith(".json") or Path(scene).exists():
        return load_scene(scene)
    return preset_world(scene), {}
