"""Tests for scene presets and scene files."""

import json

import pytest

from spheretracer.core.vector import Vector3
from spheretracer.exceptions import SceneError
from spheretracer.geometry.scenes import (
    PRESETS,
    build_world,
    load_scene,
    preset_world,
    resolve_scene,
    sphere_from_descriptor,
)
from spheretracer.geometry.sphere import Sphere


class TestDescriptors:

    def test_sphere_from_descriptor(self):
        sphere = sphere_from_descriptor({"center": [1, 2, 3], "radius": 0.5})
        assert isinstance(sphere, Sphere)
        assert sphere.center == Vector3(1, 2, 3)
        assert sphere.radius == 0.5

    def test_build_world_keeps_order(self):
        world = build_world([
            {"center": (0, 0, -1), "radius": 0.5},
            {"center": (0, 0, -2), "radius": 0.25},
        ])
        assert [s.radius for s in world] == [0.5, 0.25]

    @pytest.mark.parametrize("descriptor", [
        {"radius": 1},
        {"center": [0, 0, 0]},
        {"center": [0, 0], "radius": 1},
        {"center": 5, "radius": 1},
        {"center": [0, 0, "x"], "radius": 1},
        {"center": [0, 0, 0], "radius": "big"},
        "sphere",
    ])
    def test_malformed_descriptor(self, descriptor):
        with pytest.raises(SceneError):
            sphere_from_descriptor(descriptor)


class TestPresets:

    @pytest.mark.parametrize("name", sorted(PRESETS))
    def test_every_preset_builds(self, name):
        assert len(preset_world(name)) == len(PRESETS[name])

    def test_ground_preset(self):
        world = preset_world("ground")
        centers = [s.center for s in world]
        assert centers == [Vector3(0, 0, -1), Vector3(0, -100.5, -1)]

    def test_unknown_preset(self):
        with pytest.raises(SceneError, match="unknown scene preset"):
            preset_world("cornell")


class TestSceneFiles:

    def write(self, tmp_path, data, name="scene.json"):
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    def test_list_of_spheres(self, tmp_path):
        path = self.write(tmp_path, [{"center": [0, 0, -1], "radius": 0.5}])
        world, camera = load_scene(path)
        assert len(world) == 1
        assert camera == {}

    def test_object_with_camera(self, tmp_path):
        path = self.write(tmp_path, {
            "camera": {"aspect_ratio": 2, "focal_length": 1.5},
            "spheres": [{"center": [0, 0, -1], "radius": 0.5}],
        })
        world, camera = load_scene(path)
        assert len(world) == 1
        assert camera == {"aspect_ratio": 2.0, "focal_length": 1.5}

    def test_unknown_camera_setting(self, tmp_path):
        path = self.write(tmp_path, {"camera": {"fov": 90}, "spheres": []})
        with pytest.raises(SceneError, match="unknown camera settings"):
            load_scene(path)

    def test_missing_spheres(self, tmp_path):
        path = self.write(tmp_path, {"camera": {}})
        with pytest.raises(SceneError, match="spheres"):
            load_scene(path)

    def test_scalar_document(self, tmp_path):
        path = self.write(tmp_path, 42)
        with pytest.raises(SceneError):
            load_scene(path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(SceneError, match="not valid JSON"):
            load_scene(path)

    def test_undecodable_bytes(self, tmp_path):
        path = tmp_path / "latin1.json"
        path.write_bytes(b'[{"center": [0, 0, -1], "radius": 0.5, "name": "\xff"}]')
        with pytest.raises(SceneError, match="not UTF-8"):
            load_scene(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(SceneError, match="cannot read"):
            load_scene(tmp_path / "nope.json")


class TestResolveScene:

    def test_preset_name(self):
        world, camera = resolve_scene("pair")
        assert len(world) == 2
        assert camera == {}

    def test_file_path(self, tmp_path):
        path = tmp_path / "custom.json"
        path.write_text(json.dumps([{"center": [1, 1, 1], "radius": 1}]), encoding="utf-8")
        world, _ = resolve_scene(str(path))
        assert len(world) == 1

    def test_unknown_name(self):
        with pytest.raises(SceneError):
            resolve_scene("no-such-scene")
