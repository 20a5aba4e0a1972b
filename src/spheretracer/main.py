# main.py
import argparse
import logging
import sys
from dataclasses import replace
from typing import List, Optional

from spheretracer.camera.camera import Camera
from spheretracer.config import BACKENDS, QUALITY_LEVELS, RenderSettings, parse_aspect_ratio
from spheretracer.exceptions import SpheretracerError
from spheretracer.geometry.scenes import DEFAULT_PRESET, PRESETS, resolve_scene
from spheretracer.logging_config import setup_logging
from spheretracer.renderer.image_io import gradient_test_pattern, save_image, write_ppm
from spheretracer.renderer.raytracer import Renderer

logger = logging.getLogger("spheretracer.main")

def _aspect_ratio(text: str) -> float:
    try:
        return parse_aspect_ratio(text)
    except SpheretracerError as e:
        raise argparse.ArgumentTypeError(str(e)) from None

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spheretracer",
        description="Render a scene of diffuse spheres under a sky gradient.",
    )
    parser.add_argument("-o", "--output",
                        help="output image (.ppm is written as plain text, other "
                             "suffixes through Pillow); default: PPM on stdout")
    parser.add_argument("--scene", default=DEFAULT_PRESET,
                        help=f"preset ({', '.join(sorted(PRESETS))}) or a JSON scene file")
    parser.add_argument("--width", type=int, help="image width in pixels")
    parser.add_argument("--aspect-ratio", type=_aspect_ratio,
                        help="width/height, e.g. 1.5 or 16:9")
    parser.add_argument("--quality", choices=sorted(QUALITY_LEVELS),
                        help="preset for samples and bounces")
    parser.add_argument("--samples", type=int, help="samples per pixel")
    parser.add_argument("--max-depth", type=int, help="maximum diffuse bounces per ray")
    parser.add_argument("--t-min", type=float, help="ignore hits closer than this along a ray")
    parser.add_argument("--seed", type=int, help="seed for a reproducible image")
    parser.add_argument("--workers", type=int, help="parallel workers (processes or threads)")
    parser.add_argument("--backend", choices=BACKENDS, help="renderer implementation")
    parser.add_argument("--no-jitter", action="store_true",
                        help="sample pixel corners instead of random points (no antialiasing)")
    parser.add_argument("--debug-normals", action="store_true",
                        help="shade hits by surface normal instead of tracing bounces")
    parser.add_argument("--test-pattern", action="store_true",
                        help="write the red/green gradient test image instead of rendering")
    parser.add_argument("--preview", action="store_true",
                        help="show the result in a pygame window")
    parser.add_argument("--log-level", default=None,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    return parser

def settings_from_args(args: argparse.Namespace, camera_overrides=None) -> RenderSettings:
    """
    Environment defaults, then the quality preset, then the scene file's
    camera settings, then explicit flags.
    """
    settings = RenderSettings.from_env()
    if args.quality:
        settings = settings.with_quality(args.quality)
    if camera_overrides and "aspect_ratio" in camera_overrides:
        settings = replace(settings, aspect_ratio=camera_overrides["aspect_ratio"])

    overrides = {
        "image_width": args.width,
        "aspect_ratio": args.aspect_ratio,
        "samples_per_pixel": args.samples,
        "max_depth": args.max_depth,
        "t_min": args.t_min,
        "seed": args.seed,
        "workers": args.workers,
        "backend": args.backend,
    }
    settings = replace(settings, **{k: v for k, v in overrides.items() if v is not None})
    if args.no_jitter:
        settings = replace(settings, jitter=False)
    if args.debug_normals:
        settings = replace(settings, debug_normals=True)
    return settings.validate()

def run(args: argparse.Namespace):
    if args.test_pattern:
        settings = settings_from_args(args)
        logger.info("Writing %dx%d test pattern", settings.image_width, settings.image_height)
        return gradient_test_pattern(settings.image_width, settings.image_height)

    world, camera_overrides = resolve_scene(args.scene)
    settings = settings_from_args(args, camera_overrides)
    camera = Camera(
        settings.aspect_ratio,
        viewport_height=camera_overrides.get("viewport_height", 2.0),
        focal_length=camera_overrides.get("focal_length", 1.0),
    )
    logger.debug("Scene: %d objects, %r", len(world), camera)
    return Renderer.from_settings(settings).render(camera, world)

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        image = run(args)
        if args.output:
            path = save_image(image, args.output)
            logger.info("Wrote %s", path)
        else:
            write_ppm(image, sys.stdout)
            sys.stdout.flush()
    except (SpheretracerError, OSError) as e:
        logger.error("%s", e)
        return 1

    if args.preview:
        try:
            from spheretracer.renderer.preview import show_image
            show_image(image)
        except ImportError as e:
            logger.error("--preview needs pygame (pip install 'spheretracer[preview]'): %s", e)
            return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
