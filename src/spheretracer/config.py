"""Configuration for spheretracer: defaults, quality presets and environment overrides."""

import os
from dataclasses import dataclass, replace
from typing import Optional

from spheretracer.exceptions import ConfigError

# Image settings
DEFAULT_ASPECT_RATIO = 16.0 / 9.0
DEFAULT_IMAGE_WIDTH = 400
DEFAULT_SAMPLES_PER_PIXEL = 100
DEFAULT_MAX_DEPTH = 50

# Scene queries start at this ray parameter
DEFAULT_T_MIN = 0.0

# Execution settings
DEFAULT_WORKERS = 1
BACKENDS = ("python", "numba")
DEFAULT_BACKEND = "python"

# Logging settings
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")

# Trade noise for speed
QUALITY_LEVELS = {
    "interactive": {"samples": 1, "bounces": 2},
    "balanced": {"samples": 16, "bounces": 8},
    "high_quality": {"samples": 100, "bounces": 50},
}


def _env_number(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a {cast.__name__}, got {raw!r}") from None


def _env_aspect_ratio(default: float) -> float:
    raw = os.getenv("SPHERETRACER_ASPECT_RATIO")
    if raw is None or raw.strip() == "":
        return default
    return parse_aspect_ratio(raw)


def parse_aspect_ratio(text: str) -> float:
    """Accepts either a plain number ("1.5") or a ratio ("16:9", "16/9")."""
    for sep in (":", "/"):
        if sep in text:
            num, _, den = text.partition(sep)
            try:
                return float(num) / float(den)
            except (ValueError, ZeroDivisionError):
                raise ConfigError(f"invalid aspect ratio {text!r}") from None
    try:
        return float(text)
    except ValueError:
        raise ConfigError(f"invalid aspect ratio {text!r}") from None


@dataclass(frozen=True)
class RenderSettings:
    """Parameters of one render, independent of the scene."""
    image_width: int = DEFAULT_IMAGE_WIDTH
    aspect_ratio: float = DEFAULT_ASPECT_RATIO
    samples_per_pixel: int = DEFAULT_SAMPLES_PER_PIXEL
    max_depth: int = DEFAULT_MAX_DEPTH
    t_min: float = DEFAULT_T_MIN
    seed: Optional[int] = None
    workers: int = DEFAULT_WORKERS
    backend: str = DEFAULT_BACKEND
    jitter: bool = True
    debug_normals: bool = False

    @property
    def image_height(self) -> int:
        return max(1, round(self.image_width / self.aspect_ratio))

    @classmethod
    def from_env(cls) -> "RenderSettings":
        """Defaults overridden by SPHERETRACER_* environment variables."""
        return cls(
            image_width=_env_number("SPHERETRACER_WIDTH", DEFAULT_IMAGE_WIDTH, int),
            aspect_ratio=_env_aspect_ratio(DEFAULT_ASPECT_RATIO),
            samples_per_pixel=_env_number("SPHERETRACER_SAMPLES", DEFAULT_SAMPLES_PER_PIXEL, int),
            max_depth=_env_number("SPHERETRACER_MAX_DEPTH", DEFAULT_MAX_DEPTH, int),
            seed=_env_number("SPHERETRACER_SEED", None, int),
            workers=_env_number("SPHERETRACER_WORKERS", DEFAULT_WORKERS, int),
            backend=os.getenv("SPHERETRACER_BACKEND", DEFAULT_BACKEND),
        )

    def with_quality(self, name: str) -> "RenderSettings":
        try:
            quality = QUALITY_LEVELS[name]
        except KeyError:
            raise ConfigError(
                f"unknown quality level {name!r}, expected one of {sorted(QUALITY_LEVELS)}"
            ) from None
        return replace(self, samples_per_pixel=quality["samples"], max_depth=quality["bounces"])

    def validate(self) -> "RenderSettings":
        if self.image_width <= 0:
            raise ConfigError(f"image width must be positive, got {self.image_width}")
        if self.aspect_ratio <= 0:
            raise ConfigError(f"aspect ratio must be positive, got {self.aspect_ratio}")
        if self.samples_per_pixel <= 0:
            raise ConfigError(f"samples per pixel must be positive, got {self.samples_per_pixel}")
        if self.max_depth < 0:
            raise ConfigError(f"max depth must not be negative, got {self.max_depth}")
        if self.workers <= 0:
            raise ConfigError(f"workers must be positive, got {self.workers}")
        if self.backend not in BACKENDS:
            raise ConfigError(f"unknown backend {self.backend!r}, expected one of {BACKENDS}")
        return self
