"""Exception hierarchy for spheretracer.

The rendering core never raises these; they belong to the layers that read
user input (scene files, environment, command line).
"""


class SpheretracerError(Exception):
    """Base class for all spheretracer errors."""


class SceneError(SpheretracerError):
    """A scene description could not be loaded or understood."""


class ConfigError(SpheretracerError):
    """A configuration value is missing or invalid."""


class OutputError(SpheretracerError):
    """The rendered image could not be encoded."""
