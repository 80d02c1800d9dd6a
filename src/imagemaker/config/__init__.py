from .image_spec import (
    DEFAULT_AXIS_SIZE,
    DEFAULT_CONFIG_FILENAME,
    SUPPORTED_DIMENSIONS,
    ImageSpec,
    resolve_dimension,
)

__all__ = [
    "DEFAULT_AXIS_SIZE",
    "DEFAULT_CONFIG_FILENAME",
    "SUPPORTED_DIMENSIONS",
    "ImageSpec",
    "resolve_dimension",
]
