from .direction import Direction
from .pixel_types import (
    SCALAR_TYPE_ALIASES,
    PixelType,
    ScalarType,
    parse_scalar_type,
    select_pixel_type,
)
from .raster_image import RasterImage

__all__ = [
    "Direction",
    "PixelType",
    "RasterImage",
    "SCALAR_TYPE_ALIASES",
    "ScalarType",
    "parse_scalar_type",
    "select_pixel_type",
]
