__version__ = "1.0.0"

from .config import ImageSpec
from .coretypes import (
    Direction,
    PixelType,
    RasterImage,
    ScalarType,
    select_pixel_type,
)
from .io.writers import ExistingFileMode, ImageFileWriter
from .loggers import logger
from .maker import make_image, make_image_file, write_image

__all__ = [
    "logger",
    ## configuration
    "ImageSpec",
    ## coretypes
    "Direction",
    "PixelType",
    "RasterImage",
    "ScalarType",
    "select_pixel_type",
    ## writing
    "ExistingFileMode",
    "ImageFileWriter",
    ## making images
    "make_image",
    "make_image_file",
    "write_image",
]
