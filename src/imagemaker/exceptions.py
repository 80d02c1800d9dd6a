class ImageMakerError(Exception):
    """Base class for every error raised while making an image."""

    pass


class UnknownComponentTypeError(ImageMakerError, ValueError):
    """Raised when a scalar type name does not match any supported kind."""

    def __init__(self, scalar_type: str) -> None:
        self.scalar_type = scalar_type
        super().__init__(f"unknown component type: {scalar_type!r}")


class InvalidImageSpecError(ImageMakerError, ValueError):
    """Raised when the geometry of a spec does not match its dimension."""

    pass


class FillValueError(ImageMakerError, ValueError):
    """Raised when a fill value cannot be stored in the chosen scalar type."""

    pass


class ImageAllocationError(ImageMakerError, MemoryError):
    """Raised when the raster buffer cannot be allocated."""

    pass
