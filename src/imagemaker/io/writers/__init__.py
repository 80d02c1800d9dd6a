from .image_writer import (
    ExistingFileMode,
    ImageFileWriter,
    ImageWriterError,
    ImageWriterIOError,
    ImageWriterValidationError,
)

__all__ = [
    "ExistingFileMode",
    "ImageFileWriter",
    "ImageWriterError",
    "ImageWriterIOError",
    "ImageWriterValidationError",
]
