from .writers import ExistingFileMode, ImageFileWriter

__all__ = ["ExistingFileMode", "ImageFileWriter"]
