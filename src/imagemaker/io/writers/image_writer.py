from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import ClassVar

import nibabel as nib
import numpy as np
import SimpleITK as sitk

from imagemaker.coretypes import RasterImage
from imagemaker.exceptions import ImageMakerError
from imagemaker.loggers import logger


class ImageWriterError(ImageMakerError):
    """Base exception for ImageFileWriter errors."""

    pass


class ImageWriterValidationError(ImageWriterError):
    """Raised when validation of writer configuration or output path fails."""

    pass


class ImageWriterIOError(ImageWriterError):
    """Raised when I/O operations fail."""

    pass


class ExistingFileMode(str, Enum):
    """
    Enum to specify handling behavior for existing files.

    Attributes
    ----------
    OVERWRITE: str
        Replace the existing file.
    SKIP: str
        Leave the existing file alone and report its path as the result.
    FAIL: str
        Refuse to write and raise an ImageWriterIOError.
    """

    OVERWRITE = "overwrite"
    SKIP = "skip"
    FAIL = "fail"


# RAS (NIfTI) = diag(-1, -1, 1) * LPS (ITK)
_LPS_TO_RAS = np.diag([-1.0, -1.0, 1.0])


@dataclass
class ImageFileWriter:
    """Write a RasterImage to a single file.

    2-D and 3-D images go through ``SimpleITK.WriteImage`` and the file
    format follows the extension (``.nrrd``, ``.mha``, ``.nii.gz`` ...).
    SimpleITK has no 1-D images, so those are written as NIfTI with
    nibabel, using the same LPS to RAS convention ITK applies.

    Attributes
    ----------
    use_compression : bool, default=False
        Ask the file format to compress the pixel data.
    compression_level : int, default=-1
        Compression level passed to the image IO. -1 lets the IO choose.
    existing_file_mode : ExistingFileMode, default=ExistingFileMode.OVERWRITE
        Behavior when the output file already exists.
    create_dirs : bool, default=True
        Create missing parent directories of the output file.
    """

    use_compression: bool = field(default=False)
    compression_level: int = field(default=-1)
    existing_file_mode: ExistingFileMode = field(
        default=ExistingFileMode.OVERWRITE
    )
    create_dirs: bool = field(default=True)

    NIFTI_EXTENSIONS: ClassVar[list[str]] = [".nii", ".nii.gz"]
    MAX_COMPRESSION_LEVEL: ClassVar[int] = 9
    MIN_COMPRESSION_LEVEL: ClassVar[int] = -1

    def __post_init__(self) -> None:
        match self.existing_file_mode:
            case ExistingFileMode():
                pass
            case str():
                try:
                    self.existing_file_mode = ExistingFileMode(
                        self.existing_file_mode.lower()
                    )
                except ValueError as e:
                    errmsg = (
                        f"Invalid existing_file_mode {self.existing_file_mode}. "
                        "Must be one of 'overwrite', 'skip', or 'fail'."
                    )
                    raise ImageWriterValidationError(errmsg) from e
            case _:
                errmsg = (
                    f"Invalid existing_file_mode {self.existing_file_mode}. "
                    "Must be one of 'overwrite', 'skip', or 'fail'."
                )
                raise ImageWriterValidationError(errmsg)

        if (
            not self.MIN_COMPRESSION_LEVEL
            <= self.compression_level
            <= self.MAX_COMPRESSION_LEVEL
        ):
            msg = (
                f"Invalid compression level {self.compression_level}. "
                f"Must be between {self.MIN_COMPRESSION_LEVEL} and "
                f"{self.MAX_COMPRESSION_LEVEL}."
            )
            raise ImageWriterValidationError(msg)

    def save(self, image: RasterImage, path: str | Path) -> Path:
        """Write the image to ``path``.

        Parameters
        ----------
        image : RasterImage
            The filled image to write.
        path : str | Path
            Output file. Its extension selects the format.

        Returns
        -------
        Path
            Path of the written (or skipped) file.

        Raises
        ------
        ImageWriterValidationError
            If the format cannot hold an image of this dimension.
        ImageWriterIOError
            If the file exists in FAIL mode or the encoder fails.
        """
        out_path = Path(path)
        self.validate(image.dimension, out_path)

        if out_path.exists():
            match self.existing_file_mode:
                case ExistingFileMode.SKIP:
                    logger.debug("File exists, skipping.", out_path=out_path)
                    return out_path
                case ExistingFileMode.FAIL:
                    msg = f"File {out_path} already exists."
                    raise ImageWriterIOError(msg)
                case ExistingFileMode.OVERWRITE:
                    logger.debug("File exists, overwriting.", out_path=out_path)

        if self.create_dirs:
            try:
                out_path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                msg = f"Cannot create directory {out_path.parent}: {e}"
                raise ImageWriterIOError(msg) from e

        try:
            if image.dimension == 1:
                nib.save(self.to_nifti(image), out_path.as_posix())
            else:
                sitk.WriteImage(
                    image.to_sitk(),
                    out_path.as_posix(),
                    useCompression=self.use_compression,
                    compressionLevel=self.compression_level,
                )
        except Exception as e:
            msg = f"Error writing image to file {out_path}: {e}"
            raise ImageWriterIOError(msg) from e

        logger.debug(
            "Image written.",
            out_path=out_path,
            size=image.size,
            pixel_type=str(image.pixel_type),
        )
        return out_path

    def validate(self, dimension: int, path: str | Path) -> None:
        """Check that an image of ``dimension`` can be written to ``path``.

        Only the output format is checked, nothing is touched on disk.

        Raises
        ------
        ImageWriterValidationError
            If a 1-D image is headed for anything other than NIfTI.
        """
        out_path = Path(path)
        if dimension == 1 and not self._is_nifti(out_path):
            msg = (
                f"Cannot write a 1-D image to {out_path.name}. "
                f"1-D images must use one of {self.NIFTI_EXTENSIONS}."
            )
            raise ImageWriterValidationError(msg)

    def _is_nifti(self, path: Path) -> bool:
        return any(path.name.endswith(ext) for ext in self.NIFTI_EXTENSIONS)

    @staticmethod
    def to_nifti(image: RasterImage) -> nib.Nifti1Image:
        """Build a NIfTI image with an ITK-compatible affine.

        Vector pixels are stored along the fifth NIfTI axis with a
        ``vector`` intent, the way ITK lays them out.
        """
        dim = image.dimension
        spacing = np.ones(3)
        spacing[:dim] = image.spacing
        origin = np.zeros(3)
        origin[:dim] = image.origin

        affine = np.eye(4)
        affine[:3, :3] = _LPS_TO_RAS @ image.direction.embed_3d() @ np.diag(spacing)
        affine[:3, 3] = _LPS_TO_RAS @ origin

        # numpy order is slowest axis first, NIfTI is fastest axis first
        if image.pixel_type.is_vector:
            data = np.moveaxis(image.array, -1, 0).T
            spatial = data.shape[:dim] + (1,) * (4 - dim)
            data = data.reshape(spatial + (image.number_of_components,))
        else:
            data = image.array.T

        nifti = nib.Nifti1Image(data, affine, dtype=image.pixel_type.dtype)
        nifti.header.set_xyzt_units("mm")
        if image.pixel_type.is_vector:
            nifti.header.set_intent("vector")
        return nifti
