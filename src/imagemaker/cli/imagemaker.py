from __future__ import annotations

import pathlib
from typing import TYPE_CHECKING, List, Sequence

import click

from imagemaker import __version__
from imagemaker.loggers import logger

from . import verbosity_options
from .param_types import FLOAT_LIST, INT_LIST, NUMBER_LIST

if TYPE_CHECKING:
    import numpy as np

    from imagemaker.config import ImageSpec
    from imagemaker.coretypes import PixelType

EXISTING_FILE_MODES = ["overwrite", "skip", "fail"]


@click.command(no_args_is_help=True)
@click.argument(
    "output_volume",
    type=click.Path(
        dir_okay=False,
        writable=True,
        path_type=pathlib.Path,
    ),
)
@click.option(
    "--dimension",
    "-d",
    type=int,
    default=None,
    help="Image dimension (1, 2 or 3). Other values make a 3-D image.  [default: 3]",
)
@click.option(
    "--components",
    "-n",
    "number_of_components",
    type=click.IntRange(min=1),
    default=None,
    help="Number of components per pixel. More than one makes a vector image.  [default: 1]",
)
@click.option(
    "--scalar-type",
    "-t",
    type=str,
    default=None,
    help="Pixel component type: uchar, char, ushort, short, uint, int, "
    "ulong, long, float, double (or uint8 ... float64).  [default: uchar]",
)
@click.option(
    "--size",
    type=INT_LIST,
    default=None,
    help="Pixels per axis, e.g. 256,256,128.  [default: 64 per axis]",
)
@click.option(
    "--spacing",
    type=FLOAT_LIST,
    default=None,
    help="Pixel spacing per axis, e.g. 0.5,0.5,2.  [default: 1 per axis]",
)
@click.option(
    "--origin",
    type=FLOAT_LIST,
    default=None,
    help="Physical position of the first pixel.  [default: 0 per axis]",
)
@click.option(
    "--direction",
    type=FLOAT_LIST,
    default=None,
    help="Direction cosines as a row-major DxD matrix.  [default: identity]",
)
@click.option(
    "--fill-value",
    "-f",
    type=NUMBER_LIST,
    default=None,
    help="Value(s) for every pixel, cycled over the components.  [default: 0]",
)
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(
        exists=True,
        dir_okay=False,
        readable=True,
        path_type=pathlib.Path,
    ),
    default=None,
    help="YAML file with image parameters. Command line options take precedence.",
)
@click.option(
    "--save-config",
    type=click.Path(dir_okay=False, writable=True, path_type=pathlib.Path),
    default=None,
    help="Write the resolved image parameters to this YAML file.",
)
@click.option(
    "--compress/--no-compress",
    default=False,
    show_default=True,
    help="Compress the pixel data if the file format supports it.",
)
@click.option(
    "--compression-level",
    type=click.IntRange(-1, 9),
    default=-1,
    show_default=True,
    help="Compression level, -1 lets the file format choose.",
)
@click.option(
    "--existing-file-mode",
    type=click.Choice(EXISTING_FILE_MODES, case_sensitive=False),
    default="overwrite",
    show_default=True,
    help="What to do when OUTPUT_VOLUME already exists.",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Describe the image that would be made, without writing it.",
)
@verbosity_options()
@click.version_option(
    version=__version__,
    package_name="med-imagemaker",
    prog_name="imagemaker",
    message="%(package)s:%(prog)s:%(version)s",
)
@click.help_option("-h", "--help")
@click.pass_context
def imagemaker(
    ctx: click.Context,
    output_volume: pathlib.Path,
    dimension: int | None,
    number_of_components: int | None,
    scalar_type: str | None,
    size: List[int] | None,
    spacing: List[float] | None,
    origin: List[float] | None,
    direction: List[float] | None,
    fill_value: List[float] | None,
    config_file: pathlib.Path | None,
    save_config: pathlib.Path | None,
    compress: bool,
    compression_level: int,
    existing_file_mode: str,
    dry_run: bool,
) -> None:
    """Make a blank image volume filled with a constant value.

    \b
    Every pixel of the image gets the same value. With more than one
    component per pixel, component C gets FILL_VALUE[C % len(FILL_VALUE)].
    The extension of OUTPUT_VOLUME selects the file format.

    \b
    Examples:
      imagemaker blank.nrrd --size 256,256,128 --spacing 0.5,0.5,2
      imagemaker mask.nii.gz -t uchar --size 64,64,64 -f 1
      imagemaker rgb.mha -d 2 -n 3 --size 32,32 -f 255,0,0
      imagemaker line.nii.gz -d 1 --size 100 -t float -f 0.5
    """
    from pydantic import ValidationError

    from imagemaker.config import ImageSpec
    from imagemaker.exceptions import ImageMakerError, UnknownComponentTypeError
    from imagemaker.io.writers import ImageFileWriter
    from imagemaker.maker import make_image_file, representative_pixel

    overrides = {
        "output_volume": output_volume,
        "dimension": dimension,
        "number_of_components": number_of_components,
        "scalar_type": scalar_type,
        "size": size,
        "spacing": spacing,
        "origin": origin,
        "direction": direction,
        "fill_value": fill_value,
    }

    try:
        if config_file is not None:
            logger.info("Loading image parameters.", config_file=config_file)
            spec = ImageSpec.from_user_yaml(config_file, **overrides)
        else:
            spec = ImageSpec(
                **{k: v for k, v in overrides.items() if v is not None}
            )
    except ValidationError as e:
        logger.error("Invalid image parameters.", errors=e.error_count())
        raise click.ClickException(f"Invalid image parameters:\n{e}") from e

    try:
        pixel_type = spec.pixel_type
    except UnknownComponentTypeError as e:
        click.echo(str(e))
        ctx.exit(1)

    # everything short of allocating and writing is checked before a dry run
    try:
        pixel = representative_pixel(spec.fill_value, pixel_type)
        writer = ImageFileWriter(
            use_compression=compress,
            compression_level=compression_level,
            existing_file_mode=existing_file_mode,
        )
        writer.validate(spec.dimension, spec.output_volume)
    except ImageMakerError as e:
        logger.error("Invalid image parameters.", error=str(e))
        raise click.ClickException(f"{type(e).__name__}: {e}") from e

    if save_config is not None:
        try:
            spec.to_yaml(save_config)
        except ValueError as e:
            raise click.ClickException(str(e)) from e
        logger.info("Image parameters saved.", path=save_config)

    if dry_run:
        _print_summary(spec, pixel_type, pixel)
        return

    try:
        out_path = make_image_file(spec, writer=writer)
    except Exception as e:
        logger.error(
            "Failed to make image.",
            output_volume=spec.output_volume,
            error=f"{type(e).__name__}: {e}",
        )
        raise click.ClickException(f"{type(e).__name__}: {e}") from e

    logger.info("Image saved.", out_path=out_path)


def _print_summary(spec: ImageSpec, pixel_type: PixelType, pixel: np.ndarray) -> None:
    from rich.console import Console
    from rich.table import Table

    def fmt(values: Sequence[int | float]) -> str:
        return ", ".join(f"{v:g}" if isinstance(v, float) else str(v) for v in values)

    table = Table(title="Image to make (dry run)", box=None)
    table.add_column("Parameter", justify="left", style="cyan", no_wrap=True)
    table.add_column("Value", style="magenta")
    table.add_row("output", str(spec.output_volume))
    table.add_row("dimension", str(spec.dimension))
    table.add_row("pixel type", str(pixel_type))
    table.add_row("size", " x ".join(str(s) for s in spec.size))
    table.add_row("spacing", fmt(spec.spacing))
    table.add_row("origin", fmt(spec.origin))
    table.add_row("direction", fmt(spec.direction))
    table.add_row("fill value", fmt(spec.fill_value))
    table.add_row("pixel", fmt(pixel.tolist()))
    table.add_row("pixels", str(spec.number_of_pixels))
    table.add_row("bytes", str(spec.number_of_pixels * pixel_type.bytes_per_pixel))

    Console(width=120).print(table)
