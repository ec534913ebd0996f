"""Assemble indexed-color PNG frames into an FLC animation."""

import logging
import sys
from pathlib import Path

import click

from .. import __version__
from ..config import EncodeConfig
from ..error_handling import (
    ConfigurationError,
    Png2FlicError,
    describe_error,
    log_warning_with_context,
)
from ..io import setup_logging
from ..meta import extract_flic_metadata
from ..pipeline import EncodingPipeline
from .utils import (
    display_path_info,
    display_results_summary,
    handle_generic_error,
    handle_keyboard_interrupt,
)

logger = logging.getLogger(__name__)


@click.command("png2flic", context_settings={"help_option_names": ["--help"]})
@click.version_option(version=__version__, prog_name="png2flic")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="set output file",
)
@click.option("--height", "-h", type=int, default=None, help="set video height")
@click.option("--width", "-w", type=int, default=None, help="set video width")
@click.option(
    "--speed",
    "-s",
    type=int,
    default=None,
    help="set video speed (milliseconds per frame)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    help="Logging level (default: INFO)",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also write log records to this file",
)
@click.argument("input_files", nargs=-1, type=click.Path(path_type=Path))
def encode(
    output: Path | None,
    height: int | None,
    width: int | None,
    speed: int | None,
    log_level: str,
    log_file: Path | None,
    input_files: tuple[Path, ...],
) -> None:
    """🎞️ png2flic: assemble indexed-color PNG frames into an FLC animation.

    Every frame must be a palette-based PNG of exactly WIDTH x HEIGHT pixels
    with at most 256 colors. Frames are written in the order given; the first
    frame that cannot be decoded or does not fit aborts the run.

    INPUT_FILES: PNG frames, in presentation order
    """
    setup_logging(log_level, log_file)

    try:
        config = EncodeConfig.from_options(
            output=output, height=height, width=width, speed=speed, inputs=input_files
        )
    except ConfigurationError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    display_path_info("output", config.output)
    click.echo(f"📐 height: {config.height}")
    click.echo(f"📐 width: {config.width}")

    try:
        result = EncodingPipeline(config).run()
    except KeyboardInterrupt:
        handle_keyboard_interrupt("png2flic")
        return
    except Png2FlicError as e:
        handle_generic_error("png2flic", e)
        return

    if not result.succeeded:
        click.echo(
            f"❌ {describe_error(result.error)} "
            f"({result.summary()}, partial output left in {result.output})",
            err=True,
        )
        sys.exit(1)

    try:
        metadata = extract_flic_metadata(config.output)
    except ValueError as e:
        log_warning_with_context(
            f"Could not read back output: {e}", {"output": config.output}, logger
        )
        metadata = None

    display_results_summary(result, metadata)
