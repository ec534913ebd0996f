"""Sequential decode → validate → color map → encode pipeline.

Sources are processed strictly one at a time and in input order: the frame
buffer is overwritten for every source and the FLC delta chunks depend on the
previously emitted frame. The first decode or validation failure stops the
run; bad frames are never skipped.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from .color_map import build_color_map
from .config import EncodeConfig
from .decoder import PngDecoder, RasterDecoder
from .error_handling import (
    DecodeError,
    Png2FlicError,
    ResourceError,
    ValidationError,
    describe_error,
    error_context,
)
from .flic import ContainerEncoder, FlicEncoder
from .frame_validator import validate_frame
from .io import open_output
from .models import Frame, Header, allocate_frame

logger = logging.getLogger(__name__)


@dataclass
class EncodeResult:
    """Outcome of one pipeline run."""

    output: Path
    processed: int
    total: int
    frames: int = 0
    error: Png2FlicError | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    def summary(self) -> str:
        return f"processed {self.processed} of {self.total} sources"


class EncodingPipeline:
    """Encode every configured source into one FLC file.

    Args:
        config: Resolved run configuration
        decoder: Source decoder (defaults to the Pillow PNG decoder)
        encoder_factory: Builds the container encoder around the open output
            stream (defaults to :class:`FlicEncoder`)
    """

    def __init__(
        self,
        config: EncodeConfig,
        decoder: RasterDecoder | None = None,
        encoder_factory: Callable[[BinaryIO], ContainerEncoder] = FlicEncoder,
    ):
        self.config = config
        self.header: Header = config.header()
        self.decoder = decoder or PngDecoder()
        self.encoder_factory = encoder_factory

    def run(self) -> EncodeResult:
        """Run the whole batch.

        Decode and validation failures are returned in the result, with the
        number of sources processed before them. The output file is left as
        written so far.

        Raises:
            ResourceError: If the output destination cannot be opened or
                written
        """
        with open_output(self.config.output) as fp:
            encoder = self.encoder_factory(fp)
            with error_context("write FLC header", ResourceError, logger=logger):
                encoder.write_header(self.header)
            try:
                with allocate_frame(self.header) as frame:
                    result = self._encode_sources(frame, encoder)
            finally:
                with error_context("finalize FLC file", ResourceError, logger=logger):
                    encoder.finish()

        result.frames = self.header.frame_count
        if not result.succeeded:
            logger.debug(
                f"⚠️  Partial output left on disk: {self.config.output} ({result.frames} frames)"
            )
        return result

    def _encode_sources(self, frame: Frame, encoder: ContainerEncoder) -> EncodeResult:
        total = len(self.config.inputs)
        for processed, source in enumerate(self.config.inputs):
            try:
                self._encode_source(source, frame, encoder)
            except (DecodeError, ValidationError) as e:
                logger.debug(f'❌ Failed to read input file "{source}": {describe_error(e)}')
                return EncodeResult(
                    output=self.config.output, processed=processed, total=total, error=e
                )
        return EncodeResult(output=self.config.output, processed=total, total=total)

    def _encode_source(self, source: Path, frame: Frame, encoder: ContainerEncoder) -> None:
        logger.info(f"📥 Reading {source}")
        decoded = self.decoder.decode(source)
        validate_frame(self.header, decoded, frame)

        logger.info(f"🎨 writing {decoded.palette_size} palette entries")
        build_color_map(decoded.palette, frame.color_map)
        frame.pixels[:] = decoded.pixels

        payload = frame.snapshot() if encoder.retains_frames else frame
        with error_context(
            "write frame", ResourceError, context={"source": source}, logger=logger
        ):
            encoder.write_frame(payload)
