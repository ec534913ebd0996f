"""Configuration settings for png2flic."""

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from .error_handling import ConfigurationError
from .models import Header


@dataclass(frozen=True)
class FlicConfig:
    """Constants written into every FLC header."""

    # Autodesk Animator Pro FLC magic (0xAF11 is the older 320x200 FLI)
    MAGIC: int = 0xAF12
    FRAME_MAGIC: int = 0xF1FA

    HEADER_SIZE: int = 128
    FRAME_HEADER_SIZE: int = 16
    CHUNK_HEADER_SIZE: int = 6

    # Bits per pixel; FLC only supports 8 for indexed frames
    DEPTH: int = 8

    # 0x0001 = file was closed properly, 0x0002 = header was updated
    FLAGS: int = 0x0003

    ASPECT_DX: int = 1
    ASPECT_DY: int = 1

    # "FLIB" as a little-endian DWORD, same id the reference encoders use
    CREATOR: int = 0x464C4942


@dataclass(frozen=True)
class EncodeConfig:
    """Resolved options for one encoding run.

    Built once at startup and passed explicitly to the pipeline; it is never
    mutated afterwards.
    """

    width: int
    height: int
    speed: int
    output: Path
    inputs: tuple[Path, ...]

    @classmethod
    def from_options(
        cls,
        output: str | Path | None,
        height: int | None,
        width: int | None,
        speed: int | None,
        inputs: Sequence[str | Path] | None,
    ) -> "EncodeConfig":
        """Validate raw option values and build the configuration.

        Checks run in a fixed order so the first missing option is the one
        reported.

        Raises:
            ConfigurationError: If any option is missing or invalid
        """
        if output is None or str(output) == "":
            raise ConfigurationError("must specify output file")

        if height is None or height <= 0:
            raise ConfigurationError("Must specify valid height")

        if width is None or width <= 0:
            raise ConfigurationError("Must specify valid width")

        if speed is None or speed <= 0:
            raise ConfigurationError("Must specify valid speed")

        if not inputs:
            raise ConfigurationError("Must specify at least one input file")

        return cls(
            width=width,
            height=height,
            speed=speed,
            output=Path(output),
            inputs=tuple(Path(p) for p in inputs),
        )

    def header(self) -> Header:
        """Build the container header for this run (frame count starts at 0)."""
        return Header(width=self.width, height=self.height, speed=self.speed)


DEFAULT_FLIC_CONFIG = FlicConfig()
