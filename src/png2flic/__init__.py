"""png2flic - assemble indexed-color PNG frames into FLC animations."""

__version__: str = "0.1.0"

from .color_map import build_color_map
from .config import EncodeConfig
from .decoder import PngDecoder
from .error_handling import (
    ConfigurationError,
    DecodeError,
    HeightMismatch,
    PaletteTooLarge,
    PixelCountMismatch,
    Png2FlicError,
    ResourceError,
    StrideMismatch,
    ValidationError,
    WidthMismatch,
)
from .flic import FlicEncoder
from .frame_validator import validate_frame
from .models import DecodedImage, Frame, Header, allocate_frame
from .pipeline import EncodeResult, EncodingPipeline

__all__ = [
    "ConfigurationError",
    "DecodeError",
    "DecodedImage",
    "EncodeConfig",
    "EncodeResult",
    "EncodingPipeline",
    "FlicEncoder",
    "Frame",
    "Header",
    "HeightMismatch",
    "PaletteTooLarge",
    "PixelCountMismatch",
    "PngDecoder",
    "Png2FlicError",
    "ResourceError",
    "StrideMismatch",
    "ValidationError",
    "WidthMismatch",
    "allocate_frame",
    "build_color_map",
    "validate_frame",
]
