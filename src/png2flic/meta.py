"""Metadata extraction and hashing for written FLC files."""

import hashlib
from dataclasses import dataclass
from pathlib import Path

from PIL import Image


@dataclass
class FlicMetadata:
    """Metadata read back from an FLC file."""

    flic_sha: str
    filename: str
    kilobytes: float
    width: int
    height: int
    frames: int
    speed_ms: int


def compute_file_sha256(file_path: Path) -> str:
    """Compute SHA256 hash of a file.

    Args:
        file_path: Path to the file to hash

    Returns:
        Hexadecimal SHA256 hash string
    """
    sha256_hash = hashlib.sha256()
    with open(file_path, "rb") as f:
        for chunk in iter(lambda: f.read(4096), b""):
            sha256_hash.update(chunk)
    return sha256_hash.hexdigest()


def extract_flic_metadata(file_path: Path) -> FlicMetadata:
    """Extract metadata from an FLC file.

    Args:
        file_path: Path to the FLC file

    Returns:
        FlicMetadata object with extracted information

    Raises:
        ValueError: If file is not a valid FLI/FLC animation
        OSError: If file cannot be read
    """
    if not file_path.exists():
        raise OSError(f"File not found: {file_path}")

    try:
        with Image.open(file_path) as img:
            if img.format != "FLI":
                raise ValueError(f"File is not an FLI/FLC animation: {file_path}")
            width, height = img.size
            frames = getattr(img, "n_frames", 1)
            speed_ms = int(img.info.get("duration", 0))
    except ValueError:
        raise
    except Exception as e:
        raise ValueError(f"Error processing FLC {file_path}: {e}") from e

    return FlicMetadata(
        flic_sha=compute_file_sha256(file_path),
        filename=file_path.name,
        kilobytes=file_path.stat().st_size / 1024.0,
        width=width,
        height=height,
        frames=frames,
        speed_ms=speed_ms,
    )
