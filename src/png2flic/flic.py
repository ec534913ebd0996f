"""Autodesk FLC container encoder.

Frames are written as ``0xF1FA`` frame chunks. The first frame carries a full
``COLOR_256`` palette chunk and a ``BYTE_RUN`` image; later frames carry a
palette chunk only when the color map changed and a ``DELTA_FLC`` chunk
describing the lines that differ from the previous frame. On ``finish()`` a
ring frame (last frame back to the first) is appended so players can loop,
and the header is rewritten with the final size, frame count and frame
offsets.

Chunk layouts follow the Animator Pro file format description:
https://www.compuphase.com/flic.htm
"""

import logging
import struct
from types import TracebackType
from typing import BinaryIO, Protocol

import numpy as np

from .config import DEFAULT_FLIC_CONFIG, FlicConfig
from .models import PALETTE_SIZE, Frame, Header

logger = logging.getLogger(__name__)

# Sub-chunk types
COLOR_256 = 4
DELTA_FLC = 7
BYTE_RUN = 15

_HEADER_FORMAT = "<IHHHHHHIHIIIIHHHHHIHH24xII40x"
_FRAME_HEADER_FORMAT = "<IHHHHHH"
_CHUNK_HEADER_FORMAT = "<IH"

# Packet limits
_MAX_BYTE_RUN = 127
_MAX_BYTE_LITERAL = 128
_MAX_WORD_RUN = 128
_MAX_WORD_LITERAL = 127
_MAX_COLUMN_SKIP = 255
_MAX_LINE_SKIP = 0x4000
_MIN_RUN = 3


class ContainerEncoder(Protocol):
    """Receives a header, then frames in presentation order, then ``finish()``.

    ``write_frame`` must consume the frame before returning: callers reuse the
    same buffers for the next frame. Encoders that keep references set
    ``retains_frames`` and are handed read-only snapshots instead.
    """

    retains_frames: bool

    def write_header(self, header: Header) -> None: ...

    def write_frame(self, frame: Frame) -> None: ...

    def finish(self) -> None: ...


class FlicEncoder:
    """Write an FLC animation to a seekable binary stream."""

    # Pixels and color map are copied on every call
    retains_frames = False

    def __init__(self, fp: BinaryIO, config: FlicConfig = DEFAULT_FLIC_CONFIG):
        self._fp = fp
        self._config = config
        self._header: Header | None = None
        self._start = 0
        self._frame_offsets: list[int] = []
        self._first_pixels: np.ndarray | None = None
        self._first_color_map: np.ndarray | None = None
        self._prev_pixels: np.ndarray | None = None
        self._prev_color_map: np.ndarray | None = None
        self._finished = False
        self.frames_written = 0

    def __enter__(self) -> "FlicEncoder":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.finish()

    def write_header(self, header: Header) -> None:
        """Reserve the 128-byte header; it is completed by ``finish()``."""
        if self._header is not None:
            raise RuntimeError("FLC header already written")
        if header.width > 0xFFFF or header.height > 0xFFFF:
            raise ValueError(
                f"FLC frames are limited to 65535x65535, got {header.width}x{header.height}"
            )

        self._header = header
        self._start = self._fp.tell()
        self._fp.write(self._pack_header(size=0, frames=0, oframe1=0, oframe2=0))

    def write_frame(self, frame: Frame) -> None:
        header = self._require_open()
        if frame.pixels is None:
            raise ValueError("Cannot encode a released frame")
        if frame.row_stride != header.width or len(frame.pixels) != header.width * header.height:
            raise ValueError(
                f"Frame geometry {frame.row_stride}x{frame.height} "
                f"doesn't match header {header.width}x{header.height}"
            )

        pixels = np.array(frame.rows(), dtype=np.uint8)
        color_map = np.array(frame.color_map, dtype=np.uint8).reshape(PALETTE_SIZE, 3)

        chunks: list[tuple[int, bytes]] = []
        if self._prev_color_map is None or not np.array_equal(color_map, self._prev_color_map):
            chunks.append((COLOR_256, encode_color_256(color_map)))

        if self._prev_pixels is None:
            chunks.append((BYTE_RUN, encode_byte_run(pixels)))
            self._first_pixels = pixels
            self._first_color_map = color_map
        else:
            delta = encode_delta_flc(self._prev_pixels, pixels)
            if delta is not None:
                chunks.append((DELTA_FLC, delta))

        self._write_frame_chunk(chunks)
        self._prev_pixels = pixels
        self._prev_color_map = color_map
        self.frames_written += 1

    def finish(self) -> None:
        """Append the ring frame and persist size, frame count and offsets.

        Safe to call more than once; only the first call writes.
        """
        if self._finished:
            return
        self._finished = True
        if self._header is None:
            return

        if self.frames_written:
            self._write_ring_frame()

        end = self._fp.tell()
        oframe1 = self._frame_offsets[0] if self._frame_offsets else 0
        oframe2 = self._frame_offsets[1] if len(self._frame_offsets) > 1 else 0

        self._header.frame_count = self.frames_written
        self._fp.seek(self._start)
        self._fp.write(
            self._pack_header(
                size=end - self._start,
                frames=self.frames_written,
                oframe1=oframe1,
                oframe2=oframe2,
            )
        )
        self._fp.seek(end)
        self._fp.flush()
        logger.debug(f"FLC finalized: {self.frames_written} frames, {end - self._start} bytes")

    def _require_open(self) -> Header:
        if self._header is None:
            raise RuntimeError("write_header() must be called before write_frame()")
        if self._finished:
            raise RuntimeError("FLC encoder already finished")
        return self._header

    def _write_ring_frame(self) -> None:
        assert self._first_pixels is not None and self._prev_pixels is not None
        assert self._first_color_map is not None and self._prev_color_map is not None

        chunks: list[tuple[int, bytes]] = []
        if not np.array_equal(self._first_color_map, self._prev_color_map):
            chunks.append((COLOR_256, encode_color_256(self._first_color_map)))
        delta = encode_delta_flc(self._prev_pixels, self._first_pixels)
        if delta is not None:
            chunks.append((DELTA_FLC, delta))
        self._write_frame_chunk(chunks)

    def _write_frame_chunk(self, chunks: list[tuple[int, bytes]]) -> None:
        body = b"".join(pack_chunk(chunk_type, data) for chunk_type, data in chunks)
        size = self._config.FRAME_HEADER_SIZE + len(body)

        self._frame_offsets.append(self._fp.tell() - self._start)
        self._fp.write(
            struct.pack(
                _FRAME_HEADER_FORMAT,
                size,
                self._config.FRAME_MAGIC,
                len(chunks),
                0,  # delay override
                0,  # reserved
                0,  # width override
                0,  # height override
            )
        )
        self._fp.write(body)

    def _pack_header(self, size: int, frames: int, oframe1: int, oframe2: int) -> bytes:
        assert self._header is not None
        cfg = self._config
        return struct.pack(
            _HEADER_FORMAT,
            size,
            cfg.MAGIC,
            frames,
            self._header.width,
            self._header.height,
            cfg.DEPTH,
            cfg.FLAGS,
            self._header.speed,
            0,  # reserved
            0,  # created
            cfg.CREATOR,
            0,  # updated
            cfg.CREATOR,
            cfg.ASPECT_DX,
            cfg.ASPECT_DY,
            0,  # ext_flags
            0,  # keyframes
            0,  # totalframes
            0,  # req_memory
            0,  # max_regions
            0,  # transp_num
            oframe1,
            oframe2,
        )


def pack_chunk(chunk_type: int, data: bytes) -> bytes:
    """Wrap *data* in a sub-chunk header, padded to an even length."""
    padding = b"\x00" if len(data) % 2 else b""
    size = DEFAULT_FLIC_CONFIG.CHUNK_HEADER_SIZE + len(data) + len(padding)
    return struct.pack(_CHUNK_HEADER_FORMAT, size, chunk_type) + data + padding


def encode_color_256(color_map: np.ndarray) -> bytes:
    """Single packet covering all 256 entries (a count of 0 means 256)."""
    return struct.pack("<HBB", 1, 0, 0) + color_map.astype(np.uint8).tobytes()


def encode_byte_run(rows: np.ndarray) -> bytes:
    """Run-length encode a full image, one line at a time."""
    out = bytearray()
    for row in rows:
        packets = _byte_run_packets(row.tobytes())
        # Packet count is informational only; readers go by the line width
        out.append(min(len(packets), 0xFF))
        for packet in packets:
            out += packet
    return bytes(out)


def _byte_run_packets(row: bytes) -> list[bytes]:
    packets: list[bytes] = []
    literal = bytearray()
    i = 0
    n = len(row)

    while i < n:
        value = row[i]
        run = 1
        while i + run < n and run < _MAX_BYTE_RUN and row[i + run] == value:
            run += 1

        if run >= _MIN_RUN:
            if literal:
                packets.append(bytes((256 - len(literal),)) + bytes(literal))
                literal = bytearray()
            packets.append(bytes((run, value)))
            i += run
        else:
            literal.append(value)
            i += 1
            if len(literal) == _MAX_BYTE_LITERAL:
                packets.append(bytes((256 - len(literal),)) + bytes(literal))
                literal = bytearray()

    if literal:
        packets.append(bytes((256 - len(literal),)) + bytes(literal))
    return packets


def encode_delta_flc(prev: np.ndarray, cur: np.ndarray) -> bytes | None:
    """Word-oriented delta from *prev* to *cur*, or None when they are equal.

    Both arguments are (height, width) uint8 arrays.
    """
    height, width = cur.shape
    changed_rows = np.flatnonzero((prev != cur).any(axis=1))
    if not len(changed_rows):
        return None

    even = width - (width % 2)
    body = bytearray()
    next_y = 0

    for y in changed_rows:
        skip = int(y) - next_y
        while skip > 0:
            step = min(skip, _MAX_LINE_SKIP)
            body += struct.pack("<H", 0x10000 - step)
            skip -= step

        if width % 2:
            body += struct.pack("<H", 0x8000 | int(cur[y, width - 1]))

        packets = _line_packets(prev[y, :even], cur[y, :even])
        body += struct.pack("<H", len(packets))
        for packet in packets:
            body += packet
        next_y = int(y) + 1

    return struct.pack("<H", len(changed_rows)) + bytes(body)


def _line_packets(prev_row: np.ndarray, cur_row: np.ndarray) -> list[bytes]:
    prev_pairs = prev_row.reshape(-1, 2)
    cur_pairs = cur_row.reshape(-1, 2)
    changed = np.flatnonzero((prev_pairs != cur_pairs).any(axis=1))
    if not len(changed):
        return []

    breaks = np.flatnonzero(np.diff(changed) > 1)
    starts = np.concatenate(([changed[0]], changed[breaks + 1]))
    ends = np.concatenate((changed[breaks], [changed[-1]])) + 1

    packets: list[bytes] = []
    x = 0
    for start, end in zip(starts, ends):
        skip = 2 * int(start) - x
        while skip > _MAX_COLUMN_SKIP:
            # Empty literal packet: advances the column without copying
            packets.append(bytes((_MAX_COLUMN_SKIP - 1, 0)))
            skip -= _MAX_COLUMN_SKIP - 1
        packets.extend(_segment_packets(skip, cur_pairs[start:end]))
        x = 2 * int(end)
    return packets


def _segment_packets(skip: int, pairs: np.ndarray) -> list[bytes]:
    """Encode a run of changed words; only the first packet carries *skip*."""
    words = pairs[:, 0].astype(np.uint16) | (pairs[:, 1].astype(np.uint16) << 8)
    packets: list[bytes] = []
    n = len(words)
    i = 0
    literal_start = 0

    while i < n:
        run = 1
        while i + run < n and run < _MAX_WORD_RUN and words[i + run] == words[i]:
            run += 1

        if run >= _MIN_RUN:
            if i > literal_start:
                packets.extend(_word_literal_packets(skip, pairs[literal_start:i]))
                skip = 0
            packets.append(bytes((skip, 256 - run)) + pairs[i].tobytes())
            skip = 0
            i += run
            literal_start = i
        else:
            i += 1

    if n > literal_start:
        packets.extend(_word_literal_packets(skip, pairs[literal_start:n]))
    return packets


def _word_literal_packets(skip: int, pairs: np.ndarray) -> list[bytes]:
    packets = []
    for offset in range(0, len(pairs), _MAX_WORD_LITERAL):
        chunk = pairs[offset : offset + _MAX_WORD_LITERAL]
        packets.append(bytes((skip, len(chunk))) + chunk.tobytes())
        skip = 0
    return packets
