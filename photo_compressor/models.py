"""Result types produced by the compressor."""

from dataclasses import dataclass
from typing import Tuple

JPEG_MEDIA_TYPE = "image/jpeg"


@dataclass(frozen=True)
class EncodedCandidate:
    """One JPEG encoding of the scaled raster at a given quality."""
    quality: float
    data: bytes

    @property
    def size_bytes(self) -> int:
        return len(self.data)

    @property
    def size_kb(self) -> float:
        return len(self.data) / 1024


@dataclass(frozen=True)
class CompressionResult:
    """
    The accepted candidate, handed back to the caller.

    Attributes:
        data: Encoded JPEG bytes.
        width: Output width in pixels.
        height: Output height in pixels.
        quality: Quality factor the accepted candidate was encoded at.
        attempts: Every quality tried, in order; the last one is ``quality``.
        original_size: Byte length of the source.
        source_reused: True when ``data`` is the untouched source JPEG, which was
            already in bounds and smaller than the accepted re-encode.
        media_type: Always ``image/jpeg``.
    """
    data: bytes
    width: int
    height: int
    quality: float
    attempts: Tuple[float, ...]
    original_size: int
    source_reused: bool = False
    media_type: str = JPEG_MEDIA_TYPE

    @property
    def size_bytes(self) -> int:
        return len(self.data)

    @property
    def size_kb(self) -> float:
        return len(self.data) / 1024

    @property
    def retries(self) -> int:
        """Number of re-encodes after the first attempt."""
        return len(self.attempts) - 1
