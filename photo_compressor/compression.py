"""
Adaptive JPEG compression for profile photos.

The pipeline is decode -> scale -> encode. Encoding starts at a high
quality and steps down until the candidate fits the size envelope:

    accept if size <= target
           or quality <= min_quality
           or (size <= max_size and quality < relaxed_quality)

Quality only ever decreases and is floored at ``min_quality``, so the loop
runs a bounded number of times (ten encodes with the default settings).

A JPEG source that needed no resizing is returned as is when it is smaller
than the accepted candidate, so compressing an output again never grows it.
"""

import asyncio
import os
import time
from concurrent.futures import Executor
from typing import BinaryIO, Iterator, List, Optional, Tuple, Union

from .codec import OpenCVCodec, RasterCodec
from .config import DEFAULT_CONFIG, CompressionConfig
from .errors import ReadError
from .logger_setup import CORE_LOGGER, setup_logger
from .models import CompressionResult, EncodedCandidate

log = setup_logger(CORE_LOGGER, log_file=None)

Source = Union[bytes, bytearray, memoryview, str, os.PathLike, BinaryIO]


def _is_jpeg(data: bytes) -> bool:
    return data[:3] == b"\xff\xd8\xff"


def _percent(quality: float) -> int:
    """Quality factor as integer hundredths, the unit the JPEG encoder takes."""
    return int(round(quality * 100))


def read_source(source: Source) -> bytes:
    """
    Read the raw bytes of an image source.

    Args:
        source: Raw bytes, a filesystem path, or a binary file-like object.

    Returns:
        bytes: The full content of the source.

    Raises:
        ReadError: If the source cannot be read to completion.
    """
    if isinstance(source, (bytes, bytearray, memoryview)):
        return bytes(source)

    if isinstance(source, (str, os.PathLike)):
        try:
            with open(source, "rb") as f:
                return f.read()
        except OSError as exc:
            raise ReadError(f"Failed to read {os.fspath(source)}: {exc}") from exc

    if hasattr(source, "read"):
        try:
            data = source.read()
        except (OSError, ValueError) as exc:
            # ValueError: read on a closed file
            raise ReadError(f"Failed to read source stream: {exc}") from exc
        if not isinstance(data, (bytes, bytearray)):
            raise ReadError("Source stream must be opened in binary mode")
        return bytes(data)

    raise TypeError(f"Unsupported image source type: {type(source).__name__}")


def scaled_dimensions(width: int, height: int, config: CompressionConfig = DEFAULT_CONFIG) -> Tuple[int, int]:
    """
    Fit ``width`` x ``height`` inside the configured bounds, keeping the aspect ratio.

    Images already within bounds keep their size; nothing is upscaled.
    """
    if width <= config.max_width and height <= config.max_height:
        return width, height

    ratio = min(config.max_width / width, config.max_height / height)
    # round half up, like a browser canvas does
    new_w = max(1, int(width * ratio + 0.5))
    new_h = max(1, int(height * ratio + 0.5))
    return min(new_w, config.max_width), min(new_h, config.max_height)


def quality_steps(config: CompressionConfig = DEFAULT_CONFIG) -> Iterator[float]:
    """
    Yield the quality factors to try, highest first.

    Each value is ``quality_step`` below the previous one; the last step is
    shortened so the sequence ends exactly on ``min_quality``.
    """
    quality = _percent(config.start_quality)
    floor = _percent(config.min_quality)
    step = _percent(config.quality_step)

    while True:
        yield quality / 100
        if quality <= floor:
            return
        quality = max(quality - step, floor)


def should_accept(size_kb: float, quality: float, config: CompressionConfig = DEFAULT_CONFIG) -> bool:
    """
    Decide whether an encoded candidate is good enough.

    The three clauses are checked in order: small enough, quality floor
    reached, or merely acceptable size once quality is already below the
    relaxed threshold.
    """
    q = _percent(quality)
    if size_kb <= config.target_size_kb:
        return True
    if q <= _percent(config.min_quality):
        return True
    return size_kb <= config.max_size_kb and q < _percent(config.relaxed_quality)


class AdaptiveCompressor:
    """
    Downscale an image to bounded dimensions and re-encode it as JPEG
    at the highest quality that satisfies the size envelope.

    Args:
        config (CompressionConfig, optional): Size and quality settings.
        codec (RasterCodec, optional): Decode/resize/encode backend. Defaults to OpenCV.

    Example:
        >>> result = AdaptiveCompressor().compress_bytes(open("me.png", "rb").read())
        >>> result.media_type, result.width <= 800
        ('image/jpeg', True)
    """

    def __init__(self, config: Optional[CompressionConfig] = None, codec: Optional[RasterCodec] = None):
        self.config = config or DEFAULT_CONFIG
        self.codec = codec or OpenCVCodec()

    def compress_bytes(self, data: bytes, name: str = "image") -> CompressionResult:
        """
        Compress encoded image bytes.

        Args:
            data (bytes): Encoded source image in any format the codec can decode.
            name (str): Label used in log messages.

        Returns:
            CompressionResult: The accepted JPEG candidate.

        Raises:
            DecodeError: If ``data`` is not a decodable image.
            EncodeError: If the encoder produces no output.
        """
        start_time = time.time()

        raster = self.codec.decode(data)
        width, height = self.codec.size(raster)
        new_w, new_h = scaled_dimensions(width, height, self.config)
        resized = (new_w, new_h) != (width, height)
        if resized:
            raster = self.codec.resize(raster, new_w, new_h)
            log.debug(f"{name}: resized {width}x{height} → {new_w}x{new_h}")

        attempts: List[float] = []
        candidate = None
        for quality in quality_steps(self.config):
            candidate = EncodedCandidate(quality, self.codec.encode_jpeg(raster, _percent(quality)))
            attempts.append(quality)
            log.debug(f"{name}: {candidate.size_kb:.0f}KB at quality {quality:.2f}")
            if should_accept(candidate.size_kb, quality, self.config):
                break

        source_reused = False
        if not resized and _is_jpeg(data) and len(data) < candidate.size_bytes:
            # re-encoding an in-bounds JPEG must never grow it
            log.debug(f"{name}: source JPEG ({len(data)} B) is smaller than the candidate, keeping it")
            candidate = EncodedCandidate(candidate.quality, data)
            source_reused = True

        elapsed = time.time() - start_time
        log.info(
            f"Compressed {name}: {len(data)/1024:.0f}KB → {candidate.size_kb:.0f}KB "
            f"at quality {candidate.quality:.2f} ({len(attempts)} attempts, {elapsed:.2f}s)"
        )
        return CompressionResult(
            data=candidate.data,
            width=new_w,
            height=new_h,
            quality=candidate.quality,
            attempts=tuple(attempts),
            original_size=len(data),
            source_reused=source_reused,
        )


def compress_image(
        source: Source,
        config: Optional[CompressionConfig] = None,
        codec: Optional[RasterCodec] = None
) -> CompressionResult:
    """
    Read and compress one image synchronously.

    Raises:
        ReadError: If the source cannot be read.
        DecodeError: If the source is not an image.
        EncodeError: If JPEG encoding fails.
    """
    name = os.path.basename(os.fspath(source)) if isinstance(source, (str, os.PathLike)) else "image"
    data = read_source(source)
    return AdaptiveCompressor(config, codec).compress_bytes(data, name=name)


async def compress(
        source: Source,
        config: Optional[CompressionConfig] = None,
        codec: Optional[RasterCodec] = None,
        executor: Optional[Executor] = None
) -> CompressionResult:
    """
    Compress one image without blocking the event loop.

    The work runs in ``executor`` (the loop's default thread pool when omitted);
    the caller is suspended until the result or the error is available.
    There is no cancellation: an abandoned call runs to completion and its
    result is simply dropped.
    """
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(executor, compress_image, source, config, codec)
