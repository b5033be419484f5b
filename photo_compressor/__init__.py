"""
Photo Compressor Package

Downscales photos to at most 800x800 and re-encodes them as JPEG at the
highest quality that fits the size envelope, for single uploads or whole
folders. Includes colored console logging and file logging.
"""

from .batch import (
    BatchSummary,
    compress_file,
    compress_folder_async,
    compression_status,
    is_supported_image,
    jpeg_filename,
)
from .codec import OpenCVCodec, RasterCodec
from .compression import (
    AdaptiveCompressor,
    compress,
    compress_image,
    quality_steps,
    read_source,
    scaled_dimensions,
    should_accept,
)
from .config import DEFAULT_CONFIG, CompressionConfig
from .errors import CompressionError, DecodeError, EncodeError, ReadError
from .models import CompressionResult, EncodedCandidate

__all__ = [
    "AdaptiveCompressor",
    "BatchSummary",
    "CompressionConfig",
    "CompressionError",
    "CompressionResult",
    "DEFAULT_CONFIG",
    "DecodeError",
    "EncodeError",
    "EncodedCandidate",
    "OpenCVCodec",
    "RasterCodec",
    "ReadError",
    "compress",
    "compress_file",
    "compress_folder_async",
    "compress_image",
    "compression_status",
    "is_supported_image",
    "jpeg_filename",
    "quality_steps",
    "read_source",
    "scaled_dimensions",
    "should_accept",
]
