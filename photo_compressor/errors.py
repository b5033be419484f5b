"""
Errors raised by the photo compressor.

All of them are terminal for one compression call: nothing is retried
and no partial result is returned.
"""


class CompressionError(Exception):
    """Base class for compression failures."""


class ReadError(CompressionError):
    """The source bytes could not be read to completion."""


class DecodeError(CompressionError):
    """The source could not be interpreted as a raster image."""


class EncodeError(CompressionError):
    """The JPEG encoder failed to produce output."""
