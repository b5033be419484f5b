"""
Raster codec used by the compressor.

The compressor only needs three capabilities: decode bytes into a raster,
resize the raster, and encode it as JPEG at a given quality. ``RasterCodec``
names them; ``OpenCVCodec`` is the default implementation.
"""

from abc import ABC, abstractmethod
from typing import Tuple

import cv2
import numpy as np

from .errors import DecodeError, EncodeError


class RasterCodec(ABC):
    """Decode, resize and encode-at-quality."""

    @abstractmethod
    def decode(self, data: bytes) -> np.ndarray:
        """Decode encoded image bytes. Raises ``DecodeError``."""

    @abstractmethod
    def size(self, raster: np.ndarray) -> Tuple[int, int]:
        """Return ``(width, height)`` of a decoded raster."""

    @abstractmethod
    def resize(self, raster: np.ndarray, width: int, height: int) -> np.ndarray:
        """Return a new raster resampled to ``width`` x ``height``. Raises ``EncodeError``."""

    @abstractmethod
    def encode_jpeg(self, raster: np.ndarray, quality: int) -> bytes:
        """Encode as JPEG at ``quality`` (1-100). Raises ``EncodeError``."""


class OpenCVCodec(RasterCodec):
    """
    ``RasterCodec`` backed by OpenCV.

    Notes:
        - Images are decoded as 3-channel BGR; alpha is dropped since JPEG has none.
        - Downscaling uses ``INTER_AREA``, which gives the smoothest result when shrinking.
        - Each call works on its own numpy buffers, so one instance is safe to share.
    """

    def decode(self, data: bytes) -> np.ndarray:
        if not data:
            raise DecodeError("Source is empty")

        buffer = np.frombuffer(data, dtype=np.uint8)
        try:
            img = cv2.imdecode(buffer, cv2.IMREAD_COLOR)
        except cv2.error as exc:
            raise DecodeError(f"Failed to decode image: {exc}") from exc

        if img is None or img.size == 0:
            raise DecodeError("Source is not a decodable image")
        return img

    def size(self, raster: np.ndarray) -> Tuple[int, int]:
        h, w = raster.shape[:2]
        return w, h

    def resize(self, raster: np.ndarray, width: int, height: int) -> np.ndarray:
        try:
            return cv2.resize(raster, (width, height), interpolation=cv2.INTER_AREA)
        except cv2.error as exc:
            raise EncodeError(f"Failed to resize raster to {width}x{height}: {exc}") from exc

    def encode_jpeg(self, raster: np.ndarray, quality: int) -> bytes:
        encode_params = [cv2.IMWRITE_JPEG_QUALITY, quality]
        try:
            success, encoded_img = cv2.imencode(".jpg", raster, encode_params)
        except cv2.error as exc:
            raise EncodeError(f"Failed to encode JPEG at quality {quality}: {exc}") from exc

        if not success or encoded_img is None or encoded_img.size == 0:
            raise EncodeError(f"Failed to encode JPEG at quality {quality}")
        return encoded_img.tobytes()
