import cv2
import numpy as np
import pytest

from photo_compressor import EncodeError, RasterCodec


def make_photo(width: int, height: int) -> np.ndarray:
    """Smooth BGR gradient with a little noise, close enough to a real photo."""
    rng = np.random.default_rng(0)
    x = np.linspace(0, 255, width, dtype=np.float32)
    y = np.linspace(0, 255, height, dtype=np.float32)
    img = np.empty((height, width, 3), dtype=np.float32)
    img[..., 0] = x[np.newaxis, :]
    img[..., 1] = y[:, np.newaxis]
    img[..., 2] = (x[np.newaxis, :] + y[:, np.newaxis]) / 2
    img += rng.normal(0, 4, img.shape).astype(np.float32)
    return np.clip(img, 0, 255).astype(np.uint8)


def make_noise(width: int, height: int) -> np.ndarray:
    """Uniform random pixels; about the worst case for JPEG."""
    rng = np.random.default_rng(1)
    return rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8)


def encode_png(img: np.ndarray) -> bytes:
    success, buf = cv2.imencode(".png", img)
    assert success
    return buf.tobytes()


@pytest.fixture
def photo_bytes():
    """Factory returning PNG bytes of a synthetic photo."""
    def _make(width: int, height: int) -> bytes:
        return encode_png(make_photo(width, height))
    return _make


@pytest.fixture
def noise_bytes():
    """Factory returning PNG bytes of random noise."""
    def _make(width: int, height: int) -> bytes:
        return encode_png(make_noise(width, height))
    return _make


class FakeCodec(RasterCodec):
    """
    Codec whose output size is scripted per quality.

    Rasters are plain ``(width, height)`` tuples and the source bytes are ignored.
    """

    def __init__(self, size_kb, width=1000, height=500, fail_at=None):
        self.size_kb = size_kb
        self.width = width
        self.height = height
        self.fail_at = fail_at
        self.encoded = []
        self.resized_to = None

    def decode(self, data):
        return self.width, self.height

    def size(self, raster):
        return raster

    def resize(self, raster, width, height):
        self.resized_to = (width, height)
        return width, height

    def encode_jpeg(self, raster, quality):
        if self.fail_at is not None and quality <= self.fail_at:
            raise EncodeError(f"encoder gave up at {quality}")
        self.encoded.append(quality)
        size_kb = self.size_kb(quality) if callable(self.size_kb) else self.size_kb
        return b"\xff" * int(size_kb * 1024)


@pytest.fixture
def fake_codec():
    return FakeCodec
