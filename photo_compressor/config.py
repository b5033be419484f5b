"""
Compression settings for profile photos.

The settings are supplied once and shared by every compression call,
so they live in an immutable dataclass rather than per-call arguments.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class CompressionConfig:
    """
    Fixed configuration of the adaptive compressor.

    Attributes:
        max_width: Largest allowed output width in pixels.
        max_height: Largest allowed output height in pixels.
        target_size_kb: Ideal output size; the first candidate at or under it is accepted.
        max_size_kb: Size accepted once quality has already dropped below ``relaxed_quality``.
        start_quality: JPEG quality factor (0-1) of the first attempt.
        min_quality: Quality floor; a candidate at this quality is always accepted.
        quality_step: Amount the quality drops between attempts.
        relaxed_quality: Below this quality, anything under ``max_size_kb`` is good enough.

    Quality factors and the step are whole hundredths (0.92, 0.05), the
    resolution of the JPEG encoder's 0-100 quality scale.
    """
    max_width: int = 800
    max_height: int = 800
    target_size_kb: float = 500
    max_size_kb: float = 1024
    start_quality: float = 0.92
    min_quality: float = 0.5
    quality_step: float = 0.05
    relaxed_quality: float = 0.8

    def __post_init__(self):
        """Validate settings."""
        if self.max_width <= 0 or self.max_height <= 0:
            raise ValueError(f"max dimensions must be positive, got {self.max_width}x{self.max_height}")
        if self.target_size_kb <= 0 or self.max_size_kb <= 0:
            raise ValueError("size thresholds must be positive")
        if self.target_size_kb > self.max_size_kb:
            raise ValueError(
                f"target_size_kb ({self.target_size_kb}) must not exceed max_size_kb ({self.max_size_kb})"
            )
        for name in ("start_quality", "min_quality", "relaxed_quality"):
            value = getattr(self, name)
            if not 0 < value <= 1:
                raise ValueError(f"{name} must be in (0, 1], got {value}")
        if self.min_quality > self.start_quality:
            raise ValueError(
                f"min_quality ({self.min_quality}) must not exceed start_quality ({self.start_quality})"
            )
        if self.quality_step <= 0:
            raise ValueError(f"quality_step must be positive, got {self.quality_step}")
        for name in ("start_quality", "min_quality", "relaxed_quality", "quality_step"):
            value = getattr(self, name)
            if abs(value * 100 - round(value * 100)) > 1e-6:
                raise ValueError(f"{name} must be a whole number of hundredths, got {value}")


DEFAULT_CONFIG = CompressionConfig()
