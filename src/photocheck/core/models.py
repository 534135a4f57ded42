from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np


@dataclass(frozen=True)
class ValidationConfig:
    """
    Knobs that control how an uploaded photo is decoded, scanned and scored.

    Defaults reproduce the behaviour of the browser-side validator the web app
    shipped with, so only change them deliberately (use dataclasses.replace).

    max_upload_bytes:
        Payloads larger than this are rejected before decoding (10 MiB).
    allowed_mime_types:
        Accepted content types, after normalisation (image/jpg -> image/jpeg).
    skin_ratio_threshold / white_ratio_threshold:
        Fraction of pixels that must match the skin-tone / white rule.
    brightness_min / brightness_max:
        Exclusive bounds for the mean (R+G+B)/3 brightness on a 0-255 scale.
    face_weight, eyes_weight, lighting_weight, background_weight:
        Contribution of each check to the confidence score.
    pass_threshold:
        Confidence must be strictly greater than this to pass.
    timeout_seconds:
        Time budget for the pixel scan. None disables the budget.
    sample_stride:
        Scan every Nth row and column. 1 scans every pixel.
    scan_band_rows:
        Rows processed per vectorised band; the time budget is checked between bands.
    document_accept_score:
        Minimum score for a scanned document to be considered usable.
    """
    max_upload_bytes: int = 10 * 1024 * 1024
    allowed_mime_types: Tuple[str, ...] = ("image/jpeg", "image/png", "image/webp")

    skin_ratio_threshold: float = 0.10
    brightness_min: float = 50.0
    brightness_max: float = 200.0
    white_ratio_threshold: float = 0.40

    face_weight: float = 0.4
    eyes_weight: float = 0.2
    lighting_weight: float = 0.2
    background_weight: float = 0.2
    pass_threshold: float = 0.6

    timeout_seconds: Optional[float] = 5.0
    sample_stride: int = 1
    scan_band_rows: int = 256

    document_accept_score: float = 0.6

    def __post_init__(self) -> None:
        if self.max_upload_bytes <= 0:
            raise ValueError("max_upload_bytes must be > 0")
        if not (0.0 <= self.pass_threshold <= 1.0):
            raise ValueError("pass_threshold must be between 0 and 1")
        weights = (self.face_weight, self.eyes_weight, self.lighting_weight, self.background_weight)
        if any(w < 0 for w in weights):
            raise ValueError("check weights must be non-negative")
        if self.brightness_min >= self.brightness_max:
            raise ValueError("brightness_min must be below brightness_max")
        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0 (or None to disable)")
        if self.sample_stride < 1:
            raise ValueError("sample_stride must be >= 1")
        if self.scan_band_rows < 1:
            raise ValueError("scan_band_rows must be >= 1")


DEFAULT_CONFIG = ValidationConfig()


@dataclass(frozen=True)
class PixelBuffer:
    """
    Decoded image as width/height plus flat RGBA bytes (row-major, 4 bytes per pixel).
    """
    width: int
    height: int
    data: bytes

    @property
    def pixel_count(self) -> int:
        return max(0, self.width) * max(0, self.height)

    def is_consistent(self) -> bool:
        """True when the dimensions are positive and match the byte length."""
        return self.width > 0 and self.height > 0 and len(self.data) == self.width * self.height * 4

    def as_array(self) -> np.ndarray:
        """Read-only (height, width, 4) uint8 view over the buffer."""
        if not self.is_consistent():
            raise ValueError(
                f"buffer of {len(self.data)} bytes does not match {self.width}x{self.height} RGBA"
            )
        return np.frombuffer(self.data, dtype=np.uint8).reshape(self.height, self.width, 4)
