from __future__ import annotations

import logging
import time
from typing import Optional

import numpy as np

from photocheck.core.errors import ValidationTimeoutError
from photocheck.core.models import DEFAULT_CONFIG, PixelBuffer, ValidationConfig
from photocheck.validation.report import FacePosition, HeuristicReport

logger = logging.getLogger(__name__)


def _skin_mask(rgb: np.ndarray) -> np.ndarray:
    """
    Classic RGB skin-tone rule. `rgb` must be a signed integer array (..., 3).

    This is a proxy for face presence, not face detection: skin-coloured
    backgrounds trip it and tight crops where the face is small do not.
    """
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]
    spread = rgb.max(axis=-1) - rgb.min(axis=-1)
    return (
        (r > 95) & (g > 40) & (b > 20)
        & (spread > 15)
        & (np.abs(r - g) > 15)
        & (r > g) & (r > b)
    )


def _white_mask(rgb: np.ndarray) -> np.ndarray:
    return (rgb[..., 0] > 200) & (rgb[..., 1] > 200) & (rgb[..., 2] > 200)


def analyze_pixels(
    buffer: PixelBuffer,
    config: ValidationConfig = DEFAULT_CONFIG,
    deadline: Optional[float] = None,
) -> HeuristicReport:
    """
    Run the skin-tone, brightness and white-background scans over `buffer`.

    The scans share one pass over row bands. `deadline` is a time.monotonic()
    value; when it passes between bands the scan stops with ValidationTimeoutError.
    A buffer that cannot be scanned yields HeuristicReport.failed() instead of raising.
    """
    if not buffer.is_consistent():
        logger.warning(
            "Cannot scan %dx%d buffer with %d bytes; reporting all checks failed",
            buffer.width, buffer.height, len(buffer.data),
        )
        return HeuristicReport.failed()

    arr = buffer.as_array()
    step = config.sample_stride
    if step > 1:
        arr = arr[::step, ::step]

    rows = arr.shape[0]
    skin = 0
    white = 0
    brightness_sum = 0.0
    total = 0

    for start in range(0, rows, config.scan_band_rows):
        band = arr[start : start + config.scan_band_rows, :, :3].astype(np.int16)
        skin += int(np.count_nonzero(_skin_mask(band)))
        white += int(np.count_nonzero(_white_mask(band)))
        # sum of per-pixel (R+G+B)/3
        brightness_sum += float(band.sum(dtype=np.int64)) / 3.0
        total += band.shape[0] * band.shape[1]

        if deadline is not None and time.monotonic() > deadline:
            logger.warning("Pixel scan exceeded its time budget after %d of %d rows", start + band.shape[0], rows)
            raise ValidationTimeoutError(f"pixel scan timed out after {start + band.shape[0]} of {rows} rows")

    if total == 0:
        return HeuristicReport.failed()

    skin_ratio = skin / total
    avg_brightness = brightness_sum / total
    white_ratio = white / total

    metrics = {
        "skin_ratio": skin_ratio,
        "avg_brightness": avg_brightness,
        "white_ratio": white_ratio,
        "sampled_pixels": total,
    }
    logger.debug(
        "Scan metrics: skin %.3f, brightness %.1f, white %.3f over %d pixels",
        skin_ratio, avg_brightness, white_ratio, total,
    )

    return HeuristicReport(
        face_detected=skin_ratio > config.skin_ratio_threshold,
        # No landmark model yet: fixed placeholders, flagged by eye_detection_available=False.
        eyes_open=True,
        proper_lighting=config.brightness_min < avg_brightness < config.brightness_max,
        white_background=white_ratio > config.white_ratio_threshold,
        face_position=FacePosition.CENTERED,
        eye_detection_available=False,
        metrics=metrics,
    )
