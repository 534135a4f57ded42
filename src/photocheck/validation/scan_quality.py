from __future__ import annotations

import logging

import cv2
import numpy as np

from photocheck.core.models import DEFAULT_CONFIG, PixelBuffer, ValidationConfig
from photocheck.imaging.loader import load_pixel_buffer
from photocheck.validation.report import DocumentQuality

logger = logging.getLogger(__name__)

# Normalisation points: values at or beyond these map to 1.0.
_CONTRAST_STD_FULL = 64.0
_SHARPNESS_VAR_FULL = 500.0
_EDGE_DENSITY_FULL = 0.05


def _gray(buffer: PixelBuffer) -> np.ndarray:
    return cv2.cvtColor(np.array(buffer.as_array()), cv2.COLOR_RGBA2GRAY)


def assess_document_quality(buffer: PixelBuffer, config: ValidationConfig = DEFAULT_CONFIG) -> DocumentQuality:
    """
    Score how usable a scanned document capture is.

    brightness:     1 at mid-gray, falling to 0 at pure black/white
    contrast:       grayscale standard deviation
    sharpness:      variance of the Laplacian (low means blurry)
    document_edges: density of Canny edges (text, borders)
    """
    if not buffer.is_consistent():
        logger.warning("Cannot assess %dx%d buffer; reporting zero quality", buffer.width, buffer.height)
        return DocumentQuality(0.0, False, 0.0, 0.0, 0.0, 0.0)

    gray = _gray(buffer)
    mean = float(gray.mean())
    std = float(gray.std())
    lap_var = float(cv2.Laplacian(gray, cv2.CV_64F).var())
    edges = cv2.Canny(gray, 50, 150)
    edge_density = float(np.count_nonzero(edges)) / float(edges.size)

    brightness = max(0.0, 1.0 - abs(mean - 128.0) / 128.0)
    contrast = min(std / _CONTRAST_STD_FULL, 1.0)
    sharpness = min(lap_var / _SHARPNESS_VAR_FULL, 1.0)
    document_edges = min(edge_density / _EDGE_DENSITY_FULL, 1.0)

    total = round((brightness + contrast + sharpness + document_edges) / 4.0, 4)
    logger.debug(
        "Document quality: mean %.1f, std %.1f, laplacian var %.1f, edge density %.4f -> %.3f",
        mean, std, lap_var, edge_density, total,
    )
    return DocumentQuality(
        score=total,
        is_acceptable=total >= config.document_accept_score,
        brightness=round(brightness, 4),
        contrast=round(contrast, 4),
        sharpness=round(sharpness, 4),
        document_edges=round(document_edges, 4),
    )


def validate_document_scan(
    data: bytes,
    mime_type: str | None,
    config: ValidationConfig = DEFAULT_CONFIG,
) -> DocumentQuality:
    """Decode an uploaded document capture and assess its quality."""
    buffer = load_pixel_buffer(data, mime_type, config)
    quality = assess_document_quality(buffer, config)
    logger.info("Document scan %dx%d scored %.3f", buffer.width, buffer.height, quality.score)
    return quality
