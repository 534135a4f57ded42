import unittest

import numpy as np

from tests._test_path import encode, solid

from photocheck.core.errors import UnsupportedFormatError
from photocheck.core.models import PixelBuffer, ValidationConfig
from photocheck.validation.scan_quality import assess_document_quality, validate_document_scan


def _buffer(rgb: np.ndarray) -> PixelBuffer:
    h, w, _ = rgb.shape
    rgba = np.dstack([rgb.astype(np.uint8), np.full((h, w), 255, dtype=np.uint8)])
    return PixelBuffer(width=w, height=h, data=rgba.tobytes())


def _checkerboard(size: int = 64, cell: int = 4) -> np.ndarray:
    yy, xx = np.indices((size, size))
    board = (((yy // cell) + (xx // cell)) % 2 * 255).astype(np.uint8)
    return np.dstack([board, board, board])


class TestAssessDocumentQuality(unittest.TestCase):
    def test_flat_gray_is_not_acceptable(self):
        q = assess_document_quality(_buffer(solid((128, 128, 128), size=(64, 64))))
        self.assertEqual(q.brightness, 1.0)
        self.assertEqual(q.contrast, 0.0)
        self.assertEqual(q.sharpness, 0.0)
        self.assertEqual(q.document_edges, 0.0)
        self.assertAlmostEqual(q.score, 0.25)
        self.assertFalse(q.is_acceptable)

    def test_sharp_high_contrast_pattern_is_acceptable(self):
        q = assess_document_quality(_buffer(_checkerboard()))
        self.assertEqual(q.contrast, 1.0)
        self.assertEqual(q.sharpness, 1.0)
        self.assertGreater(q.document_edges, 0.5)
        self.assertTrue(q.is_acceptable)

    def test_black_frame(self):
        q = assess_document_quality(_buffer(solid((0, 0, 0), size=(32, 32))))
        self.assertEqual(q.brightness, 0.0)
        self.assertEqual(q.score, 0.0)

    def test_values_in_unit_range(self):
        rng = np.random.default_rng(3)
        q = assess_document_quality(_buffer(rng.integers(0, 256, (48, 48, 3), dtype=np.uint8)))
        for value in (q.score, q.brightness, q.contrast, q.sharpness, q.document_edges):
            self.assertGreaterEqual(value, 0.0)
            self.assertLessEqual(value, 1.0)

    def test_configurable_acceptance(self):
        buf = _buffer(solid((128, 128, 128), size=(16, 16)))
        self.assertTrue(assess_document_quality(buf, ValidationConfig(document_accept_score=0.2)).is_acceptable)

    def test_unscannable_buffer(self):
        q = assess_document_quality(PixelBuffer(3, 3, b""))
        self.assertEqual(q.score, 0.0)
        self.assertFalse(q.is_acceptable)


class TestValidateDocumentScan(unittest.TestCase):
    def test_decodes_and_scores(self):
        q = validate_document_scan(encode(_checkerboard(), "PNG"), "image/png")
        self.assertTrue(q.is_acceptable)

    def test_loader_errors_apply(self):
        with self.assertRaises(UnsupportedFormatError):
            validate_document_scan(b"%PDF-1.4", "application/pdf")
