import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient

from tests._test_path import encode, passport_like, solid

from photocheck.api import server
from photocheck.api.server import create_app
from photocheck.core.models import ValidationConfig


class TestValidateEndpoint(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(create_app())

    def _post(self, data: bytes, content_type: str, **form):
        return self.client.post(
            "/api/validate/passport-photo",
            files={"image": ("photo", data, content_type)},
            data=form,
        )

    def test_passing_photo(self):
        resp = self._post(encode(passport_like(), "PNG"), "image/png", type="passport_photo")
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertTrue(body["success"])
        self.assertTrue(body["data"]["passed"])
        self.assertEqual(body["data"]["confidence"], 1.0)
        self.assertEqual(body["data"]["message"], "Photo meets passport requirements")
        self.assertEqual(body["data"]["details"]["facePosition"], "centered")
        self.assertFalse(body["data"]["details"]["eyeDetectionAvailable"])

    def test_type_defaults_to_passport_photo(self):
        resp = self._post(encode(solid((255, 255, 255)), "PNG"), "image/png")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["data"]["message"], "No face detected in the image")

    def test_document_type(self):
        resp = self._post(encode(solid((128, 128, 128)), "PNG"), "image/png", type="document")
        self.assertEqual(resp.status_code, 200)
        data = resp.json()["data"]
        self.assertIn("isAcceptable", data)
        self.assertIn("documentEdges", data)

    def test_unknown_type(self):
        resp = self._post(encode(solid((1, 1, 1)), "PNG"), "image/png", type="selfie")
        self.assertEqual(resp.status_code, 400)
        self.assertIn("Unsupported validation type", resp.json()["error"])

    def test_missing_file(self):
        resp = self.client.post("/api/validate/passport-photo", data={"type": "passport_photo"})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "No file provided"})

    def test_unsupported_media_type(self):
        resp = self._post(b"%PDF-1.4", "application/pdf")
        self.assertEqual(resp.status_code, 415)
        self.assertIn("Invalid file type", resp.json()["error"])

    def test_corrupt_image(self):
        resp = self._post(b"not an image", "image/jpeg")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "The uploaded file could not be read as an image."})

    def test_too_large(self):
        client = TestClient(create_app(ValidationConfig(max_upload_bytes=10)))
        resp = client.post(
            "/api/validate/passport-photo",
            files={"image": ("photo.png", b"\x00" * 11, "image/png")},
        )
        self.assertEqual(resp.status_code, 413)
        self.assertIn("File size too large", resp.json()["error"])

    def test_oversized_upload_rejected_before_validation(self):
        client = TestClient(create_app(ValidationConfig(max_upload_bytes=1024)))
        with patch.object(server, "validate_passport_photo") as validate:
            resp = client.post(
                "/api/validate/passport-photo",
                files={"image": ("photo.png", b"\x00" * (64 * 1024), "image/png")},
            )
        self.assertEqual(resp.status_code, 413)
        self.assertEqual(resp.json(), {"error": "File size too large. Maximum size is 10MB."})
        validate.assert_not_called()

    def test_upload_at_limit_is_validated(self):
        data = encode(passport_like(), "PNG")
        client = TestClient(create_app(ValidationConfig(max_upload_bytes=len(data))))
        resp = client.post(
            "/api/validate/passport-photo",
            files={"image": ("photo.png", data, "image/png")},
        )
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["data"]["passed"])

    def test_timeout(self):
        client = TestClient(create_app(ValidationConfig(timeout_seconds=1e-9)))
        resp = client.post(
            "/api/validate/passport-photo",
            files={"image": ("photo.png", encode(passport_like(), "PNG"), "image/png")},
        )
        self.assertEqual(resp.status_code, 503)
        self.assertIn("took too long", resp.json()["error"])


class TestHealthEndpoint(unittest.TestCase):
    def test_health(self):
        client = TestClient(create_app())
        body = client.get("/api/health").json()
        self.assertEqual(body["status"], "healthy")
        self.assertEqual(body["pass_threshold"], 0.6)
        self.assertIn("image/png", body["allowed_mime_types"])
