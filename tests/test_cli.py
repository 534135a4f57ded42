import io
import json
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

from tests._test_path import encode, passport_like, solid

from photocheck import cli


class TestCli(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def _write(self, name: str, data: bytes) -> str:
        path = self.tmp / name
        path.write_bytes(data)
        return str(path)

    def _run(self, *argv):
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = cli.main(list(argv))
        return code, out.getvalue(), err.getvalue()

    def test_passing_photo_text_report(self):
        path = self._write("photo.png", encode(passport_like(), "PNG"))
        code, out, _ = self._run(path)
        self.assertEqual(code, 0)
        self.assertIn("Overall: PASS", out)

    def test_failing_photo_json(self):
        path = self._write("white.png", encode(solid((255, 255, 255)), "PNG"))
        code, out, _ = self._run(path, "--json")
        self.assertEqual(code, 1)
        body = json.loads(out)
        self.assertFalse(body["passed"])
        self.assertEqual(body["message"], "No face detected in the image")
        self.assertIn("skin_ratio", body["metrics"])

    def test_threshold_override(self):
        path = self._write("photo.png", encode(passport_like(), "PNG"))
        code, _, _ = self._run(path, "--threshold", "1.0")
        self.assertEqual(code, 1)

    def test_mime_override_mismatch(self):
        path = self._write("photo.png", encode(passport_like(), "PNG"))
        code, _, err = self._run(path, "--mime", "image/jpeg")
        self.assertEqual(code, 2)
        self.assertIn("could not be read as an image", err)

    def test_unknown_extension(self):
        path = self._write("photo.bin", encode(passport_like(), "PNG"))
        code, _, err = self._run(path)
        self.assertEqual(code, 2)
        self.assertIn("Invalid file type", err)

    def test_missing_file(self):
        code, _, err = self._run(str(self.tmp / "nope.png"))
        self.assertEqual(code, 2)
        self.assertIn("ERROR:", err)

    def test_invalid_config(self):
        path = self._write("photo.png", encode(passport_like(), "PNG"))
        code, _, err = self._run(path, "--sample-stride", "0")
        self.assertEqual(code, 2)
        self.assertIn("sample_stride", err)

    def test_document_mode(self):
        path = self._write("scan.png", encode(solid((128, 128, 128), size=(32, 32)), "PNG"))
        code, out, _ = self._run(path, "--type", "document")
        self.assertEqual(code, 1)
        self.assertIn("Document Scan Quality Report", out)
        self.assertIn("POOR", out)
