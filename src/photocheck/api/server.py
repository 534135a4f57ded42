"""
HTTP front door for the photo checks.

    POST /api/validate/passport-photo   multipart: image=<file>, type=passport_photo|document
    GET  /api/health

Responses are `{"success": true, "data": {...}}` on success and `{"error": "..."}`
with a 4xx/5xx status otherwise.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, File, Form, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from photocheck.core.errors import (
    DecodeError,
    PayloadTooLargeError,
    PhotoValidationError,
    UnsupportedFormatError,
    ValidationTimeoutError,
)
from photocheck.core.models import DEFAULT_CONFIG, ValidationConfig
from photocheck.validation.scan_quality import validate_document_scan
from photocheck.validation.validator import validate_passport_photo

logger = logging.getLogger(__name__)

VALIDATION_TYPES = ("passport_photo", "document")

_STATUS_BY_ERROR = {
    PayloadTooLargeError: 413,
    UnsupportedFormatError: 415,
    DecodeError: 400,
    ValidationTimeoutError: 503,
}


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def create_app(config: Optional[ValidationConfig] = None) -> FastAPI:
    """Build the API around an explicit ValidationConfig (defaults when omitted)."""
    cfg = config or DEFAULT_CONFIG

    app = FastAPI(
        title="Passport Photo Check API",
        description="Rule-based passport photo and document scan checks.",
        version="1.0.0",
    )
    app.state.config = cfg

    @app.get("/api/health")
    async def health():
        return {
            "status": "healthy",
            "service": "photocheck",
            "pass_threshold": cfg.pass_threshold,
            "max_upload_bytes": cfg.max_upload_bytes,
            "allowed_mime_types": list(cfg.allowed_mime_types),
            "eye_detection_available": False,
        }

    @app.post("/api/validate/passport-photo")
    async def validate_photo(
        image: Optional[UploadFile] = File(None, description="Photo or document capture"),
        validation_type: str = Form("passport_photo", alias="type"),
    ):
        if image is None:
            return _error(400, "No file provided")
        if validation_type not in VALIDATION_TYPES:
            return _error(400, f"Unsupported validation type. Expected one of: {', '.join(VALIDATION_TYPES)}")

        # Never buffer more than limit + 1 bytes; the declared size short-circuits when known.
        declared = getattr(image, "size", None)
        if declared is not None and declared > cfg.max_upload_bytes:
            data = b""
            oversized = True
        else:
            data = await image.read(cfg.max_upload_bytes + 1)
            oversized = len(data) > cfg.max_upload_bytes
        if oversized:
            logger.warning("Rejected %s upload over %d bytes", validation_type, cfg.max_upload_bytes)
            return _error(413, PayloadTooLargeError.user_message)

        logger.info("Received %s upload: %d bytes (%s)", validation_type, len(data), image.content_type)

        check = validate_passport_photo if validation_type == "passport_photo" else validate_document_scan
        try:
            result = await run_in_threadpool(check, data, image.content_type, cfg)
        except PhotoValidationError as e:
            status = _STATUS_BY_ERROR.get(type(e), 400)
            logger.warning("Rejected %s upload (%d): %s", validation_type, status, e)
            return _error(status, e.user_message)

        return {"success": True, "data": result.to_dict()}

    return app


def serve(argv: Optional[list[str]] = None) -> None:
    """Run the API with uvicorn (`photocheck-api --host 0.0.0.0 --port 8000`)."""
    import argparse

    import uvicorn

    p = argparse.ArgumentParser(description="Serve the passport photo check API.")
    p.add_argument("--host", default="127.0.0.1")
    p.add_argument("--port", type=int, default=8000)
    p.add_argument("--log-level", default="info")
    args = p.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run(create_app(), host=args.host, port=args.port, log_level=args.log_level)
