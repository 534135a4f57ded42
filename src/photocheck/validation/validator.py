from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional, Tuple

from photocheck.core.models import DEFAULT_CONFIG, ValidationConfig
from photocheck.imaging.loader import load_pixel_buffer
from photocheck.validation.heuristics import analyze_pixels
from photocheck.validation.report import HeuristicReport, ValidationResult
from photocheck.validation.scoring import is_passing, score

logger = logging.getLogger(__name__)

MSG_NO_FACE = "No face detected in the image"
MSG_POOR_LIGHTING = "Poor lighting detected. Please use better lighting."
MSG_NO_WHITE_BACKGROUND = "White background required. Please use a white background."
MSG_EYES_CLOSED = "Eyes must be open and clearly visible."
MSG_PASSED = "Photo meets passport requirements"
MSG_FAILED = "Photo does not meet requirements"

# First matching rule picks the message. Only the no-face rule changes the verdict.
_MESSAGE_RULES: List[Tuple[Callable[[HeuristicReport], bool], str]] = [
    (lambda r: not r.proper_lighting, MSG_POOR_LIGHTING),
    (lambda r: not r.white_background, MSG_NO_WHITE_BACKGROUND),
    (lambda r: not r.eyes_open, MSG_EYES_CLOSED),
]


def build_result(report: HeuristicReport, config: ValidationConfig = DEFAULT_CONFIG) -> ValidationResult:
    """
    Score a HeuristicReport and attach the user-facing message.

    A photo without a detectable face never passes, whatever the other checks
    score. Lighting/background/eyes messages take priority over the verdict
    message but leave `passed` as the threshold decided, so a well-scoring
    photo can pass while still carrying e.g. the lighting hint.
    """
    confidence = score(report, config)
    passed = is_passing(confidence, config)

    if not report.face_detected:
        return ValidationResult(passed=False, confidence=confidence, details=report, message=MSG_NO_FACE)

    message: Optional[str] = None
    for matches, text in _MESSAGE_RULES:
        if matches(report):
            message = text
            break
    if message is None:
        message = MSG_PASSED if passed else MSG_FAILED

    return ValidationResult(passed=passed, confidence=confidence, details=report, message=message)


def validate_passport_photo(
    data: bytes,
    mime_type: str | None,
    config: ValidationConfig = DEFAULT_CONFIG,
) -> ValidationResult:
    """
    Validate an uploaded passport photo and return a ValidationResult.

    Raises UnsupportedFormatError, PayloadTooLargeError, DecodeError or
    ValidationTimeoutError. Rules are best-effort heuristics intended for user
    guidance. They are NOT an official adjudication of passport acceptance.
    """
    buffer = load_pixel_buffer(data, mime_type, config)

    deadline = None
    if config.timeout_seconds is not None:
        deadline = time.monotonic() + config.timeout_seconds

    report = analyze_pixels(buffer, config, deadline=deadline)
    result = build_result(report, config)
    logger.info(
        "Validated %dx%d photo: passed=%s confidence=%.2f (%s)",
        buffer.width, buffer.height, result.passed, result.confidence, result.message,
    )
    return result


def format_report_text(result: ValidationResult) -> str:
    d = result.details
    checks = [
        ("Face detected", d.face_detected, ""),
        ("Eyes open", d.eyes_open, "" if d.eye_detection_available else " (not checked)"),
        ("Proper lighting", d.proper_lighting, ""),
        ("White background", d.white_background, ""),
    ]

    lines: List[str] = []
    lines.append("Passport Photo Validation Report")
    lines.append("-" * 32)
    lines.append(f"Overall: {'PASS' if result.passed else 'FAIL'}")
    lines.append(f"Confidence: {result.confidence * 100:.1f}%")
    lines.append(f"Message: {result.message}")
    lines.append("")
    for name, ok, note in checks:
        mark = "✅" if ok else "❌"
        lines.append(f"{mark} {name}{note}")
    position_note = "" if d.eye_detection_available else " (not checked)"
    lines.append(f"•  Face position: {d.face_position.value}{position_note}")
    return "\n".join(lines)
