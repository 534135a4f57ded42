from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class FacePosition(str, Enum):
    CENTERED = "centered"
    NEAR_CENTERED = "near_centered"
    OFF_CENTER = "off_center"
    ERROR = "error"


@dataclass(frozen=True)
class HeuristicReport:
    """
    Outcome of the pixel heuristics for one image.

    `eyes_open` and `face_position` are placeholders until a landmark model is
    wired in; `eye_detection_available` says so explicitly and callers must not
    enforce on those two fields while it is False.
    """
    face_detected: bool
    eyes_open: bool
    proper_lighting: bool
    white_background: bool
    face_position: FacePosition
    eye_detection_available: bool = False
    metrics: dict[str, Any] | None = field(default=None, compare=False)

    @classmethod
    def failed(cls) -> "HeuristicReport":
        """Report used when the buffer could not be scanned at all."""
        return cls(
            face_detected=False,
            eyes_open=False,
            proper_lighting=False,
            white_background=False,
            face_position=FacePosition.ERROR,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "faceDetected": self.face_detected,
            "eyesOpen": self.eyes_open,
            "properLighting": self.proper_lighting,
            "whiteBackground": self.white_background,
            "facePosition": self.face_position.value,
            "eyeDetectionAvailable": self.eye_detection_available,
        }


@dataclass(frozen=True)
class ValidationResult:
    """
    Verdict for an uploaded passport photo.
    """
    passed: bool
    confidence: float
    details: HeuristicReport
    message: str

    def to_dict(self, include_metrics: bool = False) -> dict[str, Any]:
        out: dict[str, Any] = {
            "passed": self.passed,
            "confidence": self.confidence,
            "details": self.details.to_dict(),
            "message": self.message,
        }
        if include_metrics:
            out["metrics"] = dict(self.details.metrics or {})
        return out


@dataclass(frozen=True)
class DocumentQuality:
    """
    Capture quality of a scanned identity document. All values are in [0, 1].
    """
    score: float
    is_acceptable: bool
    brightness: float
    contrast: float
    sharpness: float
    document_edges: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "isAcceptable": self.is_acceptable,
            "brightness": self.brightness,
            "contrast": self.contrast,
            "sharpness": self.sharpness,
            "documentEdges": self.document_edges,
        }
