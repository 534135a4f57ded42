from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

from photocheck.core.models import ValidationConfig
from photocheck.validation.report import ValidationResult

if TYPE_CHECKING:  # avoid importing Pillow at module import time
    from PIL import Image


@dataclass
class AppState:
    """
    Mutable state for a single GUI session.

    The window reads/writes this state; a new upload invalidates the previous result.
    """
    # Input
    input_path: Optional[str] = None
    image_bytes: Optional[bytes] = None
    mime_type: Optional[str] = None
    preview_pil: Optional["Image.Image"] = None

    # User-tunable settings
    config: ValidationConfig = field(default_factory=ValidationConfig)

    # Validation
    result: Optional[ValidationResult] = None

    def load_upload(self, path: str, data: bytes, mime_type: Optional[str], preview: "Image.Image") -> None:
        self.input_path = path
        self.image_bytes = data
        self.mime_type = mime_type
        self.preview_pil = preview
        self.result = None

    def reset(self) -> None:
        """Clear all session state (used by a Reset button)."""
        self.input_path = None
        self.image_bytes = None
        self.mime_type = None
        self.preview_pil = None
        self.result = None
        self.config = ValidationConfig()  # restore defaults
