from __future__ import annotations


class PhotoValidationError(Exception):
    """
    Base class for failures that end a validation call.

    `user_message` is the fixed text that may be shown to the person who uploaded
    the image; `str(exc)` may carry extra detail for logs.
    """
    user_message = "Failed to validate photo"

    def __init__(self, detail: str | None = None):
        super().__init__(detail or self.user_message)
        self.detail = detail


class PayloadTooLargeError(PhotoValidationError):
    user_message = "File size too large. Maximum size is 10MB."


class UnsupportedFormatError(PhotoValidationError):
    user_message = "Invalid file type. Only JPEG, PNG and WebP images are allowed for passport photos."


class DecodeError(PhotoValidationError):
    user_message = "The uploaded file could not be read as an image."


class ValidationTimeoutError(PhotoValidationError):
    user_message = "Photo analysis took too long. Please try a smaller image."
