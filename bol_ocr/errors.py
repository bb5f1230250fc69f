"""
errors.py

Exceptions raised by the BOL OCR service.

Routes and services raise these; the handlers registered in
bol_ocr/main.py turn them into the JSON error shapes the client
understands:

- ImageRejectedError -> 400 {"error": ...}
- ExtractionError    -> 500 {"error": ..., "details": ...}
"""


class BOLServiceError(Exception):
    """Base class for every error this service raises on purpose."""


class ImageRejectedError(BOLServiceError):
    """
    The upload was refused before any processing started.

    Raised for a missing file, a non-image MIME type or a file
    above the size ceiling. No OCR or model call has been made.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ExtractionError(BOLServiceError):
    """
    An external step of the pipeline failed.

    The client always receives the same public message; the
    underlying reason travels in `details`.
    """

    public_message = "Failed to process image"

    def __init__(self, details: str):
        super().__init__(details)
        self.details = details


class OCRError(ExtractionError):
    """Tesseract could not read the uploaded image."""


class ModelCallError(ExtractionError):
    """The language model call failed (network, auth, rate limit...)."""
