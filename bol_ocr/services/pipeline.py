"""
pipeline.py

The one pipeline this service runs:

image -> temp file -> Tesseract -> vision model -> parser -> ExtractionResult

Each call is independent; the only shared thing between
concurrent requests is the upload directory.
"""

import logging

from bol_ocr.config import Settings
from bol_ocr.schemas.extraction import RAW_OCR_TEXT_LIMIT, ExtractionResult
from bol_ocr.services.extractor import BOLExtractorService
from bol_ocr.services.ocr import OCRService
from bol_ocr.services.parser import parse_completion
from bol_ocr.services.storage import temporary_upload

logger = logging.getLogger(__name__)


class BOLExtractionPipeline:
    """Runs OCR and model extraction for a single uploaded image."""

    def __init__(self, ocr_service: OCRService, extractor: BOLExtractorService, upload_dir: str):
        self.ocr_service = ocr_service
        self.extractor = extractor
        self.upload_dir = upload_dir

    @classmethod
    def from_settings(cls, settings: Settings) -> "BOLExtractionPipeline":
        return cls(
            ocr_service=OCRService(
                language=settings.ocr_language,
                tesseract_cmd=settings.tesseract_cmd,
            ),
            extractor=BOLExtractorService(
                api_key=settings.openai_api_key,
                model=settings.openai_model,
                max_tokens=settings.openai_max_tokens,
                temperature=settings.openai_temperature,
            ),
            upload_dir=settings.upload_dir,
        )

    def process(self, image_bytes: bytes, filename: str, content_type: str) -> ExtractionResult:
        """
        Extract BOL fields from one image.

        What happens here:
        1. Save the upload to a temporary file
        2. OCR the file
        3. Ask the model for the fields (image + OCR text)
        4. Parse the reply (JSON, or per-field patterns)
        5. Remove the temporary file (always, see temporary_upload)

        Raises:
        - OCRError / ModelCallError; the temp file is gone either way
        """

        with temporary_upload(self.upload_dir, filename, image_bytes) as image_path:
            ocr_text = self.ocr_service.read_text(image_path)
            completion = self.extractor.request_fields(image_bytes, content_type, ocr_text)

        parsed = parse_completion(completion)
        logger.info(
            f"Extracted data ({parsed.mode.value}): bolNumber={parsed.bol_number}, "
            f"weight={parsed.weight}, weightType={parsed.weight_type}"
        )

        return ExtractionResult(
            bol_number=parsed.bol_number,
            weight=parsed.weight,
            weight_type=parsed.weight_type,
            raw_ocr_text=ocr_text[:RAW_OCR_TEXT_LIMIT],
        )
