"""
ocr.py

This file is used to read an uploaded Bill of Lading image
and extract readable text from it with Tesseract.

This file:
- Only returns extracted text
- Does NOT delete or save files (see storage.py)
- Does NOT contain FastAPI routes
- Does NOT talk to the language model
"""

import logging
from pathlib import Path
from typing import Optional

from PIL import Image  # Used for image handling
import pytesseract  # OCR engine to read text from images

from bol_ocr.errors import OCRError

logger = logging.getLogger(__name__)


class OCRService:
    """
    OCRService is responsible for one job only:
    reading an image file and returning the text Tesseract sees.

    No preprocessing and no confidence filtering is done here;
    whatever Tesseract recognises is passed downstream.
    """

    def __init__(self, language: str = "eng", tesseract_cmd: Optional[str] = None):
        """
        Initialize OCR service.

        Parameters:
        - language: Tesseract language profile (e.g. "eng")
        - tesseract_cmd: optional path to the tesseract executable,
          needed when it is not on PATH (Windows installs)
        """

        self.language = language

        # Point pytesseract at a specific binary only when asked to
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    def read_text(self, image_path: Path) -> str:
        """
        Run OCR over the image stored at `image_path`.

        What happens here:
        1. Open the image with Pillow
        2. Run Tesseract with the configured language
        3. Return the text exactly as Tesseract produced it

        Raises:
        - OCRError if the file cannot be opened or Tesseract fails

        Called by:
        - BOLExtractionPipeline.process() in services/pipeline.py
        """

        logger.info("Starting OCR processing...")

        try:
            with Image.open(image_path) as image:
                text = pytesseract.image_to_string(image, lang=self.language)
        except Exception as error:
            logger.error(f"OCR failed for {image_path}: {error}")
            raise OCRError(str(error)) from error

        logger.info(f"OCR completed. Tesseract text length: {len(text)}")
        logger.debug(f"OCR text: {text}")

        return text
