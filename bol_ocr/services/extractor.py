"""
extractor.py

AI-powered extractor that reads a Bill of Lading.

This service sends the BOL image together with its OCR text to
an OpenAI vision model and asks for three fields:
- BOL number
- Weight (Net > Shipping > anything else, including Gross)
- Weight type

It only returns the model's raw reply. Turning that reply into
fields is the job of parser.py.
"""

import base64
import logging
from typing import Optional

from openai import OpenAI

from bol_ocr.errors import ModelCallError

# Setup logging
logger = logging.getLogger(__name__)


WEIGHT_PRIORITY_RULE = """2. Weight - Priority order (return the FIRST one you find):
   - Net Weight or Net (highest priority)
   - Shipping Weight (second priority)
   - Any other weight including Gross Weight (lowest priority)"""


def build_prompt(ocr_text: str) -> str:
    """
    Build the instruction sent alongside the image.

    The OCR text is embedded verbatim so the model can compare
    what Tesseract read with what it sees in the image.
    """

    return f"""Analyze this image and the OCR text below to extract BOL (Bill of Lading) information.

OCR Text:
{ocr_text}

Please extract and return ONLY:
1. BOL Number (Bill of Lading number)
{WEIGHT_PRIORITY_RULE}
3. Weight Type - specify which type was found (e.g., "Net Weight", "Shipping Weight", "Gross Weight", "Weight")

Return the response in this exact JSON format:
{{
  "bolNumber": "extracted BOL number or null if not found",
  "weight": "extracted weight with units or null if not found",
  "weightType": "type of weight found (Net Weight, Shipping Weight, Gross Weight, etc.) or null"
}}

If you cannot find either value, return null for that field.
"""


class BOLExtractorService:
    """
    BOLExtractorService asks the vision model for BOL fields.

    One call per image; nothing is retried.
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gpt-4o",
        max_tokens: int = 300,
        temperature: float = 0.1,
    ):
        """
        Initialize the extractor.

        What happens here:
        - Store model parameters
        - Create OpenAI client if an API key is provided

        Without a key the service still starts; every call then
        fails with ModelCallError.
        """

        logger.info("Initializing BOL extractor service...")

        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

        # Store OpenAI client (will be None if no key provided)
        self.client = None
        if api_key:
            self.client = OpenAI(api_key=api_key)

    def request_fields(self, image_bytes: bytes, content_type: str, ocr_text: str) -> str:
        """
        Send the image and OCR text to the model and return its reply.

        What happens here:
        1. Convert image bytes to a base64 data URL
        2. Build the prompt with the OCR text embedded
        3. Call the chat completions API once
        4. Return the reply text (possibly not JSON)

        Parameters:
        - image_bytes: the uploaded image
        - content_type: its MIME type, used in the data URL
        - ocr_text: raw Tesseract output

        Raises:
        - ModelCallError for any failure of the API call

        Called by:
        - BOLExtractionPipeline.process() in services/pipeline.py
        """

        if self.client is None:
            raise ModelCallError("OpenAI API key is not configured")

        # Step 1: OpenAI API needs base64 format
        base64_image = base64.b64encode(image_bytes).decode("utf-8")

        logger.info(f"Processing with {self.model}...")

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {
                                "type": "text",
                                "text": build_prompt(ocr_text),
                            },
                            {
                                "type": "image_url",
                                "image_url": {
                                    "url": f"data:{content_type};base64,{base64_image}"
                                },
                            },
                        ],
                    }
                ],
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except Exception as error:
            logger.error(f"Error processing with {self.model}: {error}")
            raise ModelCallError(str(error)) from error

        return response.choices[0].message.content or ""
