"""
extraction.py (Schemas)

This file defines the data structure (schemas) used by the
image processing API.

Python attributes are snake_case; the JSON the client sees is
camelCase (bolNumber, weightType, rawOcrText), the same keys the
frontend has always read.

This file does NOT:
- Perform OCR
- Call the language model
- Handle file uploads
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


RAW_OCR_TEXT_LIMIT = 500


class ExtractionResult(BaseModel):
    """
    ExtractionResult

    The three fields pulled out of a Bill of Lading plus
    the beginning of the raw OCR text.

    Built once per request and never modified afterwards.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    bol_number: Optional[str] = Field(
        default=None,
        description="Bill of Lading number, or null if not found",
        examples=["BOL-2024-001234"],
    )

    weight: Optional[str] = Field(
        default=None,
        description="Weight with units, or null if not found",
        examples=["500 lbs"],
    )

    weight_type: Optional[str] = Field(
        default=None,
        description="Which weight was found (Net Weight, Shipping Weight, Gross Weight...)",
        examples=["Net Weight"],
    )

    raw_ocr_text: str = Field(
        default="",
        max_length=RAW_OCR_TEXT_LIMIT,
        description="First 500 characters of the unmodified OCR output",
    )


class ProcessImageResponse(BaseModel):
    """Success envelope returned by POST /api/process-image."""

    success: bool = Field(
        default=True,
        description="Whether processing succeeded"
    )

    data: ExtractionResult


class ErrorResponse(BaseModel):
    """
    Error envelope.

    `details` is only present for server-side failures.
    """

    error: str = Field(..., examples=["No image file provided"])
    details: Optional[str] = Field(default=None, examples=["Connection error."])


class HealthResponse(BaseModel):
    status: str = Field(..., examples=["Server is running"])
