"""
process.py (API Route)

This file defines the image processing endpoint of the BOL OCR service.

What this file does:
- Defines the /api/process-image endpoint
- Accepts one image upload (form field "image")
- Rejects missing, non-image and oversized files
- Runs the extraction pipeline in a worker thread
- Returns the extracted fields as JSON

What this file does NOT do:
- Run OCR or call the model itself (delegates to BOLExtractionPipeline)
- Format error responses (see the handlers in bol_ocr/main.py)

Flow:
User uploads image → This API → Pipeline → OCR + model → Return JSON
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Request, UploadFile, status
from fastapi.concurrency import run_in_threadpool

from bol_ocr.config import Settings
from bol_ocr.errors import ImageRejectedError
from bol_ocr.schemas.extraction import ErrorResponse, ProcessImageResponse
from bol_ocr.services.pipeline import BOLExtractionPipeline

logger = logging.getLogger(__name__)

# This router will be registered in main.py
router = APIRouter()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_pipeline(request: Request) -> BOLExtractionPipeline:
    return request.app.state.pipeline


async def read_accepted_image(image: Optional[UploadFile], max_bytes: int) -> bytes:
    """
    Upload acceptance checks, done before anything touches disk.

    Only max_bytes + 1 bytes are read, which is enough to tell
    whether the file is over the limit.
    """

    # Step 1: A file must be attached
    if image is None or not image.filename:
        raise ImageRejectedError("No image file provided")

    # Step 2: Only images are accepted
    content_type = image.content_type or ""
    if not content_type.startswith("image/"):
        raise ImageRejectedError("Only image files are allowed!")

    # Step 3: Enforce the size ceiling
    data = await image.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise ImageRejectedError("File too large")

    return data


@router.post(
    "/process-image",
    response_model=ProcessImageResponse,
    status_code=status.HTTP_200_OK,
    responses={
        400: {"model": ErrorResponse, "description": "Missing, non-image or oversized file"},
        500: {"model": ErrorResponse, "description": "OCR or model call failed"},
    },
    summary="Extract BOL number and weight from an image",
    description=(
        "Upload an image of a Bill of Lading. The service runs Tesseract OCR, "
        "sends the image and the OCR text to a vision model and returns the "
        "BOL number, the weight and the weight type."
    ),
)
async def process_image(
    image: Optional[UploadFile] = File(default=None),
    settings: Settings = Depends(get_settings),
    pipeline: BOLExtractionPipeline = Depends(get_pipeline),
):
    """
    BOL extraction endpoint.

    Errors:
    - 400: no file, not an image, or too large
    - 500: OCR or model failure (temporary file is still removed)

    Called by:
    - Streamlit client (bol_ocr/ui/app.py)
    - Any client making a multipart POST to /api/process-image
    """

    data = await read_accepted_image(image, settings.max_upload_bytes)

    # OCR and the OpenAI call block; keep them off the event loop
    result = await run_in_threadpool(
        pipeline.process,
        data,
        image.filename,
        image.content_type,
    )

    return ProcessImageResponse(success=True, data=result)
