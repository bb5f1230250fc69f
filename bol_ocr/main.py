"""
main.py

This is the main entry point of the FastAPI application.
Here we create the FastAPI app, register the API routes and
turn service errors into the JSON shapes the client expects.

This file does NOT contain business logic.
It only wires everything together.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Import API routers
from bol_ocr.api.health import router as health_router
from bol_ocr.api.process import router as process_router
from bol_ocr.config import Settings, load_settings
from bol_ocr.errors import ExtractionError, ImageRejectedError
from bol_ocr.services.pipeline import BOLExtractionPipeline

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Map service exceptions to {"error": ...} / {"error": ..., "details": ...}."""

    @app.exception_handler(ImageRejectedError)
    async def image_rejected_handler(request: Request, error: ImageRejectedError):
        logger.warning(f"Rejected upload: {error.message}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": error.message},
        )

    @app.exception_handler(ExtractionError)
    async def extraction_error_handler(request: Request, error: ExtractionError):
        logger.error(f"Error processing image ({type(error).__name__}): {error.details}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": error.public_message, "details": error.details},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, error: RequestValidationError):
        # The only form field is "image"; anything but a file there means no file
        logger.warning(f"Invalid upload request: {error.errors()}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "No image file provided"},
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, error: Exception):
        logger.exception("Unexpected error")
        # OSError messages carry server paths; keep only the reason
        if isinstance(error, OSError) and error.strerror:
            details = error.strerror
        else:
            details = str(error)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": ExtractionError.public_message, "details": details},
        )


def create_app(
    settings: Optional[Settings] = None,
    pipeline: Optional[BOLExtractionPipeline] = None,
) -> FastAPI:
    """
    Creates and returns the FastAPI application instance.
    This function helps keep the app creation clean and testable.

    Parameters:
    - settings: configuration; loaded from the environment when omitted
    - pipeline: extraction pipeline; built from settings when omitted
    """

    if settings is None:
        settings = load_settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )

    app = FastAPI(
        title="BOL OCR Service",
        description="Extracts BOL number and weight from Bill of Lading images",
        version="1.0.0"
    )

    app.state.settings = settings
    app.state.pipeline = pipeline or BOLExtractionPipeline.from_settings(settings)

    # Only the known frontends may call the API from a browser
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.allowed_origins),
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    # Register API routes
    app.include_router(health_router, prefix="/api", tags=["Health"])
    app.include_router(process_router, prefix="/api", tags=["BOL"])

    return app
