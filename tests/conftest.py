"""
Pytest configuration and shared fixtures for the BOL OCR service tests.

Tesseract and OpenAI are never called: the pipeline is built with
MagicMock stand-ins for OCRService and BOLExtractorService.
"""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from bol_ocr.config import Settings
from bol_ocr.main import create_app
from bol_ocr.services.extractor import BOLExtractorService
from bol_ocr.services.ocr import OCRService
from bol_ocr.services.pipeline import BOLExtractionPipeline

FRONTEND_ORIGIN = "http://localhost:5173"

JSON_COMPLETION = (
    '```json\n'
    '{"bolNumber": "BOL-778812", "weight": "500 lbs", "weightType": "Net Weight"}\n'
    '```'
)


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def settings(upload_dir):
    return Settings(
        openai_api_key="test-key",
        upload_dir=str(upload_dir),
        max_upload_bytes=1024,
        allowed_origins=(FRONTEND_ORIGIN,),
    )


@pytest.fixture
def ocr_service():
    mock = MagicMock(spec=OCRService)
    mock.read_text.return_value = "BILL OF LADING\nBOL #: BOL-778812\nNet Weight: 500 lbs\n"
    return mock


@pytest.fixture
def extractor():
    mock = MagicMock(spec=BOLExtractorService)
    mock.request_fields.return_value = JSON_COMPLETION
    return mock


@pytest.fixture
def pipeline(ocr_service, extractor, upload_dir):
    return BOLExtractionPipeline(
        ocr_service=ocr_service,
        extractor=extractor,
        upload_dir=str(upload_dir),
    )


@pytest.fixture
def client(settings, pipeline):
    app = create_app(settings=settings, pipeline=pipeline)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def leftover_uploads(upload_dir):
    """Callable listing the files still present in the upload directory."""

    def _list():
        if not upload_dir.exists():
            return []
        return list(upload_dir.iterdir())

    return _list
