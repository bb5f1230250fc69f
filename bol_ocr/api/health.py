from fastapi import APIRouter

from bol_ocr.schemas.extraction import HealthResponse

router = APIRouter()

@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=200,
    summary="Health check",
    description="Liveness check for the BOL OCR service"
)
def health_check():
    return {"status": "Server is running"}
