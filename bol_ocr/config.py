"""
config.py

Central place to load environment variables.

Everything is read once at startup by load_settings() and packed
into an immutable Settings object. The app factory receives that
object and hands it to the routes and services, so nothing else
reads os.environ directly.
"""

import os
from typing import Optional, Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field


DEFAULT_ALLOWED_ORIGINS = (
    "http://localhost:5173",
    "http://localhost:3000",
    "http://localhost:8501",
)


class Settings(BaseModel):
    """
    Settings

    Immutable runtime configuration for the BOL OCR service
    and its Streamlit client.
    """

    model_config = ConfigDict(frozen=True)

    # Hosted language model
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o"
    openai_max_tokens: int = 300
    openai_temperature: float = 0.1

    # HTTP server
    host: str = "0.0.0.0"
    port: int = 5000
    allowed_origins: Tuple[str, ...] = DEFAULT_ALLOWED_ORIGINS

    # Uploads
    upload_dir: str = "uploads"
    max_upload_bytes: int = Field(default=10 * 1024 * 1024, gt=0)  # 10MB

    # OCR engine
    ocr_language: str = "eng"
    tesseract_cmd: Optional[str] = None

    log_level: str = "INFO"

    # Where the client finds the service
    backend_url: str = "http://localhost:5000"


def _split_origins(raw: Optional[str]) -> Tuple[str, ...]:
    """Turn "a, b,c" into ("a", "b", "c"), dropping blanks."""
    if not raw:
        return DEFAULT_ALLOWED_ORIGINS
    return tuple(origin.strip() for origin in raw.split(",") if origin.strip())


def load_settings() -> Settings:
    """
    Build Settings from the environment.

    What happens here:
    1. Load variables from .env file into environment
    2. Read every known variable (falling back to defaults)
    3. Let pydantic validate and convert the values

    Called by:
    - create_app() in bol_ocr/main.py
    - run.py
    - the Streamlit client
    """

    # Load variables from .env file into environment
    load_dotenv()

    values = {
        "openai_api_key": os.getenv("OPENAI_API_KEY") or None,
        "openai_model": os.getenv("OPENAI_MODEL"),
        "openai_max_tokens": os.getenv("OPENAI_MAX_TOKENS"),
        "openai_temperature": os.getenv("OPENAI_TEMPERATURE"),
        "host": os.getenv("HOST"),
        "port": os.getenv("PORT"),
        "allowed_origins": _split_origins(os.getenv("ALLOWED_ORIGINS")),
        "upload_dir": os.getenv("UPLOAD_DIR"),
        "max_upload_bytes": os.getenv("MAX_UPLOAD_BYTES"),
        "ocr_language": os.getenv("OCR_LANGUAGE"),
        "tesseract_cmd": os.getenv("TESSERACT_CMD") or None,
        "log_level": os.getenv("LOG_LEVEL"),
        "backend_url": os.getenv("BACKEND_URL"),
    }

    # Unset variables keep the model defaults
    return Settings(**{key: value for key, value in values.items() if value is not None})
