"""
run.py

This file is a simple entry point to run the FastAPI application
using Uvicorn.

It allows developers to start the server using:
    python run.py

No business logic should be written here.
"""

import uvicorn

from bol_ocr.config import load_settings
from bol_ocr.main import create_app


if __name__ == "__main__":
    settings = load_settings()

    # host="0.0.0.0" allows access from other devices if needed
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
    )
