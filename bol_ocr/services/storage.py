"""
storage.py

Scratch storage for uploaded images.

The OCR engine reads from a file path, so each upload is written
to the upload directory for the lifetime of one request and then
removed. temporary_upload() is the only way files get there, and
its finally block is the only place they get deleted.
"""

import logging
import time
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)


# Most filesystems cap a file name at 255 bytes; the prefix takes 23
MAX_NAME_BYTES = 100


def _shorten(name: str) -> str:
    # Keep the tail so the extension survives
    encoded = name.encode("utf-8")
    if len(encoded) <= MAX_NAME_BYTES:
        return name
    return encoded[-MAX_NAME_BYTES:].decode("utf-8", errors="ignore")


def build_upload_name(original_name: str) -> str:
    """
    Collision-resistant file name for one upload.

    Format: <epoch milliseconds>-<8 hex chars>-<original name>.
    Directory parts of the original name are dropped so a client
    cannot write outside the upload directory, and long names are
    cut down to their last MAX_NAME_BYTES bytes.
    """
    safe_name = _shorten(Path(original_name or "upload").name) or "upload"
    timestamp = int(time.time() * 1000)
    return f"{timestamp}-{uuid.uuid4().hex[:8]}-{safe_name}"


@contextmanager
def temporary_upload(upload_dir: str, original_name: str, data: bytes) -> Iterator[Path]:
    """
    Write `data` to the upload directory and yield its path.

    The file is removed when the block exits, whether it exits
    normally or by an exception.

    Example:
        with temporary_upload("uploads", "bol.png", image_bytes) as path:
            text = ocr.read_text(path)
    """

    directory = Path(upload_dir)
    directory.mkdir(parents=True, exist_ok=True)

    path = directory / build_upload_name(original_name)
    try:
        path.write_bytes(data)
        logger.info(f"Saved upload to {path} ({len(data)} bytes)")
        yield path
    finally:
        path.unlink(missing_ok=True)
        logger.info(f"Removed upload {path}")
