"""
api_client.py

This module is responsible for communicating with the BOL OCR service.
The Streamlit page NEVER calls requests directly.

Responsibilities:
- Send the image as multipart/form-data
- Decode the JSON reply, whatever the status code
- Turn network failures and non-JSON replies into ServiceError
"""

from typing import Any, Dict

import requests


class ServiceError(Exception):
    """The service could not be reached or did not answer with JSON."""


class BOLServiceClient:
    """
    BOLServiceClient is a thin wrapper over the service's two endpoints.

    No retries: one image, one request.
    """

    def __init__(self, base_url: str, timeout: float = 120):
        """
        Parameters:
        - base_url: service base URL (e.g. http://localhost:5000)
        - timeout: request timeout in seconds; OCR plus a model call
          routinely takes 10-30 seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _decode(self, response: requests.Response) -> Dict[str, Any]:
        try:
            return response.json()
        except ValueError as error:
            raise ServiceError(
                f"Unexpected response from server (HTTP {response.status_code})"
            ) from error

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    def process_image(self, filename: str, data: bytes, content_type: str) -> Dict[str, Any]:
        """
        POST the image to /api/process-image.

        Error replies (400/500) are JSON too and are returned as-is;
        the caller looks at "success" and "error".
        """

        url = f"{self.base_url}/api/process-image"
        files = {"image": (filename, data, content_type)}

        try:
            response = requests.post(url, files=files, timeout=self.timeout)
        except requests.RequestException as error:
            raise ServiceError(str(error)) from error

        return self._decode(response)

    def health(self) -> Dict[str, Any]:
        """GET /api/health."""

        try:
            response = requests.get(f"{self.base_url}/api/health", timeout=5)
            response.raise_for_status()
        except requests.RequestException as error:
            raise ServiceError(str(error)) from error

        return self._decode(response)
