"""
Tests for the HTTP surface: /api/process-image and /api/health.
"""

import pytest
from fastapi.testclient import TestClient

from bol_ocr.errors import ModelCallError, OCRError
from bol_ocr.main import create_app


PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def post_image(client, data=PNG_BYTES, filename="bol.png", content_type="image/png"):
    return client.post(
        "/api/process-image",
        files={"image": (filename, data, content_type)},
    )


class TestProcessImage:

    def test_success_returns_fields_and_truncated_ocr_text(self, client, ocr_service, extractor):
        ocr_text = "BOL #: BOL-778812 " + "x" * 800
        ocr_service.read_text.return_value = ocr_text

        response = post_image(client)

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "data": {
                "bolNumber": "BOL-778812",
                "weight": "500 lbs",
                "weightType": "Net Weight",
                "rawOcrText": ocr_text[:500],
            },
        }
        extractor.request_fields.assert_called_once_with(PNG_BYTES, "image/png", ocr_text)

    def test_null_fields_are_returned_as_null(self, client, extractor):
        extractor.request_fields.return_value = (
            '{"bolNumber": null, "weight": null, "weightType": null}'
        )

        body = post_image(client).json()

        assert body["success"] is True
        assert body["data"]["bolNumber"] is None
        assert body["data"]["weight"] is None
        assert body["data"]["weightType"] is None

    def test_non_json_reply_falls_back_to_patterns(self, client, extractor):
        extractor.request_fields.return_value = (
            'Sure! Here it is: "bolNumber": "BOL-1", "weight": "12 kg" (no type found)'
        )

        body = post_image(client).json()

        assert body["data"]["bolNumber"] == "BOL-1"
        assert body["data"]["weight"] == "12 kg"
        assert body["data"]["weightType"] is None

    def test_missing_file_is_rejected_without_external_calls(self, client, ocr_service, extractor):
        response = client.post("/api/process-image")

        assert response.status_code == 400
        assert response.json() == {"error": "No image file provided"}
        ocr_service.read_text.assert_not_called()
        extractor.request_fields.assert_not_called()

    def test_other_form_fields_do_not_count_as_a_file(self, client, ocr_service):
        response = client.post("/api/process-image", data={"note": "hello"})

        assert response.status_code == 400
        assert response.json() == {"error": "No image file provided"}
        ocr_service.read_text.assert_not_called()

    def test_text_file_is_rejected_before_ocr(self, client, ocr_service, extractor, leftover_uploads):
        response = post_image(client, data=b"hello", filename="notes.txt", content_type="text/plain")

        assert response.status_code == 400
        assert response.json() == {"error": "Only image files are allowed!"}
        ocr_service.read_text.assert_not_called()
        extractor.request_fields.assert_not_called()
        assert leftover_uploads() == []

    def test_oversized_file_is_rejected_and_nothing_is_written(
        self, client, settings, ocr_service, leftover_uploads
    ):
        response = post_image(client, data=b"\x00" * (settings.max_upload_bytes + 1))

        assert response.status_code == 400
        assert response.json() == {"error": "File too large"}
        ocr_service.read_text.assert_not_called()
        assert leftover_uploads() == []

    def test_file_at_the_size_limit_is_accepted(self, client, settings):
        response = post_image(client, data=b"\x00" * settings.max_upload_bytes)

        assert response.status_code == 200

    def test_upload_exists_during_ocr_and_is_removed_after(self, client, ocr_service, leftover_uploads):
        seen = {}

        def read_text(path):
            seen["path"] = path
            seen["existed"] = path.exists()
            seen["content"] = path.read_bytes()
            return "Net Weight: 500 lbs"

        ocr_service.read_text.side_effect = read_text

        response = post_image(client, filename="scan.png")

        assert response.status_code == 200
        assert seen["existed"] is True
        assert seen["content"] == PNG_BYTES
        assert seen["path"].name.endswith("-scan.png")
        assert not seen["path"].exists()
        assert leftover_uploads() == []

    def test_ocr_failure_returns_500_and_cleans_up(self, client, ocr_service, extractor, leftover_uploads):
        ocr_service.read_text.side_effect = OCRError("tesseract is not installed")

        response = post_image(client)

        assert response.status_code == 500
        assert response.json() == {
            "error": "Failed to process image",
            "details": "tesseract is not installed",
        }
        extractor.request_fields.assert_not_called()
        assert leftover_uploads() == []

    def test_model_failure_returns_500_and_cleans_up(self, client, extractor, leftover_uploads):
        extractor.request_fields.side_effect = ModelCallError("Rate limit reached")

        response = post_image(client)

        assert response.status_code == 500
        assert response.json() == {
            "error": "Failed to process image",
            "details": "Rate limit reached",
        }
        assert leftover_uploads() == []

    def test_long_filename_is_processed_and_cleaned_up(self, client, ocr_service, leftover_uploads):
        response = post_image(client, filename="a" * 240 + ".png")

        assert response.status_code == 200
        ocr_service.read_text.assert_called_once()
        assert ocr_service.read_text.call_args.args[0].name.endswith(".png")
        assert leftover_uploads() == []

    def test_text_value_in_image_field_is_treated_as_missing_file(self, client, ocr_service):
        response = client.post("/api/process-image", data={"image": "not a file"})

        assert response.status_code == 400
        assert response.json() == {"error": "No image file provided"}
        ocr_service.read_text.assert_not_called()


class TestUnexpectedErrors:

    @pytest.fixture
    def lenient_client(self, settings, pipeline):
        app = create_app(settings=settings, pipeline=pipeline)
        with TestClient(app, raise_server_exceptions=False) as test_client:
            yield test_client

    def test_unexpected_error_uses_server_error_shape(self, lenient_client, ocr_service, leftover_uploads):
        ocr_service.read_text.side_effect = KeyError("page")

        response = post_image(lenient_client)

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to process image", "details": "'page'"}
        assert leftover_uploads() == []

    def test_os_error_details_do_not_include_paths(self, lenient_client, ocr_service):
        ocr_service.read_text.side_effect = OSError(36, "File name too long", "/srv/uploads/x.png")

        body = post_image(lenient_client).json()

        assert body == {"error": "Failed to process image", "details": "File name too long"}


class TestHealth:

    def test_health_check(self, client, ocr_service):
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json() == {"status": "Server is running"}
        ocr_service.read_text.assert_not_called()


class TestCors:

    def test_allowed_origin_gets_cors_header(self, client, settings):
        origin = settings.allowed_origins[0]
        response = client.get("/api/health", headers={"Origin": origin})

        assert response.headers["access-control-allow-origin"] == origin

    def test_unknown_origin_gets_no_cors_header(self, client):
        response = client.get("/api/health", headers={"Origin": "https://evil.example"})

        assert "access-control-allow-origin" not in response.headers

    def test_preflight_from_unknown_origin_is_refused(self, client):
        response = client.options(
            "/api/process-image",
            headers={
                "Origin": "https://evil.example",
                "Access-Control-Request-Method": "POST",
            },
        )

        assert response.status_code == 400
