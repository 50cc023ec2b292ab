"""
Catalog Backend - Upload Endpoint Tests
=========================================

What:  Tests for POST /upload.
How:   Real app via test_client; the blob store is patched for the failure case.
"""

from unittest.mock import AsyncMock, patch

import pytest


class TestUploadEndpoint:

    @pytest.mark.asyncio
    async def test_upload_returns_stored_file_metadata(self, test_client, sample_image_bytes):
        response = await test_client.post(
            "/upload",
            files={"file": ("photo.png", sample_image_bytes, "image/png")},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "File uploaded successfully!"
        stored = body["file"]
        assert stored["fieldname"] == "file"
        assert stored["originalname"] == "photo.png"
        assert stored["mimetype"] == "image/png"
        assert stored["destination"] == "uploads"
        assert stored["filename"].endswith(".png")
        assert stored["path"] == f"uploads/{stored['filename']}"
        assert stored["size"] == len(sample_image_bytes)

    @pytest.mark.asyncio
    async def test_uploaded_file_is_retrievable(self, test_client):
        response = await test_client.post(
            "/upload", files={"file": ("notes.txt", b"hello", "text/plain")}
        )
        path = response.json()["file"]["path"]

        served = await test_client.get("/" + path)

        assert served.status_code == 200
        assert served.content == b"hello"

    @pytest.mark.asyncio
    async def test_any_file_type_is_accepted(self, test_client):
        response = await test_client.post(
            "/upload",
            files={"file": ("tool.exe", b"MZ\x90\x00", "application/octet-stream")},
        )

        assert response.status_code == 200
        assert response.json()["file"]["filename"].endswith(".exe")

    @pytest.mark.asyncio
    async def test_missing_file_part_returns_null_file(self, test_client):
        response = await test_client.post("/upload", data={"comment": "no file here"})

        assert response.status_code == 200
        assert response.json() == {"message": "File uploaded successfully!", "file": None}

    @pytest.mark.asyncio
    async def test_storage_failure_returns_500(self, test_client, app):
        failing = AsyncMock(side_effect=OSError(28, "No space left on device"))

        with patch.object(app.state.blob_store, "store", failing):
            response = await test_client.post(
                "/upload", files={"file": ("photo.png", b"data", "image/png")}
            )

        assert response.status_code == 500
        body = response.json()
        assert body["message"] == "File upload failed"
        assert body["error"]["name"] == "OSError"
        assert "No space left on device" in body["error"]["message"]
