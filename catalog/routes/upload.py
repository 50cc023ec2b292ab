"""
Catalog Backend - Upload Route Handler
========================================

What:  Handles POST /upload, a standalone single-file upload.
How:   Reads the `file` part, hands it to the BlobStore, echoes the stored
       file's metadata.
Who:   Clients that want a stored reference before creating a product.

The upload is not attached to any product. No type or size validation.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from catalog.dependencies import get_blob_store
from catalog.exceptions import OperationFailedError
from catalog.schemas.product import ErrorResponse, StoredFileResponse, UploadResponse
from catalog.services.blob_store import BlobStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Upload"])


@router.post(
    "/upload",
    status_code=200,
    response_model=UploadResponse,
    responses={
        200: {"description": "File stored", "model": UploadResponse},
        500: {"description": "File could not be stored", "model": ErrorResponse},
    },
    summary="Upload a single file",
)
async def upload_file(
    file: Optional[UploadFile] = File(default=None, description="Any file"),
    blob_store: BlobStore = Depends(get_blob_store),
) -> UploadResponse:
    """
    Store one file and return its metadata.

    Without a `file` part the response is still 200, with "file": null.
    Any failure while reading or storing becomes a 500
    {"message": "File upload failed", "error": {...}}.
    """
    if file is None:
        logger.info("Upload request without a file part")
        return UploadResponse(file=None)

    try:
        content = await file.read()
        stored = await blob_store.store(
            content,
            file.filename or "",
            content_type=file.content_type,
            field_name="file",
        )
        return UploadResponse(file=StoredFileResponse(**stored.to_dict()))

    except Exception as e:
        logger.error("File upload failed: %s", str(e), exc_info=True)
        raise OperationFailedError("File upload failed", error=e) from e
    finally:
        await file.close()
