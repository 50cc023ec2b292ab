"""
Catalog Backend - Product Route Handlers
==========================================

What:  The five product routes under /api/products.
How:   Parses multipart bodies into form fields + files, delegates to
       ProductService, returns the serialized result. Errors raised by the
       service are turned into responses by the handlers in main.py.

Route Inventory:
    POST   /api/products                 create (≤5 files under `images`)
    GET    /api/products                 list all
    GET    /api/products/{id}            fetch one
    PUT    /api/products/{id}            replace fields, optionally images
    PUT    /api/products/{id}/favorite   flip isFavorite
    DELETE /api/products/{id}            delete, always 204
"""

import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile

from catalog.dependencies import get_product_service
from catalog.schemas.product import (
    ErrorResponse,
    ProductCreatedResponse,
    ProductResponse,
)
from catalog.services.blob_store import IncomingFile
from catalog.services.product_service import ProductService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Products"])


def product_form(
    sku: Optional[str] = Form(default=None),
    name: Optional[str] = Form(default=None),
    quantity: Optional[str] = Form(default=None, description="Numeric quantity"),
    description: Optional[str] = Form(default=None),
    featured_image: Optional[str] = Form(
        default=None,
        alias="featuredImage",
        description="Stored reference to feature; defaults to the first uploaded image",
    ),
) -> Dict[str, Optional[str]]:
    """
    Collect the scalar product fields from a multipart body.

    Values stay strings here; ProductService validates them into a
    ProductForm so a bad quantity fails inside the workflow (→ 500).
    """
    return {
        "sku": sku,
        "name": name,
        "quantity": quantity,
        "description": description,
        "featuredImage": featured_image,
    }


async def read_uploads(files: Optional[List[UploadFile]]) -> List[IncomingFile]:
    """Read each uploaded part into memory, closing it afterwards."""
    incoming = []
    for upload in files or []:
        try:
            content = await upload.read()
            incoming.append(
                IncomingFile(
                    filename=upload.filename or "",
                    content=content,
                    content_type=upload.content_type,
                )
            )
        finally:
            await upload.close()
    return incoming


@router.post(
    "/products",
    status_code=201,
    response_model=ProductCreatedResponse,
    responses={
        201: {"description": "Product created", "model": ProductCreatedResponse},
        500: {"description": "Product could not be created", "model": ErrorResponse},
    },
    summary="Create a product with up to 5 images",
)
async def create_product(
    form: Dict[str, Optional[str]] = Depends(product_form),
    images: Optional[List[UploadFile]] = File(default=None, description="Up to 5 image files"),
    service: ProductService = Depends(get_product_service),
) -> ProductCreatedResponse:
    files = await read_uploads(images)
    logger.info("Received create request: sku=%s, %d image(s)", form.get("sku"), len(files))
    return await service.create_product(form, files)


@router.get(
    "/products",
    response_model=List[ProductResponse],
    summary="List every product",
)
async def list_products(
    service: ProductService = Depends(get_product_service),
) -> List[ProductResponse]:
    return await service.list_products()


@router.get(
    "/products/{product_id}",
    response_model=ProductResponse,
    responses={
        404: {"description": "Product not found", "model": ErrorResponse},
        500: {"description": "Lookup failed (including malformed ids)", "model": ErrorResponse},
    },
    summary="Get a single product by ID",
)
async def get_product(
    product_id: str,
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    """
    product_id is taken as a plain string: a malformed id is a failed
    lookup (500), not a request validation error.
    """
    return await service.get_product(product_id)


@router.put(
    "/products/{product_id}",
    response_model=ProductResponse,
    responses={
        404: {"description": "Product not found", "model": ErrorResponse},
        500: {"description": "Update failed", "model": ErrorResponse},
    },
    summary="Replace a product's fields and optionally its images",
)
async def update_product(
    product_id: str,
    form: Dict[str, Optional[str]] = Depends(product_form),
    images: Optional[List[UploadFile]] = File(default=None, description="Replacement images"),
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    """
    Without new files the product keeps its current images. With new files
    the image list is replaced; the old files stay on disk.
    """
    files = await read_uploads(images)
    return await service.update_product(product_id, form, files)


@router.put(
    "/products/{product_id}/favorite",
    response_model=ProductResponse,
    responses={
        404: {"description": "Product not found", "model": ErrorResponse},
        500: {"description": "Toggle failed", "model": ErrorResponse},
    },
    summary="Flip a product's favorite flag",
)
async def toggle_favorite(
    product_id: str,
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    return await service.toggle_favorite(product_id)


@router.delete(
    "/products/{product_id}",
    status_code=204,
    response_class=Response,
    summary="Delete a product",
)
async def delete_product(
    product_id: str,
    service: ProductService = Depends(get_product_service),
) -> Response:
    """Responds 204 whether or not the product existed."""
    await service.delete_product(product_id)
    return Response(status_code=204)
