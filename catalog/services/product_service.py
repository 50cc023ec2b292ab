"""
Catalog Backend - Product Service (Workflow Orchestrator)
===========================================================

What:  The five product workflows: create, list, get, update, favorite
       toggle, delete.
How:   Composes BlobStore (file bytes) and ProductRepository (documents),
       and maps every failure onto the two API error kinds.
Who:   Constructed per request by the `get_product_service` dependency.

Orchestration Flow (POST /api/products):
    ┌──────────┐    ┌─────────────┐    ┌──────────────┐    ┌──────────────┐
    │  Form +  │───▶│  Validate   │───▶│  BlobStore   │───▶│  Repository  │
    │  files   │    │ ProductForm │    │  store × N   │    │  create      │
    └──────────┘    └─────────────┘    └──────────────┘    └──────────────┘

Error mapping:
    NotFoundError  → propagated unchanged (404)
    anything else  → OperationFailedError carrying the original error (500)

Stored files are never cleaned up: not when a later step fails, not when
images are replaced, not when the product is deleted.
"""

import logging
from typing import Any, List, Mapping, Optional, Sequence

from catalog.exceptions import NotFoundError, OperationFailedError
from catalog.schemas.product import (
    ProductCreatedResponse,
    ProductForm,
    ProductResponse,
)
from catalog.services.blob_store import BlobStore, IncomingFile
from catalog.services.product_repository import ProductRepository

logger = logging.getLogger(__name__)

IMAGES_FIELD = "images"


def resolve_featured_image(explicit: Optional[str], references: Sequence[str]) -> Optional[str]:
    """
    Pick the featured image for a create or update.

    An explicit non-empty value wins, even if it names a file that is not
    among the references. Otherwise the first reference, otherwise None.
    """
    if explicit:
        return explicit
    return references[0] if references else None


class ProductService:
    """
    Business logic layer for product operations.

    Each public method corresponds to one HTTP route and raises only
    NotFoundError or OperationFailedError.
    """

    def __init__(
        self,
        repository: ProductRepository,
        blob_store: BlobStore,
        max_images: int = 5,
    ):
        self.repository = repository
        self.blob_store = blob_store
        self.max_images = max_images

    async def _store_images(self, files: Sequence[IncomingFile]) -> List[str]:
        """Write every file in order and return their stored references."""
        if len(files) > self.max_images:
            raise ValueError(
                f"Unexpected field '{IMAGES_FIELD}': at most {self.max_images} files allowed, "
                f"got {len(files)}"
            )
        references = []
        for incoming in files:
            stored = await self.blob_store.store_incoming(incoming, field_name=IMAGES_FIELD)
            references.append(stored.path)
        return references

    async def create_product(
        self,
        form: Mapping[str, Any],
        files: Sequence[IncomingFile] = (),
    ) -> ProductCreatedResponse:
        """
        Validate the form, store the images, persist the product.

        Raises:
            OperationFailedError("Error adding product") on any failure
        """
        try:
            fields = ProductForm.model_validate(dict(form))
            references = await self._store_images(files)
            product = await self.repository.create(
                **fields.scalar_values(),
                images=references,
                featured_image=resolve_featured_image(fields.featured_image, references),
            )
            return ProductCreatedResponse(product=ProductResponse.from_model(product))

        except Exception as e:
            logger.error("Error adding product: %s", str(e), exc_info=True)
            raise OperationFailedError("Error adding product", error=e) from e

    async def list_products(self) -> List[ProductResponse]:
        try:
            products = await self.repository.list_all()
            return [ProductResponse.from_model(p) for p in products]
        except Exception as e:
            logger.error("Error listing products: %s", str(e), exc_info=True)
            raise OperationFailedError("Error listing products", error=e, raw=True) from e

    async def get_product(self, product_id: str) -> ProductResponse:
        """
        Raises:
            NotFoundError: no product with this id (→ 404)
            OperationFailedError("Error fetching product"): malformed id or
                database failure (→ 500)
        """
        try:
            product = await self.repository.get(product_id)
            return ProductResponse.from_model(product)
        except NotFoundError:
            raise
        except Exception as e:
            logger.error("Error fetching product %s: %s", product_id, str(e))
            raise OperationFailedError("Error fetching product", error=e) from e

    async def update_product(
        self,
        product_id: str,
        form: Mapping[str, Any],
        files: Sequence[IncomingFile] = (),
    ) -> ProductResponse:
        """
        Replace the scalar fields and, when new files arrive, the images.

        Without new files `images` is left out of the update, so the stored
        list stays as it is. featuredImage is recomputed from the new files
        only, so an update with neither files nor an explicit value clears it.
        """
        try:
            fields = ProductForm.model_validate(dict(form))
            references = await self._store_images(files)

            values = fields.scalar_values()
            values["featured_image"] = resolve_featured_image(fields.featured_image, references)
            if references:
                values["images"] = references

            product = await self.repository.update(product_id, values)
            return ProductResponse.from_model(product)

        except NotFoundError:
            raise
        except Exception as e:
            logger.error("Error updating product %s: %s", product_id, str(e), exc_info=True)
            raise OperationFailedError("Error updating product", error=e) from e

    async def toggle_favorite(self, product_id: str) -> ProductResponse:
        try:
            product = await self.repository.toggle_favorite(product_id)
            return ProductResponse.from_model(product)
        except NotFoundError:
            raise
        except Exception as e:
            logger.error("Error toggling favorite status for %s: %s", product_id, str(e))
            raise OperationFailedError("Error toggling favorite status", error=e) from e

    async def delete_product(self, product_id: str) -> None:
        try:
            await self.repository.delete(product_id)
        except Exception as e:
            logger.error("Error deleting product %s: %s", product_id, str(e))
            raise OperationFailedError("Error deleting product", error=e, raw=True) from e
