"""FastAPI dependency implementations."""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.config import Settings
from catalog.database import get_db_session
from catalog.services.blob_store import BlobStore
from catalog.services.product_repository import ProductRepository
from catalog.services.product_service import ProductService


def get_settings(request: Request) -> Settings:
    """Get the settings the running app was built with."""
    return request.app.state.settings


def get_blob_store(request: Request) -> BlobStore:
    """Get the blob store instance."""
    return request.app.state.blob_store


def get_product_repository(
    session: AsyncSession = Depends(get_db_session),
) -> ProductRepository:
    """Get a repository bound to this request's session."""
    return ProductRepository(session)


def get_product_service(
    repository: ProductRepository = Depends(get_product_repository),
    blob_store: BlobStore = Depends(get_blob_store),
    settings: Settings = Depends(get_settings),
) -> ProductService:
    """Get the product workflow service for this request."""
    return ProductService(
        repository,
        blob_store,
        max_images=settings.max_images_per_product,
    )
