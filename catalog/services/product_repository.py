"""
Catalog Backend - Product Repository
======================================

What:  Persistence boundary over the `products` table.
How:   Wraps one AsyncSession; every write commits immediately so each call
       behaves like a single document save.
Who:   Constructed per request by the `get_product_repository` dependency
       and used by ProductService.

Identifiers:
    Ids arrive from the URL as strings. A string that is not a UUID raises
    ValueError from parse_product_id; callers treat that like any other
    failed lookup (500), not as a separate "bad id" case.

Concurrency:
    update() and toggle_favorite() read the row and write it back in two
    steps without a version column. Concurrent writers to the same product
    race and the last write wins.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional, Union

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.exceptions import NotFoundError
from catalog.models.product import Product

logger = logging.getLogger(__name__)

ProductId = Union[str, uuid.UUID]

# Columns update() may assign; id and is_favorite are not among them
UPDATABLE_FIELDS = frozenset(
    {"sku", "name", "quantity", "description", "images", "featured_image"}
)


def parse_product_id(product_id: ProductId) -> uuid.UUID:
    """
    Convert a path parameter to a UUID.

    Raises:
        ValueError: the string is not a valid UUID
    """
    if isinstance(product_id, uuid.UUID):
        return product_id
    return uuid.UUID(str(product_id))


class ProductRepository:
    """Create, read, update, delete and favorite-toggle for products."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        sku: Optional[str] = None,
        name: Optional[str] = None,
        quantity: Optional[float] = None,
        description: Optional[str] = None,
        images: Optional[List[str]] = None,
        featured_image: Optional[str] = None,
    ) -> Product:
        product = Product(
            sku=sku,
            name=name,
            quantity=quantity,
            description=description,
            images=list(images or []),
            featured_image=featured_image,
            is_favorite=False,
        )
        self.session.add(product)
        await self.session.flush()
        await self.session.commit()
        logger.info("Product created: %s", product.id)
        return product

    async def list_all(self) -> List[Product]:
        # No ORDER BY: row order is whatever the database returns
        result = await self.session.execute(select(Product))
        return list(result.scalars().all())

    async def find(self, product_id: ProductId) -> Optional[Product]:
        result = await self.session.execute(
            select(Product).where(Product.id == parse_product_id(product_id))
        )
        return result.scalar_one_or_none()

    async def get(self, product_id: ProductId) -> Product:
        """
        Fetch a product or raise.

        Raises:
            NotFoundError: no product has this id (→ 404)
            ValueError: the id is not a UUID (→ 500)
        """
        product = await self.find(product_id)
        if product is None:
            raise NotFoundError(resource="Product", resource_id=str(product_id))
        return product

    async def update(self, product_id: ProductId, values: Dict[str, Any]) -> Product:
        """
        Assign the given columns and commit.

        Every key present in `values` is written, including None; absent
        keys keep their stored value. `images` is replaced with a fresh list
        so the JSON column registers a change.
        """
        unknown = set(values) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        product = await self.get(product_id)
        for field, value in values.items():
            if field == "images":
                value = list(value or [])
            setattr(product, field, value)

        await self.session.flush()
        await self.session.commit()
        logger.info("Product updated: %s", product.id)
        return product

    async def toggle_favorite(self, product_id: ProductId) -> Product:
        product = await self.get(product_id)
        product.is_favorite = not product.is_favorite
        await self.session.flush()
        await self.session.commit()
        logger.info("Product %s favorite=%s", product.id, product.is_favorite)
        return product

    async def delete(self, product_id: ProductId) -> None:
        """Delete by id without checking that the product exists."""
        result = await self.session.execute(
            delete(Product).where(Product.id == parse_product_id(product_id))
        )
        await self.session.commit()
        logger.info("Product delete %s: %d row(s) removed", product_id, result.rowcount)
