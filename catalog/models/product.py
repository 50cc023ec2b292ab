"""
Catalog Backend - Product SQLAlchemy Model
============================================

What:  ORM model representing the `products` table.
How:   Inherits from the shared DeclarativeBase; Alembic reads it for migrations.
Who:   Used by ProductRepository for CRUD operations.

Table Design:
    - UUID primary key, generated in Python so the id is known before flush
    - images: JSON list of stored references, always replaced wholesale
    - featured_image: free string, may point outside `images`
    - is_favorite: flipped in place by the favorite toggle
    - Column types are dialect-neutral (Uuid, JSON) so the same model runs on
      PostgreSQL in production and SQLite in tests
"""

import uuid
from typing import List, Optional

from sqlalchemy import JSON, Boolean, Float, String, Text, Uuid, false
from sqlalchemy.orm import Mapped, mapped_column

from catalog.database import Base


class Product(Base):
    """
    A catalog product with its attached image references.

    Lifecycle:
        1. Created by the create workflow (images stored first)
        2. Scalar fields replaced by update; images replaced only when new
           files are uploaded
        3. is_favorite flipped by the favorite toggle
        4. Deleted explicitly; stored files are left on disk
    """

    __tablename__ = "products"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    # No uniqueness constraint: two products may share a SKU
    sku: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    quantity: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Ordered stored references, e.g. ["uploads/1700000000000.png"]
    images: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
    )

    featured_image: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)

    is_favorite: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, sku='{self.sku}', name='{self.name}')>"
