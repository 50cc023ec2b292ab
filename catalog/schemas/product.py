"""
Catalog Backend - Pydantic Request/Response Schemas
=====================================================

What:  Pydantic models defining the API contract.
How:   FastAPI uses these models to serialize responses and generate the
       OpenAPI document. ProductForm validates the multipart form fields
       before a Product is built.

Wire names:
    Products are exposed with camelCase keys (featuredImage, isFavorite) via
    field aliases. Python code uses the snake_case field names; that works
    because every model sets populate_by_name.
"""

import uuid
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class ProductForm(BaseModel):
    """
    Scalar fields accepted by create and update.

    Every field is optional. Missing fields are stored as null. quantity
    must be a finite number; an empty string counts as missing.
    """
    sku: Optional[str] = None
    name: Optional[str] = None
    quantity: Optional[float] = Field(default=None, allow_inf_nan=False)
    description: Optional[str] = None
    featured_image: Optional[str] = Field(default=None, alias="featuredImage")

    model_config = {"populate_by_name": True}

    @field_validator("quantity", mode="before")
    @classmethod
    def blank_quantity_is_missing(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def scalar_values(self) -> Dict[str, Any]:
        """The columns a form sets directly (featured image is derived)."""
        return {
            "sku": self.sku,
            "name": self.name,
            "quantity": self.quantity,
            "description": self.description,
        }


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ProductResponse(BaseModel):
    """
    What:  Full representation of a product document.
    Who:   Returned by every product route except delete.
    """
    id: uuid.UUID = Field(description="Product identifier (UUID)")
    sku: Optional[str] = Field(default=None, description="Stock keeping unit, not unique")
    name: Optional[str] = None
    quantity: Optional[float] = None
    description: Optional[str] = None
    images: List[str] = Field(default_factory=list, description="Stored image references")
    featured_image: Optional[str] = Field(
        default=None,
        alias="featuredImage",
        description="Primary display image; defaults to the first uploaded image",
    )
    is_favorite: bool = Field(default=False, alias="isFavorite")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_model(cls, product: Any) -> "ProductResponse":
        return cls(
            id=product.id,
            sku=product.sku,
            name=product.name,
            quantity=product.quantity,
            description=product.description,
            images=list(product.images or []),
            featured_image=product.featured_image,
            is_favorite=bool(product.is_favorite),
        )


class ProductCreatedResponse(BaseModel):
    """Returned by POST /api/products with HTTP 201."""
    message: str = Field(default="Product successfully added")
    product: ProductResponse


class StoredFileResponse(BaseModel):
    """
    Metadata of a file written by the blob store.

    Field names follow the multer file object that upload clients expect.
    `path` is the stored reference, retrievable at GET /<path>.
    """
    fieldname: str
    originalname: str
    mimetype: Optional[str] = None
    destination: str
    filename: str
    path: str
    size: int


class UploadResponse(BaseModel):
    """Returned by POST /upload."""
    message: str = Field(default="File uploaded successfully!")
    file: Optional[StoredFileResponse] = None


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorDetail(BaseModel):
    name: str
    message: str


class ErrorResponse(BaseModel):
    """
    Error body for 404 and 500 responses.

    Example:
        {"message": "Error fetching product",
         "error": {"name": "ValueError", "message": "badly formed hexadecimal UUID string"}}
    """
    message: str = Field(description="Human-readable error description")
    error: Optional[ErrorDetail] = Field(default=None, description="The underlying error")


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and load balancer checks."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
