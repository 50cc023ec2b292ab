"""
Catalog Backend - Application Package
=======================================

Layered layout:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← multipart parsing, status codes
    ├─────────────────────────────────────┤
    │     Services (Workflows, Storage)   │  ← ProductService, BlobStore
    ├─────────────────────────────────────┤
    │   Repository, Models & Schemas      │  ← ProductRepository, ORM, Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
