# Services package init
"""
Catalog Backend - Services Layer
==================================

Service Inventory:
    - BlobStore:          writes uploaded bytes, returns stored references
    - ProductRepository:  persistence over the products table
    - ProductService:     create/list/get/update/toggle/delete workflows
"""
