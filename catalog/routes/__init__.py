# Routes package init
"""
Catalog Backend - API Routes Package
======================================

Route Inventory:
    - upload.py:    POST   /upload                        (store one file)
    - products.py:  POST   /api/products                  (create)
                    GET    /api/products                  (list)
                    GET    /api/products/{id}             (fetch)
                    PUT    /api/products/{id}             (update)
                    PUT    /api/products/{id}/favorite    (toggle favorite)
                    DELETE /api/products/{id}             (delete)
    - health.py:    GET    /health                        (service health)

Routes stay thin: they read the request, call a service and return its
result. Workflow rules live in services/product_service.py.
"""
