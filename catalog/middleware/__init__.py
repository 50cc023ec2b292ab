# Middleware package init
"""
Catalog Backend - Middleware Package
======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [Security Headers] → [CORS] → Route Handler

    - Request ID runs first so every later log line can carry it
    - Logging sees the final status code, including CORS preflight replies
    - Security headers are added to every response, errors included
"""
