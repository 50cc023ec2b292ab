"""
Catalog Backend - Security Headers Middleware
===============================================

What:  Adds a fixed set of HTTP security headers to every response.
How:   Sets each header unless the handler already set it.

Headers:
    X-Content-Type-Options            nosniff
    X-Frame-Options                   SAMEORIGIN
    Referrer-Policy                   no-referrer
    X-DNS-Prefetch-Control            off
    Strict-Transport-Security         max-age=15552000; includeSubDomains
    X-Download-Options                noopen
    X-Permitted-Cross-Domain-Policies none
    Cross-Origin-Resource-Policy      same-origin
    Cross-Origin-Opener-Policy        same-origin
"""

from typing import Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

DEFAULT_SECURITY_HEADERS: Dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "X-DNS-Prefetch-Control": "off",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "X-Download-Options": "noopen",
    "X-Permitted-Cross-Domain-Policies": "none",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Cross-Origin-Opener-Policy": "same-origin",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, headers: Optional[Dict[str, str]] = None):
        super().__init__(app)
        self.headers = dict(DEFAULT_SECURITY_HEADERS if headers is None else headers)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)
        for name, value in self.headers.items():
            response.headers.setdefault(name, value)
        return response
