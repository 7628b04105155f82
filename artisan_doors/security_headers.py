"""
Middleware de cabeceras de seguridad (equivalente a helmet):
- Content-Security-Policy restrictiva para una API JSON
- X-Content-Type-Options / X-Frame-Options / Referrer-Policy
- Sin cabeceras que revelen el servidor
"""
import logging

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

CSP_DIRECTIVES = [
    "default-src 'self'",
    "script-src 'self' 'unsafe-inline'",
    "style-src 'self' 'unsafe-inline'",
    "img-src 'self' data: https:",
    "connect-src 'self'",
]


def get_csp_policy() -> str:
    return "; ".join(CSP_DIRECTIVES)


SECURITY_HEADERS = {
    "Content-Security-Policy": get_csp_policy(),
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "X-XSS-Protection": "0",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Opener-Policy": "same-origin",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        for header in ("server", "x-powered-by"):
            if header in response.headers:
                del response.headers[header]
        return response
