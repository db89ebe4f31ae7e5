"""FastAPI middleware that stamps permissive CORS headers on every response."""

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from typing import Dict, Optional

DEFAULT_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


class CorsHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add CORS headers whether or not the request sent an Origin"""

    def __init__(self, app, headers: Optional[Dict[str, str]] = None):
        """Initializes the middleware."""
        super().__init__(app)
        self.headers = headers or DEFAULT_CORS_HEADERS

    async def dispatch(self, request: Request, call_next):
        """Processes the request and sets the CORS headers on the response."""
        response = await call_next(request)
        for name, value in self.headers.items():
            response.headers[name] = value
        return response
