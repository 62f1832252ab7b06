# =============================================================================
# Import API - Middleware Package
# =============================================================================
"""ASGI middleware applied in front of the API routes."""

from .body_limit import BodySizeLimitMiddleware

__all__ = ["BodySizeLimitMiddleware"]
