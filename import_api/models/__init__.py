# =============================================================================
# Import API - Models Package
# =============================================================================
"""Pydantic models for request/response validation."""

from .schemas import (
    ErrorResponse,
    HealthResponse,
    ResponseFormat,
)

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "ResponseFormat",
]
