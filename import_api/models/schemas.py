# =============================================================================
# Import API - Pydantic Schemas
# =============================================================================
"""
Request and response models for the Import API.

These models handle validation, serialization, and documentation
for all API endpoints.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ResponseFormat(str, Enum):
    """
    Response encodings a client can negotiate with the Accept header.

    No member is a default: a missing or unknown header value is an error.
    """
    JSON = "application/json"
    CBOR = "application/cbor"
    PACK = "application/pack"
    OCTET_STREAM = "application/octet-stream"
    NATIVE = "application/vnd.import-api.native"

    @classmethod
    def from_header(cls, value: Optional[str]) -> Optional["ResponseFormat"]:
        """
        Map an Accept header value to a format.

        Returns:
            The matching format, or None when the value is absent or unknown
        """
        if value is None:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class ErrorResponse(BaseModel):
    """
    Body of every error response.

    Attributes:
        code: HTTP status code
        error: Machine-readable error kind
        details: Short summary
        description: Longer explanation for humans
        information: The specific failure message
    """

    code: int = Field(..., description="HTTP status code", examples=[403])
    error: str = Field(..., description="Error kind", examples=["route_forbidden"])
    details: str = Field(..., description="Short summary", examples=["Forbidden"])
    description: str = Field(..., description="Longer explanation")
    information: str = Field(..., description="Failure message")


class HealthResponse(BaseModel):
    """
    Response model for health check endpoint.

    Attributes:
        status: Service health status
        service: Service name
        version: Service version
        timestamp: Current server time
    """

    status: str = Field(default="healthy", description="Health status")
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="Service version")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Current timestamp",
    )
