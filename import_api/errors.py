# =============================================================================
# Import API - Error Taxonomy
# =============================================================================
"""
Errors raised while handling a request.

Every failure the pipeline can produce is an ``ImportApiError`` subclass
with a fixed HTTP status and a machine-readable kind, rendered by a single
exception handler registered in ``main.py``.
"""

from typing import Any, Dict

from fastapi import status


class ImportApiError(Exception):
    """Base class for all request-terminating errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "internal_error"
    details: str = "Internal error"
    description: str = "There was a problem with the server. Please try again."

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.details)
        self.message = message or self.details

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the error as a JSON response body."""
        return {
            "code": self.status_code,
            "error": self.error,
            "details": self.details,
            "description": self.description,
            "information": self.message,
        }


class RouteForbidden(ImportApiError):
    """The capability gate refused the requested route."""

    status_code = status.HTTP_403_FORBIDDEN
    error = "route_forbidden"
    details = "Forbidden"
    description = "This route has been disabled by the server capabilities."

    def __init__(self, route: str) -> None:
        super().__init__(f"Not allowed to do this: HTTP route '{route}'")
        self.route = route


class DecodeError(ImportApiError):
    """The request body is not valid UTF-8."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "invalid_encoding"
    details = "Request problems detected"
    description = "The request body must be valid UTF-8 text."


class UnsupportedFormat(ImportApiError):
    """The Accept header does not name a supported response format."""

    status_code = status.HTTP_415_UNSUPPORTED_MEDIA_TYPE
    error = "invalid_content_type"
    details = "Unsupported media type"
    description = "The request needs to be sent with an Accept header naming a supported response format."


class PermissionDenied(ImportApiError):
    """The session may not edit at its own authorization level."""

    status_code = status.HTTP_401_UNAUTHORIZED
    error = "permission_denied"
    details = "Authentication failed"
    description = "Your authentication details are invalid or lack the rights to run an import."


class ImportFailed(ImportApiError):
    """The engine rejected or failed to execute the import."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "import_failed"
    details = "Request problems detected"
    description = "There is a problem with your request. Refer to the information for further details."


class PayloadTooLarge(ImportApiError):
    """The request body exceeds the configured import limit."""

    status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
    error = "payload_too_large"
    details = "Payload too large"
    description = "The request body exceeds the maximum import size allowed by the server."


class EngineUnavailable(ImportApiError):
    """No engine handle could be built from the configuration."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error = "engine_unavailable"
    details = "Service unavailable"
    description = "The data engine is not available. Please try again later."


class ClientDisconnected(ImportApiError):
    """The client went away while the import was still running."""

    status_code = 499
    error = "client_disconnected"
    details = "Client closed request"
    description = "The connection was closed before the import completed; the import was abandoned."
