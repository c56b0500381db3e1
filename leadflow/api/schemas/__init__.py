"""API schemas package."""

from leadflow.api.schemas.dispatch import DispatchRequest, DispatchResponse, ErrorResponse

__all__ = [
    "DispatchRequest",
    "DispatchResponse",
    "ErrorResponse",
]
