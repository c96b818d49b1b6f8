"""
Service error -> HTTP status mapping shared by the v1 endpoints.
"""

from fastapi import HTTPException

from clon.services.base import ServiceError, ValidationError, ExternalAPIError


def http_error_for(error: ServiceError) -> HTTPException:
    """400 for bad input (including short candle windows), 502 for upstream failures."""
    if isinstance(error, ValidationError):
        return HTTPException(status_code=400, detail=error.message)
    if isinstance(error, ExternalAPIError):
        return HTTPException(status_code=502, detail=error.message)
    return HTTPException(status_code=500, detail=error.message)
