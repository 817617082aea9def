from fastapi import HTTPException, status

from rsvp_engine.errors import (
    CapacityExceededError,
    DependencyUnavailableError,
    NotFoundError,
    RSVPEngineError,
    ValidationError,
)


def to_http_exception(error: RSVPEngineError) -> HTTPException:
    """Map an engine error onto the HTTP status the API reports for it."""
    if isinstance(error, ValidationError):
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"field": error.field, "message": error.message},
        )
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, CapacityExceededError):
        return HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail={"message": str(error), "requested": error.requested, "limit": error.limit},
        )
    if isinstance(error, DependencyUnavailableError):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(error))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error))
