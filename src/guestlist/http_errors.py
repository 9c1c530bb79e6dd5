from fastapi import HTTPException

from src.guestlist.errors import (
    CapacityExceededError,
    CodeGenerationError,
    FeatureDisabledError,
    GuestListError,
    InvalidTransitionError,
    NotFoundError,
    PermissionDeniedError,
    QuotaExceededError,
    StorageError,
)

STATUS_CODES: list[tuple[type[GuestListError], int]] = [
    (PermissionDeniedError, 403),
    (NotFoundError, 404),
    (CapacityExceededError, 409),
    (QuotaExceededError, 409),
    (InvalidTransitionError, 409),
    (FeatureDisabledError, 409),
    (CodeGenerationError, 503),
    (StorageError, 503),
]


def http_error(error: GuestListError) -> HTTPException:
    """Translate a guest list error into the HTTP response for it."""
    for error_type, status_code in STATUS_CODES:
        if isinstance(error, error_type):
            return HTTPException(status_code=status_code, detail=str(error))
    return HTTPException(status_code=400, detail=str(error))
