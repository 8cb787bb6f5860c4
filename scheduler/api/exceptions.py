from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from ..domain.errors import (
    ConcurrentUpdateConflict,
    InvalidRating,
    NotFound,
    SchedulerError,
    SessionComplete,
    StorageUnavailable,
)

STATUS_BY_ERROR = (
    (NotFound, status.HTTP_404_NOT_FOUND),
    (InvalidRating, status.HTTP_400_BAD_REQUEST),
    (ConcurrentUpdateConflict, status.HTTP_409_CONFLICT),
    (SessionComplete, status.HTTP_409_CONFLICT),
    (StorageUnavailable, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def scheduler_exception_handler(exc, context):
    """DRF exception handler that also renders scheduler errors."""
    if isinstance(exc, SchedulerError):
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        for error_cls, code in STATUS_BY_ERROR:
            if isinstance(exc, error_cls):
                status_code = code
                break
        return Response(
            {"error": exc.code, "detail": str(exc), "retryable": exc.retryable},
            status=status_code,
        )
    return exception_handler(exc, context)
