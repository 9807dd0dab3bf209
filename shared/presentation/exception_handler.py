"""DRF exception handler that renders booking failures consistently."""

from __future__ import annotations

import logging

from rest_framework import status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler as drf_exception_handler  # type: ignore

from shared.domain.errors import BookingError, ErrorKind

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.PRECONDITION_FAILED: status.HTTP_400_BAD_REQUEST,
    ErrorKind.DATE_RANGE_CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.FATAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(error: BookingError) -> int:
    return STATUS_BY_KIND.get(error.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)


def booking_exception_handler(exc, context):
    """
    Map ``BookingError`` to a JSON body and the status of its kind.

    Everything else falls through to the stock DRF handler.
    """
    if isinstance(exc, BookingError):
        http_status = status_for(exc)
        if http_status >= 500:
            logger.error(f"Unhandled booking failure in {context.get('view')}: {exc.message}")
        body = exc.to_dict()
        body["detail"] = exc.message
        return Response(body, status=http_status)
    return drf_exception_handler(exc, context)
