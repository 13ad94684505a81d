import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from .exceptions import CountryAPIError

logger = logging.getLogger(__name__)


def country_exception_handler(exc, context):
    """
    DRF exception handler: every error leaves as {"error": ..., ...} JSON.
    Anything that is not an API exception becomes a bare 500.
    """
    response = exception_handler(exc, context)

    if isinstance(exc, CountryAPIError):
        response.data = exc.as_payload()
        return response

    if response is not None:
        # DRF's own errors (405, parse errors, Http404)
        detail = response.data.get("detail") if isinstance(response.data, dict) else None
        if detail is not None:
            response.data = {"error": str(detail)}
        else:
            response.data = {"error": "Validation failed", "details": response.data}
        return response

    view = context.get("view")
    logger.exception("Unhandled error in %s", type(view).__name__ if view else "view")
    return Response(
        {"error": "Internal server error"},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
