# clubhub/exception_handler.py
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again later."


def api_exception_handler(exc, context):
    """
    DRF handler first; anything it does not know becomes a generic 500.
    The traceback goes to the log, never to the client.
    """
    response = exception_handler(exc, context)
    if response is not None:
        return response

    view = context.get("view")
    request = context.get("request")
    logger.exception(
        "Unhandled error in %s (%s %s)",
        view.__class__.__name__ if view else "unknown view",
        getattr(request, "method", "?"),
        getattr(request, "path", "?"),
    )
    return Response({"detail": GENERIC_ERROR_MESSAGE}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
