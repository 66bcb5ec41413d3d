"""
DRF exception handler for application errors.

Registered as ``REST_FRAMEWORK["EXCEPTION_HANDLER"]``. Any
``BaseApplicationError`` raised from a view or service is rendered with its
``to_dict()`` payload and class status code; everything else is handed to
DRF's default handler.
"""

from __future__ import annotations

import logging

from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.exceptions import BaseApplicationError

logger = logging.getLogger(__name__)


def application_exception_handler(exc, context):
    if isinstance(exc, BaseApplicationError):
        view = context.get("view")
        view_name = view.__class__.__name__ if view else "unknown"
        if exc.status_code >= 500:
            logger.error(f"{view_name} failed: {exc!r}")
        else:
            logger.info(f"{view_name} rejected request: {exc}")
        return Response(exc.to_dict(), status=exc.status_code)

    return exception_handler(exc, context)
