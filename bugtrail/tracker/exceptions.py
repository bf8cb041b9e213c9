# ============================================
# tracker/exceptions.py
# ============================================
"""
Maps domain failures onto HTTP outcomes:

- ValidationFailed -> 400 (Django or DRF ValidationError)
- NotAuthorized    -> 403 (PermissionDenied)
- NotFound         -> 404 (Http404, ObjectDoesNotExist)
- UpstreamFailure  -> 500 (DatabaseError, OSError), logged, detail hidden
"""
import logging

from django.core.exceptions import ObjectDoesNotExist, ValidationError as DjangoValidationError
from django.db import DatabaseError
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server issue"


def _validation_detail(exc: DjangoValidationError) -> str:
    return "; ".join(str(m) for m in exc.messages)


def tracker_exception_handler(exc, context):
    if isinstance(exc, DjangoValidationError):
        exc = exceptions.ValidationError(detail={'detail': _validation_detail(exc)})
    elif isinstance(exc, ObjectDoesNotExist):
        exc = exceptions.NotFound(detail=str(exc) or None)

    response = exception_handler(exc, context)
    if response is not None:
        return response

    if isinstance(exc, (DatabaseError, OSError)):
        view = context.get('view')
        logger.exception("[upstream] %s failed: %s", view.__class__.__name__ if view else 'request', exc)
        return Response({'detail': INTERNAL_ERROR_MESSAGE}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return None
