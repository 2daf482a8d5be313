"""
Domain errors and the project-wide API exception handler.

Services raise these directly; the handler turns every error into the
``{'ok': False, 'error': {...}}`` envelope the frontend expects.
"""
import logging

from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)

NotFound = exceptions.NotFound


class InvalidState(exceptions.APIException):
    """Approve/reject attempted on a pre-registration that is no longer pending."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Pre-registration is not in pending status.'
    default_code = 'invalid_state'


class InvalidTransition(exceptions.APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Queue entry cannot move to the requested status.'
    default_code = 'invalid_transition'


class ConflictError(exceptions.APIException):
    """Lost the race for a queue number; the allocation may be retried."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Queue number allocation conflicted with another request, please retry.'
    default_code = 'conflict'


def _error_code(exc) -> str:
    codes = exc.get_codes() if isinstance(exc, exceptions.APIException) else None
    if isinstance(codes, str):
        return codes
    return 'api_error'


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        view = context.get('view')
        logger.exception('unhandled error in %s', view.__class__.__name__ if view else 'api view')
        return Response(
            {'ok': False, 'error': {'code': 'server_error', 'message': 'Internal server error.'}},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    if isinstance(exc, exceptions.ValidationError):
        return Response(
            {'ok': False, 'error': {'code': 'validation_error', 'message': 'The given data was invalid.', 'fields': resp.data}},
            status=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    else:
        detail = str(resp.data)
    return Response({'ok': False, 'error': {'code': _error_code(exc), 'message': detail}}, status=resp.status_code)
