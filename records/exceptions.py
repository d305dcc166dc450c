import logging

from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


def _first_message(detail):
    if isinstance(detail, dict):
        for value in detail.values():
            return _first_message(value)
        return ''
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else ''
    return str(detail)


def api_exception_handler(exc, context):
    """Wrap every error in the ``{success, message, error}`` envelope."""
    resp = drf_exception_handler(exc, context)
    if resp is None:
        view = context.get('view')
        logger.exception('unhandled error in %s', view.__class__.__name__ if view else 'view')
        return Response(
            {'success': False, 'message': 'Internal server error', 'error': str(exc)},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    # normalize response
    if isinstance(exc, exceptions.ValidationError):
        data = resp.data
        if isinstance(data, list):
            data = {'non_field_errors': data}
        body = {'success': False, 'message': _first_message(data) or 'Validation failed', 'error': data}
    else:
        detail = resp.data.get('detail') if isinstance(resp.data, dict) else resp.data
        code = getattr(exc, 'default_code', 'error')
        if isinstance(getattr(exc, 'detail', None), exceptions.ErrorDetail):
            code = exc.detail.code
        body = {'success': False, 'message': str(detail), 'error': code}
    resp.data = body
    return resp
