"""
Global exception handler for consistent API error responses.
Follows DRF convention and returns a uniform structure the front-end reads `message` from.
"""
import logging
from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework import status
from django.core.exceptions import PermissionDenied, ValidationError as DjangoValidationError

logger = logging.getLogger(__name__)


def custom_exception_handler(exc, context):
    """
    Custom exception handler that returns:
    { "message": str, "code": str, "errors": dict (validation only), "error": str (500 only) }
    """
    response = exception_handler(exc, context)
    if response is not None:
        data = {
            'message': _get_message(exc),
            'code': _get_code(exc),
        }
        detail = getattr(exc, 'detail', None)
        if isinstance(detail, dict) and set(detail) - {'message'}:
            data['errors'] = detail
        response.data = data
        return response

    if isinstance(exc, PermissionDenied):
        return Response(
            {'message': str(exc) or 'Permission denied', 'code': 'permission_denied'},
            status=status.HTTP_403_FORBIDDEN
        )
    if isinstance(exc, DjangoValidationError):
        return Response(
            {'message': '; '.join(exc.messages), 'code': 'validation_error'},
            status=status.HTTP_400_BAD_REQUEST
        )

    request = context.get('request') if context else None
    logger.exception('Unhandled exception on %s: %s', request.path if request else 'unknown', exc)
    return Response(
        {'message': 'Server error', 'code': 'internal_error', 'error': str(exc)},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR
    )


def _first_message(detail):
    if isinstance(detail, list):
        return _first_message(detail[0]) if detail else 'Error'
    if isinstance(detail, dict):
        if 'message' in detail:
            return _first_message(detail['message'])
        if 'detail' in detail:
            return _first_message(detail['detail'])
        for field, value in detail.items():
            text = _first_message(value)
            if field == 'non_field_errors' or field.replace('_', ' ') in text.lower().replace('_', ' '):
                return text
            return f'{field}: {text}'
        return 'Error'
    return str(detail)


def _get_message(exc):
    if hasattr(exc, 'detail'):
        return _first_message(exc.detail)
    return str(exc)


def _get_code(exc):
    code = getattr(exc, 'default_code', None)
    if code == 'invalid':
        return 'validation_error'
    return code or 'error'
