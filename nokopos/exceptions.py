# exceptions.py
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError
from django.http import Http404, JsonResponse
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class PosAPIException(exceptions.APIException):
    """
    Base error for the POS API.

    Carries a stable machine-readable ``code`` and optional ``details``
    which the exception handler places in the error envelope.
    """
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Request could not be processed'
    default_code = 'BAD_REQUEST'

    def __init__(self, message=None, code=None, details=None):
        super().__init__(detail=message, code=code or self.default_code)
        self.code = code or self.default_code
        self.details = details


class InvalidItems(PosAPIException):
    default_detail = 'One or more menu items not found'
    default_code = 'INVALID_ITEMS'


class TotalMismatch(PosAPIException):
    default_detail = 'Total mismatch'
    default_code = 'TOTAL_MISMATCH'


class InvalidStatusTransition(PosAPIException):
    default_detail = 'Order status cannot be changed'
    default_code = 'INVALID_STATUS_TRANSITION'


class DuplicateCategory(PosAPIException):
    default_detail = 'Category with this name already exists'
    default_code = 'DUPLICATE_CATEGORY'


class ReservedCategory(PosAPIException):
    default_detail = 'The "all" category is reserved and cannot be changed'
    default_code = 'RESERVED_CATEGORY'


class CategoryInUse(PosAPIException):
    default_detail = 'Cannot delete category that is being used by menu items'
    default_code = 'CATEGORY_IN_USE'


class DuplicateName(PosAPIException):
    default_detail = 'Menu item with this name already exists'
    default_code = 'DUPLICATE_NAME'


class InvalidCredentials(PosAPIException):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Invalid username or password'
    default_code = 'INVALID_CREDENTIALS'


class InvalidToken(PosAPIException):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Invalid or expired token'
    default_code = 'INVALID_TOKEN'


class ResourceNotFound(PosAPIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Resource not found'
    default_code = 'NOT_FOUND'


# Infrastructure failures: the store or network failed, never retried here
class CreateError(PosAPIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Failed to create record'
    default_code = 'CREATE_ERROR'


class FetchError(PosAPIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Failed to fetch records'
    default_code = 'FETCH_ERROR'


class UpdateError(PosAPIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Failed to update record'
    default_code = 'UPDATE_ERROR'


class DeleteError(PosAPIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Failed to delete record'
    default_code = 'DELETE_ERROR'


class AnalyticsError(PosAPIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Failed to fetch sales analytics'
    default_code = 'ANALYTICS_ERROR'


STATUS_CODES = {
    400: ('BAD_REQUEST', 'Bad request'),
    401: ('UNAUTHORIZED', 'Authentication required'),
    403: ('FORBIDDEN', 'Permission denied'),
    404: ('NOT_FOUND', 'Resource not found'),
    405: ('METHOD_NOT_ALLOWED', 'Method not allowed'),
    415: ('UNSUPPORTED_MEDIA_TYPE', 'Unsupported media type'),
    429: ('THROTTLED', 'Too many requests'),
}


def error_payload(message, code, details=None):
    error = {'message': message, 'code': code}
    if details is not None:
        error['details'] = details
    return {'success': False, 'error': error}


def custom_exception_handler(exc, context):
    """
    Custom exception handler for the POS system

    Every error leaves the API as ``{success: false, error: {message, code, details?}}``.
    """
    if isinstance(exc, PosAPIException):
        if exc.status_code >= 500:
            logger.error("%s: %s", exc.code, exc.detail)
        return Response(
            error_payload(str(exc.detail), exc.code, exc.details),
            status=exc.status_code,
        )

    if isinstance(exc, exceptions.ValidationError):
        return Response(
            error_payload('Validation failed', 'VALIDATION_ERROR', exc.detail),
            status=status.HTTP_400_BAD_REQUEST,
        )

    # Handle Django ValidationError
    if isinstance(exc, DjangoValidationError):
        logger.warning("Validation Error: %s", exc)
        return Response(
            error_payload('Validation failed', 'VALIDATION_ERROR', {'non_field_errors': exc.messages}),
            status=status.HTTP_400_BAD_REQUEST,
        )

    # Handle Django IntegrityError
    if isinstance(exc, IntegrityError):
        logger.error("Integrity Error: %s", exc)
        return Response(
            error_payload('This operation violates database constraints', 'INTEGRITY_ERROR'),
            status=status.HTTP_400_BAD_REQUEST,
        )

    # Call REST framework's default exception handler for the rest
    response = exception_handler(exc, context)

    if response is not None:
        code, message = STATUS_CODES.get(response.status_code, ('ERROR', 'An error occurred'))
        if isinstance(exc, Http404):
            message = 'Resource not found'
        elif isinstance(response.data, dict) and 'detail' in response.data:
            message = str(response.data['detail'])
        response.data = error_payload(message, code)
        return response

    # Handle unexpected errors
    logger.error("Unexpected Error: %s", exc, exc_info=exc)
    return Response(
        error_payload('Internal server error', 'SERVER_ERROR'),
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def api_not_found(request, *args, **kwargs):
    return JsonResponse(error_payload('API not found', 'NOT_FOUND'), status=404)
