"""
Typed failures raised by the service layer.

Every failure carries a stable ``kind`` and a human readable message. The
DRF exception handler below renders them as ``{"error": kind, "message": ...}``.
"""
import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class ServiceError(APIException):
    kind = 'internal'


class ValidationFailure(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid input.'
    kind = 'validation'


class NotFound(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not found.'
    kind = 'not_found'


class Forbidden(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'You do not have permission to perform this action.'
    kind = 'forbidden'


class PreconditionFailure(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Precondition not met.'
    kind = 'precondition'


class UpstreamFailure(ServiceError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = 'An upstream service failed.'
    kind = 'upstream'


class InternalFailure(ServiceError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Internal error.'
    kind = 'internal'


# Kinds for DRF's built-in exceptions
STATUS_KINDS = {
    400: 'validation',
    401: 'unauthenticated',
    403: 'forbidden',
    404: 'not_found',
    405: 'method_not_allowed',
    409: 'precondition',
    502: 'upstream',
}


def api_exception_handler(exc, context):
    response = exception_handler(exc, context)
    if response is None:
        return None

    kind = getattr(exc, 'kind', None) or STATUS_KINDS.get(response.status_code, 'internal')
    detail = response.data
    if isinstance(detail, dict) and set(detail) == {'detail'}:
        detail = detail['detail']
    if kind == 'upstream':
        logger.error(f"Upstream failure: {detail}")

    response.data = {'error': kind, 'message': detail}
    return response
