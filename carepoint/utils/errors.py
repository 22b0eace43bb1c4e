# /carepoint/utils/errors.py
from enum import Enum


class ErrorKind(Enum):
    """Closed set of failure categories a service can report."""
    VALIDATION = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    CONFLICT = 409
    INTERNAL = 500

    @property
    def status_code(self) -> int:
        return self.value


class ServiceError(Exception):
    """Base error raised by the domain layer; the API boundary maps it by kind."""
    kind = ErrorKind.INTERNAL
    default_message = "Internal server error"

    def __init__(self, message=None, details=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.details = details

    def to_dict(self):
        payload = {'success': False, 'error': self.message}
        if self.details is not None:
            payload['details'] = self.details
        return payload


class ValidationError(ServiceError):
    kind = ErrorKind.VALIDATION
    default_message = "Validation failed"


class NotFoundError(ServiceError):
    kind = ErrorKind.NOT_FOUND
    default_message = "Resource not found"


class ConflictError(ServiceError):
    kind = ErrorKind.CONFLICT
    default_message = "Resource conflict"


class UnauthorizedError(ServiceError):
    kind = ErrorKind.UNAUTHORIZED
    default_message = "Unauthorized access"


class ForbiddenError(ServiceError):
    kind = ErrorKind.FORBIDDEN
    default_message = "Forbidden: insufficient permissions"


class PaymentDeclinedError(ValidationError):
    """The gateway refused the charge; the payment has already been marked Failed."""
    default_message = "Payment processing failed"

    def __init__(self, message=None, gateway_response=None, payment=None):
        super().__init__(message, details={'gateway': gateway_response, 'payment': payment})
        self.gateway_response = gateway_response
        self.payment = payment
