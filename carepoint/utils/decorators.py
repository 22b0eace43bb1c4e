# /carepoint/utils/decorators.py
from functools import wraps
from flask import request, current_app, make_response
from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request

from carepoint.models.staff_models import StaffRole
from carepoint.utils.errors import ForbiddenError, ServiceError


def audit_log(action, resource):
    """Writes one audit line per API call: who did what, and whether it worked."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            user_id = None
            resource_id = kwargs.get('patient_id') or kwargs.get('appointment_id') or kwargs.get('payment_id')
            ip_address = request.remote_addr

            try:
                user_id = get_jwt_identity()
            except RuntimeError:
                # No JWT verification happened for this route (e.g. login)
                pass

            try:
                response = make_response(f(*args, **kwargs))
            except ServiceError as e:
                current_app.audit_logger.info(
                    f"Action='{action}', Resource='{resource}', ResourceID='{resource_id}', UserID='{user_id}', "
                    f"IP='{ip_address}', Success='False', Status='{e.kind.status_code}', Details='{e.message}'"
                )
                raise
            except Exception as e:
                current_app.audit_logger.error(
                    f"Action='{action}', Resource='{resource}', ResourceID='{resource_id}', UserID='{user_id}', "
                    f"IP='{ip_address}', Success='False', Details='An error occurred: {e}'"
                )
                raise

            success = response.status_code < 400
            current_app.audit_logger.info(
                f"Action='{action}', Resource='{resource}', ResourceID='{resource_id}', UserID='{user_id}', "
                f"IP='{ip_address}', Success='{success}', Status='{response.status_code}'"
            )
            return response

        return decorated_function
    return decorator


def session_required(*roles):
    """
    Resolves the caller's identity from a bearer token.

    With ``API_AUTH_REQUIRED`` off a token is optional and roles are not
    enforced. With it on, a valid access token is mandatory and, when
    ``roles`` are given, its role claim must be one of them (Managers pass
    every check).
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not current_app.config.get('API_AUTH_REQUIRED'):
                verify_jwt_in_request(optional=True)
                return f(*args, **kwargs)

            verify_jwt_in_request()
            role = get_jwt().get('role')
            if roles and role != StaffRole.MANAGER and role not in roles:
                raise ForbiddenError("Permission denied")
            return f(*args, **kwargs)
        return decorated_function
    return decorator
