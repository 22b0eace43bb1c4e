# /carepoint/utils/error_handlers.py
from flask import jsonify, current_app
from werkzeug.exceptions import HTTPException

from carepoint.extensions import db, jwt
from carepoint.utils.errors import ServiceError


def error_response(message, status_code, details=None):
    payload = {'success': False, 'error': message}
    if details is not None:
        payload['details'] = details
    return jsonify(payload), status_code


def register_error_handlers(app):
    @app.errorhandler(ServiceError)
    def service_error(error):
        if error.kind.status_code >= 500:
            db.session.rollback()
            current_app.audit_logger.error(f"Service failure: {error.message}")
        return jsonify(error.to_dict()), error.kind.status_code

    @app.errorhandler(404)
    def not_found(error):
        return error_response('Resource not found', 404)

    @app.errorhandler(405)
    def method_not_allowed(error):
        return error_response('Method not allowed', 405)

    @app.errorhandler(429)
    def rate_limited(error):
        return error_response('Too many requests', 429)

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        current_app.audit_logger.error(f"Internal server error: {str(error)}")
        return error_response('Internal server error', 500)

    @app.errorhandler(Exception)
    def unexpected_error(error):
        if isinstance(error, HTTPException):
            return error_response(error.description, error.code)
        db.session.rollback()
        current_app.logger.exception(error)
        current_app.audit_logger.error(f"Unhandled exception: {str(error)}")
        return error_response('Internal server error', 500)

    # Token problems share the same envelope as everything else
    @jwt.unauthorized_loader
    def missing_token(reason):
        return error_response(reason, 401)

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return error_response(reason, 401)

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return error_response('Token has expired', 401)

    @jwt.revoked_token_loader
    def revoked_token(jwt_header, jwt_payload):
        return error_response('Token has been revoked', 401)
