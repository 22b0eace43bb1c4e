from flask_jwt_extended import get_jwt, get_jwt_identity

from carepoint.api.responses import request_data, success_response
from carepoint.container import services


def register_staff():
    """Creates a staff account; the password is bcrypt-hashed and never returned."""
    staff = services.auth.register_staff(request_data())
    return success_response(staff, 201, message='User created successfully')


def login():
    data = request_data()
    tokens = services.auth.authenticate(data.get('email'), data.get('password'))
    return success_response(tokens)


def logout():
    services.auth.revoke_token(get_jwt()['jti'])
    return success_response(message='Successfully logged out')


def refresh_token():
    return success_response(services.auth.refresh(get_jwt_identity()))
