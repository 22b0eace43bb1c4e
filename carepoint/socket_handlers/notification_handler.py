# /carepoint/socket_handlers/notification_handler.py
import logging

from flask import current_app, request
from flask_jwt_extended import decode_token
from flask_socketio import emit, join_room, leave_room

from carepoint.extensions import socketio
from carepoint.services.notification_service import STAFF_ROOM, doctor_room, patient_room

logger = logging.getLogger(__name__)


def get_claims_from_token():
    """Decode the JWT passed as ``?token=`` on the socket handshake."""
    token = request.args.get('token')
    if not token:
        return None
    try:
        return decode_token(token)
    except Exception as e:
        logger.error(f"Socket token validation error: {e}")
        return None


def rooms_for(data):
    rooms = []
    if data.get('patientId'):
        rooms.append(patient_room(data['patientId']))
    if data.get('doctorId'):
        rooms.append(doctor_room(data['doctorId']))
    if data.get('staff'):
        rooms.append(STAFF_ROOM)
    return rooms


@socketio.on('connect')
def handle_connect():
    claims = get_claims_from_token()
    if claims is None and current_app.config.get('API_AUTH_REQUIRED'):
        emit('error', {'message': 'Authentication required'})
        return False

    if claims is not None:
        join_room(STAFF_ROOM)
    emit('connected', {'authenticated': claims is not None})


@socketio.on('subscribe')
def handle_subscribe(data):
    """Join the notification rooms named in ``data`` (patientId, doctorId, staff)."""
    rooms = rooms_for(data or {})
    if not rooms:
        emit('error', {'message': 'patientId, doctorId or staff is required'})
        return
    for room in rooms:
        join_room(room)
    emit('subscribed', {'rooms': rooms})


@socketio.on('unsubscribe')
def handle_unsubscribe(data):
    rooms = rooms_for(data or {})
    for room in rooms:
        leave_room(room)
    emit('unsubscribed', {'rooms': rooms})
