# /carepoint/api/responses.py
from flask import jsonify, request


def success_response(data=None, status=200, message=None):
    payload = {'success': True, 'data': data}
    if message:
        payload['message'] = message
    return jsonify(payload), status


def request_data() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
