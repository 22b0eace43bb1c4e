from flask import jsonify

from carepoint.api.responses import request_data
from carepoint.container import services


def _amount(value):
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _provider_response(result, ok_field):
    """Provider answers map to 200 when positive and 400 when negative."""
    if result.get(ok_field):
        return jsonify({'success': True, 'data': result}), 200
    return jsonify({'success': False, 'error': result.get('error'), 'details': result}), 400


def insurance_provider():
    data = request_data()
    amount = _amount(data.get('amount'))
    if not data.get('policyNumber') or not data.get('patientId') or not amount:
        return jsonify({'success': False, 'error': 'Missing required fields'}), 400

    result = services.insurance_provider.check_eligibility(data['policyNumber'], data['patientId'], amount)
    return _provider_response(result, 'eligible')


def payment_gateway():
    data = request_data()
    amount = _amount(data.get('amount'))
    if not amount or not data.get('cardNumber') or not data.get('cvv'):
        return jsonify({'success': False, 'error': 'Missing required fields'}), 400

    card_details = {key: data.get(key) for key in ('cardNumber', 'cvv', 'cardholderName', 'expiryDate')}
    result = services.payment_gateway.charge(amount, card_details)
    return _provider_response(result, 'success')
