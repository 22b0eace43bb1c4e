from flask import request

from carepoint.api.responses import request_data, success_response
from carepoint.container import services
from carepoint.utils.errors import ValidationError


def list_policies():
    patient_id = request.args.get('patientId')
    if not patient_id:
        raise ValidationError("patientId is required")
    return success_response(services.insurance.get_patient_policies(patient_id))


def add_policy():
    return success_response(services.insurance.add_policy(request_data()), 201)


def check_eligibility():
    data = request_data()
    if not data.get('patientId'):
        raise ValidationError("patientId is required")
    return success_response(services.insurance.check_eligibility(data['patientId'], data.get('amount')))


def submit_claim():
    data = request_data()
    claim = services.insurance.submit_claim(data.get('policyId'), data.get('paymentId'), data.get('claimAmount'))
    return success_response(claim, 201)


def get_claim(claim_id):
    return success_response(services.insurance.get_claim(claim_id))
