from flask import request

from carepoint.api.responses import request_data, success_response
from carepoint.container import services
from carepoint.models.billing_models import PaymentMethod
from carepoint.utils.errors import ValidationError


def list_payments():
    patient_id = request.args.get('patientId')
    if patient_id:
        return success_response(services.billing.get_patient_payments(patient_id))
    return success_response(services.billing.list_payments())


def create_bill():
    """Prices the visit against the patient's insurance, then opens a Pending payment."""
    data = request_data()
    bill = services.billing.calculate_bill(data.get('appointmentId'), data.get('amount'), data.get('patientId'))

    payment = services.billing.generate_bill({
        'appointmentId': data.get('appointmentId'),
        'patientId': data.get('patientId'),
        'amount': bill['amount'],
        'insuranceCoverage': bill['insuranceCoverage'],
        'paymentMethod': data.get('paymentMethod') or PaymentMethod.CASH,
    })
    return success_response(payment, 201)


def get_payment(payment_id):
    return success_response(services.billing.get_payment(payment_id))


def process_payment():
    data = request_data()
    if not data.get('paymentId') or not data.get('paymentMethod'):
        raise ValidationError("paymentId and paymentMethod are required")

    payment = services.billing.process_payment(data['paymentId'], data['paymentMethod'], data.get('cardDetails'))
    return success_response(payment)
