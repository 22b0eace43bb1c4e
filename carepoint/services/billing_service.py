# /carepoint/services/billing_service.py
import logging

from carepoint.models.billing_models import PaymentMethod, PaymentStatus
from carepoint.services.base import BaseService
from carepoint.utils.errors import ConflictError, NotFoundError, PaymentDeclinedError, ValidationError

logger = logging.getLogger(__name__)


class BillingService(BaseService):
    def __init__(self, payment_repo, insurance_service, payment_gateway, notification_service=None):
        super().__init__(notification_service)
        self.payment_repo = payment_repo
        self.insurance_service = insurance_service
        self.gateway = payment_gateway

    def calculate_bill(self, appointment_id, base_amount, patient_id) -> dict:
        """Splits ``base_amount`` into the insurer's share and the patient's portion."""
        amount = self._validate_amount(base_amount)
        try:
            eligibility = self.insurance_service.check_eligibility(patient_id, amount)
        except NotFoundError:
            eligibility = None

        coverage = eligibility['approvedAmount'] if eligibility and eligibility['eligible'] else 0
        coverage = min(coverage, amount)
        return {
            'appointmentId': appointment_id,
            'amount': amount,
            'insuranceCoverage': coverage,
            'patientPortion': amount - coverage,
        }

    def generate_bill(self, data: dict) -> dict:
        data = data or {}
        self._validate_payment_data(data)
        # Read-then-write, so one payment per appointment is best effort under concurrency.
        if self.payment_repo.find_by_appointment_id(data['appointmentId']):
            raise ConflictError("A payment already exists for this appointment")

        amount = float(data['amount'])
        coverage = float(data.get('insuranceCoverage') or 0)
        payment_id = self.payment_repo.create({
            'appointmentId': data['appointmentId'],
            'patientId': data['patientId'],
            'amount': amount,
            'insuranceCoverage': coverage,
            'patientPortion': amount - coverage,
            'paymentMethod': data.get('paymentMethod') or PaymentMethod.CASH,
        })
        logger.info(f"Generated bill {payment_id} for appointment {data['appointmentId']}")
        return self.get_payment(payment_id)

    def process_payment(self, payment_id, payment_method, card_details=None) -> dict:
        """
        Settles a Pending payment exactly once.

        The local status is written before notifications go out and is never
        rolled back. The final write is conditioned on the version read at the
        start, so a concurrent attempt on the same payment ends in a
        ConflictError instead of a second settlement.
        """
        payment = self.get_payment(payment_id)
        if payment['status'] != PaymentStatus.PENDING:
            raise ValidationError(f"Payment is already {payment['status'].lower()}")
        if payment_method not in PaymentMethod.ALL:
            raise ValidationError(f"Unsupported payment method: {payment_method}")

        version = payment['version']
        charge_amount = payment.get('patientPortion', payment['amount'])
        result = {'success': True, 'transactionId': payment.get('transactionId')}

        if payment_method in PaymentMethod.GATEWAY and charge_amount > 0:
            try:
                result = self.gateway.charge(charge_amount, card_details or {})
            except Exception as e:
                logger.error(f"Payment gateway error for {payment_id}: {e}")
                self._fail(payment_id, version, payment_method)
                raise

        if not result.get('success'):
            failed = self._fail(payment_id, version, payment_method)
            raise PaymentDeclinedError(result.get('error'), gateway_response=result, payment=failed)

        paid = self.payment_repo.mark_as_paid(
            payment_id,
            expected_version=version,
            paymentMethod=payment_method,
            transactionId=result.get('transactionId') or payment.get('transactionId'),
        )
        logger.info(f"Payment {payment_id} completed via {payment_method}")
        self._notify('send_payment_confirmation', paid)
        return paid

    def get_payment(self, payment_id) -> dict:
        payment = self.payment_repo.find_by_id(payment_id)
        if not payment:
            raise NotFoundError("Payment not found")
        return payment

    def get_patient_payments(self, patient_id) -> list:
        return self.payment_repo.find_by_patient_id(patient_id)

    def list_payments(self) -> list:
        return self.payment_repo.find_all()

    def _fail(self, payment_id, version, payment_method):
        failed = self.payment_repo.mark_as_failed(payment_id, expected_version=version, paymentMethod=payment_method)
        logger.warning(f"Payment {payment_id} failed")
        self._notify('send_payment_failure_notification', failed)
        return failed

    @staticmethod
    def _validate_amount(amount):
        try:
            amount = float(amount)
        except (TypeError, ValueError):
            raise ValidationError("Valid amount is required")
        if amount <= 0:
            raise ValidationError("Valid amount is required")
        return amount

    def _validate_payment_data(self, data):
        if not data.get('appointmentId') or not data.get('patientId'):
            raise ValidationError("Appointment and Patient are required")
        amount = self._validate_amount(data.get('amount'))
        try:
            coverage = float(data.get('insuranceCoverage') or 0)
        except (TypeError, ValueError):
            raise ValidationError("insuranceCoverage must be a number")
        if coverage < 0 or coverage > amount:
            raise ValidationError("insuranceCoverage must be between 0 and the billed amount")
        method = data.get('paymentMethod')
        if method and method not in PaymentMethod.ALL:
            raise ValidationError(f"Unsupported payment method: {method}")
