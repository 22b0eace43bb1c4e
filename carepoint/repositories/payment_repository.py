# /carepoint/repositories/payment_repository.py
import secrets
import time

from carepoint.models.billing_models import PAYMENT_COLLECTION, PaymentStatus
from carepoint.repositories.base_repository import BaseRepository
from carepoint.utils.time_util import utcnow_iso


def generate_transaction_id():
    return f"TXN{int(time.time() * 1000)}{secrets.token_hex(5)}"


class PaymentRepository(BaseRepository):
    collection_name = PAYMENT_COLLECTION

    def find_by_patient_id(self, patient_id):
        return self.store.find(self.collection_name, {'patientId': patient_id},
                               order_by='createdAt', descending=True)

    def find_by_appointment_id(self, appointment_id):
        return self._find_first(appointmentId=appointment_id)

    def find_by_date_range(self, start_date, end_date):
        # createdAt is a full UTC timestamp; widen the upper bound to the end of that day.
        return self.store.find_range(self.collection_name, 'createdAt', start_date,
                                     f"{end_date}T23:59:59.999999+00:00")

    def create(self, data: dict) -> str:
        return super().create({
            **data,
            'insuranceCoverage': data.get('insuranceCoverage') or 0,
            'status': PaymentStatus.PENDING,
            'transactionId': generate_transaction_id(),
        })

    def mark_as_paid(self, payment_id, expected_version=None, **extra) -> dict:
        return self.update(payment_id, {
            **extra,
            'status': PaymentStatus.COMPLETED,
            'paidAt': utcnow_iso(),
        }, expected_version=expected_version)

    def mark_as_failed(self, payment_id, expected_version=None, **extra) -> dict:
        return self.update(payment_id, {**extra, 'status': PaymentStatus.FAILED},
                           expected_version=expected_version)
