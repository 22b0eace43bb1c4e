# /carepoint/repositories/insurance_repository.py
from carepoint.models.billing_models import CLAIM_COLLECTION, POLICY_COLLECTION, PolicyStatus
from carepoint.repositories.base_repository import BaseRepository
from carepoint.utils.time_util import utcnow_iso


class InsurancePolicyRepository(BaseRepository):
    collection_name = POLICY_COLLECTION

    def find_by_patient_id(self, patient_id):
        return self.store.find(self.collection_name, {'patientId': patient_id}, order_by='createdAt')

    def find_active_policy_by_patient_id(self, patient_id):
        """First Active policy on file; any others are ignored for eligibility."""
        return self._find_first(patientId=patient_id, status=PolicyStatus.ACTIVE)

    def find_by_policy_number(self, policy_number):
        return self._find_first(policyNumber=policy_number)


class InsuranceClaimRepository(BaseRepository):
    collection_name = CLAIM_COLLECTION

    def create(self, data: dict) -> str:
        return super().create({**data, 'submittedAt': utcnow_iso()})

    def find_by_payment_id(self, payment_id):
        return self._find_first(paymentId=payment_id)

    def find_by_policy_id(self, policy_id):
        return self.store.find(self.collection_name, {'policyId': policy_id}, order_by='submittedAt')
