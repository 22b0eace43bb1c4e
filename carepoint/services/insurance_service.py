# /carepoint/services/insurance_service.py
import logging

from carepoint.models.billing_models import ClaimStatus, PolicyStatus
from carepoint.services.base import BaseService
from carepoint.utils.errors import ConflictError, NotFoundError, ValidationError
from carepoint.utils.time_util import parse_date, today_iso, utcnow_iso

logger = logging.getLogger(__name__)


class InsuranceService(BaseService):
    def __init__(self, policy_repo, claim_repo, insurance_provider, notification_service=None, payment_repo=None):
        super().__init__(notification_service)
        self.policy_repo = policy_repo
        self.claim_repo = claim_repo
        self.provider = insurance_provider
        self.payment_repo = payment_repo

    def check_eligibility(self, patient_id, amount) -> dict:
        """
        Looks up the patient's active policy and asks the insurer for a decision.

        ``coverageAmount`` is computed locally from the policy terms, while
        ``approvedAmount`` comes from the insurer, which applies its own
        coverage tier. The two figures are reported side by side and are not
        reconciled; the insurer's figure is the one billing uses.
        """
        amount = self._validate_amount(amount)
        policy = self.policy_repo.find_active_policy_by_patient_id(patient_id)
        if not policy:
            raise NotFoundError("No active insurance policy found")
        if policy.get('endDate') and policy['endDate'] < today_iso():
            raise NotFoundError("Insurance policy has expired")

        coverage_amount = min(amount * (policy['coveragePercentage'] / 100), policy['maxCoverage'])

        response = self.provider.check_eligibility(policy['policyNumber'], patient_id, amount)
        if not response.get('eligible'):
            logger.info(f"Insurer reported patient {patient_id} ineligible on policy {policy['policyNumber']}")
            return {
                'eligible': False,
                'policyId': policy['id'],
                'coveragePercentage': policy['coveragePercentage'],
                'coverageAmount': coverage_amount,
                'approvedAmount': 0,
                'claimId': None,
                'error': response.get('error'),
                'errorCode': response.get('errorCode'),
            }

        return {
            'eligible': True,
            'policyId': policy['id'],
            'coveragePercentage': policy['coveragePercentage'],
            'coverageAmount': coverage_amount,
            'approvedAmount': response['approvedAmount'],
            'claimId': response.get('claimId'),
        }

    def submit_claim(self, policy_id, payment_id, claim_amount) -> dict:
        claim_amount = self._validate_amount(claim_amount)
        policy = self.policy_repo.find_by_id(policy_id)
        if not policy:
            raise NotFoundError("Insurance policy not found")
        if self.payment_repo is not None and not self.payment_repo.find_by_id(payment_id):
            raise NotFoundError("Payment not found")
        # Read-then-write: two simultaneous submissions for one payment can both get through.
        if self.claim_repo.find_by_payment_id(payment_id):
            raise ConflictError("A claim has already been submitted for this payment")

        response = self.provider.submit_claim(policy['policyNumber'], claim_amount)
        status = response.get('status') or ClaimStatus.SUBMITTED

        claim_id = self.claim_repo.create({
            'policyId': policy_id,
            'paymentId': payment_id,
            'claimAmount': claim_amount,
            'approvedAmount': response.get('approvedAmount', 0),
            'status': status,
            'processedAt': utcnow_iso(),
        })
        if self.payment_repo is not None:
            self.payment_repo.update(payment_id, {'insuranceClaimId': claim_id})

        logger.info(f"Claim {claim_id} on policy {policy['policyNumber']}: {status}")
        self._notify('send_insurance_claim_update', claim_id, status)
        return self.claim_repo.find_by_id(claim_id)

    def add_policy(self, data: dict) -> dict:
        data = data or {}
        required = ['patientId', 'policyNumber', 'provider', 'coveragePercentage', 'maxCoverage', 'endDate']
        missing = [field for field in required if data.get(field) in (None, '')]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        try:
            coverage_percentage = float(data['coveragePercentage'])
            max_coverage = float(data['maxCoverage'])
        except (TypeError, ValueError):
            raise ValidationError("coveragePercentage and maxCoverage must be numbers")
        if not 0 <= coverage_percentage <= 100:
            raise ValidationError("coveragePercentage must be between 0 and 100")
        if max_coverage < 0:
            raise ValidationError("maxCoverage cannot be negative")

        status = data.get('status', PolicyStatus.ACTIVE)
        if status not in PolicyStatus.ALL:
            raise ValidationError(f"Unknown policy status: {status}")
        if self.policy_repo.find_by_policy_number(data['policyNumber']):
            raise ValidationError("Policy number already exists")

        policy_id = self.policy_repo.create({
            'patientId': data['patientId'],
            'policyNumber': data['policyNumber'],
            'provider': data['provider'],
            'coveragePercentage': coverage_percentage,
            'maxCoverage': max_coverage,
            'startDate': parse_date(data.get('startDate') or today_iso(), 'startDate'),
            'endDate': parse_date(data['endDate'], 'endDate'),
            'status': status,
        })
        return self.policy_repo.find_by_id(policy_id)

    def get_patient_policies(self, patient_id) -> list:
        return self.policy_repo.find_by_patient_id(patient_id)

    def get_claim(self, claim_id) -> dict:
        claim = self.claim_repo.find_by_id(claim_id)
        if not claim:
            raise NotFoundError("Insurance claim not found")
        return claim

    @staticmethod
    def _validate_amount(amount):
        try:
            amount = float(amount)
        except (TypeError, ValueError):
            raise ValidationError("Valid amount is required")
        if amount <= 0:
            raise ValidationError("Valid amount is required")
        return amount
