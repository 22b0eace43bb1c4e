# /carepoint/providers/insurance_provider.py
import logging
import random
import secrets
import time

logger = logging.getLogger(__name__)

INELIGIBLE_MESSAGE = "Policy not active or patient not covered"
PROVIDER_MAX_COVERAGE = 100000


def _claim_id():
    return f"CLM{int(time.time() * 1000)}{secrets.token_hex(5)}"


class InsuranceProvider:
    """
    Capability interface for the insurer's eligibility and claims APIs.

    Ineligible or rejected answers are ordinary return values, never exceptions.
    """

    def check_eligibility(self, policy_number, patient_id, amount) -> dict:
        raise NotImplementedError

    def submit_claim(self, policy_number, claim_amount) -> dict:
        raise NotImplementedError

    @staticmethod
    def _eligible(amount, coverage_percentage):
        return {
            'eligible': True,
            'coveragePercentage': coverage_percentage,
            'approvedAmount': amount * (coverage_percentage / 100),
            'maxCoverage': PROVIDER_MAX_COVERAGE,
            'claimId': _claim_id(),
            'message': "Policy is active and eligible for claim",
        }

    @staticmethod
    def _ineligible():
        return {'eligible': False, 'error': INELIGIBLE_MESSAGE, 'errorCode': 'POLICY_INACTIVE'}

    @staticmethod
    def _claim_result(claim_amount, approved):
        return {
            'status': 'Approved' if approved else 'Rejected',
            'approvedAmount': claim_amount if approved else 0,
        }


class MockInsuranceProvider(InsuranceProvider):
    """Simulated insurer.

    Eligibility is re-randomized on every call (about ``eligibility_rate``
    eligible) and the coverage tier is drawn from 80% / 50%, independently of
    whatever the policy on file says.
    """

    COVERAGE_TIERS = (80, 50)

    def __init__(self, eligibility_rate=0.8, claim_approval_rate=0.9,
                 eligibility_delay=0.5, claim_delay=1.0, rng=None):
        self.eligibility_rate = eligibility_rate
        self.claim_approval_rate = claim_approval_rate
        self.eligibility_delay = eligibility_delay
        self.claim_delay = claim_delay
        self.rng = rng or random.Random()

    def check_eligibility(self, policy_number, patient_id, amount) -> dict:
        if self.eligibility_delay:
            time.sleep(self.eligibility_delay)
        if self.rng.random() >= self.eligibility_rate:
            logger.info(f"Mock insurer: policy {policy_number} not eligible")
            return self._ineligible()
        tier = self.COVERAGE_TIERS[0] if self.rng.random() > 0.5 else self.COVERAGE_TIERS[1]
        return self._eligible(amount, tier)

    def submit_claim(self, policy_number, claim_amount) -> dict:
        if self.claim_delay:
            time.sleep(self.claim_delay)
        approved = self.rng.random() < self.claim_approval_rate
        logger.info(f"Mock insurer: claim on {policy_number} for {claim_amount} -> {'approved' if approved else 'rejected'}")
        return self._claim_result(claim_amount, approved)


class StaticInsuranceProvider(InsuranceProvider):
    """Deterministic test double."""

    def __init__(self, eligible=True, coverage_percentage=80, approve_claims=True):
        self.eligible = eligible
        self.coverage_percentage = coverage_percentage
        self.approve_claims = approve_claims

    def check_eligibility(self, policy_number, patient_id, amount) -> dict:
        if not self.eligible:
            return self._ineligible()
        return self._eligible(amount, self.coverage_percentage)

    def submit_claim(self, policy_number, claim_amount) -> dict:
        return self._claim_result(claim_amount, self.approve_claims)


def build_insurance_provider(config) -> InsuranceProvider:
    kind = (config.get('INSURANCE_PROVIDER') or 'mock').lower()
    if kind == 'approve':
        return StaticInsuranceProvider(eligible=True, approve_claims=True)
    if kind == 'decline':
        return StaticInsuranceProvider(eligible=False, approve_claims=False)
    seed = config.get('MOCK_PROVIDER_SEED')
    return MockInsuranceProvider(
        eligibility_rate=float(config.get('INSURANCE_ELIGIBILITY_RATE', 0.8)),
        claim_approval_rate=float(config.get('INSURANCE_CLAIM_APPROVAL_RATE', 0.9)),
        eligibility_delay=float(config.get('INSURANCE_ELIGIBILITY_DELAY', 0.5)),
        claim_delay=float(config.get('INSURANCE_CLAIM_DELAY', 1.0)),
        rng=random.Random(seed) if seed is not None else None,
    )
