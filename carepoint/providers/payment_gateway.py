# /carepoint/providers/payment_gateway.py
import logging
import random
import secrets
import time

from carepoint.utils.time_util import utcnow_iso

logger = logging.getLogger(__name__)

DECLINE_MESSAGE = "Payment declined - Insufficient funds or invalid card"


def _transaction_id():
    return f"TXN{int(time.time() * 1000)}{secrets.token_hex(5)}"


class PaymentGateway:
    """
    Capability interface for charging a card.

    ``charge`` never raises for a business decline. It returns a dict shaped
    like the gateway's JSON answer:

        {'success': True, 'transactionId': ..., 'amount': ..., 'processedAt': ..., 'message': ...}
        {'success': False, 'error': ..., 'errorCode': 'PAYMENT_DECLINED'}
    """

    def charge(self, amount, card_details=None) -> dict:
        raise NotImplementedError

    @staticmethod
    def _approved(amount):
        return {
            'success': True,
            'transactionId': _transaction_id(),
            'message': "Payment processed successfully",
            'amount': amount,
            'processedAt': utcnow_iso(),
        }

    @staticmethod
    def _declined():
        return {'success': False, 'error': DECLINE_MESSAGE, 'errorCode': 'PAYMENT_DECLINED'}


class MockPaymentGateway(PaymentGateway):
    """Simulated gateway: fixed latency, approves roughly ``success_rate`` of charges."""

    def __init__(self, success_rate=0.9, delay=1.0, rng=None):
        self.success_rate = success_rate
        self.delay = delay
        self.rng = rng or random.Random()

    def charge(self, amount, card_details=None) -> dict:
        if self.delay:
            time.sleep(self.delay)
        if self.rng.random() < self.success_rate:
            result = self._approved(amount)
            logger.info(f"Mock gateway approved {amount} ({result['transactionId']})")
            return result
        logger.info(f"Mock gateway declined {amount}")
        return self._declined()


class StaticPaymentGateway(PaymentGateway):
    """Deterministic test double."""

    def __init__(self, approve=True):
        self.approve = approve
        self.charges = []

    def charge(self, amount, card_details=None) -> dict:
        self.charges.append({'amount': amount, 'card_details': card_details})
        return self._approved(amount) if self.approve else self._declined()


def build_payment_gateway(config) -> PaymentGateway:
    kind = (config.get('PAYMENT_GATEWAY') or 'mock').lower()
    if kind == 'approve':
        return StaticPaymentGateway(approve=True)
    if kind == 'decline':
        return StaticPaymentGateway(approve=False)
    seed = config.get('MOCK_PROVIDER_SEED')
    return MockPaymentGateway(
        success_rate=float(config.get('PAYMENT_GATEWAY_SUCCESS_RATE', 0.9)),
        delay=float(config.get('PAYMENT_GATEWAY_DELAY', 1.0)),
        rng=random.Random(seed) if seed is not None else None,
    )
