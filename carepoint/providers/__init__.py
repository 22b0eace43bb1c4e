from carepoint.providers.payment_gateway import (
    PaymentGateway, MockPaymentGateway, StaticPaymentGateway, build_payment_gateway
)
from carepoint.providers.insurance_provider import (
    InsuranceProvider, MockInsuranceProvider, StaticInsuranceProvider, build_insurance_provider
)

__all__ = [
    'PaymentGateway', 'MockPaymentGateway', 'StaticPaymentGateway', 'build_payment_gateway',
    'InsuranceProvider', 'MockInsuranceProvider', 'StaticInsuranceProvider', 'build_insurance_provider',
]
