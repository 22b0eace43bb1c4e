# /carepoint/models/billing_models.py

PAYMENT_COLLECTION = 'payments'
POLICY_COLLECTION = 'insurancePolicies'
CLAIM_COLLECTION = 'insuranceClaims'


class PaymentStatus:
    PENDING = 'Pending'
    COMPLETED = 'Completed'
    FAILED = 'Failed'
    # Never set by the billing workflow; refunds are recorded on the document
    # directly and only surface in the revenue report's refunds total.
    REFUNDED = 'Refunded'


class PaymentMethod:
    CASH = 'Cash'
    CARD = 'Card'
    INSURANCE = 'Insurance'
    MIXED = 'Mixed'

    ALL = (CASH, CARD, INSURANCE, MIXED)
    # Methods that charge the patient's portion through the payment gateway.
    GATEWAY = (CARD, MIXED)


class PolicyStatus:
    ACTIVE = 'Active'
    EXPIRED = 'Expired'
    SUSPENDED = 'Suspended'

    ALL = (ACTIVE, EXPIRED, SUSPENDED)


class ClaimStatus:
    SUBMITTED = 'Submitted'
    APPROVED = 'Approved'
    REJECTED = 'Rejected'
    PENDING = 'Pending'
