# /carepoint/models/staff_models.py

STAFF_COLLECTION = 'staff'
DEPARTMENT_COLLECTION = 'departments'
HOSPITAL_COLLECTION = 'hospitals'
REVOKED_TOKEN_COLLECTION = 'revokedTokens'


class StaffRole:
    STAFF = 'Staff'
    DOCTOR = 'Doctor'
    PAYMENTS_OFFICER = 'PaymentsOfficer'
    MANAGER = 'Manager'

    ALL = (STAFF, DOCTOR, PAYMENTS_OFFICER, MANAGER)


class HospitalType:
    PUBLIC = 'Public'
    PRIVATE = 'Private'
    SEMI_PRIVATE = 'SemiPrivate'

    ALL = (PUBLIC, PRIVATE, SEMI_PRIVATE)


DEFAULT_HOSPITAL = {
    'name': 'CarePoint General Hospital',
    'type': HospitalType.PRIVATE,
    'address': '1 Main Street',
    'contactNumber': '0110000000',
}

DEFAULT_DEPARTMENTS = [
    {'name': 'General Medicine', 'description': 'Primary care and internal medicine'},
    {'name': 'Cardiology', 'description': 'Heart and vascular care'},
    {'name': 'Pediatrics', 'description': 'Care for infants, children and adolescents'},
    {'name': 'Orthopedics', 'description': 'Bones, joints and musculoskeletal care'},
]
