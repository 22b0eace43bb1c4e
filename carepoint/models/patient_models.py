# /carepoint/models/patient_models.py
import re

PATIENT_COLLECTION = 'patients'
HEALTH_RECORD_COLLECTION = 'healthRecords'


class PatientRecordStatus:
    # Patient exists but its health record has not been provisioned yet.
    PROVISIONAL = 'Provisional'
    ACTIVE = 'Active'


PATIENT_FIELDS = (
    'firstName', 'lastName', 'dateOfBirth', 'gender', 'contactNumber',
    'email', 'address', 'emergencyContact',
)

BLOOD_TYPES = ("A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-")

HEALTH_RECORD_FIELDS = ('bloodType', 'allergies', 'chronicConditions', 'digitalHealthCardId')


def empty_health_record(patient_id):
    return {
        'patientId': patient_id,
        'bloodType': '',
        'allergies': [],
        'chronicConditions': [],
        'encounters': [],
        'medications': [],
    }


def normalize_phone(phone: str) -> str:
    """Drops the dashes and spaces allowed in contact numbers."""
    return re.sub(r'[-\s]', '', phone)
