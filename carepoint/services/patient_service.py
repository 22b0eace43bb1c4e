# /carepoint/services/patient_service.py
import logging
import re

from carepoint.models.patient_models import PATIENT_FIELDS, PatientRecordStatus, empty_health_record, normalize_phone
from carepoint.utils.errors import NotFoundError, ValidationError
from carepoint.utils.time_util import parse_date

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
PHONE_RE = re.compile(r'^[0-9]{10}$')


def is_valid_email(email) -> bool:
    return isinstance(email, str) and bool(EMAIL_RE.match(email.strip()))


def is_valid_phone(phone) -> bool:
    return isinstance(phone, str) and bool(PHONE_RE.match(normalize_phone(phone)))


def _is_blank(value) -> bool:
    return not isinstance(value, str) or not value.strip()


class PatientService:
    def __init__(self, patient_repo, health_record_repo):
        self.patient_repo = patient_repo
        self.health_record_repo = health_record_repo

    def register_patient(self, data: dict) -> dict:
        """
        Registers a patient together with an empty health record.

        The two documents are committed separately. The patient is written as
        Provisional first and only promoted to Active once its health record
        exists; if the second step fails the patient stays Provisional and
        ``ensure_health_record`` (or ``flask repair-health-records``) finishes
        the job later.
        """
        data = data or {}
        self._validate_patient_data(data)
        email = data['email'].strip().lower()

        if self.patient_repo.find_by_email(email):
            raise ValidationError("Patient with this email already exists")

        patient_data = {field: data.get(field) for field in PATIENT_FIELDS if field in data}
        patient_data.update({
            'firstName': data['firstName'].strip(),
            'lastName': data['lastName'].strip(),
            'email': email,
            'dateOfBirth': parse_date(data['dateOfBirth'], 'dateOfBirth'),
            'recordStatus': PatientRecordStatus.PROVISIONAL,
        })
        patient_id = self.patient_repo.create(patient_data)
        logger.info(f"Registered patient {patient_id}")

        try:
            self.ensure_health_record(patient_id)
        except Exception:
            logger.error(f"Health record provisioning failed; patient {patient_id} left provisional")
            raise

        return self.get_patient(patient_id)

    def ensure_health_record(self, patient_id) -> dict:
        """Idempotently provisions the patient's health record and activates the patient."""
        record = self.health_record_repo.find_by_patient_id(patient_id)
        if record is None:
            record_id = self.health_record_repo.create(empty_health_record(patient_id))
            record = self.health_record_repo.find_by_id(record_id)
        self.patient_repo.update(patient_id, {'recordStatus': PatientRecordStatus.ACTIVE})
        return record

    def repair_provisional_patients(self) -> list:
        repaired = []
        for patient in self.patient_repo.find_provisional():
            self.ensure_health_record(patient['id'])
            repaired.append(patient['id'])
        return repaired

    def get_patient(self, patient_id) -> dict:
        patient = self.patient_repo.find_by_id(patient_id)
        if not patient:
            raise NotFoundError("Patient not found")
        return patient

    def update_patient(self, patient_id, data: dict) -> dict:
        self.get_patient(patient_id)
        changes = {field: data[field] for field in PATIENT_FIELDS if field in (data or {})}

        if 'email' in changes:
            if not is_valid_email(changes['email']):
                raise ValidationError("Valid email is required")
            changes['email'] = changes['email'].strip().lower()
            existing = self.patient_repo.find_by_email(changes['email'])
            if existing and existing['id'] != patient_id:
                raise ValidationError("Email already in use by another patient")
        if 'contactNumber' in changes and not is_valid_phone(changes['contactNumber']):
            raise ValidationError("Valid contact number is required")
        if 'dateOfBirth' in changes:
            changes['dateOfBirth'] = parse_date(changes['dateOfBirth'], 'dateOfBirth')
        for name_field in ('firstName', 'lastName'):
            if name_field in changes:
                if _is_blank(changes[name_field]):
                    raise ValidationError(f"{name_field} cannot be empty")
                changes[name_field] = changes[name_field].strip()

        if changes:
            self.patient_repo.update(patient_id, changes)
        return self.get_patient(patient_id)

    def delete_patient(self, patient_id):
        # Hard delete; appointments, payments and the health record are left as they are.
        self.get_patient(patient_id)
        self.patient_repo.delete(patient_id)

    def get_all_patients(self, limit=None) -> list:
        return self.patient_repo.find_all(limit=limit)

    def search_patients(self, term) -> list:
        if not term or len(term.strip()) < 2:
            raise ValidationError("Search term must be at least 2 characters")
        return self.patient_repo.search(term)

    @staticmethod
    def _validate_patient_data(data):
        if _is_blank(data.get('firstName')):
            raise ValidationError("First name is required")
        if _is_blank(data.get('lastName')):
            raise ValidationError("Last name is required")
        if not is_valid_email(data.get('email')):
            raise ValidationError("Valid email is required")
        if not is_valid_phone(data.get('contactNumber')):
            raise ValidationError("Valid contact number is required")
        if not data.get('dateOfBirth'):
            raise ValidationError("Date of birth is required")
