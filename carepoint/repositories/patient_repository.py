# /carepoint/repositories/patient_repository.py
from carepoint.models.patient_models import PATIENT_COLLECTION, PatientRecordStatus, normalize_phone
from carepoint.repositories.base_repository import BaseRepository


class PatientRepository(BaseRepository):
    collection_name = PATIENT_COLLECTION

    def find_by_email(self, email):
        return self._find_first(email=email)

    def find_provisional(self):
        return self.store.find(self.collection_name, {'recordStatus': PatientRecordStatus.PROVISIONAL})

    def search(self, term: str):
        """Substring match over name, email and phone; text fields ignore case."""
        needle = term.strip().lower()
        digits = normalize_phone(term.strip())

        def matches(patient):
            text_fields = (patient.get('firstName'), patient.get('lastName'), patient.get('email'))
            if any(needle in (value or '').lower() for value in text_fields):
                return True
            return bool(digits) and digits in normalize_phone(patient.get('contactNumber') or '')

        return [patient for patient in self.find_all() if matches(patient)]
