# /carepoint/services/health_record_service.py
import secrets
import time

from carepoint.models.patient_models import BLOOD_TYPES, HEALTH_RECORD_FIELDS
from carepoint.utils.errors import NotFoundError, ValidationError
from carepoint.utils.time_util import utcnow_iso


def _sub_id(prefix):
    return f"{prefix}{int(time.time() * 1000)}{secrets.token_hex(5)}"


class HealthRecordService:
    def __init__(self, health_record_repo):
        self.health_record_repo = health_record_repo

    def get_health_record(self, record_id) -> dict:
        record = self.health_record_repo.find_by_id(record_id)
        if not record:
            raise NotFoundError("Health record not found")
        return record

    def get_health_record_by_patient_id(self, patient_id) -> dict:
        record = self.health_record_repo.find_by_patient_id(patient_id)
        if not record:
            raise NotFoundError("Health record not found for patient")
        return record

    def update_health_record(self, record_id, data: dict) -> dict:
        self.get_health_record(record_id)
        changes = {field: data[field] for field in HEALTH_RECORD_FIELDS if field in (data or {})}

        if changes.get('bloodType') and changes['bloodType'] not in BLOOD_TYPES:
            raise ValidationError("Invalid blood type")
        for list_field in ('allergies', 'chronicConditions'):
            if list_field in changes and not isinstance(changes[list_field], list):
                raise ValidationError(f"{list_field} must be a list")

        if changes:
            self.health_record_repo.update(record_id, changes)
        return self.get_health_record(record_id)

    def add_encounter(self, patient_id, encounter: dict) -> dict:
        record = self.get_health_record_by_patient_id(patient_id)
        encounter = encounter or {}
        if not encounter.get('doctorId'):
            raise ValidationError("doctorId is required")

        new_encounter = {
            'encounterId': _sub_id('ENC'),
            'date': encounter.get('date') or utcnow_iso(),
            'diagnosis': encounter.get('diagnosis', ''),
            'labResults': list(encounter.get('labResults') or []),
            'medicalNotes': encounter.get('medicalNotes', ''),
            'doctorId': encounter['doctorId'],
        }
        return self.health_record_repo.add_encounter(record['id'], new_encounter)

    def update_medical_notes(self, patient_id, encounter_id, notes, doctor_id=None) -> dict:
        record = self.get_health_record_by_patient_id(patient_id)
        self._find_encounter(record, encounter_id)
        return self.health_record_repo.update_medical_notes(record['id'], encounter_id, notes, updated_by=doctor_id)

    def update_lab_results(self, patient_id, encounter_id, lab_results) -> dict:
        record = self.get_health_record_by_patient_id(patient_id)
        self._find_encounter(record, encounter_id)
        if not isinstance(lab_results, list):
            raise ValidationError("labResults must be a list")

        encounters = [
            {**enc, 'labResults': lab_results} if enc.get('encounterId') == encounter_id else enc
            for enc in record.get('encounters') or []
        ]
        return self.health_record_repo.replace_encounters(record['id'], encounters)

    def add_medication(self, patient_id, medication: dict) -> dict:
        record = self.get_health_record_by_patient_id(patient_id)
        medication = medication or {}
        if not (medication.get('name') or '').strip():
            raise ValidationError("Medication name is required")

        new_medication = {
            'medicationId': _sub_id('MED'),
            'name': medication['name'].strip(),
            'dosage': medication.get('dosage', ''),
            'frequency': medication.get('frequency', ''),
            'prescribedBy': medication.get('prescribedBy'),
            'startDate': medication.get('startDate') or utcnow_iso()[:10],
            'active': True,
        }
        return self.health_record_repo.add_medication(record['id'], new_medication)

    def discontinue_medication(self, patient_id, medication_id) -> dict:
        record = self.get_health_record_by_patient_id(patient_id)
        medications = record.get('medications') or []
        if not any(med.get('medicationId') == medication_id for med in medications):
            raise NotFoundError("Medication not found")

        updated = [
            {**med, 'active': False, 'endDate': utcnow_iso()[:10]} if med.get('medicationId') == medication_id else med
            for med in medications
        ]
        return self.health_record_repo.replace_medications(record['id'], updated)

    @staticmethod
    def _find_encounter(record, encounter_id):
        for encounter in record.get('encounters') or []:
            if encounter.get('encounterId') == encounter_id:
                return encounter
        raise NotFoundError("Encounter not found")
