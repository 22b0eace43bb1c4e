# /carepoint/repositories/health_record_repository.py
from carepoint.models.patient_models import HEALTH_RECORD_COLLECTION
from carepoint.repositories.base_repository import BaseRepository
from carepoint.utils.errors import NotFoundError
from carepoint.utils.time_util import utcnow_iso


class HealthRecordRepository(BaseRepository):
    """Health records own their encounters and medications as nested lists.

    The store's partial update works at document granularity, so nested
    collections are always rewritten whole (read-modify-write).
    """
    collection_name = HEALTH_RECORD_COLLECTION

    def find_by_patient_id(self, patient_id):
        return self._find_first(patientId=patient_id)

    def add_encounter(self, record_id, encounter: dict) -> dict:
        record = self._require(record_id)
        return self.replace_encounters(record_id, list(record.get('encounters') or []) + [encounter])

    def add_medication(self, record_id, medication: dict) -> dict:
        record = self._require(record_id)
        return self.replace_medications(record_id, list(record.get('medications') or []) + [medication])

    def replace_encounters(self, record_id, encounters: list) -> dict:
        return self.update(record_id, {'encounters': encounters})

    def replace_medications(self, record_id, medications: list) -> dict:
        return self.update(record_id, {'medications': medications})

    def update_medical_notes(self, record_id, encounter_id, notes, updated_by=None) -> dict:
        record = self._require(record_id)
        changes = {'medicalNotes': notes, 'notesUpdatedAt': utcnow_iso()}
        if updated_by:
            changes['notesUpdatedBy'] = updated_by
        encounters = [
            {**enc, **changes} if enc.get('encounterId') == encounter_id else enc
            for enc in record.get('encounters') or []
        ]
        return self.replace_encounters(record_id, encounters)

    def _require(self, record_id):
        record = self.find_by_id(record_id)
        if not record:
            raise NotFoundError("Health record not found")
        return record
