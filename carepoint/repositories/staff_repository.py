# /carepoint/repositories/staff_repository.py
from carepoint.models.staff_models import (
    DEPARTMENT_COLLECTION, HOSPITAL_COLLECTION, REVOKED_TOKEN_COLLECTION, STAFF_COLLECTION, StaffRole
)
from carepoint.repositories.base_repository import BaseRepository
from carepoint.utils.time_util import utcnow_iso


class StaffRepository(BaseRepository):
    collection_name = STAFF_COLLECTION

    def find_by_email(self, email):
        return self._find_first(email=(email or '').strip().lower())

    def find_by_role(self, role):
        return self.store.find(self.collection_name, {'role': role}, order_by='lastName')

    def find_doctors(self):
        return self.find_by_role(StaffRole.DOCTOR)


class DepartmentRepository(BaseRepository):
    collection_name = DEPARTMENT_COLLECTION

    def find_all(self, limit=None):
        return self.store.all(self.collection_name, order_by='name', limit=limit)

    def find_by_hospital_id(self, hospital_id):
        return self.store.find(self.collection_name, {'hospitalId': hospital_id}, order_by='name')


class HospitalRepository(BaseRepository):
    collection_name = HOSPITAL_COLLECTION

    def find_all(self, limit=None):
        return self.store.all(self.collection_name, order_by='name', limit=limit)


class RevokedTokenRepository(BaseRepository):
    collection_name = REVOKED_TOKEN_COLLECTION

    def add(self, jti):
        # The jti doubles as the document id, so revoking twice is a no-op lookup.
        if self.store.get(self.collection_name, jti):
            return jti
        return self.store.create(self.collection_name, {'revokedAt': utcnow_iso()}, doc_id=jti)

    def is_revoked(self, jti) -> bool:
        return self.store.get(self.collection_name, jti) is not None
