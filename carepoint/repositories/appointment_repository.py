# /carepoint/repositories/appointment_repository.py
from carepoint.models.appointment_models import COLLECTION, AppointmentStatus
from carepoint.repositories.base_repository import BaseRepository


class AppointmentRepository(BaseRepository):
    collection_name = COLLECTION

    def find_all(self, status=None, limit=None):
        filters = {'status': status} if status else None
        return self.store.find(self.collection_name, filters, order_by='appointmentDate',
                               descending=True, limit=limit)

    def find_by_patient_id(self, patient_id):
        return self.store.find(self.collection_name, {'patientId': patient_id},
                               order_by='appointmentDate', descending=True)

    def find_by_doctor_id(self, doctor_id, date=None):
        filters = {'doctorId': doctor_id}
        if date:
            filters['appointmentDate'] = date
        return self.store.find(self.collection_name, filters, order_by='appointmentDate')

    def find_by_date_range(self, start_date, end_date):
        return self.store.find_range(self.collection_name, 'appointmentDate', start_date, end_date)

    def find_occupying(self, doctor_id, date, time_slot):
        """Non-cancelled appointments holding the (doctor, date, slot) triple."""
        return self.store.find(self.collection_name, {
            'doctorId': doctor_id,
            'appointmentDate': date,
            'timeSlot': time_slot,
            'status': list(AppointmentStatus.OCCUPYING),
        })

    def check_slot_availability(self, doctor_id, date, time_slot, exclude_id=None) -> bool:
        occupying = [appt for appt in self.find_occupying(doctor_id, date, time_slot)
                     if appt['id'] != exclude_id]
        return not occupying
