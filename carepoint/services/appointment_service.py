# /carepoint/services/appointment_service.py
import logging

from carepoint.models.appointment_models import AppointmentStatus, build_slot_catalog
from carepoint.services.base import BaseService
from carepoint.utils.errors import ConflictError, NotFoundError, ValidationError
from carepoint.utils.locks import KeyedLock
from carepoint.utils.time_util import parse_date, today_iso, utcnow_iso

logger = logging.getLogger(__name__)


class AppointmentService(BaseService):
    """
    Booking workflow and appointment state machine.

        Scheduled -> Confirmed -> CheckedIn -> Completed
        (any non-terminal state) -> Cancelled

    At most one non-cancelled appointment may hold a (doctor, date, slot)
    triple. The store has no transactions, so the check-then-write is
    serialized through a per-slot lock; that only covers requests within this
    process, and concurrent bookings served by different processes can still
    both pass the check.
    """

    EDITABLE_FIELDS = ('reason', 'notes', 'departmentId')

    def __init__(self, appointment_repo, notification_service=None, slot_catalog=None,
                 reject_past_dates=False, slot_lock=None):
        super().__init__(notification_service)
        self.appointment_repo = appointment_repo
        self.slot_catalog = list(slot_catalog or build_slot_catalog())
        self.reject_past_dates = reject_past_dates
        self.slot_lock = slot_lock or KeyedLock()

    # --- commands ---

    def book_appointment(self, data: dict) -> dict:
        data = data or {}
        appointment_date, time_slot = self._validate_booking(data)
        doctor_id = data['doctorId']

        with self.slot_lock.hold((doctor_id, appointment_date, time_slot)):
            if not self.appointment_repo.check_slot_availability(doctor_id, appointment_date, time_slot):
                raise ConflictError("Selected time slot is not available")

            appointment_id = self.appointment_repo.create({
                'patientId': data['patientId'],
                'doctorId': doctor_id,
                'departmentId': data.get('departmentId'),
                'appointmentDate': appointment_date,
                'timeSlot': time_slot,
                'reason': (data.get('reason') or '').strip(),
                'notes': data.get('notes') or '',
                'status': AppointmentStatus.SCHEDULED,
            })

        appointment = self.get_appointment(appointment_id)
        logger.info(f"Booked appointment {appointment_id} for doctor {doctor_id} on {appointment_date} {time_slot}")
        self._notify('send_appointment_confirmation', appointment)
        return appointment

    def confirm_appointment(self, appointment_id) -> dict:
        appointment = self.get_appointment(appointment_id)
        if appointment['status'] != AppointmentStatus.SCHEDULED:
            raise ValidationError("Only scheduled appointments can be confirmed")
        return self.appointment_repo.update(appointment_id, {'status': AppointmentStatus.CONFIRMED})

    def check_in(self, appointment_id) -> dict:
        appointment = self.get_appointment(appointment_id)
        if appointment['status'] not in AppointmentStatus.CHECK_IN_ALLOWED:
            raise ValidationError("Appointment cannot be checked in")

        updated = self.appointment_repo.update(appointment_id, {
            'status': AppointmentStatus.CHECKED_IN,
            'checkedInAt': utcnow_iso(),
        })
        self._notify('send_check_in_notification', updated)
        return updated

    def cancel_appointment(self, appointment_id) -> dict:
        appointment = self.get_appointment(appointment_id)
        if appointment['status'] in AppointmentStatus.TERMINAL:
            raise ValidationError("Appointment cannot be cancelled")

        updated = self.appointment_repo.update(appointment_id, {
            'status': AppointmentStatus.CANCELLED,
            'cancelledAt': utcnow_iso(),
        })
        self._notify('send_cancellation_notification', updated)
        return updated

    def complete_appointment(self, appointment_id) -> dict:
        appointment = self.get_appointment(appointment_id)
        if appointment['status'] != AppointmentStatus.CHECKED_IN:
            raise ValidationError("Only checked-in appointments can be completed")

        return self.appointment_repo.update(appointment_id, {
            'status': AppointmentStatus.COMPLETED,
            'completedAt': utcnow_iso(),
        })

    def reschedule_appointment(self, appointment_id, new_date, new_time_slot) -> dict:
        appointment = self.get_appointment(appointment_id)
        if appointment['status'] in AppointmentStatus.TERMINAL:
            raise ValidationError("Appointment cannot be rescheduled")

        appointment_date = self._validate_date(new_date)
        time_slot = self._validate_slot(new_time_slot)
        doctor_id = appointment['doctorId']

        with self.slot_lock.hold((doctor_id, appointment_date, time_slot)):
            if not self.appointment_repo.check_slot_availability(
                    doctor_id, appointment_date, time_slot, exclude_id=appointment_id):
                raise ConflictError("Selected time slot is not available")

            updated = self.appointment_repo.update(appointment_id, {
                'appointmentDate': appointment_date,
                'timeSlot': time_slot,
                'status': AppointmentStatus.SCHEDULED,
            })

        self._notify('send_reschedule_notification', updated)
        return updated

    def update_details(self, appointment_id, data: dict) -> dict:
        """Edits free-form fields only; status and slot go through the workflow methods."""
        self.get_appointment(appointment_id)
        changes = {field: (data or {})[field] for field in self.EDITABLE_FIELDS if field in (data or {})}
        if not changes:
            raise ValidationError(f"Nothing to update; editable fields are {', '.join(self.EDITABLE_FIELDS)}")
        return self.appointment_repo.update(appointment_id, changes)

    # --- queries ---

    def get_appointment(self, appointment_id) -> dict:
        appointment = self.appointment_repo.find_by_id(appointment_id)
        if not appointment:
            raise NotFoundError("Appointment not found")
        return appointment

    def list_appointments(self, status=None, limit=None) -> list:
        if status and status not in AppointmentStatus.ALL:
            raise ValidationError(f"Unknown appointment status: {status}")
        return self.appointment_repo.find_all(status=status, limit=limit)

    def get_patient_appointments(self, patient_id) -> list:
        return self.appointment_repo.find_by_patient_id(patient_id)

    def get_doctor_appointments(self, doctor_id, date=None) -> list:
        return self.appointment_repo.find_by_doctor_id(doctor_id, parse_date(date) if date else None)

    def get_available_slots(self, doctor_id, date) -> list:
        if not doctor_id:
            raise ValidationError("doctorId is required")
        appointment_date = parse_date(date)
        occupied = {
            appt['timeSlot'] for appt in self.appointment_repo.find_by_doctor_id(doctor_id, appointment_date)
            if appt['status'] in AppointmentStatus.OCCUPYING
        }
        return [slot for slot in self.slot_catalog if slot not in occupied]

    # --- validation ---

    def _validate_booking(self, data):
        if not data.get('patientId') or not data.get('doctorId'):
            raise ValidationError("Patient and Doctor are required")
        if not data.get('appointmentDate'):
            raise ValidationError("Appointment date is required")
        if not data.get('timeSlot'):
            raise ValidationError("Time slot is required")
        return self._validate_date(data['appointmentDate']), self._validate_slot(data['timeSlot'])

    def _validate_date(self, value):
        appointment_date = parse_date(value, 'appointmentDate')
        if self.reject_past_dates and appointment_date < today_iso():
            raise ValidationError("Cannot book appointments in the past")
        return appointment_date

    def _validate_slot(self, time_slot):
        if not time_slot:
            raise ValidationError("Time slot is required")
        if time_slot not in self.slot_catalog:
            raise ValidationError(f"Unknown time slot: {time_slot}")
        return time_slot
