# /carepoint/services/notification_service.py
import logging

logger = logging.getLogger(__name__)

STAFF_ROOM = 'staff'


def patient_room(patient_id):
    return f"patient:{patient_id}"


def doctor_room(doctor_id):
    return f"doctor:{doctor_id}"


class NotificationService:
    """
    Fire-and-forget sink for domain events.

    Events are pushed to Socket.IO rooms; the emitter is injected so the sink
    can be swapped (e.g. ``socketio.emit`` in the app, a recorder in tests).
    Callers are expected to treat any exception raised here as non-fatal.
    """

    def __init__(self, emitter=None):
        self.emitter = emitter

    def _dispatch(self, event, payload, rooms):
        logger.info(f"Notification '{event}' -> {', '.join(rooms)}")
        if self.emitter is None:
            return
        for room in rooms:
            self.emitter(event, payload, to=room)

    def _appointment_rooms(self, appointment):
        return [patient_room(appointment.get('patientId')), doctor_room(appointment.get('doctorId')), STAFF_ROOM]

    def send_appointment_confirmation(self, appointment):
        self._dispatch('appointment_booked', {
            'appointmentId': appointment['id'],
            'patientId': appointment.get('patientId'),
            'appointmentDate': appointment.get('appointmentDate'),
            'timeSlot': appointment.get('timeSlot'),
        }, self._appointment_rooms(appointment))

    def send_check_in_notification(self, appointment):
        self._dispatch('appointment_checked_in', {'appointmentId': appointment['id']},
                       self._appointment_rooms(appointment))

    def send_cancellation_notification(self, appointment):
        self._dispatch('appointment_cancelled', {'appointmentId': appointment['id']},
                       self._appointment_rooms(appointment))

    def send_reschedule_notification(self, appointment):
        self._dispatch('appointment_rescheduled', {
            'appointmentId': appointment['id'],
            'appointmentDate': appointment.get('appointmentDate'),
            'timeSlot': appointment.get('timeSlot'),
        }, self._appointment_rooms(appointment))

    def send_payment_confirmation(self, payment):
        self._dispatch('payment_confirmed', {
            'paymentId': payment['id'],
            'amount': payment.get('amount'),
            'status': payment.get('status'),
        }, [patient_room(payment.get('patientId')), STAFF_ROOM])

    def send_payment_failure_notification(self, payment):
        self._dispatch('payment_failed', {'paymentId': payment['id']},
                       [patient_room(payment.get('patientId')), STAFF_ROOM])

    def send_insurance_claim_update(self, claim_id, status):
        self._dispatch('insurance_claim_updated', {'claimId': claim_id, 'status': status}, [STAFF_ROOM])
