from flask import request

from carepoint.api.responses import request_data, success_response
from carepoint.container import services
from carepoint.models.appointment_models import AppointmentStatus


def list_appointments():
    patient_id = request.args.get('patientId')
    doctor_id = request.args.get('doctorId')

    if patient_id:
        return success_response(services.appointments.get_patient_appointments(patient_id))
    if doctor_id:
        date = request.args.get('date')
        return success_response(services.appointments.get_doctor_appointments(doctor_id, date))

    appointments = services.appointments.list_appointments(
        status=request.args.get('status'),
        limit=request.args.get('limit', type=int),
    )
    return success_response(appointments)


def book_appointment():
    appointment = services.appointments.book_appointment(request_data())
    return success_response(appointment, 201)


def get_available_slots():
    slots = services.appointments.get_available_slots(request.args.get('doctorId'), request.args.get('date'))
    return success_response(slots)


def get_appointment(appointment_id):
    return success_response(services.appointments.get_appointment(appointment_id))


def update_appointment(appointment_id):
    """
    Body-driven update: a new ``appointmentDate`` + ``timeSlot`` reschedules,
    a ``status`` of Cancelled/Completed/Confirmed/CheckedIn runs that
    transition, anything else edits the free-form fields.
    """
    data = request_data()
    appointments = services.appointments

    if data.get('appointmentDate') and data.get('timeSlot'):
        appointment = appointments.reschedule_appointment(appointment_id, data['appointmentDate'], data['timeSlot'])
    elif data.get('status') == AppointmentStatus.CANCELLED:
        appointment = appointments.cancel_appointment(appointment_id)
    elif data.get('status') == AppointmentStatus.COMPLETED:
        appointment = appointments.complete_appointment(appointment_id)
    elif data.get('status') == AppointmentStatus.CONFIRMED:
        appointment = appointments.confirm_appointment(appointment_id)
    elif data.get('status') == AppointmentStatus.CHECKED_IN:
        appointment = appointments.check_in(appointment_id)
    else:
        appointment = appointments.update_details(appointment_id, data)
    return success_response(appointment)


def cancel_appointment(appointment_id):
    return success_response(services.appointments.cancel_appointment(appointment_id))


def check_in(appointment_id):
    return success_response(services.appointments.check_in(appointment_id))


def confirm_appointment(appointment_id):
    return success_response(services.appointments.confirm_appointment(appointment_id))
