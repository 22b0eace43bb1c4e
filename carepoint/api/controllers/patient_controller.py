from flask import request

from carepoint.api.responses import request_data, success_response
from carepoint.container import services
from carepoint.utils.errors import ValidationError


def list_patients():
    search = request.args.get('search')
    if search is not None:
        return success_response(services.patients.search_patients(search))
    limit = request.args.get('limit', type=int)
    return success_response(services.patients.get_all_patients(limit))


def register_patient():
    patient = services.patients.register_patient(request_data())
    return success_response(patient, 201)


def get_patient(patient_id):
    return success_response(services.patients.get_patient(patient_id))


def update_patient(patient_id):
    return success_response(services.patients.update_patient(patient_id, request_data()))


def delete_patient(patient_id):
    services.patients.delete_patient(patient_id)
    return success_response({'id': patient_id}, message='Patient deleted')


# --- Health record ---

def get_health_record(patient_id):
    services.patients.get_patient(patient_id)
    return success_response(services.health_records.get_health_record_by_patient_id(patient_id))


def update_health_record(patient_id):
    record = services.health_records.get_health_record_by_patient_id(patient_id)
    return success_response(services.health_records.update_health_record(record['id'], request_data()))


def add_encounter(patient_id):
    record = services.health_records.add_encounter(patient_id, request_data())
    return success_response(record, 201)


def update_encounter(patient_id, encounter_id):
    """Accepts ``medicalNotes`` and/or ``labResults`` for one encounter."""
    data = request_data()
    if 'medicalNotes' not in data and 'labResults' not in data:
        raise ValidationError("medicalNotes or labResults is required")

    record = None
    if 'medicalNotes' in data:
        record = services.health_records.update_medical_notes(
            patient_id, encounter_id, data['medicalNotes'], data.get('doctorId'))
    if 'labResults' in data:
        record = services.health_records.update_lab_results(patient_id, encounter_id, data['labResults'])
    return success_response(record)


def add_medication(patient_id):
    record = services.health_records.add_medication(patient_id, request_data())
    return success_response(record, 201)


def discontinue_medication(patient_id, medication_id):
    return success_response(services.health_records.discontinue_medication(patient_id, medication_id))
