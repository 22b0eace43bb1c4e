# /carepoint/api/routes.py

from flask_jwt_extended import jwt_required
from . import api_bp
from carepoint.extensions import limiter
from carepoint.api.responses import success_response
from carepoint.models.staff_models import StaffRole
from carepoint.utils.decorators import audit_log, session_required
from .controllers import (
    auth_controller, patient_controller, appointment_controller, billing_controller,
    insurance_controller, mock_provider_controller, report_controller, directory_controller
)

CLINICAL = (StaffRole.STAFF, StaffRole.DOCTOR)
FINANCE = (StaffRole.STAFF, StaffRole.PAYMENTS_OFFICER)


# --- Authentication Endpoints ---
@api_bp.route('/auth/register', methods=['POST'])
@limiter.limit("5 per hour")
@session_required(StaffRole.MANAGER)
@audit_log("STAFF_REGISTRATION", "staff")
def register():
    return auth_controller.register_staff()

@api_bp.route('/auth/login', methods=['POST'])
@limiter.limit("10 per minute")
@audit_log("STAFF_LOGIN", "authentication")
def login():
    return auth_controller.login()

@api_bp.route('/auth/logout', methods=['POST'])
@jwt_required()
@audit_log("STAFF_LOGOUT", "authentication")
def logout():
    return auth_controller.logout()

@api_bp.route('/auth/refresh', methods=['POST'])
@jwt_required(refresh=True)
def refresh():
    return auth_controller.refresh_token()


# --- Patient Endpoints ---
@api_bp.route('/patients', methods=['GET'])
@session_required(*CLINICAL)
@audit_log("VIEW_PATIENTS", "patients")
def list_patients():
    return patient_controller.list_patients()

@api_bp.route('/patients', methods=['POST'])
@session_required(*CLINICAL)
@audit_log("PATIENT_REGISTRATION", "patients")
def register_patient():
    return patient_controller.register_patient()

@api_bp.route('/patients/<patient_id>', methods=['GET'])
@session_required(*CLINICAL)
@audit_log("VIEW_PATIENT", "patients")
def get_patient(patient_id):
    return patient_controller.get_patient(patient_id)

@api_bp.route('/patients/<patient_id>', methods=['PUT'])
@session_required(*CLINICAL)
@audit_log("UPDATE_PATIENT", "patients")
def update_patient(patient_id):
    return patient_controller.update_patient(patient_id)

@api_bp.route('/patients/<patient_id>', methods=['DELETE'])
@session_required(StaffRole.STAFF)
@audit_log("DELETE_PATIENT", "patients")
def delete_patient(patient_id):
    return patient_controller.delete_patient(patient_id)


# --- Health Record Endpoints ---
@api_bp.route('/patients/<patient_id>/health-record', methods=['GET'])
@session_required(*CLINICAL)
@audit_log("VIEW_HEALTH_RECORD", "health_records")
def get_health_record(patient_id):
    return patient_controller.get_health_record(patient_id)

@api_bp.route('/patients/<patient_id>/health-record', methods=['PUT'])
@session_required(StaffRole.DOCTOR)
@audit_log("UPDATE_HEALTH_RECORD", "health_records")
def update_health_record(patient_id):
    return patient_controller.update_health_record(patient_id)

@api_bp.route('/patients/<patient_id>/health-record/encounters', methods=['POST'])
@session_required(StaffRole.DOCTOR)
@audit_log("ADD_ENCOUNTER", "health_records")
def add_encounter(patient_id):
    return patient_controller.add_encounter(patient_id)

@api_bp.route('/patients/<patient_id>/health-record/encounters/<encounter_id>', methods=['PUT'])
@session_required(StaffRole.DOCTOR)
@audit_log("UPDATE_ENCOUNTER", "health_records")
def update_encounter(patient_id, encounter_id):
    return patient_controller.update_encounter(patient_id, encounter_id)

@api_bp.route('/patients/<patient_id>/health-record/medications', methods=['POST'])
@session_required(StaffRole.DOCTOR)
@audit_log("ADD_MEDICATION", "health_records")
def add_medication(patient_id):
    return patient_controller.add_medication(patient_id)

@api_bp.route('/patients/<patient_id>/health-record/medications/<medication_id>/discontinue', methods=['POST'])
@session_required(StaffRole.DOCTOR)
@audit_log("DISCONTINUE_MEDICATION", "health_records")
def discontinue_medication(patient_id, medication_id):
    return patient_controller.discontinue_medication(patient_id, medication_id)


# --- Appointment Endpoints ---
@api_bp.route('/appointments', methods=['GET'])
@session_required(*CLINICAL)
@audit_log("VIEW_APPOINTMENTS", "appointments")
def list_appointments():
    return appointment_controller.list_appointments()

@api_bp.route('/appointments', methods=['POST'])
@session_required(*CLINICAL)
@audit_log("BOOK_APPOINTMENT", "appointments")
def book_appointment():
    return appointment_controller.book_appointment()

@api_bp.route('/appointments/available-slots', methods=['GET'])
@session_required(*CLINICAL)
def available_slots():
    return appointment_controller.get_available_slots()

@api_bp.route('/appointments/<appointment_id>', methods=['GET'])
@session_required(*CLINICAL)
@audit_log("VIEW_APPOINTMENT", "appointments")
def get_appointment(appointment_id):
    return appointment_controller.get_appointment(appointment_id)

@api_bp.route('/appointments/<appointment_id>', methods=['PUT'])
@session_required(*CLINICAL)
@audit_log("UPDATE_APPOINTMENT", "appointments")
def update_appointment(appointment_id):
    return appointment_controller.update_appointment(appointment_id)

@api_bp.route('/appointments/<appointment_id>', methods=['DELETE'])
@session_required(*CLINICAL)
@audit_log("CANCEL_APPOINTMENT", "appointments")
def cancel_appointment(appointment_id):
    return appointment_controller.cancel_appointment(appointment_id)

@api_bp.route('/appointments/<appointment_id>/check-in', methods=['POST'])
@session_required(*CLINICAL)
@audit_log("CHECK_IN_APPOINTMENT", "appointments")
def check_in(appointment_id):
    return appointment_controller.check_in(appointment_id)

@api_bp.route('/appointments/<appointment_id>/confirm', methods=['POST'])
@session_required(*CLINICAL)
@audit_log("CONFIRM_APPOINTMENT", "appointments")
def confirm_appointment(appointment_id):
    return appointment_controller.confirm_appointment(appointment_id)


# --- Billing Endpoints ---
@api_bp.route('/billing', methods=['GET'])
@session_required(*FINANCE)
@audit_log("VIEW_PAYMENTS", "payments")
def list_payments():
    return billing_controller.list_payments()

@api_bp.route('/billing', methods=['POST'])
@session_required(*FINANCE)
@audit_log("GENERATE_BILL", "payments")
def create_bill():
    return billing_controller.create_bill()

@api_bp.route('/billing/<payment_id>', methods=['GET'])
@session_required(*FINANCE)
@audit_log("VIEW_PAYMENT", "payments")
def get_payment(payment_id):
    return billing_controller.get_payment(payment_id)

@api_bp.route('/billing/process-payment', methods=['POST'])
@limiter.limit("30 per minute")
@session_required(*FINANCE)
@audit_log("PROCESS_PAYMENT", "payments")
def process_payment():
    return billing_controller.process_payment()


# --- Insurance Endpoints ---
@api_bp.route('/insurance/policies', methods=['GET'])
@session_required(*FINANCE)
@audit_log("VIEW_POLICIES", "insurance")
def list_policies():
    return insurance_controller.list_policies()

@api_bp.route('/insurance/policies', methods=['POST'])
@session_required(*FINANCE)
@audit_log("ADD_POLICY", "insurance")
def add_policy():
    return insurance_controller.add_policy()

@api_bp.route('/insurance/eligibility', methods=['POST'])
@session_required(*FINANCE)
@audit_log("CHECK_ELIGIBILITY", "insurance")
def check_eligibility():
    return insurance_controller.check_eligibility()

@api_bp.route('/insurance/claims', methods=['POST'])
@session_required(*FINANCE)
@audit_log("SUBMIT_CLAIM", "insurance")
def submit_claim():
    return insurance_controller.submit_claim()

@api_bp.route('/insurance/claims/<claim_id>', methods=['GET'])
@session_required(*FINANCE)
@audit_log("VIEW_CLAIM", "insurance")
def get_claim(claim_id):
    return insurance_controller.get_claim(claim_id)


# --- Mock External Providers ---
@api_bp.route('/mock/insurance-provider', methods=['POST'])
@limiter.limit("60 per minute")
def mock_insurance_provider():
    return mock_provider_controller.insurance_provider()

@api_bp.route('/mock/payment-gateway', methods=['POST'])
@limiter.limit("60 per minute")
def mock_payment_gateway():
    return mock_provider_controller.payment_gateway()


# --- Report Endpoints ---
@api_bp.route('/reports/patient-flow', methods=['GET'])
@session_required(StaffRole.MANAGER)
@audit_log("VIEW_PATIENT_FLOW_REPORT", "reports")
def patient_flow_report():
    return report_controller.patient_flow_report()

@api_bp.route('/reports/revenue', methods=['GET'])
@session_required(StaffRole.MANAGER, StaffRole.PAYMENTS_OFFICER)
@audit_log("VIEW_REVENUE_REPORT", "reports")
def revenue_report():
    return report_controller.revenue_report()

@api_bp.route('/reports/export', methods=['POST'])
@session_required(StaffRole.MANAGER)
@audit_log("EXPORT_REPORT", "reports")
def export_report():
    return report_controller.export_report()


# --- Directory Endpoints ---
@api_bp.route('/staff/doctors', methods=['GET'])
@session_required()
def list_doctors():
    return directory_controller.list_doctors()

@api_bp.route('/staff/<staff_id>', methods=['GET'])
@session_required()
@audit_log("VIEW_STAFF", "staff")
def get_staff(staff_id):
    return directory_controller.get_staff(staff_id)

@api_bp.route('/departments', methods=['GET'])
@session_required()
def list_departments():
    return directory_controller.list_departments()

@api_bp.route('/departments', methods=['POST'])
@session_required(StaffRole.MANAGER)
@audit_log("CREATE_DEPARTMENT", "departments")
def create_department():
    return directory_controller.create_department()

@api_bp.route('/hospitals', methods=['GET'])
@session_required()
def list_hospitals():
    return directory_controller.list_hospitals()

@api_bp.route('/hospitals', methods=['POST'])
@session_required(StaffRole.MANAGER)
@audit_log("CREATE_HOSPITAL", "hospitals")
def create_hospital():
    return directory_controller.create_hospital()


# --- Liveness ---
@api_bp.route('/health', methods=['GET'])
def health():
    return success_response({'status': 'ok'})
