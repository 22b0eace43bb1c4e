from carepoint.services.notification_service import NotificationService
from carepoint.services.patient_service import PatientService
from carepoint.services.health_record_service import HealthRecordService
from carepoint.services.appointment_service import AppointmentService
from carepoint.services.insurance_service import InsuranceService
from carepoint.services.billing_service import BillingService
from carepoint.services.reporting_service import ReportingService
from carepoint.services.auth_service import AuthService
from carepoint.services.directory_service import DirectoryService

__all__ = [
    'NotificationService', 'PatientService', 'HealthRecordService', 'AppointmentService',
    'InsuranceService', 'BillingService', 'ReportingService', 'AuthService', 'DirectoryService',
]
