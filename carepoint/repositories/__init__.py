from carepoint.repositories.base_repository import BaseRepository
from carepoint.repositories.patient_repository import PatientRepository
from carepoint.repositories.appointment_repository import AppointmentRepository
from carepoint.repositories.health_record_repository import HealthRecordRepository
from carepoint.repositories.payment_repository import PaymentRepository
from carepoint.repositories.insurance_repository import InsurancePolicyRepository, InsuranceClaimRepository
from carepoint.repositories.staff_repository import (
    StaffRepository, DepartmentRepository, HospitalRepository, RevokedTokenRepository
)

__all__ = [
    'BaseRepository', 'PatientRepository', 'AppointmentRepository', 'HealthRecordRepository',
    'PaymentRepository', 'InsurancePolicyRepository', 'InsuranceClaimRepository',
    'StaffRepository', 'DepartmentRepository', 'HospitalRepository', 'RevokedTokenRepository',
]
