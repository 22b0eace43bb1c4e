# /carepoint/container.py
from carepoint.extensions import socketio
from carepoint.models.appointment_models import build_slot_catalog
from carepoint.providers import build_insurance_provider, build_payment_gateway
from carepoint.repositories import (
    AppointmentRepository, DepartmentRepository, HealthRecordRepository, HospitalRepository,
    InsuranceClaimRepository, InsurancePolicyRepository, PatientRepository, PaymentRepository,
    RevokedTokenRepository, StaffRepository
)
from carepoint.services import (
    AppointmentService, AuthService, BillingService, DirectoryService, HealthRecordService,
    InsuranceService, NotificationService, PatientService, ReportingService
)
from carepoint.store import DocumentStore
from carepoint.utils.report_export import ReportExporter


def slot_catalog_from_config(config):
    explicit = config.get('APPOINTMENT_SLOT_CATALOG')
    if explicit:
        if isinstance(explicit, str):
            explicit = explicit.split(',')
        return [slot.strip() for slot in explicit if slot.strip()]
    return build_slot_catalog(
        start_hour=int(config.get('APPOINTMENT_DAY_START_HOUR', 9)),
        end_hour=int(config.get('APPOINTMENT_DAY_END_HOUR', 17)),
        slot_minutes=int(config.get('APPOINTMENT_SLOT_MINUTES', 30)),
    )


class ServiceContainer:
    """
    Composition root: builds the repositories, providers and services once per
    application and hands them to the API layer. Every collaborator can be
    overridden through keyword arguments, which is how tests inject
    deterministic providers and a recording notifier.
    """

    def __init__(self, app=None, **overrides):
        if app is not None:
            self.init_app(app, **overrides)

    def init_app(self, app, store=None, payment_gateway=None, insurance_provider=None,
                 notification_service=None):
        config = app.config
        self.store = store or DocumentStore()

        self.patients_repo = PatientRepository(self.store)
        self.health_records_repo = HealthRecordRepository(self.store)
        self.appointments_repo = AppointmentRepository(self.store)
        self.payments_repo = PaymentRepository(self.store)
        self.policies_repo = InsurancePolicyRepository(self.store)
        self.claims_repo = InsuranceClaimRepository(self.store)
        self.staff_repo = StaffRepository(self.store)
        self.departments_repo = DepartmentRepository(self.store)
        self.hospitals_repo = HospitalRepository(self.store)
        self.revoked_tokens_repo = RevokedTokenRepository(self.store)

        self.payment_gateway = payment_gateway or build_payment_gateway(config)
        self.insurance_provider = insurance_provider or build_insurance_provider(config)
        self.notifications = notification_service or NotificationService(emitter=socketio.emit)

        self.patients = PatientService(self.patients_repo, self.health_records_repo)
        self.health_records = HealthRecordService(self.health_records_repo)
        self.appointments = AppointmentService(
            self.appointments_repo,
            notification_service=self.notifications,
            slot_catalog=slot_catalog_from_config(config),
            reject_past_dates=bool(config.get('REJECT_PAST_APPOINTMENTS', False)),
        )
        self.insurance = InsuranceService(
            self.policies_repo, self.claims_repo, self.insurance_provider,
            notification_service=self.notifications, payment_repo=self.payments_repo,
        )
        self.billing = BillingService(
            self.payments_repo, self.insurance, self.payment_gateway,
            notification_service=self.notifications,
        )
        self.reports = ReportingService(
            self.appointments_repo, self.payments_repo, self.departments_repo,
            exporter=ReportExporter(config.get('REPORT_EXPORT_DIR', 'exports')),
        )
        self.auth = AuthService(self.staff_repo, self.revoked_tokens_repo)
        self.directory = DirectoryService(self.staff_repo, self.departments_repo, self.hospitals_repo)

        app.extensions['carepoint_services'] = self
        return self


# Global instance, bound to the application in create_app
services = ServiceContainer()
