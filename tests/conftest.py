"""
Global test fixtures for pytest.

Provides reusable fixtures for service and API testing:
- An application built from TestingConfig (in-memory SQLite, deterministic providers)
- A recording notification sink
- Service instances wired against the same store
- Seed documents (patients, appointments, policies, payments)
"""
import pytest

from carepoint import create_app
from carepoint.container import services as container
from carepoint.extensions import db
from carepoint.providers import StaticInsuranceProvider, StaticPaymentGateway
from carepoint.services import NotificationService
from carepoint.utils.report_export import ReportExporter


class RecordingEmitter:
    """Stands in for socketio.emit and remembers every (event, payload, room)."""

    def __init__(self):
        self.sent = []

    def __call__(self, event, payload, to=None):
        self.sent.append((event, payload, to))

    def events(self):
        return [event for event, _, _ in self.sent]


class BrokenEmitter:
    def __call__(self, event, payload, to=None):
        raise ConnectionError("socket server unavailable")


# ============================================================================
# Application
# ============================================================================

@pytest.fixture
def emitter():
    return RecordingEmitter()


@pytest.fixture
def payment_gateway():
    return StaticPaymentGateway(approve=True)


@pytest.fixture
def insurance_provider():
    return StaticInsuranceProvider(eligible=True, coverage_percentage=80, approve_claims=True)


@pytest.fixture
def app(tmp_path, emitter, payment_gateway, insurance_provider):
    app = create_app(
        'testing',
        payment_gateway=payment_gateway,
        insurance_provider=insurance_provider,
        notification_service=NotificationService(emitter=emitter),
    )
    container.reports.exporter = ReportExporter(str(tmp_path / 'exports'))

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def services(app):
    """The service container bound to the test application."""
    return container


@pytest.fixture
def store(services):
    return services.store


# ============================================================================
# Seed data
# ============================================================================

def patient_payload(**overrides):
    payload = {
        'firstName': 'Ada',
        'lastName': 'Lovelace',
        'email': 'ada@example.com',
        'contactNumber': '0712345678',
        'dateOfBirth': '1990-12-10',
        'gender': 'Female',
        'address': '12 Analytical Way',
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def patient(services):
    return services.patients.register_patient(patient_payload())


@pytest.fixture
def appointment(services, patient):
    return services.appointments.book_appointment({
        'patientId': patient['id'],
        'doctorId': 'D1',
        'appointmentDate': '2025-06-01',
        'timeSlot': '09:00-09:30',
        'reason': 'Annual checkup',
    })


@pytest.fixture
def policy(services, patient):
    return services.insurance.add_policy({
        'patientId': patient['id'],
        'policyNumber': 'POL-1001',
        'provider': 'Acme Health',
        'coveragePercentage': 80,
        'maxCoverage': 5000,
        'startDate': '2024-01-01',
        'endDate': '2099-12-31',
    })


@pytest.fixture
def payment(services, patient, appointment):
    return services.billing.generate_bill({
        'appointmentId': appointment['id'],
        'patientId': patient['id'],
        'amount': 200,
        'insuranceCoverage': 0,
    })
