"""
Tests for patient registration, lookup and the provisional-record repair path.
"""
import pytest

from carepoint.models.patient_models import PatientRecordStatus
from carepoint.services.patient_service import is_valid_email, is_valid_phone
from carepoint.utils.errors import NotFoundError, ValidationError
from tests.conftest import patient_payload


def _failing_create(data):
    raise RuntimeError("store unavailable")


class TestValidators:
    @pytest.mark.parametrize('email,expected', [
        ('a@x.com', True),
        ('first.last@hospital.org', True),
        ('no-at-sign.com', False),
        ('spaces in@x.com', False),
        ('', False),
        (None, False),
        (42, False),
    ])
    def test_email(self, email, expected):
        assert is_valid_email(email) is expected

    @pytest.mark.parametrize('phone,expected', [
        ('0712345678', True),
        ('071-234-5678', True),
        ('071 234 5678', True),
        ('12345', False),
        ('07123456789', False),
        (712345678, False),
        (None, False),
    ])
    def test_phone(self, phone, expected):
        assert is_valid_phone(phone) is expected


class TestRegistration:
    def test_register_creates_exactly_one_health_record(self, services):
        patient = services.patients.register_patient(patient_payload(email='a@x.com'))

        assert patient['recordStatus'] == PatientRecordStatus.ACTIVE
        records = services.store.find('healthRecords', {'patientId': patient['id']})
        assert len(records) == 1
        assert records[0]['encounters'] == []
        assert records[0]['medications'] == []

    def test_duplicate_email_is_validation_error(self, services):
        services.patients.register_patient(patient_payload(email='a@x.com'))

        with pytest.raises(ValidationError, match="already exists"):
            services.patients.register_patient(patient_payload(email='a@x.com', firstName='Other'))

    def test_email_uniqueness_ignores_case(self, services):
        services.patients.register_patient(patient_payload(email='a@x.com'))
        with pytest.raises(ValidationError):
            services.patients.register_patient(patient_payload(email='A@X.COM'))

    @pytest.mark.parametrize('field,value', [
        ('firstName', ''),
        ('lastName', '   '),
        ('email', 'not-an-email'),
        ('contactNumber', '123'),
        ('dateOfBirth', None),
        ('firstName', 42),
        ('lastName', {'family': 'Lovelace'}),
        ('email', 123),
        ('contactNumber', 712345678),
        ('dateOfBirth', 19901210),
    ])
    def test_invalid_payload(self, services, field, value):
        with pytest.raises(ValidationError):
            services.patients.register_patient(patient_payload(**{field: value}))

    def test_failed_health_record_leaves_patient_provisional(self, services, monkeypatch):
        monkeypatch.setattr(services.health_records_repo, 'create', _failing_create)

        with pytest.raises(RuntimeError):
            services.patients.register_patient(patient_payload())

        provisional = services.patients_repo.find_provisional()
        assert len(provisional) == 1
        assert services.health_records_repo.find_by_patient_id(provisional[0]['id']) is None

    def test_repair_completes_provisional_patients(self, services, monkeypatch):
        with monkeypatch.context() as patched:
            patched.setattr(services.health_records_repo, 'create', _failing_create)
            with pytest.raises(RuntimeError):
                services.patients.register_patient(patient_payload())

        repaired = services.patients.repair_provisional_patients()

        assert len(repaired) == 1
        patient = services.patients.get_patient(repaired[0])
        assert patient['recordStatus'] == PatientRecordStatus.ACTIVE
        assert services.health_records_repo.find_by_patient_id(patient['id']) is not None
        assert services.patients.repair_provisional_patients() == []

    def test_ensure_health_record_is_idempotent(self, services, patient):
        first = services.patients.ensure_health_record(patient['id'])
        second = services.patients.ensure_health_record(patient['id'])
        assert first['id'] == second['id']
        assert len(services.store.find('healthRecords', {'patientId': patient['id']})) == 1


class TestLookupAndUpdate:
    def test_get_unknown_patient(self, services):
        with pytest.raises(NotFoundError):
            services.patients.get_patient('missing')

    def test_update_patient(self, services, patient):
        updated = services.patients.update_patient(patient['id'], {'address': '1 New Road', 'firstName': 'Augusta'})
        assert updated['address'] == '1 New Road'
        assert updated['firstName'] == 'Augusta'

    def test_update_rejects_email_taken_by_another_patient(self, services, patient):
        other = services.patients.register_patient(patient_payload(email='other@example.com'))
        with pytest.raises(ValidationError, match="already in use"):
            services.patients.update_patient(other['id'], {'email': patient['email']})

    def test_delete_patient(self, services, patient):
        services.patients.delete_patient(patient['id'])
        with pytest.raises(NotFoundError):
            services.patients.get_patient(patient['id'])

    def test_search_matches_names_email_and_phone(self, services, patient):
        services.patients.register_patient(patient_payload(
            firstName='Grace', lastName='Hopper', email='grace@navy.mil', contactNumber='0799999999'))

        assert [p['firstName'] for p in services.patients.search_patients('love')] == ['Ada']
        assert [p['firstName'] for p in services.patients.search_patients('NAVY')] == ['Grace']
        assert [p['firstName'] for p in services.patients.search_patients('0799')] == ['Grace']

    def test_search_ignores_phone_separators(self, services):
        services.patients.register_patient(patient_payload(contactNumber='071-234-5678'))

        assert [p['firstName'] for p in services.patients.search_patients('0712345678')] == ['Ada']
        assert [p['firstName'] for p in services.patients.search_patients('071 234')] == ['Ada']

    @pytest.mark.parametrize('field,value', [
        ('firstName', 42),
        ('lastName', ['Lovelace']),
        ('email', 123),
        ('contactNumber', 712345678),
    ])
    def test_update_rejects_non_text_values(self, services, patient, field, value):
        with pytest.raises(ValidationError):
            services.patients.update_patient(patient['id'], {field: value})

    def test_search_term_too_short(self, services):
        with pytest.raises(ValidationError):
            services.patients.search_patients('a')

    def test_get_all_patients_with_limit(self, services, patient):
        services.patients.register_patient(patient_payload(email='second@example.com'))
        assert len(services.patients.get_all_patients()) == 2
        assert len(services.patients.get_all_patients(limit=1)) == 1
