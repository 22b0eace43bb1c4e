"""
HTTP-level tests: response envelope, status-code mapping and the end-to-end
booking, billing and insurance flows.
"""
import pytest

from carepoint.models.staff_models import StaffRole
from tests.conftest import patient_payload

PASSWORD = 'Str0ng!Passw0rd'


def book(client, patient_id, **overrides):
    body = {'patientId': patient_id, 'doctorId': 'D1', 'appointmentDate': '2025-06-01', 'timeSlot': '09:00-09:30'}
    body.update(overrides)
    return client.post('/api/appointments', json=body)


@pytest.fixture
def patient_id(client):
    response = client.post('/api/patients', json=patient_payload())
    return response.get_json()['data']['id']


def test_health(client):
    response = client.get('/api/health')
    assert response.status_code == 200
    assert response.get_json() == {'success': True, 'data': {'status': 'ok'}}


def test_unknown_route_uses_envelope(client):
    response = client.get('/api/does-not-exist')
    assert response.status_code == 404
    assert response.get_json()['success'] is False


def test_wrong_method(client):
    response = client.delete('/api/health')
    assert response.status_code == 405
    assert response.get_json()['success'] is False


class TestPatientsApi:
    def test_register_then_duplicate_email(self, client):
        first = client.post('/api/patients', json=patient_payload(email='a@x.com'))
        assert first.status_code == 201
        assert first.get_json()['success'] is True
        patient = first.get_json()['data']

        record = client.get(f"/api/patients/{patient['id']}/health-record")
        assert record.status_code == 200
        assert record.get_json()['data']['patientId'] == patient['id']

        second = client.post('/api/patients', json=patient_payload(email='a@x.com'))
        assert second.status_code == 400
        assert second.get_json() == {'success': False, 'error': 'Patient with this email already exists'}

    @pytest.mark.parametrize('field,value', [
        ('firstName', 42),
        ('email', 123),
        ('contactNumber', 712345678),
    ])
    def test_non_text_fields_are_bad_requests(self, client, field, value):
        response = client.post('/api/patients', json=patient_payload(**{field: value}))
        assert response.status_code == 400
        assert response.get_json()['success'] is False

    def test_update_with_non_text_name(self, client, patient_id):
        response = client.put(f'/api/patients/{patient_id}', json={'firstName': 42})
        assert response.status_code == 400

    def test_list_and_search(self, client, patient_id):
        assert len(client.get('/api/patients').get_json()['data']) == 1
        assert client.get('/api/patients?limit=1').status_code == 200
        found = client.get('/api/patients?search=ada').get_json()['data']
        assert [p['id'] for p in found] == [patient_id]
        assert client.get('/api/patients?search=a').status_code == 400

    def test_get_update_delete(self, client, patient_id):
        response = client.put(f'/api/patients/{patient_id}', json={'address': 'Elsewhere'})
        assert response.get_json()['data']['address'] == 'Elsewhere'

        assert client.delete(f'/api/patients/{patient_id}').status_code == 200
        assert client.get(f'/api/patients/{patient_id}').status_code == 404

    def test_health_record_workflow(self, client, patient_id):
        base = f'/api/patients/{patient_id}/health-record'

        assert client.put(base, json={'bloodType': 'O+'}).get_json()['data']['bloodType'] == 'O+'
        assert client.put(base, json={'bloodType': 'Z'}).status_code == 400

        created = client.post(f'{base}/encounters', json={'doctorId': 'D1', 'diagnosis': 'Flu'})
        assert created.status_code == 201
        encounter_id = created.get_json()['data']['encounters'][0]['encounterId']

        updated = client.put(f'{base}/encounters/{encounter_id}',
                             json={'medicalNotes': 'Better', 'labResults': [{'test': 'CBC'}]})
        encounter = updated.get_json()['data']['encounters'][0]
        assert encounter['medicalNotes'] == 'Better'
        assert encounter['labResults'] == [{'test': 'CBC'}]
        assert client.put(f'{base}/encounters/{encounter_id}', json={}).status_code == 400
        assert client.put(f'{base}/encounters/nope', json={'medicalNotes': 'x'}).status_code == 404

        med = client.post(f'{base}/medications', json={'name': 'Ibuprofen'})
        assert med.status_code == 201
        medication_id = med.get_json()['data']['medications'][0]['medicationId']
        stopped = client.post(f'{base}/medications/{medication_id}/discontinue')
        assert stopped.get_json()['data']['medications'][0]['active'] is False


class TestAppointmentsApi:
    def test_booking_scenario(self, client, patient_id):
        first = book(client, patient_id)
        assert first.status_code == 201
        appointment_id = first.get_json()['data']['id']

        second = book(client, patient_id)
        assert second.status_code == 409
        assert second.get_json()['success'] is False

        slots = client.get('/api/appointments/available-slots?doctorId=D1&date=2025-06-01').get_json()['data']
        assert '09:00-09:30' not in slots

        assert client.delete(f'/api/appointments/{appointment_id}').status_code == 200

        slots = client.get('/api/appointments/available-slots?doctorId=D1&date=2025-06-01').get_json()['data']
        assert '09:00-09:30' in slots

    def test_available_slots_missing_params(self, client):
        assert client.get('/api/appointments/available-slots?doctorId=D1').status_code == 400
        assert client.get('/api/appointments/available-slots?date=2025-06-01').status_code == 400

    def test_booking_validation(self, client, patient_id):
        assert book(client, patient_id, timeSlot='').status_code == 400

    def test_check_in_mapping(self, client, patient_id):
        appointment_id = book(client, patient_id).get_json()['data']['id']

        assert client.post('/api/appointments/missing/check-in').status_code == 404
        assert client.post(f'/api/appointments/{appointment_id}/check-in').status_code == 200
        assert client.post(f'/api/appointments/{appointment_id}/check-in').status_code == 400

    def test_body_driven_update(self, client, patient_id):
        appointment_id = book(client, patient_id).get_json()['data']['id']
        other_id = book(client, patient_id, timeSlot='10:00-10:30').get_json()['data']['id']
        url = f'/api/appointments/{appointment_id}'

        moved = client.put(url, json={'appointmentDate': '2025-06-02', 'timeSlot': '11:00-11:30'})
        assert moved.status_code == 200
        assert moved.get_json()['data']['appointmentDate'] == '2025-06-02'

        conflict = client.put(f'/api/appointments/{other_id}',
                              json={'appointmentDate': '2025-06-02', 'timeSlot': '11:00-11:30'})
        assert conflict.status_code == 409

        assert client.post(f'{url}/confirm').get_json()['data']['status'] == 'Confirmed'
        assert client.put(url, json={'status': 'Completed'}).status_code == 400
        assert client.put(url, json={'status': 'CheckedIn'}).status_code == 200
        assert client.put(url, json={'status': 'Completed'}).get_json()['data']['status'] == 'Completed'
        assert client.put(url, json={'status': 'Cancelled'}).status_code == 400
        assert client.put('/api/appointments/missing', json={'notes': 'x'}).status_code == 404

    def test_listing_filters(self, client, patient_id):
        book(client, patient_id)
        book(client, patient_id, doctorId='D2')

        assert len(client.get('/api/appointments').get_json()['data']) == 2
        assert len(client.get(f'/api/appointments?patientId={patient_id}').get_json()['data']) == 2
        assert len(client.get('/api/appointments?doctorId=D2').get_json()['data']) == 1
        assert len(client.get('/api/appointments?status=Cancelled').get_json()['data']) == 0


class TestBillingApi:
    @pytest.fixture
    def payment_id(self, client, patient_id):
        appointment_id = book(client, patient_id).get_json()['data']['id']
        response = client.post('/api/billing', json={
            'appointmentId': appointment_id, 'patientId': patient_id, 'amount': 300,
        })
        assert response.status_code == 201
        return response.get_json()['data']['id']

    def test_bill_without_insurance(self, client, payment_id):
        payment = client.get(f'/api/billing/{payment_id}').get_json()['data']
        assert payment['insuranceCoverage'] == 0
        assert payment['patientPortion'] == 300.0

    def test_bill_with_insurance(self, client, patient_id):
        client.post('/api/insurance/policies', json={
            'patientId': patient_id, 'policyNumber': 'P-9', 'provider': 'Acme',
            'coveragePercentage': 80, 'maxCoverage': 1000, 'endDate': '2099-01-01',
        })
        appointment_id = book(client, patient_id).get_json()['data']['id']

        payment = client.post('/api/billing', json={
            'appointmentId': appointment_id, 'patientId': patient_id, 'amount': 100,
        }).get_json()['data']

        assert payment['insuranceCoverage'] == 80.0
        assert payment['patientPortion'] == 20.0

    def test_process_payment(self, client, payment_id):
        paid = client.post('/api/billing/process-payment', json={'paymentId': payment_id, 'paymentMethod': 'Card'})
        assert paid.status_code == 200
        assert paid.get_json()['data']['status'] == 'Completed'

        again = client.post('/api/billing/process-payment', json={'paymentId': payment_id, 'paymentMethod': 'Cash'})
        assert again.status_code == 400

    def test_process_payment_errors(self, client):
        assert client.post('/api/billing/process-payment', json={}).status_code == 400
        missing = client.post('/api/billing/process-payment', json={'paymentId': 'nope', 'paymentMethod': 'Cash'})
        assert missing.status_code == 404

    def test_declined_payment(self, client, payment_id, payment_gateway):
        payment_gateway.approve = False

        response = client.post('/api/billing/process-payment', json={'paymentId': payment_id, 'paymentMethod': 'Card'})

        body = response.get_json()
        assert response.status_code == 400
        assert body['error'] == 'Payment declined - Insufficient funds or invalid card'
        assert body['details']['payment']['status'] == 'Failed'

    def test_duplicate_bill_conflicts(self, client, payment_id):
        payment = client.get(f'/api/billing/{payment_id}').get_json()['data']
        response = client.post('/api/billing', json={
            'appointmentId': payment['appointmentId'], 'patientId': payment['patientId'], 'amount': 10,
        })
        assert response.status_code == 409

    def test_list_payments(self, client, payment_id, patient_id):
        assert len(client.get('/api/billing').get_json()['data']) == 1
        assert len(client.get(f'/api/billing?patientId={patient_id}').get_json()['data']) == 1


class TestInsuranceApi:
    def test_eligibility_without_policy(self, client, patient_id):
        response = client.post('/api/insurance/eligibility', json={'patientId': patient_id, 'amount': 100})
        assert response.status_code == 404
        assert response.get_json()['error'] == 'No active insurance policy found'

    def test_policy_eligibility_and_claim(self, client, patient_id):
        policy = client.post('/api/insurance/policies', json={
            'patientId': patient_id, 'policyNumber': 'P-1', 'provider': 'Acme',
            'coveragePercentage': 50, 'maxCoverage': 1000, 'endDate': '2099-01-01',
        }).get_json()['data']
        assert len(client.get(f'/api/insurance/policies?patientId={patient_id}').get_json()['data']) == 1

        eligibility = client.post('/api/insurance/eligibility', json={'patientId': patient_id, 'amount': 100})
        assert eligibility.get_json()['data']['eligible'] is True

        appointment_id = book(client, patient_id).get_json()['data']['id']
        payment_id = client.post('/api/billing', json={
            'appointmentId': appointment_id, 'patientId': patient_id, 'amount': 100,
        }).get_json()['data']['id']

        claim = client.post('/api/insurance/claims', json={
            'policyId': policy['id'], 'paymentId': payment_id, 'claimAmount': 80,
        })
        assert claim.status_code == 201
        claim_id = claim.get_json()['data']['id']
        assert client.get(f'/api/insurance/claims/{claim_id}').get_json()['data']['status'] == 'Approved'

        duplicate = client.post('/api/insurance/claims', json={
            'policyId': policy['id'], 'paymentId': payment_id, 'claimAmount': 80,
        })
        assert duplicate.status_code == 409


class TestMockProviders:
    def test_insurance_provider(self, client, insurance_provider):
        body = {'policyNumber': 'P-1', 'patientId': 'X', 'amount': 100}
        ok = client.post('/api/mock/insurance-provider', json=body)
        assert ok.status_code == 200
        assert ok.get_json()['data']['approvedAmount'] == 80.0

        insurance_provider.eligible = False
        denied = client.post('/api/mock/insurance-provider', json=body)
        assert denied.status_code == 400
        assert denied.get_json()['details']['errorCode'] == 'POLICY_INACTIVE'

        assert client.post('/api/mock/insurance-provider', json={'patientId': 'X'}).status_code == 400

    def test_payment_gateway(self, client, payment_gateway):
        body = {'amount': 50, 'cardNumber': '4111111111111111', 'cvv': '123'}
        ok = client.post('/api/mock/payment-gateway', json=body)
        assert ok.status_code == 200
        assert ok.get_json()['data']['transactionId'].startswith('TXN')

        payment_gateway.approve = False
        declined = client.post('/api/mock/payment-gateway', json=body)
        assert declined.status_code == 400
        assert declined.get_json()['details']['errorCode'] == 'PAYMENT_DECLINED'

        assert client.post('/api/mock/payment-gateway', json={'amount': 'x'}).status_code == 400


class TestReportsApi:
    def test_patient_flow_and_export(self, client, patient_id):
        book(client, patient_id)
        report = client.get('/api/reports/patient-flow?startDate=2025-06-01&endDate=2025-06-30')
        assert report.status_code == 200
        data = report.get_json()['data']
        assert data['totalAppointments'] == 1

        exported = client.post('/api/reports/export', json={'reportData': data, 'format': 'CSV'})
        assert exported.status_code == 200
        assert exported.get_json()['data']['path'].endswith('.csv')

        bad = client.post('/api/reports/export', json={'reportData': data, 'format': 'DOCX'})
        assert bad.status_code == 400

    def test_revenue_requires_dates(self, client):
        assert client.get('/api/reports/revenue').status_code == 400


class TestDirectoryApi:
    def test_hospitals_and_departments(self, client):
        hospital = client.post('/api/hospitals', json={'name': 'General', 'type': 'Public'})
        assert hospital.status_code == 201
        hospital_id = hospital.get_json()['data']['id']

        assert client.post('/api/departments', json={'name': 'ER', 'hospitalId': hospital_id}).status_code == 201
        assert client.post('/api/departments', json={'name': 'ER', 'hospitalId': 'nope'}).status_code == 404
        assert client.post('/api/hospitals', json={'name': 'X', 'type': 'Floating'}).status_code == 400

        departments = client.get(f'/api/departments?hospitalId={hospital_id}').get_json()['data']
        assert [d['name'] for d in departments] == ['ER']
        assert len(client.get('/api/hospitals').get_json()['data']) == 1

    def test_doctors(self, client, services):
        services.auth.register_staff({
            'email': 'doc@carepoint.test', 'password': PASSWORD, 'firstName': 'G', 'lastName': 'House',
            'role': StaffRole.DOCTOR,
        })
        doctors = client.get('/api/staff/doctors').get_json()['data']
        assert [d['email'] for d in doctors] == ['doc@carepoint.test']
        assert 'passwordHash' not in doctors[0]
        assert client.get(f"/api/staff/{doctors[0]['id']}").status_code == 200
        assert client.get('/api/staff/missing').status_code == 404


class TestAuthApi:
    @pytest.fixture
    def secured(self, app):
        app.config['API_AUTH_REQUIRED'] = True
        return app

    @pytest.fixture
    def manager(self, services):
        return services.auth.register_staff({
            'email': 'boss@carepoint.test', 'password': PASSWORD, 'firstName': 'Lisa', 'lastName': 'Cuddy',
            'role': StaffRole.MANAGER,
        })

    def login(self, client, email):
        response = client.post('/api/auth/login', json={'email': email, 'password': PASSWORD})
        assert response.status_code == 200
        return response.get_json()['data']

    def test_login_failure(self, client, manager):
        response = client.post('/api/auth/login', json={'email': 'boss@carepoint.test', 'password': 'nope'})
        assert response.status_code == 401
        assert response.get_json()['success'] is False

    def test_token_required_when_enabled(self, secured, client):
        response = client.get('/api/patients')
        assert response.status_code == 401
        assert response.get_json()['success'] is False

    def test_role_enforcement(self, secured, client, manager):
        tokens = self.login(client, 'boss@carepoint.test')
        headers = {'Authorization': f"Bearer {tokens['accessToken']}"}

        created = client.post('/api/auth/register', headers=headers, json={
            'email': 'cashier@carepoint.test', 'password': PASSWORD, 'firstName': 'Pay', 'lastName': 'Master',
            'role': StaffRole.PAYMENTS_OFFICER,
        })
        assert created.status_code == 201

        cashier = self.login(client, 'cashier@carepoint.test')
        cashier_headers = {'Authorization': f"Bearer {cashier['accessToken']}"}
        assert client.get('/api/billing', headers=cashier_headers).status_code == 200
        assert client.get('/api/patients', headers=cashier_headers).status_code == 403
        assert client.get('/api/patients', headers=headers).status_code == 200

    def test_logout_revokes_token(self, secured, client, manager):
        tokens = self.login(client, 'boss@carepoint.test')
        headers = {'Authorization': f"Bearer {tokens['accessToken']}"}

        assert client.post('/api/auth/logout', headers=headers).status_code == 200
        assert client.get('/api/patients', headers=headers).status_code == 401

    def test_refresh(self, client, manager):
        tokens = self.login(client, 'boss@carepoint.test')
        response = client.post('/api/auth/refresh', headers={'Authorization': f"Bearer {tokens['refreshToken']}"})
        assert response.status_code == 200
        assert response.get_json()['data']['accessToken']
