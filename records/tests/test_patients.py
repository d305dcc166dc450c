import pytest
from django.urls import reverse

from records.tests.conftest import bearer, make_report, make_prescription

pytestmark = pytest.mark.django_db


def test_patient_list_requires_doctor_or_admin(doctor, patient):
    r = bearer(doctor.user).get(reverse('patient-list'))
    assert r.status_code == 200
    assert r.data['data']['patients'][0]['patientId'] == patient.patient_id
    assert r.data['data']['patients'][0]['user']['email'] == 'alice@example.test'

    r = bearer(patient.user).get(reverse('patient-list'))
    assert r.status_code == 403
    assert r.data['success'] is False


def test_patient_search_matches_name_and_email(doctor, patient, other_patient):
    client = bearer(doctor.user)
    by_name = client.get(reverse('patient-search'), {'query': 'WALK'})
    assert [p['id'] for p in by_name.data['data']['patients']] == [patient.id]

    by_email = client.get(reverse('patient-search'), {'query': 'bob@'})
    assert [p['id'] for p in by_email.data['data']['patients']] == [other_patient.id]


def test_patient_search_requires_query(doctor):
    r = bearer(doctor.user).get(reverse('patient-search'), {'query': '   '})
    assert r.status_code == 400
    assert r.data['message'] == 'Search query is required'


def test_patient_detail(admin_user, patient):
    r = bearer(admin_user).get(reverse('patient-detail', args=[patient.id]))
    assert r.status_code == 200
    assert r.data['data']['patientId'] == patient.patient_id
    assert r.data['data']['primaryDoctor'] is None

    r = bearer(admin_user).get(reverse('patient-detail', args=[9999]))
    assert r.status_code == 404
    assert r.data['message'] == 'Patient not found'


def test_patient_history_and_prescriptions(doctor, other_doctor, patient, other_patient):
    make_report(doctor, patient, title='First')
    make_report(other_doctor, patient, title='Second')
    make_report(doctor, other_patient, title='Not hers')
    make_prescription(doctor, patient)

    client = bearer(doctor.user)
    r = client.get(reverse('patient-history', args=[patient.id]))
    assert r.status_code == 200
    assert [rep['title'] for rep in r.data['data']['reports']] == ['Second', 'First']
    assert r.data['data']['reports'][0]['doctor']['user']['lastName'] == 'Jones'
    assert r.data['data']['pagination']['totalCount'] == 2

    r = client.get(reverse('patient-prescriptions', args=[patient.id]))
    assert [rx['prescriptionId'] for rx in r.data['data']['prescriptions']] == ['RX00000001']


def test_patient_history_unknown_patient(doctor):
    r = bearer(doctor.user).get(reverse('patient-history', args=[4242]))
    assert r.status_code == 404
