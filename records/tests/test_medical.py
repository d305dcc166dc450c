from datetime import timedelta

import pytest
from django.urls import reverse
from django.utils import timezone

from records.models import AuditEvent, MedicalReport, Prescription
from records.tests.conftest import bearer, make_patient, make_report

pytestmark = pytest.mark.django_db


def report_payload(patient_ref, **overrides):
    data = {
        'patient': patient_ref,
        'reportType': 'consultation',
        'title': 'Chest pain follow-up',
        'description': 'Patient reports intermittent chest pain.',
        'diagnosis': {'primary': 'Stable angina', 'codes': ['I20.8']},
        'symptoms': ['chest pain'],
        'vitalSigns': {'bloodPressure': '130/85', 'heartRate': 78},
        'treatmentPlan': 'Beta blockers, review in 4 weeks.',
    }
    data.update(overrides)
    return data


def rx_payload(patient_ref, **overrides):
    data = {
        'patient': patient_ref,
        'medications': [{'name': 'Metoprolol', 'dosage': '50mg', 'frequency': 'daily', 'duration': '30 days'}],
        'diagnosis': 'Stable angina',
    }
    data.update(overrides)
    return data


@pytest.fixture
def eight_patients(db):
    return [make_patient(f'patient{i}@example.test', last_name=f'Number{i}') for i in range(1, 9)]


def test_report_scenario_ownership(doctor, eight_patients):
    """dr.smith reports on PAT000007, who can read it; PAT000008 cannot."""
    p7, p8 = eight_patients[6], eight_patients[7]
    assert (p7.patient_id, p8.patient_id) == ('PAT000007', 'PAT000008')

    r = bearer(doctor.user).post(reverse('report-create'), report_payload('PAT000007'), format='json')
    assert r.status_code == 201
    report_id = r.data['data']['id']
    assert r.data['data']['patient']['patientId'] == 'PAT000007'
    assert r.data['data']['doctor']['user']['lastName'] == 'Smith'

    mine = bearer(p7.user).get(reverse('my-reports'))
    assert [rep['id'] for rep in mine.data['data']['reports']] == [report_id]

    assert bearer(p7.user).get(reverse('report-detail', args=[report_id])).status_code == 200
    r = bearer(p8.user).get(reverse('report-detail', args=[report_id]))
    assert r.status_code == 403
    assert r.data == {'success': False, 'message': 'Access denied', 'error': 'permission_denied'}
    assert bearer(p8.user).get(reverse('my-reports')).data['data']['reports'] == []


def test_report_is_issued_in_callers_name(doctor, other_doctor, patient):
    r = bearer(doctor.user).post(reverse('report-create'),
                                 report_payload(str(patient.id), doctor=other_doctor.id), format='json')
    assert r.status_code == 201
    report = MedicalReport.objects.get(pk=r.data['data']['id'])
    assert report.doctor_id == doctor.id
    assert AuditEvent.objects.filter(action='report_create', object_id=report.id).exists()


def test_only_doctors_create_reports(admin_user, patient):
    assert bearer(admin_user).post(reverse('report-create'), report_payload(patient.patient_id),
                                   format='json').status_code == 403
    assert bearer(patient.user).post(reverse('report-create'), report_payload(patient.patient_id),
                                     format='json').status_code == 403


def test_report_for_unknown_patient(doctor):
    r = bearer(doctor.user).post(reverse('report-create'), report_payload('PAT999999'), format='json')
    assert r.status_code == 404
    assert r.data['message'] == 'Patient not found'


def test_report_validation_errors(doctor, patient):
    r = bearer(doctor.user).post(reverse('report-create'),
                                 report_payload(patient.patient_id, reportType='gossip'), format='json')
    assert r.status_code == 400
    assert 'reportType' in r.data['error']
    assert not MedicalReport.objects.exists()


def test_doctor_cannot_read_another_doctors_report(doctor, other_doctor, patient, admin_user):
    report = make_report(other_doctor, patient)
    assert bearer(doctor.user).get(reverse('report-detail', args=[report.id])).status_code == 403
    assert bearer(other_doctor.user).get(reverse('report-detail', args=[report.id])).status_code == 200
    assert bearer(admin_user).get(reverse('report-detail', args=[report.id])).status_code == 200


def test_missing_report_is_404(admin_user):
    r = bearer(admin_user).get(reverse('report-detail', args=[123]))
    assert r.status_code == 404
    assert r.data['message'] == 'Medical report not found'


def test_prescription_create_and_read(doctor, patient, other_patient):
    r = bearer(doctor.user).post(reverse('prescription-create'), rx_payload(patient.patient_id), format='json')
    assert r.status_code == 201
    data = r.data['data']
    assert data['prescriptionId'] == 'RX00000001'
    assert data['status'] == 'active'
    assert data['validUntil']

    rx_id = data['id']
    assert bearer(patient.user).get(reverse('prescription-detail', args=[rx_id])).status_code == 200
    assert bearer(other_patient.user).get(reverse('prescription-detail', args=[rx_id])).status_code == 403

    mine = bearer(patient.user).get(reverse('my-prescriptions'))
    assert [rx['prescriptionId'] for rx in mine.data['data']['prescriptions']] == ['RX00000001']


def test_prescription_requires_medications(doctor, patient):
    r = bearer(doctor.user).post(reverse('prescription-create'),
                                 rx_payload(patient.patient_id, medications=[]), format='json')
    assert r.status_code == 400
    assert not Prescription.objects.exists()


def test_prescription_valid_until_must_be_in_future(doctor, patient):
    past = (timezone.now() - timedelta(days=1)).isoformat()
    r = bearer(doctor.user).post(reverse('prescription-create'),
                                 rx_payload(patient.patient_id, validUntil=past), format='json')
    assert r.status_code == 400
    assert r.data['message'] == 'validUntil must be in the future'


def test_prescription_report_must_belong_to_patient(doctor, patient, other_patient):
    report = make_report(doctor, other_patient)
    r = bearer(doctor.user).post(reverse('prescription-create'),
                                 rx_payload(patient.patient_id, medicalReport=report.id), format='json')
    assert r.status_code == 400
    assert not Prescription.objects.exists()

    own = make_report(doctor, patient)
    r = bearer(doctor.user).post(reverse('prescription-create'),
                                 rx_payload(patient.patient_id, medicalReport=own.id), format='json')
    assert r.status_code == 201
    assert r.data['data']['medicalReport'] == own.id


def test_my_records_are_patient_only(doctor):
    assert bearer(doctor.user).get(reverse('my-reports')).status_code == 403
    assert bearer(doctor.user).get(reverse('my-prescriptions')).status_code == 403
