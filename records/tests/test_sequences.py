import threading
from datetime import timedelta

import pytest
from django.core.exceptions import ValidationError
from django.db import connection, connections, transaction

from records.models import IdentifierSequence, PatientProfile, PRESCRIPTION_VALIDITY
from records.tests.conftest import make_account, make_patient, make_report, make_prescription

pytestmark = pytest.mark.django_db


def test_patient_ids_are_sequential_without_gaps():
    ids = [make_patient(f'p{i}@example.test').patient_id for i in range(1, 6)]
    assert ids == ['PAT000001', 'PAT000002', 'PAT000003', 'PAT000004', 'PAT000005']


def test_patient_id_is_stable_across_saves(patient):
    original = patient.patient_id
    patient.blood_group = 'A+'
    patient.save()
    patient.refresh_from_db()
    assert patient.patient_id == original


def test_rolled_back_creation_does_not_consume_a_number():
    first = make_account('first@example.test', 'patient')
    second = make_account('second@example.test', 'patient')
    with pytest.raises(RuntimeError):
        with transaction.atomic():
            PatientProfile.objects.create(user=first)
            raise RuntimeError('abort')
    assert PatientProfile.objects.create(user=second).patient_id == 'PAT000001'


def test_prescription_ids_use_their_own_sequence(doctor, patient):
    first = make_prescription(doctor, patient)
    second = make_prescription(doctor, patient)
    assert (first.prescription_id, second.prescription_id) == ('RX00000001', 'RX00000002')
    assert IdentifierSequence.objects.get(name='prescription').value == 2
    assert IdentifierSequence.objects.get(name='patient').value == 1


def test_prescription_valid_until_defaults_to_thirty_days(doctor, patient):
    rx = make_prescription(doctor, patient)
    assert abs((rx.valid_until - rx.created_at) - PRESCRIPTION_VALIDITY) < timedelta(seconds=5)


def test_issue_formats_with_requested_width():
    assert IdentifierSequence.issue('scratch', prefix='X', width=3) == 'X001'
    assert IdentifierSequence.issue('scratch', prefix='X', width=3) == 'X002'


def test_clinical_record_refs_are_immutable(doctor, other_doctor, patient):
    report = make_report(doctor, patient)
    report.refresh_from_db()
    report.title = 'Updated title'
    report.save()

    loaded = type(report).objects.get(pk=report.pk)
    loaded.doctor = other_doctor
    with pytest.raises(ValidationError):
        loaded.save()


@pytest.mark.django_db(transaction=True)
def test_concurrent_issue_hands_out_distinct_numbers():
    if not connection.features.has_select_for_update:
        pytest.skip('backend does not support row locks')
    IdentifierSequence.objects.create(name='concurrent')
    workers, per_worker = 4, 10
    issued, errors = [], []
    barrier = threading.Barrier(workers)

    def worker():
        try:
            barrier.wait()
            for _ in range(per_worker):
                issued.append(IdentifierSequence.issue('concurrent', prefix='C', width=4))
        except Exception as e:  # surfaced by the assertion below
            errors.append(e)
        finally:
            connections.close_all()

    threads = [threading.Thread(target=worker) for _ in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert sorted(issued) == [f'C{n:04d}' for n in range(1, workers * per_worker + 1)]
