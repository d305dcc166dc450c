import pytest
from rest_framework.exceptions import PermissionDenied

from records.models import User
from records.services.access import can_access, ensure_access, READ, UPDATE, CREATE
from records.tests.conftest import make_account, make_report, make_prescription

pytestmark = pytest.mark.django_db


def test_doctor_reads_only_reports_they_issued(doctor, other_doctor, patient):
    report = make_report(other_doctor, patient)
    assert can_access(other_doctor.user, READ, report)
    assert not can_access(doctor.user, READ, report)


def test_doctor_creates_only_in_own_name(doctor, other_doctor, patient):
    mine = make_report(doctor, patient)
    assert can_access(doctor.user, CREATE, mine)
    theirs = make_report(other_doctor, patient)
    assert not can_access(doctor.user, CREATE, theirs)


def test_patient_reads_only_own_prescriptions(doctor, patient, other_patient):
    rx = make_prescription(doctor, patient)
    assert can_access(patient.user, READ, rx)
    assert not can_access(other_patient.user, READ, rx)


def test_patient_reads_own_profile_only(patient, other_patient):
    assert can_access(patient.user, READ, patient)
    assert not can_access(patient.user, READ, other_patient)
    assert not can_access(patient.user, UPDATE, patient)


def test_admin_reads_everything_but_never_writes_clinical_records(admin_user, doctor, patient):
    report = make_report(doctor, patient)
    assert can_access(admin_user, READ, report)
    assert can_access(admin_user, UPDATE, doctor)
    assert not can_access(admin_user, CREATE, report)
    assert not can_access(admin_user, UPDATE, report)


def test_doctor_reads_profiles_but_cannot_update_them(doctor, other_doctor, patient):
    assert can_access(doctor.user, READ, other_doctor)
    assert can_access(doctor.user, READ, patient)
    assert not can_access(doctor.user, UPDATE, other_doctor)


def test_doctor_without_profile_is_denied(patient):
    orphan = make_account('orphan@hospital.test', 'doctor')
    assert not can_access(orphan, READ, patient)


def test_inactive_and_anonymous_actors_are_denied(doctor, patient):
    report = make_report(doctor, patient)
    doctor.user.is_active = False
    assert not can_access(doctor.user, READ, report)
    assert not can_access(None, READ, report)


def test_ensure_access_raises_permission_denied(doctor, other_doctor, patient):
    report = make_report(other_doctor, patient)
    with pytest.raises(PermissionDenied):
        ensure_access(doctor.user, READ, report)
    assert ensure_access(other_doctor.user, READ, report) is None


def test_unknown_role_is_denied(patient):
    user = User(email='x@example.test', role='visitor', is_active=True)
    assert not can_access(user, READ, patient)
