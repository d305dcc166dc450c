import pytest
from rest_framework.test import APIClient

from records.models import User, DoctorProfile, PatientProfile, MedicalReport, Prescription
from records.services.accounts import issue_token

PASSWORD = 'Str0ng!Pass#2024'


@pytest.fixture(autouse=True)
def fast_hasher(settings):
    settings.PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']


@pytest.fixture
def api_client():
    return APIClient()


def bearer(user: User) -> APIClient:
    """Return an APIClient carrying a real bearer token for ``user``."""
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {issue_token(user)}')
    return client


def make_account(email, role, *, first_name='Test', last_name='User', password=PASSWORD, **extra):
    return User.objects.create_user(
        email=email, password=password, role=role, first_name=first_name, last_name=last_name, **extra,
    )


def make_doctor(email='dr.smith@hospital.test', *, first_name='John', last_name='Smith',
                license_number='LIC-1001', specialization='Cardiology', department='Cardiology') -> DoctorProfile:
    user = make_account(email, 'doctor', first_name=first_name, last_name=last_name)
    return DoctorProfile.objects.create(
        user=user, specialization=specialization, license_number=license_number, department=department,
    )


def make_patient(email, *, first_name='Pat', last_name='Ient') -> PatientProfile:
    user = make_account(email, 'patient', first_name=first_name, last_name=last_name)
    return PatientProfile.objects.create(user=user)


def make_report(doctor, patient, **extra) -> MedicalReport:
    fields = dict(report_type='consultation', title='Checkup', description='Routine visit',
                  treatment_plan='Rest and fluids')
    fields.update(extra)
    return MedicalReport.objects.create(doctor=doctor, patient=patient, **fields)


def make_prescription(doctor, patient, **extra) -> Prescription:
    fields = dict(
        medications=[{'name': 'Amoxicillin', 'dosage': '500mg', 'frequency': 'tid', 'duration': '7 days'}],
        diagnosis='Sinusitis',
    )
    fields.update(extra)
    return Prescription.objects.create(doctor=doctor, patient=patient, **fields)


@pytest.fixture
def admin_user(db):
    return make_account('admin@hospital.test', 'admin', first_name='Ada', last_name='Admin')


@pytest.fixture
def doctor(db):
    return make_doctor()


@pytest.fixture
def other_doctor(db):
    return make_doctor('dr.jones@hospital.test', first_name='Emma', last_name='Jones',
                       license_number='LIC-2002', specialization='Neurology', department='Neurology')


@pytest.fixture
def patient(db):
    return make_patient('alice@example.test', first_name='Alice', last_name='Walker')


@pytest.fixture
def other_patient(db):
    return make_patient('bob@example.test', first_name='Bob', last_name='Brown')
