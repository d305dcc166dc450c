import pytest
from django.urls import reverse
from rest_framework_simplejwt.tokens import AccessToken

from records.models import User, DoctorProfile, PatientProfile
from records.tests.conftest import PASSWORD, bearer, make_account

pytestmark = pytest.mark.django_db


def register_payload(**overrides):
    data = {
        'email': 'New.Patient@Example.test',
        'password': PASSWORD,
        'firstName': 'New',
        'lastName': 'Patient',
        'role': 'patient',
    }
    data.update(overrides)
    return data


def test_register_patient_creates_profile_and_token(api_client):
    r = api_client.post(reverse('auth-register'), register_payload(bloodGroup='O+'), format='json')
    assert r.status_code == 201
    assert r.data['success'] is True
    user = r.data['data']['user']
    assert user['email'] == 'new.patient@example.test'
    assert user['role'] == 'patient'
    assert 'password' not in user
    assert r.data['data']['token']

    profile = PatientProfile.objects.get(user__email='new.patient@example.test')
    assert profile.patient_id == 'PAT000001'
    assert profile.blood_group == 'O+'


def test_register_duplicate_email_is_rejected_case_insensitively(api_client):
    make_account('taken@example.test', 'patient')
    r = api_client.post(reverse('auth-register'), register_payload(email='TAKEN@example.test'), format='json')
    assert r.status_code == 400
    assert r.data['success'] is False
    assert r.data['message'] == 'User with this email already exists'
    assert User.objects.filter(email__iexact='taken@example.test').count() == 1


@pytest.mark.parametrize('missing', ['specialization', 'licenseNumber', 'department'])
def test_doctor_registration_requires_professional_fields(api_client, missing):
    payload = register_payload(
        email='doc@example.test', role='doctor',
        specialization='Cardiology', licenseNumber='LIC-9', department='Cardiology',
    )
    payload.pop(missing)
    r = api_client.post(reverse('auth-register'), payload, format='json')
    assert r.status_code == 400
    assert r.data['message'] == 'Specialization, license number, and department are required for doctors'
    assert not User.objects.filter(email='doc@example.test').exists()
    assert not DoctorProfile.objects.exists()


def test_doctor_registration_creates_doctor_profile(api_client):
    payload = register_payload(
        email='doc@example.test', role='doctor',
        specialization='Cardiology', licenseNumber='LIC-9', department='Cardiology', yearsOfExperience=4,
    )
    r = api_client.post(reverse('auth-register'), payload, format='json')
    assert r.status_code == 201
    doctor = DoctorProfile.objects.get(user__email='doc@example.test')
    assert doctor.license_number == 'LIC-9'
    assert doctor.years_of_experience == 4


def test_register_rejects_weak_password(api_client):
    r = api_client.post(reverse('auth-register'), register_payload(password='12345678'), format='json')
    assert r.status_code == 400
    assert 'password' in r.data['error']
    assert not User.objects.exists()


def test_register_respects_allowed_roles(api_client, settings):
    settings.REGISTRATION_ALLOWED_ROLES = ['patient']
    r = api_client.post(reverse('auth-register'), register_payload(role='admin'), format='json')
    assert r.status_code == 400
    assert 'role' in r.data['error']


def test_login_succeeds_with_case_insensitive_email(api_client, patient):
    r = api_client.post(reverse('auth-login'), {'email': 'ALICE@example.test', 'password': PASSWORD}, format='json')
    assert r.status_code == 200
    assert r.data['data']['user']['id'] == patient.user.id
    token = AccessToken(r.data['data']['token'])
    assert token['user_id'] in (patient.user.id, str(patient.user.id))


def test_wrong_password_and_unknown_email_are_indistinguishable(api_client, patient):
    wrong = api_client.post(reverse('auth-login'), {'email': 'alice@example.test', 'password': 'nope-nope'},
                            format='json')
    unknown = api_client.post(reverse('auth-login'), {'email': 'ghost@example.test', 'password': 'nope-nope'},
                              format='json')
    assert wrong.status_code == unknown.status_code == 401
    assert wrong.data == unknown.data
    assert wrong.data['message'] == 'Invalid email or password'


def test_login_deactivated_account(api_client, patient):
    patient.user.is_active = False
    patient.user.save()
    r = api_client.post(reverse('auth-login'), {'email': 'alice@example.test', 'password': PASSWORD}, format='json')
    assert r.status_code == 401
    assert r.data['message'] == 'Account is deactivated'


def test_login_ignores_role_in_body(api_client, patient):
    r = api_client.post(reverse('auth-login'),
                        {'email': 'alice@example.test', 'password': PASSWORD, 'role': 'admin'}, format='json')
    assert r.status_code == 200
    patient.user.refresh_from_db()
    assert patient.user.role == 'patient'


def test_profile_requires_token(api_client):
    r = api_client.get(reverse('auth-profile'))
    assert r.status_code == 401
    assert r.data['success'] is False


def test_profile_rejects_tampered_token(api_client):
    api_client.credentials(HTTP_AUTHORIZATION='Bearer not.a.token')
    r = api_client.get(reverse('auth-profile'))
    assert r.status_code == 401


def test_token_of_deactivated_account_is_rejected(patient):
    client = bearer(patient.user)
    patient.user.is_active = False
    patient.user.save()
    r = client.get(reverse('auth-profile'))
    assert r.status_code == 401
    assert r.data['message'] == 'Account is deactivated'


def test_profile_returns_role_profile(patient, doctor, admin_user):
    r = bearer(patient.user).get(reverse('auth-profile'))
    assert r.status_code == 200
    assert r.data['data']['user']['email'] == 'alice@example.test'
    assert r.data['data']['patientProfile']['patientId'] == patient.patient_id
    assert 'doctorProfile' not in r.data['data']

    r = bearer(doctor.user).get(reverse('auth-profile'))
    assert r.data['data']['doctorProfile']['licenseNumber'] == 'LIC-1001'

    r = bearer(admin_user).get(reverse('auth-profile'))
    assert set(r.data['data']) == {'user'}


def test_profile_update_changes_only_own_account_fields(patient):
    r = bearer(patient.user).put(
        reverse('auth-profile'),
        {'firstName': 'Alicia', 'phone': '+1 555 0100', 'role': 'admin', 'email': 'x@example.test'},
        format='json',
    )
    assert r.status_code == 200
    patient.user.refresh_from_db()
    assert patient.user.first_name == 'Alicia'
    assert patient.user.phone == '+1 555 0100'
    assert patient.user.role == 'patient'
    assert patient.user.email == 'alice@example.test'


def test_register_password_length_follows_configured_validators(api_client):
    r = api_client.post(reverse('auth-register'), register_payload(password='Xq7!kz'), format='json')
    assert r.status_code == 400
    assert 'password' in r.data['error']
    assert 'at least 8 characters' in r.data['message']
