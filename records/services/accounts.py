"""
Registration, login and token issuing.

Registration writes the account and its role profile in one transaction;
the profile constructor is picked from ``PROFILE_BUILDERS`` by role.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional

from django.db import IntegrityError, transaction
from rest_framework.exceptions import AuthenticationFailed, ValidationError
from rest_framework_simplejwt.tokens import AccessToken

from records.models import User, DoctorProfile, PatientProfile, ROLE_ADMIN, ROLE_DOCTOR, ROLE_PATIENT
from records.services.projections import format_doctor, format_patient

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = 'Invalid email or password'
ACCOUNT_DEACTIVATED = 'Account is deactivated'

ACCOUNT_FIELDS = {
    'firstName': 'first_name',
    'lastName': 'last_name',
    'phone': 'phone',
    'dateOfBirth': 'date_of_birth',
    'gender': 'gender',
    'address': 'address',
}


def _build_doctor_profile(user: User, data: dict) -> DoctorProfile:
    return DoctorProfile.objects.create(
        user=user,
        specialization=data['specialization'],
        license_number=data['licenseNumber'],
        department=data['department'],
        years_of_experience=data.get('yearsOfExperience'),
        consultation_fee=data.get('consultationFee'),
        bio=data.get('bio') or '',
        languages=data.get('languages') or [],
    )


def _build_patient_profile(user: User, data: dict) -> PatientProfile:
    return PatientProfile.objects.create(
        user=user,
        blood_group=data.get('bloodGroup') or '',
        allergies=data.get('allergies') or [],
        chronic_conditions=data.get('chronicConditions') or [],
        emergency_contact=dict(data.get('emergencyContact') or {}),
        insurance_info=dict(data.get('insuranceInfo') or {}),
    )


def _no_profile(user: User, data: dict) -> None:
    return None


PROFILE_BUILDERS: dict[str, Callable[[User, dict], object]] = {
    ROLE_DOCTOR: _build_doctor_profile,
    ROLE_PATIENT: _build_patient_profile,
    ROLE_ADMIN: _no_profile,
}


def issue_token(user: User) -> str:
    return str(AccessToken.for_user(user))


def register_account(data: dict) -> tuple[User, object]:
    """Create the account and its role profile from validated register data."""
    build_profile = PROFILE_BUILDERS[data['role']]
    try:
        with transaction.atomic():
            user = User.objects.create_user(
                email=data['email'],
                password=data['password'],
                first_name=data['firstName'],
                last_name=data['lastName'],
                role=data['role'],
                phone=data.get('phone') or '',
                date_of_birth=data.get('dateOfBirth'),
                gender=data.get('gender') or '',
                address=dict(data.get('address') or {}),
            )
            profile = build_profile(user, data)
    except IntegrityError as e:
        # a concurrent request won the race for the email or license number
        logger.warning('registration conflict for %s: %s', data['email'], e)
        raise ValidationError('User with this email or license number already exists')
    logger.info('registered account id=%s role=%s', user.id, user.role)
    return user, profile


def authenticate_account(email: str, password: str) -> User:
    """Return the account for valid credentials or raise AuthenticationFailed.

    Unknown emails and wrong passwords fail identically; a dummy hash is
    computed for unknown emails so both paths cost the same.
    """
    user: Optional[User] = User.objects.filter(email__iexact=email).first()
    if user is None:
        User().set_password(password)
        raise AuthenticationFailed(INVALID_CREDENTIALS)
    if not user.check_password(password):
        raise AuthenticationFailed(INVALID_CREDENTIALS)
    if not user.is_active:
        raise AuthenticationFailed(ACCOUNT_DEACTIVATED)
    return user


def update_own_account(user: User, data: dict) -> User:
    changed = []
    for key, attr in ACCOUNT_FIELDS.items():
        if key in data:
            value = data[key]
            if key == 'address':
                value = dict(value or {})
            elif value is None and attr != 'date_of_birth':
                value = ''
            setattr(user, attr, value)
            changed.append(attr)
    if changed:
        user.save(update_fields=changed)
    return user


def profile_for(user: User) -> dict:
    """Return the role profile keyed the way the profile endpoint exposes it."""
    if user.role == ROLE_DOCTOR:
        doctor = DoctorProfile.objects.filter(user=user).first()
        return {'doctorProfile': format_doctor(doctor, with_user=False) if doctor else None}
    if user.role == ROLE_PATIENT:
        patient = PatientProfile.objects.select_related('primary_doctor__user').filter(user=user).first()
        return {'patientProfile': format_patient(patient, with_user=False) if patient else None}
    return {}
