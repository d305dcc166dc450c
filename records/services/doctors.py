import logging
from typing import Optional

from django.db import IntegrityError, transaction
from rest_framework.exceptions import NotFound, ValidationError

from records.models import DoctorProfile, PatientProfile, MedicalReport, normalize_email, User
from records.services.pagination import paginate
from records.services.projections import format_doctor, format_patient, DOCTOR_RELATED, PATIENT_RELATED

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 20

# request key -> model attribute, partitioned by the record that owns it
ACCOUNT_UPDATE_FIELDS = {
    'firstName': 'first_name',
    'lastName': 'last_name',
    'email': 'email',
    'phone': 'phone',
    'dateOfBirth': 'date_of_birth',
    'gender': 'gender',
    'address': 'address',
    'isActive': 'is_active',
}
DOCTOR_UPDATE_FIELDS = {
    'specialization': 'specialization',
    'licenseNumber': 'license_number',
    'yearsOfExperience': 'years_of_experience',
    'education': 'education',
    'certifications': 'certifications',
    'department': 'department',
    'schedule': 'schedule',
    'consultationFee': 'consultation_fee',
    'bio': 'bio',
    'languages': 'languages',
    'isVerified': 'is_verified',
}
JSON_LIST_FIELDS = {'education', 'certifications', 'schedule', 'languages'}


def get_doctor(doctor_id: int) -> DoctorProfile:
    doctor = DoctorProfile.objects.select_related(*DOCTOR_RELATED).filter(id=doctor_id).first()
    if not doctor:
        raise NotFound('Doctor not found')
    return doctor


def list_doctors(*, page: int = 1, limit: int = 10) -> tuple[list[dict], dict]:
    qs = DoctorProfile.objects.select_related(*DOCTOR_RELATED).order_by('-created_at', '-id')
    return paginate(qs, page=page, limit=limit, formatter=format_doctor)


def search_doctors(*, query: Optional[str] = None, specialization: Optional[str] = None,
                   department: Optional[str] = None) -> list[dict]:
    """Filter by specialization/department in the database, then by name in memory."""
    qs = DoctorProfile.objects.select_related(*DOCTOR_RELATED).order_by('-created_at', '-id')
    if specialization:
        qs = qs.filter(specialization__icontains=specialization)
    if department:
        qs = qs.filter(department__icontains=department)
    needle = (query or '').strip().lower()
    results = []
    for doctor in qs.iterator():
        if needle and needle not in doctor.user.first_name.lower() and needle not in doctor.user.last_name.lower():
            continue
        results.append(format_doctor(doctor))
        if len(results) >= SEARCH_LIMIT:
            break
    return results


def _split_updates(data: dict) -> tuple[dict, dict]:
    account, doctor = {}, {}
    for key, value in data.items():
        if key in ACCOUNT_UPDATE_FIELDS:
            account[ACCOUNT_UPDATE_FIELDS[key]] = value
        elif key in DOCTOR_UPDATE_FIELDS:
            doctor[DOCTOR_UPDATE_FIELDS[key]] = value
    return account, doctor


def _normalise_account_updates(user: User, updates: dict) -> dict:
    if 'email' in updates:
        email = normalize_email(updates['email'])
        if User.objects.filter(email__iexact=email).exclude(pk=user.pk).exists():
            raise ValidationError({'email': 'User with this email already exists'})
        updates['email'] = email
    if 'address' in updates:
        updates['address'] = dict(updates['address'] or {})
    for attr in ('phone', 'gender'):
        if attr in updates and updates[attr] is None:
            updates[attr] = ''
    return updates


def _normalise_doctor_updates(doctor: DoctorProfile, updates: dict) -> dict:
    if 'license_number' in updates:
        clash = DoctorProfile.objects.filter(license_number__iexact=updates['license_number']).exclude(pk=doctor.pk)
        if clash.exists():
            raise ValidationError({'licenseNumber': 'A doctor with this license number already exists'})
    for attr in JSON_LIST_FIELDS & updates.keys():
        updates[attr] = [dict(item) if isinstance(item, dict) else item for item in updates[attr]]
    return updates


def update_doctor(doctor_id: int, data: dict) -> DoctorProfile:
    """Apply an admin edit, routing each key to the account or the profile."""
    doctor = get_doctor(doctor_id)
    account_updates, doctor_updates = _split_updates(data)
    account_updates = _normalise_account_updates(doctor.user, account_updates)
    doctor_updates = _normalise_doctor_updates(doctor, doctor_updates)
    try:
        with transaction.atomic():
            if account_updates:
                for attr, value in account_updates.items():
                    setattr(doctor.user, attr, value)
                doctor.user.save(update_fields=list(account_updates))
            if doctor_updates:
                for attr, value in doctor_updates.items():
                    setattr(doctor, attr, value)
                doctor.save(update_fields=[*doctor_updates, 'updated_at'])
    except IntegrityError as e:
        logger.warning('doctor %s update conflict: %s', doctor_id, e)
        raise ValidationError('Email or license number already in use')
    logger.info('doctor %s updated: account=%s profile=%s', doctor_id, sorted(account_updates), sorted(doctor_updates))
    return get_doctor(doctor_id)


def list_doctor_patients(doctor_id: int, *, page: int = 1, limit: int = 10) -> tuple[list[dict], dict]:
    """Paginate the distinct patients appearing in the doctor's reports."""
    doctor = get_doctor(doctor_id)
    patient_ids = set(
        MedicalReport.objects.filter(doctor=doctor).values_list('patient_id', flat=True).distinct()
    )
    qs = (
        PatientProfile.objects.select_related(*PATIENT_RELATED)
        .filter(id__in=patient_ids)
        .order_by('-created_at', '-id')
    )
    return paginate(qs, page=page, limit=limit, total=len(patient_ids), formatter=format_patient)
