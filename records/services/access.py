"""
Per-record access rules.

Route level permission classes decide which roles may call an endpoint at
all; the functions here decide whether a given account may act on a given
record.  Rules, in precedence order:

* admins may read everything and update accounts and profiles, but never
  create or update clinical records;
* a doctor may create a report or prescription only in their own name;
* a doctor may read a report or prescription only if they issued it;
* a patient may read a report or prescription only if it is theirs;
* a patient may read their own patient profile;
* a doctor may read doctor and patient profiles;
* everything else is denied, including actors whose role profile is missing.
"""
from __future__ import annotations

import logging
from typing import Optional

from rest_framework.exceptions import PermissionDenied

from records.models import (
    User, DoctorProfile, PatientProfile, MedicalReport, Prescription,
    ROLE_ADMIN, ROLE_DOCTOR, ROLE_PATIENT,
)

logger = logging.getLogger(__name__)

READ = 'read'
UPDATE = 'update'
CREATE = 'create'

CLINICAL_TYPES = (MedicalReport, Prescription)
PROFILE_TYPES = (User, DoctorProfile, PatientProfile)


def doctor_profile_for(user) -> Optional[DoctorProfile]:
    return getattr(user, 'doctor_profile', None)


def patient_profile_for(user) -> Optional[PatientProfile]:
    return getattr(user, 'patient_profile', None)


def _admin_rule(action: str, target) -> bool:
    if action == READ:
        return True
    if action == UPDATE:
        return isinstance(target, PROFILE_TYPES)
    return False


def _doctor_rule(actor, action: str, target) -> bool:
    doctor = doctor_profile_for(actor)
    if doctor is None:
        return False
    if isinstance(target, CLINICAL_TYPES):
        if action in (CREATE, READ):
            return target.doctor_id == doctor.id
        return False
    if isinstance(target, (DoctorProfile, PatientProfile)):
        return action == READ
    return False


def _patient_rule(actor, action: str, target) -> bool:
    patient = patient_profile_for(actor)
    if patient is None or action != READ:
        return False
    if isinstance(target, CLINICAL_TYPES):
        return target.patient_id == patient.id
    if isinstance(target, PatientProfile):
        return target.pk == patient.pk
    return False


def can_access(actor, action: str, target) -> bool:
    if not (actor and getattr(actor, 'is_authenticated', False) and actor.is_active):
        return False
    role = getattr(actor, 'role', None)
    if role == ROLE_ADMIN:
        return _admin_rule(action, target)
    if role == ROLE_DOCTOR:
        return _doctor_rule(actor, action, target)
    if role == ROLE_PATIENT:
        return _patient_rule(actor, action, target)
    return False


def ensure_access(actor, action: str, target) -> None:
    """Raise PermissionDenied (HTTP 403) unless ``actor`` may act on ``target``."""
    if not can_access(actor, action, target):
        logger.info('access denied: user=%s role=%s action=%s target=%s:%s',
                    getattr(actor, 'pk', None), getattr(actor, 'role', None),
                    action, type(target).__name__, getattr(target, 'pk', None))
        raise PermissionDenied('Access denied')
