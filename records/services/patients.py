from django.db.models import Q
from rest_framework.exceptions import NotFound

from records.models import PatientProfile, MedicalReport, Prescription
from records.services.pagination import paginate
from records.services.projections import (
    format_patient, format_report, format_prescription, PATIENT_RELATED, RECORD_RELATED,
)

SEARCH_LIMIT = 20


def get_patient(patient_id: int) -> PatientProfile:
    patient = PatientProfile.objects.select_related(*PATIENT_RELATED).filter(id=patient_id).first()
    if not patient:
        raise NotFound('Patient not found')
    return patient


def list_patients(*, page: int = 1, limit: int = 10) -> tuple[list[dict], dict]:
    qs = PatientProfile.objects.select_related(*PATIENT_RELATED).order_by('-created_at', '-id')
    return paginate(qs, page=page, limit=limit, formatter=format_patient)


def search_patients(query: str) -> list[dict]:
    """Match first name, last name or email; the join drops unmatched accounts."""
    qs = (
        PatientProfile.objects.select_related(*PATIENT_RELATED)
        .filter(
            Q(user__first_name__icontains=query)
            | Q(user__last_name__icontains=query)
            | Q(user__email__icontains=query)
        )
        .order_by('-created_at', '-id')[:SEARCH_LIMIT]
    )
    return [format_patient(p) for p in qs if p.user_id]


def reports_for_patient(patient: PatientProfile, *, page: int = 1, limit: int = 10) -> tuple[list[dict], dict]:
    qs = (
        MedicalReport.objects.select_related(*RECORD_RELATED)
        .filter(patient=patient)
        .order_by('-created_at', '-id')
    )
    return paginate(qs, page=page, limit=limit, formatter=format_report)


def prescriptions_for_patient(patient: PatientProfile, *, page: int = 1, limit: int = 10) -> tuple[list[dict], dict]:
    qs = (
        Prescription.objects.select_related(*RECORD_RELATED)
        .filter(patient=patient)
        .order_by('-created_at', '-id')
    )
    return paginate(qs, page=page, limit=limit, formatter=format_prescription)


def patient_medical_history(patient_id: int, **page_kwargs) -> tuple[list[dict], dict]:
    return reports_for_patient(get_patient(patient_id), **page_kwargs)


def patient_prescriptions(patient_id: int, **page_kwargs) -> tuple[list[dict], dict]:
    return prescriptions_for_patient(get_patient(patient_id), **page_kwargs)
