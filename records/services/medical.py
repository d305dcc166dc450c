"""
Medical reports and prescriptions.

Records are always issued in the name of the calling doctor; any doctor
reference supplied by the client is ignored.  Reads go through the
per-record access rules in :mod:`records.services.access`.
"""
import logging
import re

from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from records.models import User, DoctorProfile, PatientProfile, MedicalReport, Prescription
from records.services import access
from records.services.audit import log_action
from records.services.patients import reports_for_patient, prescriptions_for_patient
from records.services.projections import RECORD_RELATED

logger = logging.getLogger(__name__)

PATIENT_CODE = re.compile(r'^PAT\d{6,}$', re.IGNORECASE)


def _plain(items):
    return [dict(item) for item in items or []]


def resolve_patient(ref: str) -> PatientProfile:
    """Look a patient up by primary key or by its PAT identifier."""
    ref = (ref or '').strip()
    qs = PatientProfile.objects.select_related('user')
    if PATIENT_CODE.match(ref):
        patient = qs.filter(patient_id=ref.upper()).first()
    elif ref.isdigit():
        patient = qs.filter(id=int(ref)).first()
    else:
        patient = None
    if not patient:
        raise NotFound('Patient not found')
    return patient


def own_doctor_profile(user: User) -> DoctorProfile:
    doctor = access.doctor_profile_for(user)
    if doctor is None:
        raise NotFound('Doctor profile not found')
    return doctor


def own_patient_profile(user: User) -> PatientProfile:
    patient = access.patient_profile_for(user)
    if patient is None:
        raise NotFound('Patient profile not found')
    return patient


def create_report(user: User, data: dict) -> MedicalReport:
    doctor = own_doctor_profile(user)
    patient = resolve_patient(data['patient'])
    report = MedicalReport(
        patient=patient,
        doctor=doctor,
        report_type=data['reportType'],
        title=data['title'],
        description=data['description'],
        diagnosis=dict(data.get('diagnosis') or {}),
        symptoms=data.get('symptoms') or [],
        vital_signs=dict(data.get('vitalSigns') or {}),
        lab_results=_plain(data.get('labResults')),
        treatment_plan=data['treatmentPlan'],
        recommendations=data.get('recommendations') or [],
        follow_up_date=data.get('followUpDate'),
        attachments=[
            {**item, 'uploadDate': item.get('uploadDate') or timezone.now()}
            for item in _plain(data.get('attachments'))
        ],
        is_confidential=data.get('isConfidential', False),
        status=data.get('status') or 'finalized',
    )
    access.ensure_access(user, access.CREATE, report)
    report.save()
    logger.info('report %s created by doctor %s for patient %s', report.id, doctor.id, patient.patient_id)
    log_action(user=user, action='report_create', object_type='medical_report', object_id=report.id,
               detail={'patientId': patient.patient_id})
    return get_report(report.id)


def create_prescription(user: User, data: dict) -> Prescription:
    doctor = own_doctor_profile(user)
    patient = resolve_patient(data['patient'])
    report = None
    if data.get('medicalReport'):
        report = MedicalReport.objects.filter(id=data['medicalReport']).first()
        if not report:
            raise NotFound('Medical report not found')
        if report.patient_id != patient.id:
            raise ValidationError({'medicalReport': 'Medical report belongs to a different patient'})
    rx = Prescription(
        patient=patient,
        doctor=doctor,
        medical_report=report,
        medications=_plain(data['medications']),
        diagnosis=data['diagnosis'],
        instructions=data.get('instructions') or '',
        valid_until=data.get('validUntil'),
        pharmacy_notes=data.get('pharmacyNotes') or '',
        is_electronic=data.get('isElectronic', True),
    )
    access.ensure_access(user, access.CREATE, rx)
    rx.save()
    logger.info('prescription %s created by doctor %s for patient %s', rx.prescription_id, doctor.id, patient.patient_id)
    log_action(user=user, action='prescription_create', object_type='prescription', object_id=rx.id,
               detail={'patientId': patient.patient_id, 'prescriptionId': rx.prescription_id})
    return get_prescription(rx.id)


def get_report(report_id: int) -> MedicalReport:
    report = MedicalReport.objects.select_related(*RECORD_RELATED).filter(id=report_id).first()
    if not report:
        raise NotFound('Medical report not found')
    return report


def get_prescription(prescription_id: int) -> Prescription:
    rx = Prescription.objects.select_related(*RECORD_RELATED).filter(id=prescription_id).first()
    if not rx:
        raise NotFound('Prescription not found')
    return rx


def report_for(user: User, report_id: int) -> MedicalReport:
    report = get_report(report_id)
    access.ensure_access(user, access.READ, report)
    return report


def prescription_for(user: User, prescription_id: int) -> Prescription:
    rx = get_prescription(prescription_id)
    access.ensure_access(user, access.READ, rx)
    return rx


def my_reports(user: User, **page_kwargs):
    return reports_for_patient(own_patient_profile(user), **page_kwargs)


def my_prescriptions(user: User, **page_kwargs):
    return prescriptions_for_patient(own_patient_profile(user), **page_kwargs)
