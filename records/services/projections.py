"""
Read models returned by the API.

Each function turns one model instance (plus the relations the caller
loaded with ``select_related``) into the camelCase dictionaries the
front-end consumes.  Nested shapes such as report -> doctor -> account are
composed here rather than through chained lazy lookups.
"""
from __future__ import annotations

from typing import Optional

from records.models import User, DoctorProfile, PatientProfile, MedicalReport, Prescription


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


def _decimal(value) -> Optional[float]:
    return float(value) if value is not None else None


def format_account(user: User) -> dict:
    return {
        'id': user.id,
        'email': user.email,
        'firstName': user.first_name,
        'lastName': user.last_name,
        'role': user.role,
        'phone': user.phone,
        'dateOfBirth': _iso(user.date_of_birth),
        'gender': user.gender,
        'address': user.address,
        'isActive': user.is_active,
    }


def format_account_name(user: User) -> dict:
    return {'id': user.id, 'firstName': user.first_name, 'lastName': user.last_name}


def format_account_contact(user: User) -> dict:
    return {
        **format_account_name(user),
        'email': user.email,
        'phone': user.phone,
        'dateOfBirth': _iso(user.date_of_birth),
        'gender': user.gender,
    }


def format_doctor(doctor: DoctorProfile, *, with_user: bool = True) -> dict:
    data = {
        'id': doctor.id,
        'specialization': doctor.specialization,
        'licenseNumber': doctor.license_number,
        'yearsOfExperience': doctor.years_of_experience,
        'education': doctor.education,
        'certifications': doctor.certifications,
        'department': doctor.department,
        'schedule': doctor.schedule,
        'consultationFee': _decimal(doctor.consultation_fee),
        'bio': doctor.bio,
        'languages': doctor.languages,
        'isVerified': doctor.is_verified,
        'createdAt': _iso(doctor.created_at),
        'updatedAt': _iso(doctor.updated_at),
    }
    if with_user:
        data['user'] = format_account(doctor.user)
    return data


def format_doctor_brief(doctor: Optional[DoctorProfile]) -> Optional[dict]:
    if doctor is None:
        return None
    return {
        'id': doctor.id,
        'specialization': doctor.specialization,
        'department': doctor.department,
        'user': format_account_name(doctor.user),
    }


def format_patient(patient: PatientProfile, *, with_user: bool = True) -> dict:
    data = {
        'id': patient.id,
        'patientId': patient.patient_id,
        'emergencyContact': patient.emergency_contact,
        'bloodGroup': patient.blood_group or None,
        'allergies': patient.allergies,
        'chronicConditions': patient.chronic_conditions,
        'currentMedications': patient.current_medications,
        'insuranceInfo': patient.insurance_info,
        'medicalHistory': patient.medical_history,
        'primaryDoctor': format_doctor_brief(patient.primary_doctor),
        'createdAt': _iso(patient.created_at),
        'updatedAt': _iso(patient.updated_at),
    }
    if with_user:
        data['user'] = format_account_contact(patient.user)
    return data


def format_patient_brief(patient: PatientProfile) -> dict:
    return {
        'id': patient.id,
        'patientId': patient.patient_id,
        'user': format_account_contact(patient.user),
    }


def format_report(report: MedicalReport) -> dict:
    return {
        'id': report.id,
        'patient': format_patient_brief(report.patient),
        'doctor': format_doctor_brief(report.doctor),
        'reportType': report.report_type,
        'title': report.title,
        'description': report.description,
        'diagnosis': report.diagnosis,
        'symptoms': report.symptoms,
        'vitalSigns': report.vital_signs,
        'labResults': report.lab_results,
        'treatmentPlan': report.treatment_plan,
        'recommendations': report.recommendations,
        'followUpDate': _iso(report.follow_up_date),
        'attachments': report.attachments,
        'isConfidential': report.is_confidential,
        'status': report.status,
        'createdAt': _iso(report.created_at),
        'updatedAt': _iso(report.updated_at),
    }


def format_prescription(rx: Prescription) -> dict:
    return {
        'id': rx.id,
        'prescriptionId': rx.prescription_id,
        'patient': format_patient_brief(rx.patient),
        'doctor': format_doctor_brief(rx.doctor),
        'medicalReport': rx.medical_report_id,
        'medications': rx.medications,
        'diagnosis': rx.diagnosis,
        'instructions': rx.instructions,
        'validUntil': _iso(rx.valid_until),
        'status': rx.status,
        'pharmacyNotes': rx.pharmacy_notes,
        'isElectronic': rx.is_electronic,
        'createdAt': _iso(rx.created_at),
        'updatedAt': _iso(rx.updated_at),
    }


# select_related paths needed by the formatters above
DOCTOR_RELATED = ('user',)
PATIENT_RELATED = ('user', 'primary_doctor__user')
RECORD_RELATED = ('patient__user', 'doctor__user')
