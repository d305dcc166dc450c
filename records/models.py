"""
Database models for the hospital records backend.

Accounts carry the role and the demographic fields shared by every
user.  Role specific data lives in two satellite tables, one row per
doctor or patient account, linked through a one-to-one foreign key.
Medical reports and prescriptions each reference exactly one doctor
profile and one patient profile.  Nested, variable-shaped attributes
(schedules, lab results, medications, ...) are stored as JSON so the
payloads exchanged with the front-end round-trip unchanged.
"""
from __future__ import annotations

from datetime import timedelta

from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.core.serializers.json import DjangoJSONEncoder
from django.core.exceptions import ValidationError
from django.db import models, transaction
from django.utils import timezone


ROLE_ADMIN = 'admin'
ROLE_DOCTOR = 'doctor'
ROLE_PATIENT = 'patient'

PRESCRIPTION_VALIDITY = timedelta(days=30)


def normalize_email(email: str | None) -> str:
    return (email or '').strip().lower()


class IdentifierSequence(models.Model):
    """Named counter backing the human readable record identifiers.

    ``issue`` locks the counter row for the rest of the surrounding
    transaction, so concurrent creators are serialised and a rolled back
    creation does not consume a number.  SQLite ignores
    ``select_for_update`` and relies on its database-wide write lock
    instead; the row lock itself is only exercised on backends that
    support it.
    """
    name = models.CharField(max_length=32, primary_key=True)
    value = models.PositiveBigIntegerField(default=0)

    def __str__(self) -> str:
        return f"{self.name}={self.value}"

    @classmethod
    def issue(cls, name: str, *, prefix: str, width: int) -> str:
        with transaction.atomic():
            cls.objects.get_or_create(name=name)
            seq = cls.objects.select_for_update().get(name=name)
            seq.value += 1
            seq.save(update_fields=['value'])
        return f"{prefix}{seq.value:0{width}d}"


class AccountManager(BaseUserManager):
    """Manager for accounts identified by email instead of a username."""
    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        email = normalize_email(email)
        if not email:
            raise ValueError('An email address is required')
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', False)
        extra_fields.setdefault('is_superuser', False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', ROLE_ADMIN)
        return self._create_user(email, password, **extra_fields)

    def get_by_natural_key(self, email):
        return self.get(email__iexact=normalize_email(email))


class User(AbstractUser):
    """Account record with a role.

    Roles mirror the front-end roles: 'admin', 'doctor' and 'patient'.
    The email address is the login identifier and is stored lower-cased.
    Accounts are never hard deleted through the API; ``is_active`` is
    cleared instead.
    """
    ROLE_CHOICES = [
        (ROLE_ADMIN, 'Administrator'),
        (ROLE_DOCTOR, 'Doctor'),
        (ROLE_PATIENT, 'Patient'),
    ]
    GENDER_CHOICES = [
        ('male', 'Male'),
        ('female', 'Female'),
        ('other', 'Other'),
    ]

    username = None
    email = models.EmailField('email address', unique=True)
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=ROLE_PATIENT, db_index=True)
    phone = models.CharField(max_length=32, blank=True)
    date_of_birth = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES, blank=True)
    # street, city, state, zipCode, country
    address = models.JSONField(default=dict, blank=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['first_name', 'last_name']

    objects = AccountManager()

    def __str__(self) -> str:
        return f"{self.email} ({self.role})"

    def clean(self):
        super().clean()
        self.email = normalize_email(self.email)


class DoctorProfile(models.Model):
    """Doctor specific attributes, one row per doctor account."""
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='doctor_profile')
    specialization = models.CharField(max_length=120)
    license_number = models.CharField(max_length=64, unique=True)
    years_of_experience = models.PositiveIntegerField(null=True, blank=True)
    # [{degree, institution, year}]
    education = models.JSONField(default=list, blank=True)
    # [{name, issuingBody, issueDate, expiryDate}]
    certifications = models.JSONField(default=list, blank=True, encoder=DjangoJSONEncoder)
    department = models.CharField(max_length=120, db_index=True)
    # [{day, startTime, endTime, isAvailable}]
    schedule = models.JSONField(default=list, blank=True)
    consultation_fee = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    bio = models.TextField(max_length=1000, blank=True)
    languages = models.JSONField(default=list, blank=True)
    is_verified = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.user.email} ({self.specialization})"


class PatientProfile(models.Model):
    """Patient specific attributes, one row per patient account.

    ``patient_id`` (``PAT`` followed by six digits) is assigned on the
    first save and never changes afterwards.
    """
    BLOOD_GROUP_CHOICES = [(g, g) for g in ('A+', 'A-', 'B+', 'B-', 'AB+', 'AB-', 'O+', 'O-')]

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='patient_profile')
    patient_id = models.CharField(max_length=16, unique=True, editable=False)
    # {name, relationship, phone, email}
    emergency_contact = models.JSONField(default=dict, blank=True)
    blood_group = models.CharField(max_length=3, choices=BLOOD_GROUP_CHOICES, blank=True)
    allergies = models.JSONField(default=list, blank=True)
    chronic_conditions = models.JSONField(default=list, blank=True)
    # [{name, dosage, frequency, startDate, endDate}]
    current_medications = models.JSONField(default=list, blank=True, encoder=DjangoJSONEncoder)
    # {provider, policyNumber, groupNumber, coverageType}
    insurance_info = models.JSONField(default=dict, blank=True)
    # [{condition, diagnosedDate, status, notes}]
    medical_history = models.JSONField(default=list, blank=True, encoder=DjangoJSONEncoder)
    primary_doctor = models.ForeignKey(
        DoctorProfile, null=True, blank=True, on_delete=models.SET_NULL, related_name='primary_patients'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.patient_id} ({self.user.email})"

    def save(self, *args, **kwargs):
        with transaction.atomic():
            if not self.patient_id:
                self.patient_id = IdentifierSequence.issue('patient', prefix='PAT', width=6)
            super().save(*args, **kwargs)


class ClinicalRecord(models.Model):
    """Common base for records issued by a doctor for a patient.

    The doctor and patient references are fixed at creation; saving a
    loaded record whose references were changed raises ValidationError.
    """
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

    @classmethod
    def from_db(cls, db, field_names, values):
        instance = super().from_db(db, field_names, values)
        instance._loaded_refs = (instance.__dict__.get('doctor_id'), instance.__dict__.get('patient_id'))
        return instance

    def save(self, *args, **kwargs):
        loaded = getattr(self, '_loaded_refs', None)
        if loaded is not None and loaded != (self.doctor_id, self.patient_id):
            raise ValidationError('doctor and patient cannot be changed once a record is created')
        super().save(*args, **kwargs)
        self._loaded_refs = (self.doctor_id, self.patient_id)


class MedicalReport(ClinicalRecord):
    TYPE_CHOICES = [
        ('consultation', 'Consultation'),
        ('lab_test', 'Lab test'),
        ('imaging', 'Imaging'),
        ('procedure', 'Procedure'),
        ('emergency', 'Emergency'),
        ('follow_up', 'Follow-up'),
    ]
    STATUS_CHOICES = [
        ('draft', 'Draft'),
        ('finalized', 'Finalized'),
        ('amended', 'Amended'),
    ]

    patient = models.ForeignKey(PatientProfile, on_delete=models.PROTECT, related_name='medical_reports')
    doctor = models.ForeignKey(DoctorProfile, on_delete=models.PROTECT, related_name='medical_reports')
    report_type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    title = models.CharField(max_length=255)
    description = models.TextField()
    # {primary, secondary[], codes[]}
    diagnosis = models.JSONField(default=dict, blank=True)
    symptoms = models.JSONField(default=list, blank=True)
    # {bloodPressure, heartRate, temperature, respiratoryRate, oxygenSaturation, weight, height, bmi}
    vital_signs = models.JSONField(default=dict, blank=True)
    # [{testName, result, normalRange, unit, isAbnormal, notes}]
    lab_results = models.JSONField(default=list, blank=True)
    treatment_plan = models.TextField()
    recommendations = models.JSONField(default=list, blank=True)
    follow_up_date = models.DateTimeField(null=True, blank=True)
    # [{fileName, fileUrl, fileType, uploadDate}]
    attachments = models.JSONField(default=list, blank=True, encoder=DjangoJSONEncoder)
    is_confidential = models.BooleanField(default=False)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='finalized')

    class Meta:
        indexes = [
            models.Index(fields=['patient', '-created_at'], name='report_patient_created_idx'),
            models.Index(fields=['doctor', '-created_at'], name='report_doctor_created_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.title} ({self.report_type})"


class Prescription(ClinicalRecord):
    """A prescription issued by a doctor.

    ``prescription_id`` (``RX`` followed by eight digits) is assigned on
    the first save; ``valid_until`` defaults to thirty days from creation.
    """
    STATUS_CHOICES = [
        ('active', 'Active'),
        ('completed', 'Completed'),
        ('cancelled', 'Cancelled'),
        ('expired', 'Expired'),
    ]

    patient = models.ForeignKey(PatientProfile, on_delete=models.PROTECT, related_name='prescriptions')
    doctor = models.ForeignKey(DoctorProfile, on_delete=models.PROTECT, related_name='prescriptions')
    medical_report = models.ForeignKey(
        MedicalReport, null=True, blank=True, on_delete=models.SET_NULL, related_name='prescriptions'
    )
    prescription_id = models.CharField(max_length=16, unique=True, editable=False)
    # [{name, genericName, dosage, frequency, duration, instructions, quantity, refills, isGenericAllowed}]
    medications = models.JSONField(default=list)
    diagnosis = models.TextField()
    instructions = models.TextField(blank=True, default='')
    valid_until = models.DateTimeField()
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='active', db_index=True)
    pharmacy_notes = models.TextField(blank=True)
    is_electronic = models.BooleanField(default=True)

    class Meta:
        indexes = [
            models.Index(fields=['patient', '-created_at'], name='rx_patient_created_idx'),
            models.Index(fields=['doctor', '-created_at'], name='rx_doctor_created_idx'),
        ]

    def __str__(self) -> str:
        return self.prescription_id

    def save(self, *args, **kwargs):
        if self.valid_until is None:
            self.valid_until = timezone.now() + PRESCRIPTION_VALIDITY
        with transaction.atomic():
            if not self.prescription_id:
                self.prescription_id = IdentifierSequence.issue('prescription', prefix='RX', width=8)
            super().save(*args, **kwargs)


class AuditEvent(models.Model):
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.IntegerField(blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='audit_action_created_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='audit_object_created_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.action}:{self.user_id}@{self.created_at:%F %T}"
