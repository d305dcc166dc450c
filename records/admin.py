"""
Django admin registrations for the records models.

Superusers can inspect accounts, profiles and clinical records via the
``/admin/`` URL.  Generated identifiers are read-only here; they are
issued by the models on first save.
"""

from django.contrib import admin

from .models import (
    User,
    DoctorProfile,
    PatientProfile,
    MedicalReport,
    Prescription,
    IdentifierSequence,
    AuditEvent,
)


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('email', 'first_name', 'last_name', 'role', 'is_active', 'is_staff')
    list_filter = ('role', 'is_active')
    search_fields = ('email', 'first_name', 'last_name')
    ordering = ('email',)


@admin.register(DoctorProfile)
class DoctorProfileAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'specialization', 'department', 'license_number', 'is_verified')
    list_filter = ('department', 'is_verified')
    search_fields = ('license_number', 'user__email', 'user__last_name')


@admin.register(PatientProfile)
class PatientProfileAdmin(admin.ModelAdmin):
    list_display = ('patient_id', 'user', 'blood_group', 'primary_doctor', 'created_at')
    search_fields = ('patient_id', 'user__email', 'user__last_name')
    readonly_fields = ('patient_id',)


@admin.register(MedicalReport)
class MedicalReportAdmin(admin.ModelAdmin):
    list_display = ('id', 'title', 'report_type', 'status', 'patient', 'doctor', 'created_at')
    list_filter = ('report_type', 'status', 'is_confidential')
    search_fields = ('title', 'patient__patient_id')


@admin.register(Prescription)
class PrescriptionAdmin(admin.ModelAdmin):
    list_display = ('prescription_id', 'status', 'patient', 'doctor', 'valid_until', 'created_at')
    list_filter = ('status',)
    search_fields = ('prescription_id', 'patient__patient_id')
    readonly_fields = ('prescription_id',)


@admin.register(IdentifierSequence)
class IdentifierSequenceAdmin(admin.ModelAdmin):
    list_display = ('name', 'value')


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('created_at', 'action', 'object_type', 'object_id', 'user')
    list_filter = ('action', 'object_type')
