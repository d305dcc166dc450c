from django.utils import timezone
from rest_framework import serializers

from records.models import MedicalReport


class DiagnosisSerializer(serializers.Serializer):
    primary = serializers.CharField(required=False, allow_blank=True, max_length=255)
    secondary = serializers.ListField(child=serializers.CharField(max_length=255), required=False)
    codes = serializers.ListField(child=serializers.CharField(max_length=20), required=False)


class VitalSignsSerializer(serializers.Serializer):
    bloodPressure = serializers.RegexField(r'^\d{2,3}/\d{2,3}$', required=False)
    heartRate = serializers.IntegerField(required=False, min_value=0, max_value=300)
    temperature = serializers.FloatField(required=False, min_value=25, max_value=45)
    respiratoryRate = serializers.IntegerField(required=False, min_value=0, max_value=100)
    oxygenSaturation = serializers.FloatField(required=False, min_value=0, max_value=100)
    weight = serializers.FloatField(required=False, min_value=0)
    height = serializers.FloatField(required=False, min_value=0)
    bmi = serializers.FloatField(required=False, min_value=0)


class LabResultSerializer(serializers.Serializer):
    testName = serializers.CharField(max_length=255)
    result = serializers.CharField(required=False, allow_blank=True, max_length=255)
    normalRange = serializers.CharField(required=False, allow_blank=True, max_length=120)
    unit = serializers.CharField(required=False, allow_blank=True, max_length=40)
    isAbnormal = serializers.BooleanField(required=False, default=False)
    notes = serializers.CharField(required=False, allow_blank=True)


class AttachmentSerializer(serializers.Serializer):
    fileName = serializers.CharField(max_length=255)
    fileUrl = serializers.URLField()
    fileType = serializers.CharField(required=False, allow_blank=True, max_length=120)
    uploadDate = serializers.DateTimeField(required=False)


class MedicalReportCreateSerializer(serializers.Serializer):
    # PatientProfile id or its PAT identifier
    patient = serializers.CharField(max_length=32)
    reportType = serializers.ChoiceField(choices=[c for c, _ in MedicalReport.TYPE_CHOICES])
    title = serializers.CharField(max_length=255)
    description = serializers.CharField()
    diagnosis = DiagnosisSerializer(required=False)
    symptoms = serializers.ListField(child=serializers.CharField(max_length=255), required=False)
    vitalSigns = VitalSignsSerializer(required=False)
    labResults = LabResultSerializer(many=True, required=False)
    treatmentPlan = serializers.CharField()
    recommendations = serializers.ListField(child=serializers.CharField(), required=False)
    followUpDate = serializers.DateTimeField(required=False, allow_null=True)
    attachments = AttachmentSerializer(many=True, required=False)
    isConfidential = serializers.BooleanField(required=False, default=False)
    status = serializers.ChoiceField(choices=['draft', 'finalized'], required=False, default='finalized')


class MedicationSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    genericName = serializers.CharField(required=False, allow_blank=True, max_length=255)
    dosage = serializers.CharField(max_length=120)
    frequency = serializers.CharField(max_length=120)
    duration = serializers.CharField(max_length=120)
    instructions = serializers.CharField(required=False, allow_blank=True)
    quantity = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    refills = serializers.IntegerField(required=False, min_value=0, default=0)
    isGenericAllowed = serializers.BooleanField(required=False, default=True)


class PrescriptionCreateSerializer(serializers.Serializer):
    patient = serializers.CharField(max_length=32)
    medicalReport = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    medications = MedicationSerializer(many=True, allow_empty=False)
    diagnosis = serializers.CharField()
    instructions = serializers.CharField(required=False, allow_blank=True, default='')
    validUntil = serializers.DateTimeField(required=False, allow_null=True)
    pharmacyNotes = serializers.CharField(required=False, allow_blank=True, default='')
    isElectronic = serializers.BooleanField(required=False, default=True)

    def validate_validUntil(self, v):
        if v is not None and v <= timezone.now():
            raise serializers.ValidationError('validUntil must be in the future')
        return v
