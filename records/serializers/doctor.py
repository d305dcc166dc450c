from rest_framework import serializers

from records.models import User
from records.serializers.common import AddressSerializer, PHONE_REGEX, clean_text, validate_person_name

WEEKDAYS = ['monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday']
TIME_REGEX = r'^([01]\d|2[0-3]):[0-5]\d$'


class DoctorSearchQuerySerializer(serializers.Serializer):
    query = serializers.CharField(required=False, allow_blank=True, max_length=100)
    specialization = serializers.CharField(required=False, allow_blank=True, max_length=120)
    department = serializers.CharField(required=False, allow_blank=True, max_length=120)


class EducationSerializer(serializers.Serializer):
    degree = serializers.CharField(max_length=120)
    institution = serializers.CharField(required=False, allow_blank=True, max_length=255)
    year = serializers.IntegerField(required=False, allow_null=True, min_value=1900, max_value=2100)


class CertificationSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    issuingBody = serializers.CharField(required=False, allow_blank=True, max_length=255)
    issueDate = serializers.DateField(required=False, allow_null=True)
    expiryDate = serializers.DateField(required=False, allow_null=True)


class ScheduleSlotSerializer(serializers.Serializer):
    day = serializers.ChoiceField(choices=WEEKDAYS)
    startTime = serializers.RegexField(TIME_REGEX)
    endTime = serializers.RegexField(TIME_REGEX)
    isAvailable = serializers.BooleanField(required=False, default=True)

    def validate(self, attrs):
        if attrs['endTime'] <= attrs['startTime']:
            raise serializers.ValidationError('endTime must be after startTime')
        return attrs


class DoctorUpdateSerializer(serializers.Serializer):
    """Admin edit of a doctor; every field optional, unknown keys dropped."""
    # account
    firstName = serializers.CharField(required=False, max_length=150)
    lastName = serializers.CharField(required=False, max_length=150)
    email = serializers.EmailField(required=False)
    phone = serializers.RegexField(PHONE_REGEX, required=False, allow_blank=True)
    dateOfBirth = serializers.DateField(required=False, allow_null=True)
    gender = serializers.ChoiceField(choices=[c for c, _ in User.GENDER_CHOICES], required=False, allow_blank=True)
    address = AddressSerializer(required=False)
    isActive = serializers.BooleanField(required=False)

    # doctor profile
    specialization = serializers.CharField(required=False, max_length=120)
    licenseNumber = serializers.CharField(required=False, max_length=64)
    yearsOfExperience = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    education = EducationSerializer(many=True, required=False)
    certifications = CertificationSerializer(many=True, required=False)
    department = serializers.CharField(required=False, max_length=120)
    schedule = ScheduleSlotSerializer(many=True, required=False)
    consultationFee = serializers.DecimalField(required=False, allow_null=True, max_digits=10, decimal_places=2, min_value=0)
    bio = serializers.CharField(required=False, allow_blank=True, max_length=1000)
    languages = serializers.ListField(child=serializers.CharField(max_length=40), required=False)
    isVerified = serializers.BooleanField(required=False)

    def validate_firstName(self, v):
        return validate_person_name(v)

    def validate_lastName(self, v):
        return validate_person_name(v)

    def validate_bio(self, v):
        return clean_text(v)
