from django.conf import settings
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from records.models import User, DoctorProfile, PatientProfile, normalize_email
from records.serializers.common import AddressSerializer, PHONE_REGEX, clean_text, validate_person_name

DOCTOR_REQUIRED = ('specialization', 'licenseNumber', 'department')


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(trim_whitespace=False)

    def validate_email(self, v):
        return normalize_email(v)


class EmergencyContactSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, allow_blank=True, max_length=120)
    relationship = serializers.CharField(required=False, allow_blank=True, max_length=60)
    phone = serializers.CharField(required=False, allow_blank=True, max_length=32)
    email = serializers.EmailField(required=False, allow_blank=True)


class InsuranceInfoSerializer(serializers.Serializer):
    provider = serializers.CharField(required=False, allow_blank=True, max_length=120)
    policyNumber = serializers.CharField(required=False, allow_blank=True, max_length=64)
    groupNumber = serializers.CharField(required=False, allow_blank=True, max_length=64)
    coverageType = serializers.CharField(required=False, allow_blank=True, max_length=64)


class RegisterSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)
    firstName = serializers.CharField(max_length=150)
    lastName = serializers.CharField(max_length=150)
    role = serializers.ChoiceField(choices=[c for c, _ in User.ROLE_CHOICES])
    phone = serializers.RegexField(PHONE_REGEX, required=False, allow_blank=True)
    dateOfBirth = serializers.DateField(required=False, allow_null=True)
    gender = serializers.ChoiceField(choices=[c for c, _ in User.GENDER_CHOICES], required=False, allow_blank=True)
    address = AddressSerializer(required=False)

    # doctor
    specialization = serializers.CharField(required=False, allow_blank=True, max_length=120)
    licenseNumber = serializers.CharField(required=False, allow_blank=True, max_length=64)
    department = serializers.CharField(required=False, allow_blank=True, max_length=120)
    yearsOfExperience = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    consultationFee = serializers.DecimalField(required=False, allow_null=True, max_digits=10, decimal_places=2, min_value=0)
    bio = serializers.CharField(required=False, allow_blank=True, max_length=1000)
    languages = serializers.ListField(child=serializers.CharField(max_length=40), required=False)

    # patient
    bloodGroup = serializers.ChoiceField(choices=[c for c, _ in PatientProfile.BLOOD_GROUP_CHOICES], required=False, allow_blank=True)
    allergies = serializers.ListField(child=serializers.CharField(max_length=120), required=False)
    chronicConditions = serializers.ListField(child=serializers.CharField(max_length=120), required=False)
    emergencyContact = EmergencyContactSerializer(required=False)
    insuranceInfo = InsuranceInfoSerializer(required=False)

    def validate_email(self, v):
        v = normalize_email(v)
        if User.objects.filter(email__iexact=v).exists():
            raise serializers.ValidationError('User with this email already exists')
        return v

    def validate_role(self, v):
        if v not in settings.REGISTRATION_ALLOWED_ROLES:
            raise serializers.ValidationError('Registration with this role is not allowed')
        return v

    def validate_firstName(self, v):
        return validate_person_name(v)

    def validate_lastName(self, v):
        return validate_person_name(v)

    def validate_bio(self, v):
        return clean_text(v)

    def validate(self, attrs):
        if attrs['role'] == 'doctor':
            attrs = self._validate_doctor(attrs)
        candidate = User(email=attrs['email'], first_name=attrs['firstName'], last_name=attrs['lastName'])
        try:
            validate_password(attrs['password'], user=candidate)
        except DjangoValidationError as e:
            raise serializers.ValidationError({'password': e.messages})
        return attrs

    def _validate_doctor(self, attrs):
        for key in DOCTOR_REQUIRED:
            attrs[key] = (attrs.get(key) or '').strip()
        if not all(attrs[key] for key in DOCTOR_REQUIRED):
            raise serializers.ValidationError(
                'Specialization, license number, and department are required for doctors'
            )
        if DoctorProfile.objects.filter(license_number__iexact=attrs['licenseNumber']).exists():
            raise serializers.ValidationError({'licenseNumber': 'A doctor with this license number already exists'})
        return attrs


class ProfileUpdateSerializer(serializers.Serializer):
    """Fields an account may change on itself."""
    firstName = serializers.CharField(required=False, max_length=150)
    lastName = serializers.CharField(required=False, max_length=150)
    phone = serializers.RegexField(PHONE_REGEX, required=False, allow_blank=True)
    dateOfBirth = serializers.DateField(required=False, allow_null=True)
    gender = serializers.ChoiceField(choices=[c for c, _ in User.GENDER_CHOICES], required=False, allow_blank=True)
    address = AddressSerializer(required=False)

    def validate_firstName(self, v):
        return validate_person_name(v)

    def validate_lastName(self, v):
        return validate_person_name(v)
