import bleach
from rest_framework import serializers


class PaginationQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(required=False, min_value=1, default=1)
    limit = serializers.IntegerField(required=False, min_value=1, max_value=100, default=10)


class AddressSerializer(serializers.Serializer):
    street = serializers.CharField(required=False, allow_blank=True, max_length=255)
    city = serializers.CharField(required=False, allow_blank=True, max_length=120)
    state = serializers.CharField(required=False, allow_blank=True, max_length=120)
    zipCode = serializers.CharField(required=False, allow_blank=True, max_length=20)
    country = serializers.CharField(required=False, allow_blank=True, max_length=120)


PHONE_REGEX = r'^\+?[0-9][0-9 ()\-]{5,19}$'


def clean_text(v):
    return bleach.clean((v or '').strip(), strip=True)


def validate_person_name(v):
    v = clean_text(v)
    if not v:
        raise serializers.ValidationError('This field may not be blank.')
    return v
