from rest_framework import serializers


class PatientSearchQuerySerializer(serializers.Serializer):
    query = serializers.CharField(required=False, allow_blank=True, max_length=100)

    def validate(self, attrs):
        attrs['query'] = (attrs.get('query') or '').strip()
        if not attrs['query']:
            raise serializers.ValidationError('Search query is required')
        return attrs
