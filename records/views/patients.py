from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from records.permissions import IsDoctorOrAdmin
from records.serializers.patient import PatientSearchQuerySerializer
from records.services import access
from records.services.patients import (
    get_patient, list_patients, search_patients, patient_medical_history, patient_prescriptions,
)
from records.services.projections import format_patient
from records.views._common import page_params, paged_response


@api_view(['GET'])
@permission_classes([IsDoctorOrAdmin])
def patient_list(request):
    patients, pagination = list_patients(**page_params(request))
    return paged_response('patients', patients, pagination)


@api_view(['GET'])
@permission_classes([IsDoctorOrAdmin])
def patient_search(request):
    """Search patients by first name, last name or email (``query`` is required)."""
    s = PatientSearchQuerySerializer(data=request.query_params)
    s.is_valid(raise_exception=True)
    return Response({'success': True, 'data': {'patients': search_patients(s.validated_data['query'])}})


@api_view(['GET'])
@permission_classes([IsDoctorOrAdmin])
def patient_detail(request, patient_id: int):
    patient = get_patient(patient_id)
    access.ensure_access(request.user, access.READ, patient)
    return Response({'success': True, 'data': format_patient(patient)})


@api_view(['GET'])
@permission_classes([IsDoctorOrAdmin])
def patient_history(request, patient_id: int):
    reports, pagination = patient_medical_history(patient_id, **page_params(request))
    return paged_response('reports', reports, pagination)


@api_view(['GET'])
@permission_classes([IsDoctorOrAdmin])
def patient_prescription_list(request, patient_id: int):
    prescriptions, pagination = patient_prescriptions(patient_id, **page_params(request))
    return paged_response('prescriptions', prescriptions, pagination)
