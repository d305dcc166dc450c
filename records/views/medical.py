from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from records.permissions import IsDoctorRole, IsPatientRole
from records.serializers.medical import MedicalReportCreateSerializer, PrescriptionCreateSerializer
from records.services.medical import (
    create_report, create_prescription, report_for, prescription_for, my_reports, my_prescriptions,
)
from records.services.projections import format_report, format_prescription
from records.views._common import page_params, paged_response


@api_view(['POST'])
@permission_classes([IsDoctorRole])
def report_create(request):
    """Create a medical report in the calling doctor's name.

    ``patient`` accepts the profile id or the ``PAT`` identifier; any
    ``doctor`` key in the body is ignored.
    """
    s = MedicalReportCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    report = create_report(request.user, s.validated_data)
    return Response({
        'success': True,
        'message': 'Medical report created successfully',
        'data': format_report(report),
    }, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsDoctorRole])
def prescription_create(request):
    s = PrescriptionCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    rx = create_prescription(request.user, s.validated_data)
    return Response({
        'success': True,
        'message': 'Prescription created successfully',
        'data': format_prescription(rx),
    }, status=status.HTTP_201_CREATED)


@api_view(['GET'])
def report_detail(request, report_id: int):
    return Response({'success': True, 'data': format_report(report_for(request.user, report_id))})


@api_view(['GET'])
def prescription_detail(request, prescription_id: int):
    return Response({'success': True, 'data': format_prescription(prescription_for(request.user, prescription_id))})


@api_view(['GET'])
@permission_classes([IsPatientRole])
def my_report_list(request):
    reports, pagination = my_reports(request.user, **page_params(request))
    return paged_response('reports', reports, pagination)


@api_view(['GET'])
@permission_classes([IsPatientRole])
def my_prescription_list(request):
    prescriptions, pagination = my_prescriptions(request.user, **page_params(request))
    return paged_response('prescriptions', prescriptions, pagination)
