from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from records.permissions import IsAdminRole, IsDoctorOrAdmin, ReadOnly
from records.serializers.doctor import DoctorSearchQuerySerializer, DoctorUpdateSerializer
from records.services import access
from records.services.audit import log_action
from records.services.doctors import get_doctor, list_doctors, search_doctors, update_doctor, list_doctor_patients
from records.services.projections import format_doctor
from records.views._common import page_params, paged_response


@api_view(['GET'])
@permission_classes([IsAdminRole])
def doctor_list(request):
    doctors, pagination = list_doctors(**page_params(request))
    return paged_response('doctors', doctors, pagination)


@api_view(['GET'])
def doctor_search(request):
    """Search doctors.
    Query params:
      - query: name substring (first or last name)
      - specialization, department: substring filters
    At most 20 results, no pagination.
    """
    s = DoctorSearchQuerySerializer(data=request.query_params)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    doctors = search_doctors(
        query=vd.get('query'),
        specialization=(vd.get('specialization') or '').strip() or None,
        department=(vd.get('department') or '').strip() or None,
    )
    return Response({'success': True, 'data': {'doctors': doctors}})


@api_view(['GET', 'PUT'])
@permission_classes([(ReadOnly & IsDoctorOrAdmin) | IsAdminRole])
def doctor_detail(request, doctor_id: int):
    if request.method == 'PUT':
        access.ensure_access(request.user, access.UPDATE, get_doctor(doctor_id))
        s = DoctorUpdateSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        doctor = update_doctor(doctor_id, s.validated_data)
        log_action(user=request.user, action='doctor_update', object_type='doctor', object_id=doctor.id,
                   detail={'fields': sorted(s.validated_data)})
        return Response({'success': True, 'message': 'Doctor updated successfully', 'data': format_doctor(doctor)})

    doctor = get_doctor(doctor_id)
    access.ensure_access(request.user, access.READ, doctor)
    return Response({'success': True, 'data': format_doctor(doctor)})


@api_view(['GET'])
@permission_classes([IsDoctorOrAdmin])
def doctor_patients(request, doctor_id: int):
    patients, pagination = list_doctor_patients(doctor_id, **page_params(request))
    return paged_response('patients', patients, pagination)
