"""
URL mappings for the hospital records API.

All API paths live under ``/api/`` and deliberately omit trailing
slashes.  Literal segments such as ``search`` are registered before the
``<int:...>`` routes they would otherwise collide with.
"""
from django.urls import path, include

from .auth_views import register_view, login_view, profile_view
from .views import doctors, patients, medical, health

urlpatterns = [
    # exposes /metrics
    path('', include('django_prometheus.urls')),
    path('healthz', health.healthz, name='healthz'),

    path('api/auth/register', register_view, name='auth-register'),
    path('api/auth/login', login_view, name='auth-login'),
    path('api/auth/profile', profile_view, name='auth-profile'),

    path('api/doctors', doctors.doctor_list, name='doctor-list'),
    path('api/doctors/search', doctors.doctor_search, name='doctor-search'),
    path('api/doctors/<int:doctor_id>', doctors.doctor_detail, name='doctor-detail'),
    path('api/doctors/<int:doctor_id>/patients', doctors.doctor_patients, name='doctor-patients'),

    path('api/patients', patients.patient_list, name='patient-list'),
    path('api/patients/search', patients.patient_search, name='patient-search'),
    path('api/patients/<int:patient_id>', patients.patient_detail, name='patient-detail'),
    path('api/patients/<int:patient_id>/medical-history', patients.patient_history, name='patient-history'),
    path('api/patients/<int:patient_id>/prescriptions', patients.patient_prescription_list,
         name='patient-prescriptions'),

    path('api/medical/my-reports', medical.my_report_list, name='my-reports'),
    path('api/medical/my-prescriptions', medical.my_prescription_list, name='my-prescriptions'),
    path('api/medical/reports', medical.report_create, name='report-create'),
    path('api/medical/prescriptions', medical.prescription_create, name='prescription-create'),
    path('api/medical/reports/<int:report_id>', medical.report_detail, name='report-detail'),
    path('api/medical/prescriptions/<int:prescription_id>', medical.prescription_detail,
         name='prescription-detail'),
]
