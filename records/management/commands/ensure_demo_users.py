# records/management/commands/ensure_demo_users.py
from django.core.management.base import BaseCommand
from django.db import transaction

from records.models import User, DoctorProfile, PatientProfile, ROLE_ADMIN, ROLE_DOCTOR, ROLE_PATIENT

DEMO_PASSWORD = "Demo@12345"

DEMO_SET = [
    ("admin@hospital.local", ROLE_ADMIN, "System", "Admin"),
    ("doctor@hospital.local", ROLE_DOCTOR, "John", "Smith"),
    ("patient@hospital.local", ROLE_PATIENT, "Jane", "Doe"),
]


class Command(BaseCommand):
    help = "Ensure one demo admin, doctor and patient exist with a known password (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--password", default=DEMO_PASSWORD, help="password to set on every demo account")

    @transaction.atomic
    def handle(self, *args, **opts):
        password = opts["password"]
        for email, role, first_name, last_name in DEMO_SET:
            u, created = User.objects.get_or_create(
                email=email,
                defaults={"role": role, "first_name": first_name, "last_name": last_name,
                          "is_active": True, "is_staff": role == ROLE_ADMIN},
            )
            # reset password, role and active flag on existing rows
            u.set_password(password)
            u.role = role
            u.is_active = True
            u.save(update_fields=["password", "role", "is_active"])

            if role == ROLE_DOCTOR:
                DoctorProfile.objects.get_or_create(
                    user=u,
                    defaults={"specialization": "General Medicine", "license_number": "DEMO-0001",
                              "department": "Outpatient"},
                )
            elif role == ROLE_PATIENT and not PatientProfile.objects.filter(user=u).exists():
                PatientProfile.objects.create(user=u)
            self.stdout.write(self.style.SUCCESS(f"{'created' if created else 'ok'}: {email} ({role})"))
        self.stdout.write(self.style.SUCCESS("All demo users ensured."))
