"""
WSGI entry point for the hospital records project.

Production servers import ``application`` from this module.
"""
import os

from django.core.wsgi import get_wsgi_application  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "hospital_records.settings")

application = get_wsgi_application()
