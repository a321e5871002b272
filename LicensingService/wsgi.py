"""
WSGI config for LicensingService project.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "LicensingService.settings.dev")

application = get_wsgi_application()
