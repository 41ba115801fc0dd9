"""WSGI entry point for the Talking Notes project."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'talkingnotes.settings')

application = get_wsgi_application()
