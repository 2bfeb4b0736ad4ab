"""
WSGI config for the Sand Sample Data API.

Gunicorn or any other WSGI server imports `application` from here.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

application = get_wsgi_application()

