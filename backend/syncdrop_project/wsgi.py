"""
WSGI config for the SyncDrop backend.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'syncdrop_project.settings')

application = get_wsgi_application()
