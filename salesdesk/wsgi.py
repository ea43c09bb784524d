"""
WSGI config for salesdesk project.

It exposes the WSGI callable as a module-level variable named ``application``.
Static files are served by WhiteNoise's middleware (see settings.MIDDLEWARE).
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'salesdesk.settings')

application = get_wsgi_application()
