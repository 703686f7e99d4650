"""
WSGI config for the NOKO POS project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "nokopos.settings")

application = get_wsgi_application()
