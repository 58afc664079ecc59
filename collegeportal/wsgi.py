"""
WSGI config for the College Portal project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'collegeportal.settings')

application = get_wsgi_application()
