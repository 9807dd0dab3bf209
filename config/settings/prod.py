"""Production settings for the homestay project.

Sensitive values must be provided via environment variables.
"""

from .base import *  # noqa: F401,F403

# Never run with debug enabled in production
DEBUG = False

SECRET_KEY = get_env('DJANGO_SECRET_KEY', required=True)  # noqa: F405

# Allowed hosts should be defined explicitly via environment variable
ALLOWED_HOSTS = [
    host.strip()
    for host in get_env('DJANGO_ALLOWED_HOSTS', '').split(',')  # noqa: F405
    if host.strip()
]

DATABASES['default']['CONN_MAX_AGE'] = int(get_env('DB_CONN_MAX_AGE', '60'))  # noqa: F405

# Configure secure proxies and cookies
CSRF_COOKIE_SECURE = True
SESSION_COOKIE_SECURE = True
