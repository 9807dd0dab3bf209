"""Development settings for the homestay project.

Extends the base settings with debug mode, human readable console logs
and console email. Do not use these settings in production!
"""

from .base import *  # noqa: F401,F403

# Enable debug mode for development
DEBUG = True

# Allow all hosts in development
ALLOWED_HOSTS = ['*']

# Use console email backend during development
EMAIL_BACKEND = 'django.core.mail.backends.console.EmailBackend'

LOGGING['handlers']['console']['formatter'] = 'console'  # noqa: F405
