"""Settings used by the pytest suite."""

import os

from .base import *  # noqa: F401,F403

DEBUG = False

SECRET_KEY = 'test-secret-key'

# In-memory SQLite unless DB_ENGINE points the suite at a server database.
if not os.environ.get('DB_ENGINE'):
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': ':memory:',
        }
    }

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

LOGGING['handlers']['console']['formatter'] = 'console'  # noqa: F405
LOGGING['root']['level'] = 'CRITICAL'  # noqa: F405
