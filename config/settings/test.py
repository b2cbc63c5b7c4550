"""
Test settings for the newsroom backend.

Used by pytest-django (see pyproject.toml).
"""

from .base import *

DEBUG = False

ALLOWED_HOSTS = ['testserver', 'localhost']

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

CELERY_TASK_ALWAYS_EAGER = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

# Generous throttles so API tests never trip them unless they ask to
REST_FRAMEWORK = {
    **REST_FRAMEWORK,
    'DEFAULT_THROTTLE_RATES': {
        'burst': '10000/minute',
        'ai': '10000/minute',
        'login': '10000/minute',
    },
}

ANTHROPIC_API_KEY = 'test-key'
ANTHROPIC_API_KEY_FALLBACK = ''
AI_BACKOFF_SECONDS = 0.0

LOGGING['handlers']['file'] = {
    'class': 'logging.NullHandler',
}
