"""
Test settings: isolated database and storage, Celery tasks run inline.
"""
from .settings import *  # noqa: F401,F403

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

STORAGES = {
    'default': {
        'BACKEND': 'django.core.files.storage.InMemoryStorage',
    },
    'staticfiles': {
        'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
    },
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

STRIPE_SECRET_KEY = 'sk_test_syncdrop'
STRIPE_WEBHOOK_SECRET = 'whsec_test_syncdrop'
GUMLOOP_WORKFLOW_URL = 'https://gumloop.test/workflow'
GUMLOOP_API_KEY = 'gumloop-test-key'
RESEND_API_KEY = 're_test_syncdrop'
SITE_URL = 'http://testserver'

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = False
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

LOG_LEVEL = 'WARNING'
LOGGING['loggers']['orders']['level'] = LOG_LEVEL  # noqa: F405
LOGGING['loggers']['celery']['level'] = LOG_LEVEL  # noqa: F405
