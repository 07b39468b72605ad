"""
Development settings
"""
from .base import *
from .database import get_database_config

DEBUG = True

DATABASES = {
    'default': get_database_config(env),
}

# Email backend (console for development)
EMAIL_BACKEND = 'django.core.mail.backends.console.EmailBackend'
