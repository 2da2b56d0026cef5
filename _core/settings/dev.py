"""
Development settings for the Newsroom publication engine.

Use this for local development with manage.py runserver.
"""

from .base import *

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = config('DEBUG', default=True, cast=bool)

# Development-friendly ALLOWED_HOSTS
ALLOWED_HOSTS = config('ALLOWED_HOSTS', default='localhost,127.0.0.1,*', cast=Csv())

# Database - SQLite by default (inherited from base.py)

# Simple console logging for development
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'INFO',
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        # Mirror side effects are noisy at DEBUG; keep them at INFO
        'newsroom.mirror': {
            'handlers': ['console'],
            'level': config('MIRROR_LOG_LEVEL', default='INFO'),
            'propagate': False,
        },
    },
}

# Show detailed error pages
DEBUG_PROPAGATE_EXCEPTIONS = False
