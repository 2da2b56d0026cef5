"""
Test settings for the Newsroom publication engine.

Used by pytest-django (see pyproject.toml) and `manage.py test --settings`.
"""

from .base import *

DEBUG = False

SECRET_KEY = "test-secret-key"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

# Each test case overrides this with its own temporary directory
NEWSROOM_MIRROR_ROOT = BASE_DIR / "posts_mirror_test"

NEWSROOM_MIRROR_WORKERS = 4

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {
        "null": {
            "class": "logging.NullHandler",
        },
    },
    "root": {
        "handlers": ["null"],
        "level": "WARNING",
    },
}
