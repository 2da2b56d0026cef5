"""
Production settings for the Newsroom publication engine.

Used by the Docker image. Every secret and host-specific value comes from the
environment.
"""

import logging

from .base import *

# =============================================================================
# SENTRY ERROR TRACKING (OPTIONAL)
# =============================================================================
# Enabled only when SENTRY_DSN is set.

SENTRY_DSN = config('SENTRY_DSN', default='')

if SENTRY_DSN:
    import sentry_sdk
    from sentry_sdk.integrations.django import DjangoIntegration
    from sentry_sdk.integrations.logging import LoggingIntegration

    SENTRY_FILTERED_FIELDS = ('password', 'sessionid', 'csrfmiddlewaretoken')

    def filter_sensitive_data(event, hint):
        """Redact credentials from Sentry events before sending."""
        request = event.get('request', {})

        headers = request.get('headers', {})
        for header in ('Authorization', 'Cookie'):
            if header in headers:
                headers[header] = '[Filtered]'

        data = request.get('data')
        if isinstance(data, dict):
            for field in SENTRY_FILTERED_FIELDS:
                if field in data:
                    data[field] = '[Filtered]'

        return event

    sentry_sdk.init(
        dsn=SENTRY_DSN,
        integrations=[
            DjangoIntegration(
                transaction_style='url',
                middleware_spans=True,
                signals_spans=False,
            ),
            # Mirror failures are logged at ERROR and become events
            LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
        ],
        traces_sample_rate=config('SENTRY_TRACES_SAMPLE_RATE', default=0.1, cast=float),
        environment=config('ENVIRONMENT', default='production'),
        release=config('GIT_COMMIT', default='unknown'),
        send_default_pii=False,
        before_send=filter_sensitive_data,
        max_breadcrumbs=50,
    )

    logging.getLogger(__name__).info(
        f"Sentry initialized for environment '{config('ENVIRONMENT', default='production')}'"
    )

DEBUG = config('DEBUG', default=False, cast=bool)

# Must be set explicitly in production
ALLOWED_HOSTS = config('ALLOWED_HOSTS', cast=Csv())

# WhiteNoise serves admin and API docs static files
MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'whitenoise.middleware.WhiteNoiseMiddleware',
    'corsheaders.middleware.CorsMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
    'core.middleware.SentryContextMiddleware',
]

STORAGES = {
    'default': {
        'BACKEND': 'django.core.files.storage.FileSystemStorage',
    },
    'staticfiles': {
        'BACKEND': 'whitenoise.storage.CompressedManifestStaticFilesStorage',
    },
}

# =============================================================================
# SECURITY
# =============================================================================
# TLS terminates at the reverse proxy; Django only marks cookies secure and
# sends HSTS.

SECURE_SSL_REDIRECT = config('SECURE_SSL_REDIRECT', default=False, cast=bool)
SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')
SECURE_HSTS_SECONDS = config('SECURE_HSTS_SECONDS', default=31536000, cast=int)
SECURE_HSTS_INCLUDE_SUBDOMAINS = config('SECURE_HSTS_INCLUDE_SUBDOMAINS', default=True, cast=bool)
SESSION_COOKIE_SECURE = config('SESSION_COOKIE_SECURE', default=True, cast=bool)
CSRF_COOKIE_SECURE = config('CSRF_COOKIE_SECURE', default=True, cast=bool)
SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = 'DENY'

# Console only; docker collects stdout
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {name} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': config('LOG_LEVEL', default='INFO'),
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': config('DJANGO_LOG_LEVEL', default='INFO'),
            'propagate': False,
        },
        'newsroom.audit': {
            'handlers': ['console'],
            'level': config('AUDIT_LOG_LEVEL', default='INFO'),
            'propagate': False,
        },
        'newsroom.mirror': {
            'handlers': ['console'],
            'level': config('MIRROR_LOG_LEVEL', default='INFO'),
            'propagate': False,
        },
    },
}
