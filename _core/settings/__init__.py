"""
Django settings package for the Newsroom publication engine.

Selects the appropriate settings module based on DJANGO_SETTINGS_MODULE environment variable.
Defaults to development settings if not specified.
"""
