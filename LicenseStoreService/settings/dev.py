"""
Development settings: SQLite on request, mail printed to the console.
"""

import os

from .base import *  # noqa: F403, F401
from .logging import get_logging_config

DEBUG = True

ALLOWED_HOSTS = ["localhost", "127.0.0.1", "0.0.0.0"]

if os.environ.get("DB_ENGINE") == "sqlite":
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",  # noqa: F405
        }
    }

# Confirmation and reset links show up in the runserver output
EMAIL_BACKEND = "django.core.mail.backends.console.EmailBackend"

LOGGING = get_logging_config("development", os.environ.get("LOG_FORMAT", "plain"))
