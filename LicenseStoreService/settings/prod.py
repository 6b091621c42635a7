"""
Production settings for LicenseStoreService.
"""

import os

from .base import *  # noqa: F403, F401
from .logging import get_logging_config

DEBUG = False

# Security settings
SECURE_SSL_REDIRECT = os.environ.get("SECURE_SSL_REDIRECT", "true").lower() == "true"
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = "DENY"

# Secrets must come from the environment in production
SECRET_KEY = os.environ["SECRET_KEY"]
SESSION_TOKEN_SECRET = os.environ.get("SESSION_TOKEN_SECRET", SECRET_KEY)

# Logging in production
ENVIRONMENT = "production"
LOGGING = get_logging_config(ENVIRONMENT, os.environ.get("LOG_FORMAT", "json"))
log_file = os.environ.get("LOG_FILE")
if log_file:
    LOGGING["handlers"]["file"] = {
        "class": "logging.handlers.RotatingFileHandler",
        "filename": log_file,
        "maxBytes": 1024 * 1024 * 10,  # 10 MB
        "backupCount": 10,
        "formatter": "json",
    }
    for logger_config in [LOGGING["root"], *LOGGING["loggers"].values()]:
        logger_config["handlers"].append("file")
