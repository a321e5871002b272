"""
Base Django settings for LicensingService.

These settings are shared across all environments.
Environment-specific overrides are in dev.py, test.py, and prod.py
"""
import os
from pathlib import Path

from .logging import get_logging_config

# Build paths inside the project
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.environ.get(
    "SECRET_KEY", "django-insecure-7c!r0v#q2e9m$k1x@l8z^w4t_y3n6b5h&j0f(a)s-d+g=p"
)

DEBUG = False

ALLOWED_HOSTS = []

# Application definition
INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    # Third party
    "rest_framework",
    "drf_spectacular",
    # Local apps
    "LicensingService.apps.LicensingServiceConfig",
    "core",
    "licenses",
    "revocations",
    "api",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
    # Custom middleware
    "core.middleware.observability.ObservabilityMiddleware",
    "core.middleware.metrics.MetricsMiddleware",
    "core.middleware.auth.OperatorAPIKeyMiddleware",
]

ROOT_URLCONF = "LicensingService.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
            ],
        },
    },
]

WSGI_APPLICATION = "LicensingService.wsgi.application"
ASGI_APPLICATION = "LicensingService.asgi.application"

# Database
# https://docs.djangoproject.com/en/4.2/ref/settings/#databases
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.environ.get("DB_NAME", "licensing_service"),
        "USER": os.environ.get("DB_USER", "postgres"),
        "PASSWORD": os.environ.get("DB_PASSWORD", "postgres"),
        "HOST": os.environ.get("DB_HOST", "localhost"),
        "PORT": os.environ.get("DB_PORT", "5432"),
        "OPTIONS": {
            "connect_timeout": 10,
        },
    }
}

# Internationalization
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# Static files (CSS, JavaScript, Images)
STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

# Default primary key field type
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# REST Framework
REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
    ],
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [],
    "UNAUTHENTICATED_USER": None,
    "EXCEPTION_HANDLER": "api.exceptions.custom_exception_handler",
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
}

# drf-spectacular settings
SPECTACULAR_SETTINGS = {
    "TITLE": "Licensing Service API",
    "DESCRIPTION": (
        "Issues RSA-signed license tokens for products and maintains the "
        "authoritative revocation record consulted by verifiers."
    ),
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
    "COMPONENT_SPLIT_REQUEST": True,
    "SCHEMA_PATH_PREFIX": "/api/v1",
    "TAGS": [
        {"name": "License API", "description": "License issuance and revocation"},
    ],
}

# License signing
LICENSE_KEYS_DIR = Path(os.environ.get("LICENSE_KEYS_DIR", BASE_DIR / "keys"))
LICENSE_SIGNER_NAME = os.environ.get("LICENSE_SIGNER_NAME", "plugin")
LICENSE_KEY_PASSWORD = os.environ.get("LICENSE_KEY_PASSWORD", "")

# Revocation record
REVOCATION_STORAGE_BACKEND = os.environ.get("REVOCATION_STORAGE_BACKEND", "django")
REVOCATION_BLOB_PATH = os.environ.get("REVOCATION_BLOB_PATH", "revocations.json")
REVOCATION_RETRY = {
    "max_attempts": int(os.environ.get("REVOCATION_MAX_ATTEMPTS", "5")),
    "base_delay": float(os.environ.get("REVOCATION_BASE_DELAY", "0.05")),
    "max_delay": float(os.environ.get("REVOCATION_MAX_DELAY", "1.0")),
    "jitter": True,
}

# SHA-256 hex digests of operator API keys allowed to revoke licenses
OPERATOR_API_KEY_HASHES = [
    h.strip() for h in os.environ.get("OPERATOR_API_KEY_HASHES", "").split(",") if h.strip()
]

# Observability
LOGGING = get_logging_config(os.environ.get("ENVIRONMENT", "development"))
