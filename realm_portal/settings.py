import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "insecure-secret-key")
DEBUG = os.getenv("DJANGO_DEBUG", "1") == "1"
ALLOWED_HOSTS = []

INSTALLED_APPS = [
    "realm_calendar.apps.RealmCalendarConfig",
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "rest_framework",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "realm_portal.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [BASE_DIR / "templates"],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
                "realm_calendar.context_processors.calendar_snapshot",
            ],
        },
    },
]

WSGI_APPLICATION = "realm_portal.wsgi.application"

# SQLite path outside the repo unless overridden.
DJANGO_DB_PATH = os.environ.get("DJANGO_DB_PATH")
if DJANGO_DB_PATH:
    DB_DEFAULT_PATH = Path(DJANGO_DB_PATH)
else:
    DB_DEFAULT_PATH = Path.home() / "realm_data" / "db_dev.sqlite3"

DB_DEFAULT_PATH.parent.mkdir(parents=True, exist_ok=True)

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": str(DB_DEFAULT_PATH),
        "OPTIONS": {"timeout": 20},
    }
}

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
    {"NAME": "django.contrib.auth.password_validation.NumericPasswordValidator"},
]

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Realm calendar
REALM_CALENDAR_DEFINITION = os.getenv(
    "REALM_CALENDAR_DEFINITION", str(BASE_DIR / "realm_calendar" / "data" / "default_calendar.json")
)
REALM_CALENDAR_TIME_INTEGRATION = os.getenv("REALM_CALENDAR_TIME_INTEGRATION", "self")
REALM_CALENDAR_PRIMARY = os.getenv("REALM_CALENDAR_PRIMARY", "1") == "1"
REALM_CALENDAR_STATE_KEY = os.getenv("REALM_CALENDAR_STATE_KEY", "default")
REALM_CALENDAR_LOG_LEVEL = os.getenv("REALM_CALENDAR_LOG_LEVEL", "INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "simple"},
    },
    "loggers": {
        "realm_calendar": {
            "handlers": ["console"],
            "level": REALM_CALENDAR_LOG_LEVEL,
            "propagate": True,
        },
    },
}

# === DEV convenience: hosts & CSRF ===
if DEBUG:
    ALLOWED_HOSTS = ["*"]
    CSRF_TRUSTED_ORIGINS = [
        "http://localhost:8000",
        "http://127.0.0.1:8000",
    ]
# === END DEV block ===
