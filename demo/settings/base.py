from pathlib import Path
import os


def _level(env_name: str, default: str = "INFO") -> str:
    val = os.getenv(env_name, default).upper()
    return val if val in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"} else default


def _list(env_name: str, default: str = "") -> list[str]:
    return [v.strip() for v in os.getenv(env_name, default).split(",") if v.strip()]


BASE_DIR = Path(__file__).resolve().parent.parent.parent

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "dev-only-change-me")
DEBUG = False  # override in dev

ALLOWED_HOSTS = _list("DJANGO_ALLOWED_HOSTS")

INSTALLED_APPS = [
    "django.contrib.staticfiles",
    "importmap",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
    "importmap.middleware.ImportmapCacheSweeperMiddleware",
]

ROOT_URLCONF = "demo.urls"

DATABASES = {}

# Static
STATIC_URL = "/static/"
STATICFILES_DIRS = [BASE_DIR / "demo" / "static"]
STATIC_ROOT = BASE_DIR / "staticfiles"  # prod collectstatic

# Import map
IMPORTMAP = {
    "ACCEPT": _list("IMPORTMAP_ACCEPT", "js"),
    "DECLARATION": BASE_DIR / "config" / "importmap.py",
    "WATCHES": ["demo/static/js"],
}

LANGUAGE_CODE = "fr-fr"
TIME_ZONE = "Europe/Paris"
USE_I18N = True
USE_TZ = True

# LOGS
# comments in English
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "console": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
            "datefmt": "%Y-%m-%dT%H:%M:%S%z",
        },
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "console"},
    },
    "root": {
        "handlers": ["console"],
        "level": _level("DJANGO_LOG_LEVEL", "INFO"),
    },
    "loggers": {
        # skipped paths are warnings, cache sweeps are debug
        "importmap": {
            "handlers": ["console"],
            "level": _level("IMPORTMAP_LOG_LEVEL", "WARNING"),
            "propagate": False,
        },
    },
}
