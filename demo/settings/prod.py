from .base import *
from .base import _list

DEBUG = False

ALLOWED_HOSTS = _list("DJANGO_ALLOWED_HOSTS", "localhost")

# WhiteNoise DOIT être juste après SecurityMiddleware
MIDDLEWARE = [
                 "django.middleware.security.SecurityMiddleware",
                 "whitenoise.middleware.WhiteNoiseMiddleware",
             ] + [m for m in MIDDLEWARE if m not in (
    "django.middleware.security.SecurityMiddleware",
    "whitenoise.middleware.WhiteNoiseMiddleware",
    "importmap.middleware.ImportmapCacheSweeperMiddleware",
)]

# Storage qui génère des URLs fingerprintées + gzip/br : le resolver de l'import map s'en sert
STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage"},
}
WHITENOISE_MAX_AGE = 31536000  # 1 an pour les fichiers hashés

# fichiers figés après collectstatic : pas de surveillance
IMPORTMAP = {**IMPORTMAP, "WATCHES": [], "SWEEP_ON_REQUEST": False}
