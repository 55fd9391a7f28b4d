from __future__ import annotations

from typing import Callable, Optional, Protocol, runtime_checkable
from urllib.parse import urlsplit

from django.contrib.staticfiles.storage import staticfiles_storage
from django.core.files.storage import Storage


def is_absolute_url(path: str) -> bool:
    """Vrai pour une URL déjà servable telle quelle (ex: https://cdn.example.org/md5.js, //cdn...)."""
    return path.startswith("//") or bool(urlsplit(path).scheme)


class AssetNotFound(LookupError):
    """L'asset demandé n'existe pas (encore) côté stockage statique."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Asset introuvable: {path!r}")
        self.path: str = path


@runtime_checkable
class Resolver(Protocol):
    """Transforme un chemin logique ("components/clock.js") en URL servie."""

    def resolve(self, path: str) -> str:
        ...


class StaticfilesResolver:
    """Resolver adossé au stockage `staticfiles` de Django.

    Avec `ManifestStaticFilesStorage` (ou la variante WhiteNoise), `url()`
    renvoie l'URL fingerprintée et lève `ValueError` si l'entrée manque au
    manifeste : on la traduit en `AssetNotFound`. Les URLs absolues (CDN)
    sont renvoyées telles quelles.
    """

    def __init__(self, storage: Optional[Storage] = None) -> None:
        self.storage = storage if storage is not None else staticfiles_storage

    def resolve(self, path: str) -> str:
        if is_absolute_url(path):
            return path
        try:
            return self.storage.url(path)
        except ValueError as exc:
            raise AssetNotFound(path) from exc


class CallableResolver:
    """Adapte une simple fonction `path -> url` (ex: `django.templatetags.static.static`)."""

    def __init__(self, func: Callable[[str], str]) -> None:
        self.func = func

    def resolve(self, path: str) -> str:
        return self.func(path)
