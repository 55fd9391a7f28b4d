from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Type

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.utils.module_loading import import_string

from .map import ImportMap

DEFAULTS: Dict[str, Any] = {
    "ACCEPT": ["js"],
    "RESCUABLE_ASSET_ERRORS": ["importmap.resolver.AssetNotFound"],
    "FILE_WATCHER": "importmap.watcher.FileUpdateChecker",
    "ROOT": None,  # défaut : settings.BASE_DIR
    "DECLARATION": None,  # défaut : <ROOT>/config/importmap.py
    "WATCHES": [],
    "SWEEP_ON_REQUEST": None,  # défaut : settings.DEBUG
}

_lock = threading.Lock()
_importmap: Optional[ImportMap] = None


def importmap_settings() -> Dict[str, Any]:
    """Réglages `IMPORTMAP` complétés par les valeurs par défaut."""
    user = getattr(settings, "IMPORTMAP", {}) or {}
    if not isinstance(user, dict):
        raise ImproperlyConfigured("IMPORTMAP doit être un dict.")
    unknown = set(user) - set(DEFAULTS)
    if unknown:
        raise ImproperlyConfigured(f"Clés IMPORTMAP inconnues: {', '.join(sorted(unknown))}")

    conf = {**DEFAULTS, **user}
    if conf["ROOT"] is None:
        conf["ROOT"] = getattr(settings, "BASE_DIR", Path.cwd())
    if conf["DECLARATION"] is None:
        conf["DECLARATION"] = Path(conf["ROOT"]) / "config" / "importmap.py"
    if conf["SWEEP_ON_REQUEST"] is None:
        conf["SWEEP_ON_REQUEST"] = settings.DEBUG
    if isinstance(conf["ACCEPT"], str):
        raise ImproperlyConfigured("IMPORTMAP['ACCEPT'] doit être une liste d'extensions.")
    return conf


def _import(dotted: Any, setting: str) -> Any:
    if not isinstance(dotted, str):
        return dotted
    try:
        return import_string(dotted)
    except ImportError as exc:
        raise ImproperlyConfigured(f"IMPORTMAP['{setting}']: impossible d'importer {dotted!r}") from exc


def rescuable_errors(conf: Dict[str, Any]) -> Tuple[Type[BaseException], ...]:
    errors: List[Type[BaseException]] = []
    for item in conf["RESCUABLE_ASSET_ERRORS"]:
        cls = _import(item, "RESCUABLE_ASSET_ERRORS")
        if not (isinstance(cls, type) and issubclass(cls, BaseException)):
            raise ImproperlyConfigured(f"IMPORTMAP['RESCUABLE_ASSET_ERRORS']: {item!r} n'est pas une exception.")
        errors.append(cls)
    return tuple(errors)


def build_importmap(conf: Optional[Dict[str, Any]] = None) -> ImportMap:
    """Construit une import map depuis les settings, lit la déclaration et installe le surveillant."""
    conf = conf if conf is not None else importmap_settings()
    importmap = ImportMap(
        accept=conf["ACCEPT"],
        rescuable_errors=rescuable_errors(conf),
        file_watcher=_import(conf["FILE_WATCHER"], "FILE_WATCHER"),
        root=conf["ROOT"],
    )
    importmap.draw(conf["DECLARATION"])
    if conf["WATCHES"]:
        importmap.cache_sweeper(watches=conf["WATCHES"])
    return importmap


def get_importmap() -> ImportMap:
    """Import map partagée par le processus (construite au premier appel)."""
    global _importmap
    with _lock:
        if _importmap is None:
            _importmap = build_importmap()
        return _importmap


def reset_importmap() -> None:
    global _importmap
    with _lock:
        _importmap = None
