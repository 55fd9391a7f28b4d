from __future__ import annotations

import hashlib
import json
import logging
import os
import threading
from typing import Any, Callable, Dict, Hashable, Iterable, List, Optional, Sequence, Tuple, Type, Union

from .cache import ResolutionCache
from .entries import PinnedDirectory, PinnedFile
from .expansion import AcceptedExtensions, absolute_root_of, expand_entries
from .resolver import AssetNotFound, Resolver
from .watcher import FileUpdateChecker

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]
FileWatcherFactory = Callable[..., Any]


class ImportMap:
    """Registre des modules épinglés et génération de l'import map.

    La configuration (extensions acceptées, erreurs tolérées, fabrique de
    surveillance, racine du projet) est passée au constructeur ; voir
    `importmap.conf.get_importmap()` pour l'instance construite depuis les
    settings Django.
    """

    def __init__(
            self,
            *,
            accept: Iterable[str] = ("js",),
            rescuable_errors: Sequence[Type[BaseException]] = (AssetNotFound,),
            file_watcher: FileWatcherFactory = FileUpdateChecker,
            root: PathLike = ".",
    ) -> None:
        self._accepted = AcceptedExtensions(accept)
        self.accept: Tuple[str, ...] = self._accepted.all
        self.rescuable_errors: Tuple[Type[BaseException], ...] = tuple(rescuable_errors)
        self.file_watcher = file_watcher
        self.root = root
        self._lock = threading.Lock()
        self._packages: Dict[str, PinnedFile] = {}
        self._directories: Dict[str, PinnedDirectory] = {}
        self._cache = ResolutionCache()
        self._cache_sweeper: Optional[Any] = None

    # ------------------------------------------------------------------ registre

    @property
    def packages(self) -> Dict[str, PinnedFile]:
        with self._lock:
            return dict(self._packages)

    @property
    def directories(self) -> Dict[str, PinnedDirectory]:
        with self._lock:
            return dict(self._directories)

    def draw(self, path: Optional[PathLike] = None, block: Optional[Callable[["ImportMap"], Any]] = None) -> "ImportMap":
        from .declaration import draw

        return draw(self, path=path, block=block)

    def pin(self, name: str, to: Optional[str] = None, preload: bool = False) -> PinnedFile:
        entry = PinnedFile(
            name=name,
            path=to or self._accepted.javascript_filename(name),
            preload=preload,
        )
        with self._lock:
            self._packages[name] = entry
        self.clear_cache()
        return entry

    def pin_all_from(
            self,
            dir: PathLike,
            under: Optional[str] = None,
            to: Optional[str] = None,
            preload: bool = False,
    ) -> PinnedDirectory:
        entry = PinnedDirectory(dir=str(dir), under=under, path=to, preload=preload)
        with self._lock:
            self._directories[entry.dir] = entry
        self.clear_cache()
        return entry

    # ------------------------------------------------------------------ résolution

    def preloaded_module_paths(self, resolver: Resolver, cache_key: Hashable = "preloaded_module_paths") -> List[str]:
        """URLs résolues des modules marqués `preload`, dans l'ordre de l'ensemble agrégé.

        `cache_key` permet de faire varier le cache selon le resolver
        (ex: un resolver par `asset_host`).
        """
        return self._cache.compute_or_fetch(
            cache_key,
            lambda: list(self._resolve_asset_paths(self._expanded_preloading_entries(), resolver).values()),
        )

    def to_json(self, resolver: Resolver, cache_key: Hashable = "json") -> str:
        """Import map au format JSON indenté : `{"imports": {nom: url}}`."""
        return self._cache.compute_or_fetch(
            cache_key,
            lambda: json.dumps({"imports": self._resolve_asset_paths(self._expanded_entries(), resolver)}, indent=2),
        )

    def digest(self, resolver: Resolver) -> str:
        """SHA-1 du JSON de l'import map, utilisable dans un ETag de page HTML."""
        return hashlib.sha1(self.to_json(resolver).encode("utf-8")).hexdigest()

    # ------------------------------------------------------------------ invalidation

    def cache_sweeper(self, watches: Optional[Union[PathLike, Iterable[PathLike]]] = None) -> Optional[Any]:
        """Installe (avec `watches`) ou renvoie le surveillant qui vide le cache.

        Le surveillant est construit par `file_watcher([], {dossier: extensions}, callback)`
        et expose `execute_if_updated()` pour une vérification à la demande.
        Les dossiers relatifs sont résolus depuis `root`, comme pour `pin_all_from`.
        """
        if watches is None:
            return self._cache_sweeper
        if isinstance(watches, (str, os.PathLike)):
            watches = [watches]
        dirs = {str(absolute_root_of(d, self.root)): list(self.accept) for d in watches}
        self._cache_sweeper = self.file_watcher([], dirs, self.clear_cache)
        return self._cache_sweeper

    def clear_cache(self) -> None:
        self._cache.invalidate_all()

    # ------------------------------------------------------------------ interne

    def _expanded_entries(self) -> Dict[str, PinnedFile]:
        with self._lock:
            packages = dict(self._packages)
            directories = list(self._directories.values())
        return expand_entries(packages, directories, self._accepted, self.root)

    def _expanded_preloading_entries(self) -> Dict[str, PinnedFile]:
        return {name: entry for name, entry in self._expanded_entries().items() if entry.preload}

    def _is_rescuable(self, error: BaseException) -> bool:
        return isinstance(error, self.rescuable_errors)

    def _resolve_asset_paths(self, entries: Dict[str, PinnedFile], resolver: Resolver) -> Dict[str, str]:
        resolved: Dict[str, str] = {}
        for name, entry in entries.items():
            try:
                resolved[name] = resolver.resolve(entry.path)
            except Exception as exc:
                if not self._is_rescuable(exc):
                    raise
                logger.warning("Importmap skipped missing path: %s", entry.path)
        return resolved
