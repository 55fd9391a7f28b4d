"""Détection de changements par scrutation (polling) des fichiers surveillés.

`FileUpdateChecker` est la primitive de surveillance utilisée par défaut par
`ImportMap.cache_sweeper` : elle calcule une empreinte des métadonnées
(chemin, mtime, taille) des fichiers suivis et déclenche son callback
quand cette empreinte change.
"""

from __future__ import annotations

import hashlib
import logging
import os
import threading
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Mapping, Sequence, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


def _update_digest(digest, token: str) -> None:
    digest.update(token.encode("utf-8", errors="surrogateescape"))
    digest.update(b"\0")


def _stat_token(path: Path) -> str:
    try:
        st = path.stat()
    except FileNotFoundError:
        return "missing"
    except OSError:
        return "error"
    return f"ok:{st.st_mtime_ns}:{st.st_size}"


def _walk_matching(directory: Path, extensions: Sequence[str]) -> Iterator[Path]:
    suffixes = tuple(f".{ext.lstrip('.')}" for ext in extensions)
    for current, dirnames, filenames in os.walk(directory):
        # mêmes exclusions que le développement des dossiers épinglés
        dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
        for fname in sorted(filenames):
            if fname.startswith("."):
                continue
            if not suffixes or fname.endswith(suffixes):
                yield Path(current) / fname


class FileUpdateChecker:
    """Surveille des fichiers et des dossiers, puis appelle `callback` en cas de changement.

    Paramètres
    ----------
    files : Iterable[PathLike]
        Fichiers suivis individuellement (création/suppression comprises).
    dirs : Mapping[PathLike, Sequence[str]]
        Dossier -> extensions suivies (liste vide = toutes).
    callback : Callable[[], None]
        Appelé par `execute()`.
    """

    def __init__(
            self,
            files: Iterable[PathLike],
            dirs: Mapping[PathLike, Sequence[str]],
            callback: Callable[[], None],
    ) -> None:
        self.files: List[Path] = [Path(f) for f in files]
        self.dirs: dict[Path, tuple[str, ...]] = {Path(d): tuple(exts) for d, exts in dirs.items()}
        self.callback = callback
        self._lock = threading.Lock()
        self._last_signature: str = self.signature()

    def signature(self) -> str:
        digest = hashlib.blake2b(digest_size=20)
        for path in sorted(self.files, key=str):
            _update_digest(digest, f"file:{path}:{_stat_token(path)}")
        for directory in sorted(self.dirs, key=str):
            _update_digest(digest, f"dir:{directory}")
            if not directory.is_dir():
                _update_digest(digest, "dir:missing")
                continue
            for path in _walk_matching(directory, self.dirs[directory]):
                _update_digest(digest, f"entry:{path}:{_stat_token(path)}")
        return digest.hexdigest()

    def updated(self) -> bool:
        return self.signature() != self._last_signature

    def execute(self) -> None:
        with self._lock:
            self._last_signature = self.signature()
        self.callback()

    def execute_if_updated(self) -> bool:
        """Exécute le callback si un fichier suivi a changé ; renvoie `True` dans ce cas."""
        with self._lock:
            current = self.signature()
            if current == self._last_signature:
                return False
            self._last_signature = current
        logger.debug("Watched files changed under %s", ", ".join(str(d) for d in self.dirs))
        self.callback()
        return True
