from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Pattern, Union

from .entries import PinnedDirectory, PinnedFile

JS_EXTENSION: str = "js"

PathLike = Union[str, os.PathLike]


class AcceptedExtensions:
    """Instantané des extensions acceptées pour une passe de résolution.

    `js` fait toujours partie de l'ensemble ; les autres (ex: "jsx") sont
    des extensions « extra », servies sous un nom en `.js`.
    """

    def __init__(self, extensions: Iterable[str]) -> None:
        exts: List[str] = [JS_EXTENSION]
        for ext in extensions:
            ext = str(ext).lstrip(".")
            if ext and ext not in exts:
                exts.append(ext)
        self.all: tuple[str, ...] = tuple(exts)
        self.extra: tuple[str, ...] = tuple(e for e in exts if e != JS_EXTENSION)

        alternatives = "|".join(re.escape(e) for e in self.all)
        self._extension_re: Pattern[str] = re.compile(rf"\.(?:{alternatives})$")
        if self.extra:
            extras = "|".join(re.escape(e) for e in self.extra)
            self._index_re: Pattern[str] = re.compile(rf"(?:^|/)index(?:\.(?:{extras}))?$")
        else:
            self._index_re = re.compile(r"(?:^|/)index$")

    def accepts(self, filename: str) -> bool:
        return bool(self._extension_re.search(filename))

    def strip(self, name: str) -> str:
        """'components/Clock.jsx' -> 'components/Clock'."""
        return self._extension_re.sub("", name)

    def javascript_filename(self, name: str) -> str:
        """'components/Clock.jsx' -> 'components/Clock.js'."""
        return f"{self.strip(name)}.{JS_EXTENSION}"

    def strip_index(self, name: str) -> str:
        """'controllers/index' -> 'controllers', 'index' -> ''."""
        return self._index_re.sub("", name)


def absolute_root_of(directory: PathLike, root: PathLike) -> Path:
    path = Path(directory)
    return path if path.is_absolute() else Path(root) / path


def _raise(error: OSError) -> None:
    raise error


def find_accepted_files(base: Path, accepted: AcceptedExtensions) -> List[str]:
    """Chemins relatifs (POSIX, triés) des fichiers acceptés sous `base`.

    Les fichiers et dossiers cachés (préfixe « . ») sont ignorés.
    Les erreurs d'accès au disque remontent à l'appelant.
    """
    found: List[str] = []
    for current, dirnames, filenames in os.walk(base, onerror=_raise):
        dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
        for fname in filenames:
            if fname.startswith(".") or not accepted.accepts(fname):
                continue
            full = Path(current) / fname
            if not full.is_file():
                continue
            found.append(full.relative_to(base).as_posix())
    return sorted(found)


def _join(*parts: Optional[str]) -> str:
    return "/".join(p for p in parts if p)


def module_name_from(filename: str, mapping: PinnedDirectory, accepted: AcceptedExtensions) -> str:
    return _join(mapping.under, accepted.strip_index(accepted.strip(filename)))


def module_path_from(filename: str, mapping: PinnedDirectory, accepted: AcceptedExtensions) -> str:
    return _join(mapping.path or mapping.under, accepted.javascript_filename(filename))


def expand_directory(mapping: PinnedDirectory, accepted: AcceptedExtensions, root: PathLike) -> Iterator[PinnedFile]:
    """Fichiers `PinnedFile` d'un dossier épinglé (aucun si la racine n'existe pas).

    Un fichier dont le nom de module dérivé est vide (`index.js` à la racine
    d'un dossier épinglé sans `under`) n'est pas émis : aucun spécificateur
    vide dans l'import map.
    """
    base = absolute_root_of(mapping.dir, root)
    if not base.exists():
        return
    for filename in find_accepted_files(base, accepted):
        name = module_name_from(filename, mapping, accepted)
        if not name:
            continue
        yield PinnedFile(
            name=name,
            path=module_path_from(filename, mapping, accepted),
            preload=mapping.preload,
        )


def expand_entries(
        packages: Mapping[str, PinnedFile],
        directories: Iterable[PinnedDirectory],
        accepted: AcceptedExtensions,
        root: PathLike,
) -> Dict[str, PinnedFile]:
    """Ensemble agrégé `nom -> PinnedFile`.

    Les pins explicites sont copiés d'abord ; un fichier issu d'un dossier
    n'est ajouté que si son nom est encore libre. Un `pin` explicite
    l'emporte donc toujours sur un `pin_all_from`, quel que soit l'ordre
    des déclarations.
    """
    expanded: Dict[str, PinnedFile] = dict(packages)
    for mapping in directories:
        for entry in expand_directory(mapping, accepted, root):
            expanded.setdefault(entry.name, entry)
    return expanded
