from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PinnedFile:
    """Un module épinglé explicitement.

    Attributs
    ---------
    name : str
        Spécificateur exposé aux `import` du navigateur (ex: "application").
    path : str
        Chemin logique transmis au resolver (ex: "application.js").
    preload : bool
        Le module doit-il être préchargé (modulepreload / early hints).
    """

    name: str
    path: str
    preload: bool = False


@dataclass(frozen=True)
class PinnedDirectory:
    """Un dossier épinglé, développé en `PinnedFile` à chaque calcul.

    Attributs
    ---------
    dir : str
        Racine sur le disque (relative à la racine du projet ou absolue).
    under : Optional[str]
        Préfixe des noms de modules trouvés sous `dir`.
    path : Optional[str]
        Préfixe des chemins logiques (par défaut `under`).
    preload : bool
        Appliqué à tous les fichiers du dossier.
    """

    dir: str
    under: Optional[str] = None
    path: Optional[str] = None
    preload: bool = False
