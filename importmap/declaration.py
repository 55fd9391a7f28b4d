"""Chargement du fichier de déclaration (ex: `demo/importmap.py`).

Le fichier est un script Python exécuté avec `pin` et `pin_all_from`
liés à l'import map :

    pin("application", preload=True)
    pin_all_from("static/js/controllers", under="controllers")
"""

from __future__ import annotations

import logging
import os
import runpy
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Optional, Union

if TYPE_CHECKING:
    from .map import ImportMap

logger = logging.getLogger(__name__)


class InvalidDeclaration(Exception):
    """Le fichier de déclaration n'a pas pu être évalué."""


def draw(
        importmap: "ImportMap",
        path: Optional[Union[str, os.PathLike]] = None,
        block: Optional[Callable[["ImportMap"], Any]] = None,
) -> "ImportMap":
    """Applique les déclarations d'un fichier, ou à défaut celles de `block`.

    Un fichier absent n'est pas une erreur. Toute exception levée pendant
    l'évaluation est journalisée puis relancée en `InvalidDeclaration`.
    """
    if path is not None and Path(path).exists():
        path = Path(path)
        try:
            runpy.run_path(
                str(path),
                init_globals={"pin": importmap.pin, "pin_all_from": importmap.pin_all_from},
                run_name="importmap_declaration",
            )
        except Exception as exc:
            logger.error("Unable to parse import map from %s: %s", path, exc)
            raise InvalidDeclaration(f"Unable to parse import map from {path}: {exc}") from exc
    elif block is not None:
        block(importmap)

    return importmap
