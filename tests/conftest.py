from __future__ import annotations

import hashlib
import os
import re
from pathlib import Path
from typing import Dict, List

import pytest

from importmap.resolver import AssetNotFound


class RecordingResolver:
    """Resolver factice : "/assets/<path>", avec la liste des chemins demandés."""

    def __init__(self, missing: tuple[str, ...] = (), broken: tuple[str, ...] = ()) -> None:
        self.calls: List[str] = []
        self.missing = missing
        self.broken = broken

    def resolve(self, path: str) -> str:
        self.calls.append(path)
        if path in self.missing:
            raise AssetNotFound(path)
        if path in self.broken:
            raise RuntimeError(f"resolver en panne pour {path}")
        return f"/assets/{path}"


class MtimeResolver:
    """Empreinte basée sur la mtime du fichier source pour les chemins qui matchent `pattern`."""

    def __init__(self, root: Path, pattern: str) -> None:
        self.root = root
        self.pattern = re.compile(pattern)

    def source_file(self, path: str) -> Path:
        return self.root / f"{path}x"

    def resolve(self, path: str) -> str:
        if self.pattern.search(path):
            digest = hashlib.sha256(str(self.source_file(path).stat().st_mtime_ns).encode()).hexdigest()
            return "/assets/" + re.sub(r"\.js$", f"-{digest}.js", path)
        return f"/assets/{path}"


def write_files(root: Path, files: Dict[str, str]) -> Path:
    for rel, content in files.items():
        target = root / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def resolver() -> RecordingResolver:
    return RecordingResolver()


@pytest.fixture
def js_root(tmp_path: Path) -> Path:
    """Arborescence type : app/javascript/{application.js, components/, controllers/}."""
    return write_files(tmp_path, {
        "app/javascript/application.js": "import 'controllers'\n",
        "app/javascript/components/Clock.jsx": "export default () => null\n",
        "app/javascript/controllers/index.js": "export {}\n",
        "app/javascript/controllers/hello_controller.js": "export default class {}\n",
        "app/javascript/controllers/admin/index.jsx": "export {}\n",
        "app/javascript/controllers/admin/users.js": "export {}\n",
        "app/javascript/controllers/README.md": "pas un module\n",
        "app/javascript/controllers/.hidden.js": "ignoré\n",
        "vendor/javascript/lodash.js": "export {}\n",
    })


def touch(path: Path, delta_ns: int = 10 ** 9) -> None:
    """Avance la mtime de `path` sans dépendre de la résolution de l'horloge du FS."""
    st = path.stat()
    os.utime(path, ns=(st.st_atime_ns, st.st_mtime_ns + delta_ns))

