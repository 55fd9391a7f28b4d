from __future__ import annotations

import json
from pathlib import Path

from conftest import MtimeResolver, RecordingResolver, touch, write_files
from importmap.map import ImportMap
from importmap.watcher import FileUpdateChecker


def _imports(importmap: ImportMap, resolver) -> dict[str, str]:
    return json.loads(importmap.to_json(resolver))["imports"]


def test_sweep_is_triggered_when_asset_with_extra_extension_changes(js_root: Path):
    importmap = ImportMap(accept=["js", "jsx"], root=js_root)
    importmap.draw(block=lambda m: (m.pin("application"), m.pin("components/Clock.jsx")))
    sweeper = importmap.cache_sweeper(watches=[js_root / "app" / "javascript", js_root / "vendor" / "javascript"])

    resolver = MtimeResolver(js_root / "app" / "javascript", r"components/Clock\.js$")
    imports = _imports(importmap, resolver)
    touch(js_root / "app" / "javascript" / "components" / "Clock.jsx")
    assert sweeper.execute_if_updated() is True
    new_imports = _imports(importmap, resolver)

    assert imports["components/Clock.jsx"] is not None
    assert new_imports["components/Clock.jsx"] is not None
    assert imports["components/Clock.jsx"] != new_imports["components/Clock.jsx"]
    assert imports["application"] == new_imports["application"]


def test_directory_pin_is_recomputed_after_sweep(js_root: Path):
    importmap = ImportMap(accept=["js", "jsx"], root=js_root)
    importmap.pin("application")
    importmap.pin_all_from("app/javascript/components", under="components")
    sweeper = importmap.cache_sweeper(watches=js_root / "app" / "javascript")
    resolver = RecordingResolver()

    before = _imports(importmap, resolver)
    write_files(js_root, {"app/javascript/components/Calendar.jsx": "export {}\n"})
    # sans vérification, le cache reste en place
    assert _imports(importmap, resolver) == before

    sweeper.execute_if_updated()
    after = _imports(importmap, resolver)

    assert after["components/Calendar"] == "/assets/components/Calendar.js"
    assert after["application"] == before["application"]


def test_cache_sweeper_returns_installed_watcher(js_root: Path):
    importmap = ImportMap(root=js_root)
    assert importmap.cache_sweeper() is None
    sweeper = importmap.cache_sweeper(watches=[js_root])
    assert importmap.cache_sweeper() is sweeper


def test_cache_sweeper_uses_configured_factory(js_root: Path):
    created = []

    class FakeWatcher:
        def __init__(self, files, dirs, callback):
            self.files, self.dirs, self.callback = files, dirs, callback
            created.append(self)

        def execute_if_updated(self):
            self.callback()
            return True

    importmap = ImportMap(accept=["jsx"], file_watcher=FakeWatcher, root=js_root)
    importmap.pin("application")
    importmap.cache_sweeper(watches=["app/javascript", Path("vendor/javascript")])

    assert created[0].files == []
    assert created[0].dirs == {
        str(js_root / "app" / "javascript"): ["js", "jsx"],
        str(js_root / "vendor" / "javascript"): ["js", "jsx"],
    }

    resolver = RecordingResolver()
    importmap.to_json(resolver)
    importmap.cache_sweeper().execute_if_updated()
    importmap.to_json(resolver)
    assert resolver.calls == ["application.js", "application.js"]


def test_file_update_checker_tracks_matching_files_only(js_root: Path):
    fired = []
    controllers = js_root / "app" / "javascript" / "controllers"
    checker = FileUpdateChecker([], {controllers: ["js"]}, lambda: fired.append(1))

    assert checker.updated() is False
    assert checker.execute_if_updated() is False

    touch(controllers / "README.md")
    assert checker.execute_if_updated() is False

    touch(controllers / "hello_controller.js")
    assert checker.updated() is True
    assert checker.execute_if_updated() is True
    assert checker.execute_if_updated() is False

    (controllers / "admin" / "users.js").unlink()
    assert checker.execute_if_updated() is True
    assert fired == [1, 1]


def test_file_update_checker_watches_single_files(tmp_path: Path):
    fired = []
    target = tmp_path / "config" / "importmap.py"
    checker = FileUpdateChecker([target], {}, lambda: fired.append(1))

    write_files(tmp_path, {"config/importmap.py": "pin('application')\n"})
    assert checker.updated() is True

    checker.execute()
    assert fired == [1]
    assert checker.updated() is False


def test_file_update_checker_handles_missing_directory(tmp_path: Path):
    checker = FileUpdateChecker([], {tmp_path / "later": ["js"]}, lambda: None)
    assert checker.updated() is False

    write_files(tmp_path, {"later/app.js": ""})
    assert checker.updated() is True


def test_relative_watches_are_resolved_from_root(js_root: Path, tmp_path_factory, monkeypatch):
    monkeypatch.chdir(tmp_path_factory.mktemp("ailleurs"))
    importmap = ImportMap(root=js_root)
    importmap.pin_all_from("app/javascript/controllers", under="controllers")
    sweeper = importmap.cache_sweeper(watches=["app/javascript"])
    resolver = RecordingResolver()

    assert list(sweeper.dirs) == [js_root / "app" / "javascript"]
    assert "controllers/new_one" not in _imports(importmap, resolver)

    write_files(js_root, {"app/javascript/controllers/new_one.js": "export {}\n"})

    assert sweeper.execute_if_updated() is True
    assert _imports(importmap, resolver)["controllers/new_one"] == "/assets/controllers/new_one.js"


def test_hidden_files_do_not_trigger_a_sweep(js_root: Path):
    fired = []
    javascript = js_root / "app" / "javascript"
    write_files(js_root, {"app/javascript/.cache/bundle.js": ""})
    checker = FileUpdateChecker([], {javascript: ["js"]}, lambda: fired.append(1))

    touch(javascript / ".cache" / "bundle.js")
    touch(javascript / "controllers" / ".hidden.js")
    write_files(js_root, {"app/javascript/.tmp.js": ""})

    assert checker.execute_if_updated() is False
    assert fired == []
