# importmap/apps.py
from django.apps import AppConfig
from django.core.signals import setting_changed


def _reset_on_settings_change(*, setting, **kwargs):
    if setting in ("IMPORTMAP", "BASE_DIR", "DEBUG"):
        from .conf import reset_importmap

        reset_importmap()


class ImportmapConfig(AppConfig):
    name = "importmap"
    verbose_name = "Import map"

    def ready(self):
        setting_changed.connect(_reset_on_settings_change, dispatch_uid="importmap_reset_on_settings_change")
