#!/usr/bin/env python
"""Commandes d'administration Django du projet de démonstration."""
import os
import sys


def main(argv=None):
    """Point d'entrée des commandes `manage.py` (dev par défaut)."""
    # la prod passe DJANGO_SETTINGS_MODULE=demo.settings.prod
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "demo.settings.dev")
    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Django n'est pas installé ou absent du PYTHONPATH."
        ) from exc
    execute_from_command_line(argv if argv is not None else sys.argv)


if __name__ == "__main__":
    main()
