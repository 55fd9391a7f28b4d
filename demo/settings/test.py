from .base import *

DEBUG = False
SECRET_KEY = "test-only"

# chaque test configure sa propre import map
IMPORTMAP = {"DECLARATION": BASE_DIR / "config" / "importmap.py", "WATCHES": []}
