# importmap/middleware.py
from .conf import get_importmap, importmap_settings


class ImportmapCacheSweeperMiddleware:
    """En dev : vérifie les fichiers surveillés avant chaque requête et vide le cache si besoin."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if importmap_settings()["SWEEP_ON_REQUEST"]:
            sweeper = get_importmap().cache_sweeper()
            if sweeper is not None:
                sweeper.execute_if_updated()
        return self.get_response(request)
