# comments in English
from __future__ import annotations

from django.http import HttpResponse
from django.urls import path


def healthz(_request) -> HttpResponse:
    """Liveness probe."""
    return HttpResponse("ok", content_type="text/plain")


urlpatterns = [
    path("healthz", healthz),
]
