from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, Hashable, Optional

logger = logging.getLogger(__name__)


class _Flight:
    """Calcul en cours pour une clé : les appelants concurrents attendent son résultat."""

    def __init__(self, generation: int) -> None:
        self.generation: int = generation
        self._done = threading.Event()
        self._value: Any = None
        self._error: Optional[BaseException] = None

    def resolve(self, value: Any) -> None:
        self._value = value
        self._done.set()

    def fail(self, error: BaseException) -> None:
        self._error = error
        self._done.set()

    def wait(self) -> Any:
        self._done.wait()
        if self._error is not None:
            raise self._error
        return self._value


class ResolutionCache:
    """Mémoïsation par clé, invalidée en bloc.

    - au plus une exécution du producteur par clé et par génération ;
    - une invalidation incrémente la génération : un calcul démarré avant
      elle rend son résultat à ses appelants mais ne l'enregistre pas.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._values: Dict[Hashable, Any] = {}
        self._flights: Dict[Hashable, _Flight] = {}
        self._generation: int = 0

    @property
    def generation(self) -> int:
        return self._generation

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._values

    def compute_or_fetch(self, key: Hashable, producer: Callable[[], Any]) -> Any:
        with self._lock:
            if key in self._values:
                return self._values[key]
            flight = self._flights.get(key)
            leader = flight is None
            if leader:
                flight = _Flight(self._generation)
                self._flights[key] = flight

        if not leader:
            return flight.wait()

        try:
            value = producer()
        except BaseException as exc:
            with self._lock:
                if self._flights.get(key) is flight:
                    del self._flights[key]
            flight.fail(exc)
            raise

        with self._lock:
            if self._flights.get(key) is flight:
                del self._flights[key]
            if flight.generation == self._generation:
                self._values[key] = value
        flight.resolve(value)
        return value

    def invalidate_all(self) -> None:
        with self._lock:
            self._values.clear()
            # les calculs en vol appartiennent à l'ancienne génération
            self._flights.clear()
            self._generation += 1
        logger.debug("Importmap cache cleared (generation %d)", self._generation)
