"""
Valor compartido observable (p.ej. la sesión actual del proceso).

Contrato:
- `set(value)` reemplaza el valor y notifica a los suscriptores en orden de
  suscripción, de forma síncrona, en el hilo que llamó a `set`.
- `subscribe(cb)` devuelve una función para cancelar la suscripción.
- Un suscriptor que falla se registra en el log y no impide notificar al resto.
"""
from __future__ import annotations

import logging
from threading import RLock
from typing import Callable, Generic, List, TypeVar

T = TypeVar("T")

_log = logging.getLogger("notesapp.observable")


class Observable(Generic[T]):
    def __init__(self, initial: T):
        self._value = initial
        self._lock = RLock()
        self._subscribers: List[Callable[[T], None]] = []

    def get(self) -> T:
        with self._lock:
            return self._value

    @property
    def value(self) -> T:
        return self.get()

    def set(self, value: T) -> None:
        with self._lock:
            self._value = value
            subscribers = list(self._subscribers)
        for cb in subscribers:
            try:
                cb(value)
            except Exception:
                _log.exception("Observable subscriber failed")

    def subscribe(self, cb: Callable[[T], None]) -> Callable[[], None]:
        with self._lock:
            self._subscribers.append(cb)

        def _unsubscribe() -> None:
            with self._lock:
                if cb in self._subscribers:
                    self._subscribers.remove(cb)

        return _unsubscribe

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)
