"""
Contrato del backend remoto (auth + filas de notas).

Las implementaciones son síncronas; la capa de repositorios las ejecuta en el
threadpool para no bloquear el event loop.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, List, Optional

from notesapp.domain.schemas import Note, Session

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"
TOKEN_REFRESHED = "TOKEN_REFRESHED"
USER_UPDATED = "USER_UPDATED"

SessionCallback = Callable[[str, Optional[Session]], None]


class RemoteService(ABC):
    def __init__(self) -> None:
        self._listeners: List[SessionCallback] = []

    # --- auth ---
    @abstractmethod
    def get_session(self) -> Optional[Session]: ...

    @abstractmethod
    def sign_in_with_password(self, email: str, password: str) -> None: ...

    @abstractmethod
    def sign_up(self, email: str, password: str) -> None: ...

    @abstractmethod
    def sign_out(self) -> None: ...

    def on_session_change(self, callback: SessionCallback) -> Callable[[], None]:
        """Registra un callback para SIGNED_IN / SIGNED_OUT / TOKEN_REFRESHED."""
        self._listeners.append(callback)

        def _unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return _unsubscribe

    def _emit(self, event: str, session: Optional[Session]) -> None:
        for cb in list(self._listeners):
            cb(event, session)

    # --- notes ---
    @abstractmethod
    def list_notes(self) -> List[Note]: ...

    @abstractmethod
    def insert_note(self, title: str, content: str) -> None: ...

    @abstractmethod
    def update_note(self, note_id: str, title: str, content: str, updated_at: datetime) -> None: ...

    @abstractmethod
    def delete_note(self, note_id: str) -> None: ...

    @abstractmethod
    def search_notes(self, pattern: str) -> List[Note]: ...

    @abstractmethod
    def name(self) -> str: ...
