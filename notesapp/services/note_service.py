"""
Service layer for notes: validation, cached list and cache policy.

- create/update re-fetch the full list after success; the editor asks for the
  write alone (`refresh=False`) and re-fetches once it has closed.
- delete follows `delete_cache_policy`: "local" drops the note from the cache,
  "refetch" re-lists from the backend.
- A note id with an outstanding update/delete rejects a second request.
- `clear()` (sign-out) starts a new generation; a fetch or delete that was in
  flight before it does not touch the cache afterwards.
"""
import logging
from typing import Dict, List, Optional, Tuple

from notesapp.core.exceptions import NoteBusyError, RemoteError, ValidationError
from notesapp.core.time import now_utc
from notesapp.domain.schemas import Note, Session
from notesapp.repositories.note_repo import NoteRepository

_log = logging.getLogger("notesapp.notes")

DELETE_POLICIES = ("local", "refetch")


def validate_title(title: Optional[str]) -> None:
    if not (title or "").strip():
        raise ValidationError("Please enter a title for your note")


class NoteStore:
    def __init__(self, repo: NoteRepository, delete_cache_policy: str = "local"):
        if delete_cache_policy not in DELETE_POLICIES:
            raise ValueError(f"delete_cache_policy inválida: {delete_cache_policy}")
        self.repo = repo
        self.delete_cache_policy = delete_cache_policy
        self._notes: List[Note] = []
        self._in_flight: Dict[str, str] = {}
        self._generation = 0

    @property
    def notes(self) -> Tuple[Note, ...]:
        return tuple(self._notes)

    def get(self, note_id: str) -> Optional[Note]:
        return next((n for n in self._notes if n.id == note_id), None)

    def in_flight(self, note_id: str) -> Optional[str]:
        return self._in_flight.get(note_id)

    def clear(self) -> None:
        self._generation += 1
        self._notes = []

    def on_session(self, session: Optional[Session]) -> None:
        """Suscriptor de la sesión: al cerrar sesión se descarta el cache."""
        if session is None:
            self.clear()

    async def refresh(self) -> Tuple[Note, ...]:
        generation = self._generation
        try:
            notes = await self.repo.list_notes()
        except RemoteError as e:
            _log.warning("Error fetching notes: %s (%s)", e.message, e.detail)
            raise RemoteError("Failed to fetch notes.", detail=e.message)
        if generation != self._generation:
            _log.info("Discarding notes fetched before sign-out")
            return self.notes
        self._notes = list(notes)
        return self.notes

    async def create(self, title: str, content: str = "", refresh: bool = True) -> Tuple[Note, ...]:
        validate_title(title)
        try:
            await self.repo.insert_note(title, content or "")
        except RemoteError as e:
            _log.warning("Error saving note: %s (%s)", e.message, e.detail)
            raise RemoteError("Failed to save note.", detail=e.message)
        if not refresh:
            return self.notes
        return await self.refresh()

    async def update(self, note_id: str, title: str, content: str = "", refresh: bool = True) -> Tuple[Note, ...]:
        validate_title(title)
        self._acquire(note_id, "update")
        try:
            await self.repo.update_note(note_id, title, content or "", now_utc())
        except RemoteError as e:
            _log.warning("Error saving note id=%s: %s (%s)", note_id, e.message, e.detail)
            raise RemoteError("Failed to save note.", detail=e.message)
        finally:
            self._release(note_id)
        if not refresh:
            return self.notes
        return await self.refresh()

    async def delete(self, note_id: str) -> Tuple[Note, ...]:
        """Borra la nota; sólo debe llamarse tras la confirmación del usuario."""
        self._acquire(note_id, "delete")
        generation = self._generation
        try:
            await self.repo.delete_note(note_id)
        except RemoteError as e:
            _log.warning("Error deleting note id=%s: %s (%s)", note_id, e.message, e.detail)
            raise RemoteError("Failed to delete note.", detail=e.message)
        finally:
            self._release(note_id)
        if self.delete_cache_policy == "refetch":
            return await self.refresh()
        if generation != self._generation:
            return self.notes
        self._notes = [n for n in self._notes if n.id != note_id]
        return self.notes

    def _acquire(self, note_id: str, op: str) -> None:
        current = self._in_flight.get(note_id)
        if current is not None:
            raise NoteBusyError(f"This note is still being saved ({current}), try again in a moment.")
        self._in_flight[note_id] = op

    def _release(self, note_id: str) -> None:
        self._in_flight.pop(note_id, None)
