"""
Búsqueda de notas: predicado, estados idle/searching/results y sugerencias.

Modos:
- "remote": delega en el backend (ilike sobre title OR content).
- "local": filtra una lista fija en memoria con el mismo predicado.

Una consulta nueva reemplaza a la anterior: la respuesta tardía de una
consulta vieja nunca pisa el estado de la nueva.
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from pydantic import BaseModel, Field

from notesapp.core.exceptions import RemoteError
from notesapp.domain.schemas import Note
from notesapp.repositories.note_repo import NoteRepository

_log = logging.getLogger("notesapp.search")

IDLE = "idle"
SEARCHING = "searching"
RESULTS = "results"

EMPTY_MESSAGE = "Try searching with different keywords"


def normalize_query(query: Optional[str]) -> str:
    """Consulta de sólo espacios equivale a vacía; si no, se usa tal cual."""
    q = query or ""
    return q if q.strip() else ""


def matches(note: Note, query: str) -> bool:
    q = query.lower()
    return q in note.title.lower() or q in (note.content or "").lower()


def filter_notes(notes: Iterable[Note], query: str) -> List[Note]:
    return [n for n in notes if matches(n, query)]


def results_label(count: int, query: str) -> str:
    return f'{count} result{"" if count == 1 else "s"} for "{query}"'


class Suggestions(BaseModel):
    recent: List[str] = Field(default_factory=list)
    trending: List[str] = Field(default_factory=list)


class SearchView(BaseModel):
    state: str
    query: str = ""
    count: int = 0
    label: Optional[str] = None
    results: List[Note] = Field(default_factory=list)
    empty_message: Optional[str] = None
    suggestions: Optional[Suggestions] = None


class SearchController:
    def __init__(
        self,
        repo: Optional[NoteRepository] = None,
        *,
        mode: str = "remote",
        local_notes: Sequence[Note] = (),
        recent_defaults: Sequence[str] = (),
        trending: Sequence[str] = (),
        recent_limit: int = 5,
    ):
        if mode not in ("remote", "local"):
            raise ValueError(f"modo de búsqueda inválido: {mode}")
        if mode == "remote" and repo is None:
            raise ValueError("el modo remote requiere un NoteRepository")
        self.repo = repo
        self.mode = mode
        self.local_notes: List[Note] = list(local_notes)
        self.trending = list(trending)
        self.recent_limit = recent_limit
        self._recent: List[str] = list(recent_defaults)[:recent_limit]
        self._generation = 0
        self._state = IDLE
        self._query = ""
        self._results: List[Note] = []

    @property
    def state(self) -> str:
        return self._state

    def set_local_notes(self, notes: Iterable[Note]) -> None:
        self.local_notes = list(notes)

    @property
    def recent(self) -> List[str]:
        return list(self._recent)

    def view(self) -> SearchView:
        if self._state == IDLE:
            return SearchView(state=IDLE, suggestions=Suggestions(recent=self.recent, trending=self.trending))
        if self._state == SEARCHING:
            return SearchView(state=SEARCHING, query=self._query)
        count = len(self._results)
        return SearchView(
            state=RESULTS,
            query=self._query,
            count=count,
            label=results_label(count, self._query),
            results=list(self._results),
            empty_message=EMPTY_MESSAGE if count == 0 else None,
        )

    def clear(self) -> SearchView:
        self._generation += 1
        self._state = IDLE
        self._query = ""
        self._results = []
        return self.view()

    async def search(self, query: Optional[str]) -> SearchView:
        q = normalize_query(query)
        if not q:
            return self.clear()
        self._generation += 1
        generation = self._generation
        self._query = q
        self._results = []
        self._remember(q)
        if self.mode == "local":
            self._results = filter_notes(self.local_notes, q)
            self._state = RESULTS
            return self.view()

        self._state = SEARCHING
        try:
            found = await self.repo.search_notes(q)
        except RemoteError as e:
            _log.warning("Error searching notes: %s (%s)", e.message, e.detail)
            if generation == self._generation:
                self._results = []
                self._state = RESULTS
            raise RemoteError("Failed to search notes.", detail=e.message)
        if generation != self._generation:
            _log.debug("Discarding stale search results query=%r", q)
            return self.view()
        self._results = list(found)
        self._state = RESULTS
        return self.view()

    def on_session(self, session) -> None:
        if session is None:
            self.clear()
            self.local_notes = []

    def _remember(self, query: str) -> None:
        key = query.strip().lower()
        self._recent = [r for r in self._recent if r.strip().lower() != key]
        self._recent.insert(0, query.strip())
        del self._recent[self.recent_limit:]
