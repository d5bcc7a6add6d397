"""Repo de notas: wrappers async sobre el backend remoto.

Las llamadas del backend son bloqueantes (HTTP); se ejecutan en el threadpool
para que el event loop siga atendiendo otras acciones mientras esperan.
"""
from datetime import datetime
from typing import List

from starlette.concurrency import run_in_threadpool

from notesapp.domain.schemas import Note
from notesapp.infrastructure.remote.base import RemoteService


class NoteRepository:
    def __init__(self, remote: RemoteService):
        self.remote = remote

    async def list_notes(self) -> List[Note]:
        """Notas del usuario de la sesión, ordenadas por updated_at desc."""
        return await run_in_threadpool(self.remote.list_notes)

    async def insert_note(self, title: str, content: str) -> None:
        await run_in_threadpool(self.remote.insert_note, title, content)

    async def update_note(self, note_id: str, title: str, content: str, updated_at: datetime) -> None:
        await run_in_threadpool(self.remote.update_note, note_id, title, content, updated_at)

    async def delete_note(self, note_id: str) -> None:
        await run_in_threadpool(self.remote.delete_note, note_id)

    async def search_notes(self, pattern: str) -> List[Note]:
        """Coincidencia ilike en title OR content, ordenada por updated_at desc."""
        return await run_in_threadpool(self.remote.search_notes, pattern)
