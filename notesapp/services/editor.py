"""
Editor de notas: máquina de estados browsing / editing / saving.

- `new()` y `edit(note)` abren el editor desde browsing.
- `cancel()` descarta el borrador sin llamar al backend.
- `save()` es una transición con guarda: sólo vuelve a browsing si el
  create/update remoto termina bien; con error de validación o remoto el
  editor sigue abierto con el borrador intacto. El re-fetch posterior corre
  con el editor ya cerrado, así que su fallo no reabre el borrador.
- Un cierre de sesión durante `saving` descarta el borrador al terminar.
"""
import logging
from typing import Optional

from notesapp.core.exceptions import EditorStateError, NoteBusyError
from notesapp.domain.schemas import Draft, Note
from notesapp.services.note_service import NoteStore

_log = logging.getLogger("notesapp.editor")

BROWSING = "browsing"
EDITING = "editing"
SAVING = "saving"


class Editor:
    def __init__(self, store: NoteStore):
        self.store = store
        self.state = BROWSING
        self.draft: Optional[Draft] = None
        self._discard_draft = False

    @property
    def header(self) -> Optional[str]:
        if self.draft is None:
            return None
        return "Edit Note" if self.draft.editing_note_id else "New Note"

    def _expect(self, *states: str) -> None:
        if self.state not in states:
            raise EditorStateError(f"Editor is {self.state}, expected {' or '.join(states)}")

    def new(self) -> Draft:
        self._expect(BROWSING)
        self.draft = Draft()
        self.state = EDITING
        return self.draft

    def edit(self, note: Note) -> Draft:
        self._expect(BROWSING)
        self.draft = Draft(title=note.title, content=note.content, editing_note_id=note.id)
        self.state = EDITING
        return self.draft

    def change(self, title: Optional[str] = None, content: Optional[str] = None) -> Draft:
        self._expect(EDITING)
        if title is not None:
            self.draft.title = title
        if content is not None:
            self.draft.content = content
        return self.draft

    def cancel(self) -> None:
        self._expect(EDITING)
        self._close()

    async def save(self) -> None:
        if self.state == SAVING:
            raise NoteBusyError("Your note is still being saved.")
        self._expect(EDITING)
        draft = self.draft
        self.state = SAVING
        try:
            if draft.editing_note_id:
                await self.store.update(draft.editing_note_id, draft.title, draft.content, refresh=False)
            else:
                await self.store.create(draft.title, draft.content, refresh=False)
        except BaseException:
            # Validación, error remoto o cancelación: el editor sigue abierto salvo cierre de sesión
            if self._discard_draft:
                self._close()
            else:
                self.state = EDITING
            raise
        _log.info("Note saved id=%s", draft.editing_note_id or "new")
        signed_out = self._discard_draft
        self._close()
        if not signed_out:
            await self.store.refresh()

    def _close(self) -> None:
        self._discard_draft = False
        self.draft = None
        self.state = BROWSING

    def on_session(self, session) -> None:
        """Al cerrar sesión se descarta cualquier borrador abierto."""
        if session is None:
            if self.state == SAVING:
                self._discard_draft = True
            else:
                self._close()
