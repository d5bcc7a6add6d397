"""
Esquemas Pydantic de entrada/salida para notas.
"""
from typing import List

from pydantic import BaseModel, Field

from notesapp.core.time import date_label, to_iso
from notesapp.domain.schemas import Note


class NoteIn(BaseModel):
    # El título vacío lo rechaza el servicio (ValidationError) antes de llamar al backend
    title: str = ""
    content: str = ""


class NoteOut(BaseModel):
    id: str
    title: str
    content: str
    created_at: str
    updated_at: str
    date_label: str

    @classmethod
    def from_note(cls, note: Note) -> "NoteOut":
        return cls(
            id=note.id,
            title=note.title,
            content=note.content,
            created_at=to_iso(note.created_at),
            updated_at=to_iso(note.updated_at),
            date_label=date_label(note.updated_at),
        )


class NoteListOut(BaseModel):
    count: int
    notes: List[NoteOut] = Field(default_factory=list)
    empty_message: str | None = None

    @classmethod
    def from_notes(cls, notes) -> "NoteListOut":
        items = [NoteOut.from_note(n) for n in notes]
        return cls(
            count=len(items),
            notes=items,
            empty_message=None if items else "Tap the + button to create your first note",
        )
