"""Esquemas del editor de notas."""
from typing import Optional

from pydantic import BaseModel

from notesapp.domain.schemas import Draft


class DraftPatch(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None


class EditorOut(BaseModel):
    state: str
    header: Optional[str] = None
    draft: Optional[Draft] = None
