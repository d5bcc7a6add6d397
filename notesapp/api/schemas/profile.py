"""Schemas del perfil y del respaldo de notas."""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class ProfileOut(BaseModel):
    email: Optional[str] = None
    display: str
    user_id: Optional[str] = None
    note_count: int


class ExportOut(BaseModel):
    exported_at: str
    count: int
    notes: List[Dict[str, Any]]
