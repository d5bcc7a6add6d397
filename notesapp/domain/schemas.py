"""
Modelos de dominio compartidos por servicios, repositorios y backend remoto.

Reglas clave:
- `id` lo asigna el backend al crear y no cambia nunca.
- `updated_at` se renueva en cada update exitoso.
- Timestamps timezone-aware en UTC.
"""
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from notesapp.core.time import parse_iso


class Note(BaseModel):
    id: str
    user_id: Optional[str] = None
    title: str
    content: str = ""
    created_at: datetime
    updated_at: datetime

    @field_validator("content", mode="before")
    @classmethod
    def _none_as_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _utc(cls, v: Any) -> Any:
        if isinstance(v, (str, datetime)):
            return parse_iso(v)
        return v

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Note":
        """Construye la nota desde una fila del backend (id puede venir numérico)."""
        data = dict(row)
        data["id"] = str(data.get("id"))
        if data.get("user_id") is not None:
            data["user_id"] = str(data["user_id"])
        return cls(**data)


class Session(BaseModel):
    """Reflejo de solo lectura de la sesión que gestiona el backend."""
    user_id: str
    email: Optional[str] = None
    access_token: str = Field(repr=False)
    refresh_token: Optional[str] = Field(default=None, repr=False)
    expires_at: Optional[datetime] = None


class Draft(BaseModel):
    title: str = ""
    content: str = ""
    editing_note_id: Optional[str] = None
