"""
Perfil del usuario autenticado y exportación de sus notas como respaldo JSON.
"""
from typing import Any, Dict, Optional

from notesapp.core.time import now_utc, to_iso
from notesapp.domain.schemas import Session
from notesapp.services.note_service import NoteStore

ANONYMOUS_LABEL = "Sign in to see your profile"


def get_profile(session: Optional[Session], store: NoteStore) -> Dict[str, Any]:
    if session is None:
        return {"email": None, "display": ANONYMOUS_LABEL, "user_id": None, "note_count": 0}
    return {
        "email": session.email,
        "display": session.email or ANONYMOUS_LABEL,
        "user_id": session.user_id,
        "note_count": len(store.notes),
    }


async def export_notes(store: NoteStore) -> Dict[str, Any]:
    """Respaldo de las notas actuales del backend (re-lista antes de exportar)."""
    notes = await store.refresh()
    return {
        "exported_at": to_iso(now_utc()),
        "count": len(notes),
        "notes": [n.model_dump(mode="json") for n in notes],
    }
