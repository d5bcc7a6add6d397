"""
Endpoints de notas: listado (re-fetch o cache), crear, actualizar y borrar.

Borrar devuelve un prompt de confirmación; la llamada remota sólo ocurre al
confirmarlo en `/confirmations/{id}`.
"""
from fastapi import APIRouter, Depends, HTTPException, status

from notesapp.api.deps import get_services, require_session
from notesapp.api.schemas.note import NoteIn, NoteListOut, NoteOut
from notesapp.services.confirm import Confirmation
from notesapp.services.registry import Services

router = APIRouter(prefix="/notes", tags=["Notes"], dependencies=[Depends(require_session)])


@router.get("", response_model=NoteListOut, summary="Listar notas (re-fetch)")
async def list_notes(services: Services = Depends(get_services)) -> NoteListOut:
    return NoteListOut.from_notes(await services.notes.refresh())


@router.get("/cached", response_model=NoteListOut, summary="Notas en cache, sin consultar al backend")
def cached_notes(services: Services = Depends(get_services)) -> NoteListOut:
    return NoteListOut.from_notes(services.notes.notes)


@router.get("/{note_id}", response_model=NoteOut, summary="Nota del cache por id")
def get_note(note_id: str, services: Services = Depends(get_services)) -> NoteOut:
    note = services.notes.get(note_id)
    if note is None:
        raise HTTPException(status_code=404, detail="Note not found")
    return NoteOut.from_note(note)


@router.post("", response_model=NoteListOut, status_code=status.HTTP_201_CREATED, summary="Crear nota")
async def create_note(payload: NoteIn, services: Services = Depends(get_services)) -> NoteListOut:
    return NoteListOut.from_notes(await services.notes.create(payload.title, payload.content))


@router.put("/{note_id}", response_model=NoteListOut, summary="Actualizar título y contenido")
async def update_note(note_id: str, payload: NoteIn, services: Services = Depends(get_services)) -> NoteListOut:
    return NoteListOut.from_notes(await services.notes.update(note_id, payload.title, payload.content))


@router.delete("/{note_id}", response_model=Confirmation, summary="Pedir confirmación para borrar")
def delete_note(note_id: str, services: Services = Depends(get_services)) -> Confirmation:
    return services.confirmations.request(
        "Delete Note",
        "Are you sure you want to delete this note?",
        "Delete",
        lambda: services.notes.delete(note_id),
    )
