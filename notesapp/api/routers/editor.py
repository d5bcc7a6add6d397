"""Endpoints del editor: abrir (nueva/editar), cambiar borrador, cancelar y guardar."""
from fastapi import APIRouter, Depends, HTTPException

from notesapp.api.deps import get_services, require_session
from notesapp.api.schemas.editor import DraftPatch, EditorOut
from notesapp.services.registry import Services

router = APIRouter(prefix="/editor", tags=["Editor"], dependencies=[Depends(require_session)])


def editor_out(services: Services) -> EditorOut:
    editor = services.editor
    return EditorOut(state=editor.state, header=editor.header, draft=editor.draft)


@router.get("", response_model=EditorOut)
def get_editor(services: Services = Depends(get_services)) -> EditorOut:
    return editor_out(services)


@router.post("/new", response_model=EditorOut, summary="Nueva nota (borrador vacío)")
def new_note(services: Services = Depends(get_services)) -> EditorOut:
    services.editor.new()
    return editor_out(services)


@router.post("/edit/{note_id}", response_model=EditorOut, summary="Editar una nota del cache")
def edit_note(note_id: str, services: Services = Depends(get_services)) -> EditorOut:
    note = services.notes.get(note_id)
    if note is None:
        raise HTTPException(status_code=404, detail="Note not found")
    services.editor.edit(note)
    return editor_out(services)


@router.patch("/draft", response_model=EditorOut, summary="Cambiar título/contenido del borrador")
def change_draft(payload: DraftPatch, services: Services = Depends(get_services)) -> EditorOut:
    services.editor.change(title=payload.title, content=payload.content)
    return editor_out(services)


@router.post("/cancel", response_model=EditorOut)
def cancel(services: Services = Depends(get_services)) -> EditorOut:
    services.editor.cancel()
    return editor_out(services)


@router.post("/save", response_model=EditorOut, summary="Guardar (create o update según el borrador)")
async def save(services: Services = Depends(get_services)) -> EditorOut:
    await services.editor.save()
    return editor_out(services)
