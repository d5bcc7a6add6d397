"""Búsqueda de notas: consulta, limpieza y sugerencias en estado idle."""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from notesapp.api.deps import get_services, require_session
from notesapp.services.registry import Services
from notesapp.services.search_service import SearchView

router = APIRouter(prefix="/search", tags=["Search"], dependencies=[Depends(require_session)])


@router.get("", response_model=SearchView, summary="Buscar en título o contenido")
async def search(q: Optional[str] = Query(default=None), services: Services = Depends(get_services)) -> SearchView:
    if services.search.mode == "local":
        services.search.set_local_notes(services.notes.notes)
    return await services.search.search(q)


@router.get("/state", response_model=SearchView, summary="Estado actual de la búsqueda")
def search_state(services: Services = Depends(get_services)) -> SearchView:
    return services.search.view()


@router.delete("", response_model=SearchView, summary="Limpiar la búsqueda (vuelve a idle)")
def clear_search(services: Services = Depends(get_services)) -> SearchView:
    return services.search.clear()
