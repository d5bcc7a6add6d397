"""
Endpoints del perfil del usuario autenticado y exportación de notas.
"""
from fastapi import APIRouter, Depends

from notesapp.api.deps import get_services, require_session
from notesapp.api.schemas.profile import ExportOut, ProfileOut
from notesapp.domain.schemas import Session
from notesapp.services import profile_service
from notesapp.services.registry import Services

router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get("", response_model=ProfileOut)
def get_my_profile(services: Services = Depends(get_services)) -> ProfileOut:
    session = services.gate.session.get() if services.gate.state == "authenticated" else None
    return ProfileOut(**profile_service.get_profile(session, services.notes))


@router.get("/export", response_model=ExportOut, summary="Respaldo JSON de las notas")
async def export_my_notes(
    _session: Session = Depends(require_session),
    services: Services = Depends(get_services),
) -> ExportOut:
    return ExportOut(**await profile_service.export_notes(services.notes))
