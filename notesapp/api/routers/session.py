"""Estado de la sesión (gate de arranque) y reintento tras un fallo."""
from fastapi import APIRouter, Depends

from notesapp.api.deps import get_services
from notesapp.api.schemas.auth import SessionOut, UserOut
from notesapp.services.registry import Services

router = APIRouter(prefix="/session", tags=["Session"])


def session_out(services: Services) -> SessionOut:
    gate = services.gate
    current = gate.session.get()
    user = UserOut(user_id=current.user_id, email=current.email) if current and gate.state == "authenticated" else None
    return SessionOut(state=gate.state, route=gate.route, error=gate.error, user=user)


@router.get("", response_model=SessionOut, summary="Estado de sesión y ruta actual")
def get_session(services: Services = Depends(get_services)) -> SessionOut:
    return session_out(services)


@router.post("/retry", response_model=SessionOut, summary="Reintentar la consulta de sesión")
async def retry_session(services: Services = Depends(get_services)) -> SessionOut:
    await services.gate.retry()
    return session_out(services)
