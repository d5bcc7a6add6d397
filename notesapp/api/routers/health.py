"""Health y debug (sin auth), salidas tipadas y estables."""
from fastapi import APIRouter, Depends, status

from notesapp.core.config import settings
from notesapp.api.deps import get_services
from notesapp.api.schemas.health import DebugStatusOut, HealthOut, PingOut
from notesapp.services.registry import Services


router = APIRouter(tags=["Health"])  # no prefix to keep paths stable


@router.get("/ping", response_model=PingOut, summary="Ping básico")
def ping() -> PingOut:
    return PingOut(message="pong")


@router.get("/health", status_code=status.HTTP_200_OK, response_model=HealthOut, summary="Salud básica")
def health() -> HealthOut:
    return HealthOut(ok=True)


@router.get("/_debug/status", status_code=status.HTTP_200_OK, response_model=DebugStatusOut, summary="Estado de configuración y sesión")
def debug_status(services: Services = Depends(get_services)) -> DebugStatusOut:
    return DebugStatusOut(
        app_name=settings.app_name,
        api_prefix=settings.api_prefix,
        remote_backend=services.remote.name(),
        supabase_configured=settings.supabase_configured,
        session_state=services.gate.state,
        delete_cache_policy=services.notes.delete_cache_policy,
        search_mode=services.search.mode,
    )
