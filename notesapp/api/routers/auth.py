"""Rutas de autenticación: sign in, sign up y sign out (con confirmación)."""
from fastapi import APIRouter, Depends, status

from notesapp.api.deps import get_services
from notesapp.api.routers.session import session_out
from notesapp.api.schemas.auth import CredentialsIn, SessionOut
from notesapp.services.confirm import Confirmation
from notesapp.services.registry import Services

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/sign-in", response_model=SessionOut, summary="Iniciar sesión con email y contraseña")
async def sign_in(payload: CredentialsIn, services: Services = Depends(get_services)) -> SessionOut:
    await services.auth.sign_in(payload.email, payload.password)
    return session_out(services)


@router.post(
    "/sign-up",
    response_model=SessionOut,
    status_code=status.HTTP_201_CREATED,
    summary="Crear cuenta",
    description="Si el backend exige confirmación de correo la sesión queda en signed_out.",
)
async def sign_up(payload: CredentialsIn, services: Services = Depends(get_services)) -> SessionOut:
    await services.auth.sign_up(payload.email, payload.password)
    return session_out(services)


@router.post("/sign-out", response_model=Confirmation, summary="Pedir confirmación para cerrar sesión")
def sign_out(services: Services = Depends(get_services)) -> Confirmation:
    return services.auth.request_sign_out()
