"""
Dependencias reutilizables para routers (FastAPI Depends).

- `get_services`: registro de servicios del proceso (armado en el startup).
- `require_session`: sólo deja pasar cuando la sesión está autenticada.
"""
from fastapi import Depends, Request

from notesapp.domain.schemas import Session
from notesapp.core.exceptions import SessionUnavailableError
from notesapp.services.registry import Services


def get_services(request: Request) -> Services:
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise SessionUnavailableError("The app is still starting, try again shortly.")
    return services


def require_session(services: Services = Depends(get_services)) -> Session:
    return services.gate.require_session()
