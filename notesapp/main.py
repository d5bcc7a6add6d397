"""Entrada principal de la app FastAPI (configura middlewares, excepciones y routers)."""
import logging
from typing import Optional

from fastapi import FastAPI

from notesapp.api.router import api_router
from notesapp.core.config import Settings, settings as default_settings
from notesapp.core.exceptions import register_exception_handlers
from notesapp.core.logging import setup_logging
from notesapp.core.middleware import add_middlewares
from notesapp.infrastructure.remote import RemoteService
from notesapp.services.registry import build_services

_log = logging.getLogger("notesapp.startup")


def create_app(settings: Optional[Settings] = None, remote: Optional[RemoteService] = None) -> FastAPI:
    settings = settings or default_settings
    setup_logging(settings.log_level)
    app = FastAPI(title=settings.app_name)

    add_middlewares(app)
    register_exception_handlers(app)

    @app.on_event("startup")
    async def on_startup():
        services = build_services(settings, remote=remote)
        app.state.services = services
        _log.info("Remote backend=%s", services.remote.name())
        # Un fallo aquí deja el gate en "error"; no impide el arranque
        state = await services.gate.start()
        _log.info("Session gate ready state=%s", state)

    @app.on_event("shutdown")
    async def on_shutdown():
        services = getattr(app.state, "services", None)
        if services is not None:
            services.gate.stop()

    # Monta routers bajo el prefijo configurado
    app.include_router(api_router, prefix=settings.api_prefix_normalized)
    return app


app = create_app()
