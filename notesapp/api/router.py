"""Agregador de routers de la API."""
from fastapi import APIRouter
from notesapp.api.routers import auth, confirmations, editor, health, notes, profile, search, session

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(session.router)
api_router.include_router(auth.router)
api_router.include_router(confirmations.router)
api_router.include_router(notes.router)
api_router.include_router(editor.router)
api_router.include_router(search.router)
api_router.include_router(profile.router)
