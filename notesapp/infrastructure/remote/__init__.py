"""Selección del backend remoto según configuración."""
from notesapp.core.config import Settings
from notesapp.infrastructure.remote.base import RemoteService
from notesapp.infrastructure.remote.memory import InMemoryRemote
from notesapp.infrastructure.remote.supabase import SupabaseRemote


def build_remote(settings: Settings) -> RemoteService:
    if settings.remote_backend == "memory":
        return InMemoryRemote()
    return SupabaseRemote(settings)


__all__ = ["RemoteService", "InMemoryRemote", "SupabaseRemote", "build_remote"]
