"""Schemas para endpoints de health/debug."""
from pydantic import BaseModel


class PingOut(BaseModel):
    message: str


class HealthOut(BaseModel):
    ok: bool


class DebugStatusOut(BaseModel):
    app_name: str
    api_prefix: str
    remote_backend: str
    supabase_configured: bool
    session_state: str
    delete_cache_policy: str
    search_mode: str
