"""Configuración central de la aplicación (Pydantic Settings).

- Carga variables desde .env en la raíz del repo.
- Agrupa ajustes por área: App, CORS, Backend remoto, Notas, Búsqueda.
"""
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path

# Resuelve el .env ubicado en la raíz del repo (independiente del CWD)
ENV_FILE = Path(__file__).resolve().parents[2] / ".env"


class Settings(BaseSettings):
    """Conjunto de variables de configuración con valores por defecto razonables.

    Nota: los valores pueden sobreescribirse vía variables de entorno (.env).
    """
    # App
    app_name: str = "Notas API"
    api_prefix: str = ""
    log_level: str = "INFO"

    # CORS
    cors_origins: list[str] = ["http://localhost:8081", "http://127.0.0.1:8081"]
    cors_allow_any: bool = False  # Permite todos los orígenes (usa con cuidado)

    # Backend remoto (Supabase o en memoria para desarrollo)
    remote_backend: Literal["supabase", "memory"] = Field(
        "supabase",
        validation_alias=AliasChoices("NOTES_REMOTE_BACKEND", "REMOTE_BACKEND"),
    )
    supabase_url: str | None = None
    supabase_anon_key: str | None = None
    notes_table: str = "notes"
    remote_timeout_seconds: int = 15

    # Notas
    # "local": delete quita la nota del cache; "refetch": vuelve a listar
    delete_cache_policy: Literal["local", "refetch"] = "local"
    confirmation_ttl_seconds: int = 120

    # Búsqueda
    search_mode: Literal["remote", "local"] = "remote"
    search_recent_limit: int = 5
    search_recent_defaults: list[str] = ["example"]
    search_trending: list[str] = ["ideas"]

    # --- Utilidades derivadas / helpers ---
    @property
    def api_prefix_normalized(self) -> str:
        """Devuelve `api_prefix` con formato consistente.

        - Siempre inicia con '/'
        - Sin '/' final (excepto cuando es solo '/')
        - Si está vacío, devuelve ""
        """
        pref = (self.api_prefix or "").strip()
        if not pref:
            return ""
        if not pref.startswith('/'):
            pref = '/' + pref
        if len(pref) > 1 and pref.endswith('/'):
            pref = pref[:-1]
        return pref

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)

    @property
    def supabase_base_url(self) -> str:
        return (self.supabase_url or "").rstrip("/")

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # no fallar si hay variables no usadas
        populate_by_name=True,
    )


settings = Settings()
