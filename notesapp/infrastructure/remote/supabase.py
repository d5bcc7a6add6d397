"""Cliente HTTP mínimo para un backend compatible con Supabase (GoTrue + PostgREST).

- Auth: `/auth/v1/token` (password y refresh_token), `/auth/v1/signup`, `/auth/v1/logout`.
- Filas: `/rest/v1/<tabla>`; la propiedad de las filas la aplica el backend (RLS)
  a partir del access token de la sesión.
- Mantiene la sesión en memoria y la refresca cuando expira (TOKEN_REFRESHED).
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from threading import RLock
from typing import Any, Dict, List, Optional

import requests

from notesapp.core.config import Settings
from notesapp.core.exceptions import AuthError, RemoteError
from notesapp.core.time import now_utc, to_iso
from notesapp.domain.schemas import Note, Session
from notesapp.infrastructure.remote.base import (
    SIGNED_IN,
    SIGNED_OUT,
    TOKEN_REFRESHED,
    RemoteService,
)

_log = logging.getLogger("notesapp.remote.supabase")

NOTE_COLUMNS = "id,user_id,title,content,created_at,updated_at"
# Margen para refrescar antes de que el token caduque realmente
REFRESH_MARGIN = timedelta(seconds=30)


def _error_message(resp: requests.Response) -> str:
    """Extrae el mensaje del backend tal cual (GoTrue usa msg/error_description, PostgREST message)."""
    try:
        data = resp.json()
    except ValueError:
        return (resp.text or "").strip() or f"HTTP {resp.status_code}"
    if isinstance(data, dict):
        for key in ("msg", "error_description", "message", "error"):
            if data.get(key):
                return str(data[key])
    return f"HTTP {resp.status_code}"


def ilike_value(query: str) -> str:
    """Valor literal para `ilike` dentro de un filtro `or=(...)` de PostgREST.

    Escapa comodines de LIKE (`%`, `_`) y cita el valor para que `,` `(` `)`
    no rompan el filtro.
    """
    escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    quoted = escaped.replace("\\", "\\\\").replace('"', '\\"')
    return f'"*{quoted}*"'


class SupabaseRemote(RemoteService):
    def __init__(self, settings: Settings, http: Optional[requests.Session] = None):
        super().__init__()
        if not settings.supabase_configured:
            raise ValueError("Falta SUPABASE_URL / SUPABASE_ANON_KEY en configuración")
        self._base = settings.supabase_base_url
        self._key = settings.supabase_anon_key or ""
        self._table = settings.notes_table
        self._timeout = settings.remote_timeout_seconds
        self._http = http or requests.Session()
        self._lock = RLock()
        self._session: Optional[Session] = None

    def name(self) -> str:
        return "supabase"

    # --- transporte ---
    def _headers(self, token: Optional[str] = None) -> Dict[str, str]:
        return {
            "apikey": self._key,
            "Authorization": f"Bearer {token or self._key}",
            "Content-Type": "application/json",
        }

    def _send(self, method: str, path: str, *, token: Optional[str] = None, **kwargs: Any) -> requests.Response:
        headers = self._headers(token)
        headers.update(kwargs.pop("headers", {}) or {})
        try:
            return self._http.request(
                method,
                f"{self._base}{path}",
                headers=headers,
                timeout=self._timeout,
                **kwargs,
            )
        except requests.RequestException as e:
            _log.warning("Remote request failed method=%s path=%s error=%s", method, path, e)
            raise RemoteError("Network request failed", detail=str(e))

    def _rows(self, method: str, *, params: Dict[str, str], json: Any = None, prefer: Optional[str] = None) -> requests.Response:
        token = self._access_token()
        extra = {"Prefer": prefer} if prefer else {}
        resp = self._send(method, f"/rest/v1/{self._table}", token=token, params=params, json=json, headers=extra)
        if resp.status_code >= 400:
            msg = _error_message(resp)
            _log.warning("Rows request failed method=%s status=%s message=%s", method, resp.status_code, msg)
            raise RemoteError(msg, detail=f"status={resp.status_code}")
        return resp

    # --- sesión ---
    def _session_from_payload(self, data: Dict[str, Any]) -> Optional[Session]:
        token = data.get("access_token")
        user = data.get("user") or {}
        if not token or not user.get("id"):
            return None
        expires_at: Optional[datetime] = None
        if data.get("expires_in"):
            expires_at = now_utc() + timedelta(seconds=int(data["expires_in"]))
        return Session(
            user_id=str(user["id"]),
            email=user.get("email"),
            access_token=token,
            refresh_token=data.get("refresh_token"),
            expires_at=expires_at,
        )

    def _set_session(self, session: Optional[Session], event: str) -> None:
        with self._lock:
            self._session = session
        self._emit(event, session)

    def _refresh(self, current: Session) -> Optional[Session]:
        resp = self._send(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": current.refresh_token},
        )
        if resp.status_code >= 400:
            # Refresh token inválido o revocado: la sesión termina
            _log.info("Session refresh rejected status=%s", resp.status_code)
            self._set_session(None, SIGNED_OUT)
            return None
        session = self._session_from_payload(resp.json())
        self._set_session(session, TOKEN_REFRESHED if session else SIGNED_OUT)
        return session

    def get_session(self) -> Optional[Session]:
        with self._lock:
            current = self._session
        if current is None:
            return None
        if current.expires_at and current.refresh_token and now_utc() + REFRESH_MARGIN >= current.expires_at:
            return self._refresh(current)
        return current

    def _access_token(self) -> str:
        session = self.get_session()
        if session is None:
            raise RemoteError("Not signed in", detail="no session for row access")
        return session.access_token

    def _auth_call(self, path: str, payload: Dict[str, Any], params: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        try:
            resp = self._send("POST", path, params=params, json=payload)
        except RemoteError as e:
            raise AuthError(e.message)
        if resp.status_code >= 400:
            raise AuthError(_error_message(resp))
        try:
            return resp.json()
        except ValueError:
            return {}

    def sign_in_with_password(self, email: str, password: str) -> None:
        data = self._auth_call("/auth/v1/token", {"email": email, "password": password}, params={"grant_type": "password"})
        session = self._session_from_payload(data)
        if session is None:
            raise AuthError("Sign in did not return a session")
        self._set_session(session, SIGNED_IN)

    def sign_up(self, email: str, password: str) -> None:
        data = self._auth_call("/auth/v1/signup", {"email": email, "password": password})
        # Con confirmación de correo activa el alta no trae sesión
        session = self._session_from_payload(data)
        if session is not None:
            self._set_session(session, SIGNED_IN)

    def sign_out(self) -> None:
        with self._lock:
            current = self._session
        if current is not None:
            try:
                resp = self._send("POST", "/auth/v1/logout", token=current.access_token)
            except RemoteError as e:
                raise AuthError(e.message)
            # 401/404: el token ya no existe en el servidor, la sesión local se cierra igual
            if resp.status_code >= 400 and resp.status_code not in (401, 404):
                raise AuthError(_error_message(resp))
        self._set_session(None, SIGNED_OUT)

    # --- notas ---
    def list_notes(self) -> List[Note]:
        resp = self._rows("GET", params={"select": NOTE_COLUMNS, "order": "updated_at.desc"})
        return [Note.from_row(r) for r in resp.json()]

    def insert_note(self, title: str, content: str) -> None:
        self._rows("POST", params={}, json={"title": title, "content": content}, prefer="return=minimal")

    def update_note(self, note_id: str, title: str, content: str, updated_at: datetime) -> None:
        self._rows(
            "PATCH",
            params={"id": f"eq.{note_id}"},
            json={"title": title, "content": content, "updated_at": to_iso(updated_at)},
            prefer="return=minimal",
        )

    def delete_note(self, note_id: str) -> None:
        self._rows("DELETE", params={"id": f"eq.{note_id}"})

    def search_notes(self, pattern: str) -> List[Note]:
        value = ilike_value(pattern)
        resp = self._rows(
            "GET",
            params={
                "select": NOTE_COLUMNS,
                "or": f"(title.ilike.{value},content.ilike.{value})",
                "order": "updated_at.desc",
            },
        )
        return [Note.from_row(r) for r in resp.json()]
