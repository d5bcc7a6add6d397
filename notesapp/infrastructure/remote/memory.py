"""
Backend remoto en memoria (desarrollo local y tests).

Reproduce el comportamiento observable del backend real:
- ids asignados al insertar (uuid hex) e inmutables,
- filas aisladas por dueño (el dueño es implícito: el de la sesión),
- orden por `updated_at` descendente,
- búsqueda ilike sobre title OR content,
- update/delete de un id inexistente no es error (0 filas afectadas).

`fail_next(op)` permite inyectar un fallo en la próxima llamada a `op`.
"""
from __future__ import annotations

import itertools
import logging
import uuid
from datetime import datetime
from threading import RLock
from typing import Any, Dict, List, Optional

from argon2 import PasswordHasher
from argon2.exceptions import VerificationError

from notesapp.core.exceptions import AuthError, RemoteError
from notesapp.core.time import as_utc, now_utc
from notesapp.domain.schemas import Note, Session
from notesapp.infrastructure.remote.base import SIGNED_IN, SIGNED_OUT, RemoteService

_log = logging.getLogger("notesapp.remote.memory")

# Parámetros livianos: este backend no protege datos reales.
ph = PasswordHasher(time_cost=1, memory_cost=8192, parallelism=1)

MIN_PASSWORD_LENGTH = 6


class InMemoryRemote(RemoteService):
    def __init__(self) -> None:
        super().__init__()
        self._lock = RLock()
        self._users: Dict[str, Dict[str, Any]] = {}
        self._rows: Dict[str, Dict[str, Any]] = {}
        self._seq = itertools.count(1)
        self._session: Optional[Session] = None
        self._failures: Dict[str, str] = {}
        self.calls: List[str] = []

    def name(self) -> str:
        return "memory"

    # --- fault injection ---
    def fail_next(self, op: str, message: str = "Service unavailable") -> None:
        with self._lock:
            self._failures[op] = message

    def _enter(self, op: str) -> None:
        with self._lock:
            self.calls.append(op)
            message = self._failures.pop(op, None)
        if message is not None:
            if op in ("sign_in", "sign_up", "sign_out"):
                raise AuthError(message)
            raise RemoteError(message, detail=f"injected failure op={op}")

    # --- auth ---
    def get_session(self) -> Optional[Session]:
        self._enter("get_session")
        with self._lock:
            return self._session

    def sign_up(self, email: str, password: str) -> None:
        self._enter("sign_up")
        email = (email or "").strip().lower()
        if not email or "@" not in email:
            raise AuthError("Unable to validate email address: invalid format")
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise AuthError(f"Password should be at least {MIN_PASSWORD_LENGTH} characters.")
        with self._lock:
            if email in self._users:
                raise AuthError("User already registered")
            self._users[email] = {"id": uuid.uuid4().hex, "email": email, "password_hash": ph.hash(password)}
        # Sin confirmación de correo: el alta abre sesión directamente
        self._open_session(email)

    def sign_in_with_password(self, email: str, password: str) -> None:
        self._enter("sign_in")
        email = (email or "").strip().lower()
        with self._lock:
            user = self._users.get(email)
        if not user:
            raise AuthError("Invalid login credentials")
        try:
            ph.verify(user["password_hash"], password or "")
        except VerificationError:
            raise AuthError("Invalid login credentials")
        self._open_session(email)

    def sign_out(self) -> None:
        self._enter("sign_out")
        with self._lock:
            self._session = None
        self._emit(SIGNED_OUT, None)

    def _open_session(self, email: str) -> None:
        with self._lock:
            user = self._users[email]
            self._session = Session(
                user_id=user["id"],
                email=user["email"],
                access_token=uuid.uuid4().hex,
                refresh_token=uuid.uuid4().hex,
            )
            session = self._session
        self._emit(SIGNED_IN, session)

    def _owner(self) -> str:
        with self._lock:
            if self._session is None:
                raise RemoteError("Not signed in", detail="no session for row access")
            return self._session.user_id

    # --- notes ---
    def _visible(self, owner: str) -> List[Dict[str, Any]]:
        rows = [r for r in self._rows.values() if r["user_id"] == owner]
        rows.sort(key=lambda r: (r["updated_at"], r["_seq"]), reverse=True)
        return rows

    @staticmethod
    def _to_note(row: Dict[str, Any]) -> Note:
        return Note(**{k: v for k, v in row.items() if not k.startswith("_")})

    def list_notes(self) -> List[Note]:
        self._enter("list")
        owner = self._owner()
        with self._lock:
            return [self._to_note(r) for r in self._visible(owner)]

    def insert_note(self, title: str, content: str) -> None:
        self._enter("insert")
        owner = self._owner()
        now = now_utc()
        with self._lock:
            note_id = uuid.uuid4().hex
            self._rows[note_id] = {
                "id": note_id,
                "user_id": owner,
                "title": title,
                "content": content,
                "created_at": now,
                "updated_at": now,
                "_seq": next(self._seq),
            }
        _log.debug("insert id=%s owner=%s", note_id, owner)

    def update_note(self, note_id: str, title: str, content: str, updated_at: datetime) -> None:
        self._enter("update")
        owner = self._owner()
        with self._lock:
            row = self._rows.get(note_id)
            if not row or row["user_id"] != owner:
                return
            row.update(title=title, content=content, updated_at=as_utc(updated_at), _seq=next(self._seq))

    def delete_note(self, note_id: str) -> None:
        self._enter("delete")
        owner = self._owner()
        with self._lock:
            row = self._rows.get(note_id)
            if row and row["user_id"] == owner:
                del self._rows[note_id]

    def search_notes(self, pattern: str) -> List[Note]:
        self._enter("search")
        owner = self._owner()
        needle = (pattern or "").lower()
        with self._lock:
            return [
                self._to_note(r)
                for r in self._visible(owner)
                if needle in r["title"].lower() or needle in r["content"].lower()
            ]
