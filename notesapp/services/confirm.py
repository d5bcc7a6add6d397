"""
Confirmaciones de dos opciones para acciones destructivas (borrar nota, cerrar sesión).

`request()` registra la acción pendiente y devuelve el prompt; `resolve()` la
ejecuta con "confirm" o la descarta con "cancel". Los prompts caducan tras
`ttl_seconds` y se descartan todos al cerrar sesión.
"""
from __future__ import annotations

import logging
import time
import uuid
from typing import Any, Awaitable, Callable, Dict, List, Optional

from pydantic import BaseModel

from notesapp.core.exceptions import ConfirmationNotFound

_log = logging.getLogger("notesapp.confirm")

CANCEL = "cancel"
CONFIRM = "confirm"

Action = Callable[[], Awaitable[Any]]


class Choice(BaseModel):
    value: str
    label: str
    style: str


class Confirmation(BaseModel):
    id: str
    title: str
    message: str
    choices: List[Choice]


class Confirmations:
    def __init__(self, ttl_seconds: int = 120, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._pending: Dict[str, Dict[str, Any]] = {}

    def request(self, title: str, message: str, action_label: str, action: Action) -> Confirmation:
        self._expire()
        cid = uuid.uuid4().hex
        prompt = Confirmation(
            id=cid,
            title=title,
            message=message,
            choices=[
                Choice(value=CANCEL, label="Cancel", style="cancel"),
                Choice(value=CONFIRM, label=action_label, style="destructive"),
            ],
        )
        self._pending[cid] = {"prompt": prompt, "action": action, "at": self._clock()}
        return prompt

    def pending(self, cid: str) -> Optional[Confirmation]:
        self._expire()
        entry = self._pending.get(cid)
        return entry["prompt"] if entry else None

    async def resolve(self, cid: str, choice: str) -> Optional[Any]:
        """Ejecuta (confirm) o descarta (cancel) la acción; devuelve su resultado."""
        if choice not in (CANCEL, CONFIRM):
            raise ValueError(f"opción inválida: {choice}")
        self._expire()
        entry = self._pending.pop(cid, None)
        if entry is None:
            raise ConfirmationNotFound("This confirmation is no longer available.")
        if choice == CANCEL:
            _log.info("Confirmation cancelled title=%s", entry["prompt"].title)
            return None
        return await entry["action"]()

    def clear(self) -> None:
        self._pending.clear()

    def on_session(self, session) -> None:
        if session is None and self._pending:
            _log.info("Dropping %s pending confirmations on sign-out", len(self._pending))
            self.clear()

    def _expire(self) -> None:
        now = self._clock()
        stale = [cid for cid, e in self._pending.items() if now - e["at"] > self.ttl_seconds]
        for cid in stale:
            del self._pending[cid]
