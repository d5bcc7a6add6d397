"""
Session gate: decides whether the user lands on the notes area or on sign-in.

- `start()` subscribes to session-change events for the process lifetime and
  then fetches the current session.
- Every session-change event re-routes immediately (no debounce).
- A failing initial fetch leaves the gate in `error` with the message; `retry()`
  fetches again.

Session-change callbacks arrive from the remote worker threads. The gate counts
them right away and hands them to the event loop captured in `start()`, so the
`Observable` subscribers (note cache, editor, search) run on the loop thread.
"""
import asyncio
import logging
import threading
from threading import RLock
from typing import Callable, Optional

from notesapp.core.exceptions import NotSignedInError, RemoteError, SessionUnavailableError
from notesapp.core.observable import Observable
from notesapp.domain.schemas import Session
from notesapp.repositories.auth_repo import AuthRepository

_log = logging.getLogger("notesapp.session")

LOADING = "loading"
AUTHENTICATED = "authenticated"
SIGNED_OUT = "signed_out"
ERROR = "error"

ROUTES = {
    LOADING: "loading",
    AUTHENTICATED: "notes",
    SIGNED_OUT: "auth",
    ERROR: "error",
}


class SessionGate:
    def __init__(self, auth: AuthRepository, session: Optional[Observable[Optional[Session]]] = None):
        self.auth = auth
        self.session: Observable[Optional[Session]] = session or Observable(None)
        self._lock = RLock()
        self._state = LOADING
        self._error: Optional[str] = None
        self._events = 0
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._loop_thread: Optional[int] = None

    @property
    def state(self) -> str:
        with self._lock:
            return self._state

    @property
    def route(self) -> str:
        return ROUTES[self.state]

    @property
    def error(self) -> Optional[str]:
        with self._lock:
            return self._error

    async def start(self) -> str:
        with self._lock:
            self._loop = asyncio.get_running_loop()
            self._loop_thread = threading.get_ident()
            if self._unsubscribe is None:
                self._unsubscribe = self.auth.on_session_change(self._on_change)
        await self._fetch()
        return self.state

    async def retry(self) -> str:
        if self.state != ERROR:
            return self.state
        await self._fetch()
        return self.state

    def stop(self) -> None:
        with self._lock:
            unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe:
            unsubscribe()

    async def _fetch(self) -> None:
        with self._lock:
            self._state = LOADING
            self._error = None
            seen = self._events
        try:
            session = await self.auth.get_session()
        except RemoteError as e:
            _log.warning("Session fetch failed: %s (%s)", e.message, getattr(e, "detail", None))
            with self._lock:
                if self._events == seen:
                    self._state = ERROR
                    self._error = e.message
            return
        with self._lock:
            # Un evento llegado durante la consulta es más reciente que su resultado
            if self._events != seen:
                return
        self._apply(session)

    def _on_change(self, event: str, session: Optional[Session]) -> None:
        with self._lock:
            self._events += 1
        _log.info("Session change event=%s signed_in=%s", event, session is not None)
        self._dispatch(session)

    def _dispatch(self, session: Optional[Session]) -> None:
        loop = self._loop
        if loop is None or loop.is_closed() or threading.get_ident() == self._loop_thread:
            self._apply(session)
            return
        try:
            loop.call_soon_threadsafe(self._apply, session)
        except RuntimeError:
            # El loop se cerró entre la comprobación y la llamada
            self._apply(session)

    def _apply(self, session: Optional[Session]) -> None:
        with self._lock:
            self._state = AUTHENTICATED if session is not None else SIGNED_OUT
            self._error = None
        self.session.set(session)

    def require_session(self) -> Session:
        state = self.state
        if state == LOADING:
            raise SessionUnavailableError("Checking your session, try again shortly.")
        if state == ERROR:
            raise SessionUnavailableError(self.error or "Failed to load session.")
        session = self.session.get()
        if state != AUTHENTICATED or session is None:
            raise NotSignedInError("Not signed in")
        return session
