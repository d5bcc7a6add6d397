"""Persistencia de autenticación: delega por completo en el backend remoto."""
from typing import Callable, Optional

from starlette.concurrency import run_in_threadpool

from notesapp.domain.schemas import Session
from notesapp.infrastructure.remote.base import RemoteService, SessionCallback


class AuthRepository:
    def __init__(self, remote: RemoteService):
        self.remote = remote

    async def get_session(self) -> Optional[Session]:
        return await run_in_threadpool(self.remote.get_session)

    async def sign_in_with_password(self, email: str, password: str) -> None:
        await run_in_threadpool(self.remote.sign_in_with_password, email, password)

    async def sign_up(self, email: str, password: str) -> None:
        await run_in_threadpool(self.remote.sign_up, email, password)

    async def sign_out(self) -> None:
        await run_in_threadpool(self.remote.sign_out)

    def on_session_change(self, callback: SessionCallback) -> Callable[[], None]:
        return self.remote.on_session_change(callback)
