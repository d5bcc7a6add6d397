"""
Casos de uso de autenticación: sign in, sign up y sign out.

El backend es dueño de la sesión; aquí sólo se reenvían credenciales y se
traducen los fallos a alertas. Los mensajes de `AuthError` vienen tal cual
del backend.
"""
import logging

from notesapp.core.exceptions import AuthError
from notesapp.repositories.auth_repo import AuthRepository
from notesapp.services.confirm import Confirmation, Confirmations

_log = logging.getLogger("notesapp.auth")


class AuthService:
    def __init__(self, auth: AuthRepository, confirmations: Confirmations):
        self.auth = auth
        self.confirmations = confirmations

    async def sign_in(self, email: str, password: str) -> None:
        try:
            await self.auth.sign_in_with_password(email, password)
        except AuthError as e:
            _log.info("Sign in rejected: %s", e.message)
            raise

    async def sign_up(self, email: str, password: str) -> None:
        try:
            await self.auth.sign_up(email, password)
        except AuthError as e:
            _log.info("Sign up rejected: %s", e.message)
            raise

    def request_sign_out(self) -> Confirmation:
        return self.confirmations.request(
            "Sign Out",
            "Are you sure you want to sign out?",
            "Sign Out",
            self.sign_out,
        )

    async def sign_out(self) -> None:
        try:
            await self.auth.sign_out()
        except AuthError as e:
            _log.warning("Error signing out: %s", e.message)
            raise AuthError("Failed to sign out.")
