"""
Esquemas Pydantic para autenticación y estado de sesión.

- El email se normaliza (trim); la validación de formato la hace el backend.
"""
from typing import Literal, Optional

from pydantic import BaseModel, field_validator


class CredentialsIn(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _strip_email(cls, v: str) -> str:
        return v.strip()


class UserOut(BaseModel):
    user_id: str
    email: Optional[str] = None


class SessionOut(BaseModel):
    state: Literal["loading", "authenticated", "signed_out", "error"]
    route: Literal["loading", "notes", "auth", "error"]
    error: Optional[str] = None
    user: Optional[UserOut] = None


class ConfirmIn(BaseModel):
    choice: Literal["cancel", "confirm"]


class ConfirmOut(BaseModel):
    message: str = "ok"
    choice: str
    executed: bool
