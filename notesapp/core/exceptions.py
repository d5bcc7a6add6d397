"""
Error taxonomy and global exception handlers.

Every `AppError` is rendered as the body of a blocking alert:
`{"title": ..., "message": ...}` plus the request id when present.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


class AppError(Exception):
    status_code = 400
    title = "Error"

    def __init__(self, message: str, *, title: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if title is not None:
            self.title = title


class ValidationError(AppError):
    """Invalid user input detected locally; no remote call was made."""
    status_code = 422


class RemoteError(AppError):
    """Any failure reported by (or while reaching) the remote service."""
    status_code = 502

    def __init__(self, message: str, *, detail: Optional[str] = None, title: Optional[str] = None):
        super().__init__(message, title=title)
        self.detail = detail


class AuthError(AppError):
    """Sign-in / sign-up / sign-out failure; message comes from the backend verbatim."""
    status_code = 400


class NotSignedInError(AppError):
    status_code = 401


class NoteBusyError(AppError):
    status_code = 409


class EditorStateError(AppError):
    status_code = 409


class ConfirmationNotFound(AppError):
    status_code = 404


class SessionUnavailableError(AppError):
    status_code = 503


def _req_id(request: Request) -> str | None:
    return getattr(getattr(request, "state", object()), "request_id", None)


def register_exception_handlers(app: FastAPI) -> None:
    log = logging.getLogger("notesapp.errors")

    @app.exception_handler(AppError)
    async def _app_error_handler(request: Request, exc: AppError):
        body: Dict[str, Any] = {"title": exc.title, "message": exc.message}
        rid = _req_id(request)
        if rid:
            body["request_id"] = rid
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(StarletteHTTPException)
    async def _http_exc_handler(request: Request, exc: StarletteHTTPException):
        body: Dict[str, Any] = {"title": "Error", "message": exc.detail or "HTTP error"}
        rid = _req_id(request)
        if rid:
            body["request_id"] = rid
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(RequestValidationError)
    async def _validation_handler(request: Request, exc: RequestValidationError):
        body: Dict[str, Any] = {"title": "Error", "message": "Validation error", "errors": exc.errors()}
        rid = _req_id(request)
        if rid:
            body["request_id"] = rid
        return JSONResponse(status_code=422, content=body)

    @app.exception_handler(Exception)
    async def _generic_handler(request: Request, exc: Exception):
        rid = _req_id(request)
        log.exception("Unhandled error request_id=%s", rid)
        body: Dict[str, Any] = {"title": "Error", "message": "Internal server error"}
        if rid:
            body["request_id"] = rid
        return JSONResponse(status_code=500, content=body)
