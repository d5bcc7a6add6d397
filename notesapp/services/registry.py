"""
Registro de servicios del proceso: arma backend, repositorios y servicios una
sola vez y los cablea entre sí (sesión -> cache de notas, editor, búsqueda y confirmaciones).
"""
from dataclasses import dataclass
from typing import Optional

from notesapp.core.config import Settings
from notesapp.infrastructure.remote import RemoteService, build_remote
from notesapp.repositories.auth_repo import AuthRepository
from notesapp.repositories.note_repo import NoteRepository
from notesapp.services.auth_service import AuthService
from notesapp.services.confirm import Confirmations
from notesapp.services.editor import Editor
from notesapp.services.note_service import NoteStore
from notesapp.services.search_service import SearchController
from notesapp.services.session_gate import SessionGate


@dataclass
class Services:
    remote: RemoteService
    gate: SessionGate
    notes: NoteStore
    editor: Editor
    search: SearchController
    auth: AuthService
    confirmations: Confirmations


def build_services(settings: Settings, remote: Optional[RemoteService] = None) -> Services:
    remote = remote or build_remote(settings)
    auth_repo = AuthRepository(remote)
    note_repo = NoteRepository(remote)

    gate = SessionGate(auth_repo)
    notes = NoteStore(note_repo, delete_cache_policy=settings.delete_cache_policy)
    gate.session.subscribe(notes.on_session)

    search = SearchController(
        note_repo,
        mode=settings.search_mode,
        recent_defaults=settings.search_recent_defaults,
        trending=settings.search_trending,
        recent_limit=settings.search_recent_limit,
    )
    editor = Editor(notes)
    gate.session.subscribe(editor.on_session)
    gate.session.subscribe(search.on_session)

    confirmations = Confirmations(ttl_seconds=settings.confirmation_ttl_seconds)
    gate.session.subscribe(confirmations.on_session)
    return Services(
        remote=remote,
        gate=gate,
        notes=notes,
        editor=editor,
        search=search,
        auth=AuthService(auth_repo, confirmations),
        confirmations=confirmations,
    )
