from datetime import timedelta
from typing import Any, Dict, List

import pytest
import requests

from notesapp.core.config import Settings
from notesapp.core.exceptions import AuthError, RemoteError
from notesapp.core.time import now_utc
from notesapp.domain.schemas import Session
from notesapp.infrastructure.remote.base import SIGNED_IN, SIGNED_OUT, TOKEN_REFRESHED
from notesapp.infrastructure.remote.supabase import SupabaseRemote, ilike_value

BASE = "https://demo.supabase.co"


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: str = ""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeHttp:
    def __init__(self):
        self.requests: List[Dict[str, Any]] = []
        self.responses: List[Any] = []

    def queue(self, *responses) -> None:
        self.responses.extend(responses)

    def request(self, method, url, **kwargs):
        self.requests.append({"method": method, "url": url, **kwargs})
        resp = self.responses.pop(0)
        if isinstance(resp, Exception):
            raise resp
        return resp


def _token_payload(token: str = "access-1", expires_in: int = 3600) -> Dict[str, Any]:
    return {
        "access_token": token,
        "refresh_token": "refresh-1",
        "expires_in": expires_in,
        "user": {"id": "user-1", "email": "ana@example.com"},
    }


def _row(note_id: int, title: str) -> Dict[str, Any]:
    return {
        "id": note_id,
        "user_id": "user-1",
        "title": title,
        "content": None,
        "created_at": "2025-01-05T10:00:00.123456+00:00",
        "updated_at": "2025-01-05T10:00:00Z",
    }


@pytest.fixture()
def http() -> FakeHttp:
    return FakeHttp()


@pytest.fixture()
def remote(http: FakeHttp) -> SupabaseRemote:
    settings = Settings(supabase_url=BASE + "/", supabase_anon_key="anon-key", remote_timeout_seconds=7)
    return SupabaseRemote(settings, http=http)


def _sign_in(remote: SupabaseRemote, http: FakeHttp, **kw) -> None:
    http.queue(FakeResponse(200, _token_payload(**kw)))
    remote.sign_in_with_password("ana@example.com", "secret-123")


def test_requires_configuration() -> None:
    with pytest.raises(ValueError):
        SupabaseRemote(Settings(supabase_url=None, supabase_anon_key=None))


def test_sign_in_stores_session_and_emits(remote: SupabaseRemote, http: FakeHttp) -> None:
    events = []
    remote.on_session_change(lambda event, session: events.append(event))
    _sign_in(remote, http)
    call = http.requests[0]
    assert call["method"] == "POST"
    assert call["url"] == f"{BASE}/auth/v1/token"
    assert call["params"] == {"grant_type": "password"}
    assert call["headers"]["apikey"] == "anon-key"
    assert call["timeout"] == 7
    session = remote.get_session()
    assert session.user_id == "user-1"
    assert session.email == "ana@example.com"
    assert events == [SIGNED_IN]


def test_sign_in_error_message_is_verbatim(remote: SupabaseRemote, http: FakeHttp) -> None:
    http.queue(FakeResponse(400, {"error": "invalid_grant", "error_description": "Invalid login credentials"}))
    with pytest.raises(AuthError) as exc:
        remote.sign_in_with_password("ana@example.com", "nope")
    assert exc.value.message == "Invalid login credentials"
    assert remote.get_session() is None


def test_sign_up_without_session_keeps_signed_out(remote: SupabaseRemote, http: FakeHttp) -> None:
    http.queue(FakeResponse(200, {"id": "user-1", "email": "ana@example.com"}))
    remote.sign_up("ana@example.com", "secret-123")
    assert remote.get_session() is None


def test_list_notes_uses_session_token_and_order(remote: SupabaseRemote, http: FakeHttp) -> None:
    _sign_in(remote, http)
    http.queue(FakeResponse(200, [_row(2, "b"), _row(1, "a")]))
    notes = remote.list_notes()
    call = http.requests[-1]
    assert call["method"] == "GET"
    assert call["url"] == f"{BASE}/rest/v1/notes"
    assert call["params"]["order"] == "updated_at.desc"
    assert call["headers"]["Authorization"] == "Bearer access-1"
    assert [n.id for n in notes] == ["2", "1"]
    assert notes[0].content == ""


def test_update_and_delete_filter_by_id(remote: SupabaseRemote, http: FakeHttp) -> None:
    _sign_in(remote, http)
    http.queue(FakeResponse(204), FakeResponse(204))
    stamp = now_utc()
    remote.update_note("42", "t", "c", stamp)
    remote.delete_note("42")
    update, delete = http.requests[-2:]
    assert update["method"] == "PATCH"
    assert update["params"] == {"id": "eq.42"}
    assert update["json"]["updated_at"] == stamp.isoformat()
    assert update["headers"]["Prefer"] == "return=minimal"
    assert delete["method"] == "DELETE"
    assert delete["params"] == {"id": "eq.42"}


def test_search_builds_or_ilike_filter(remote: SupabaseRemote, http: FakeHttp) -> None:
    _sign_in(remote, http)
    http.queue(FakeResponse(200, []))
    remote.search_notes("egg")
    params = http.requests[-1]["params"]
    assert params["or"] == '(title.ilike."*egg*",content.ilike."*egg*")'
    assert params["order"] == "updated_at.desc"


def test_ilike_value_escapes_wildcards_and_quotes() -> None:
    assert ilike_value("a,b") == '"*a,b*"'
    assert ilike_value("50%") == '"*50\\\\%*"'
    assert ilike_value('say "hi"') == '"*say \\"hi\\"*"'


def test_rows_error_becomes_remote_error(remote: SupabaseRemote, http: FakeHttp) -> None:
    _sign_in(remote, http)
    http.queue(FakeResponse(403, {"message": "new row violates row-level security policy"}))
    with pytest.raises(RemoteError) as exc:
        remote.insert_note("t", "c")
    assert "row-level security" in exc.value.message


def test_network_failure_becomes_remote_error(remote: SupabaseRemote, http: FakeHttp) -> None:
    _sign_in(remote, http)
    http.queue(requests.ConnectionError("connection refused"))
    with pytest.raises(RemoteError) as exc:
        remote.list_notes()
    assert exc.value.message == "Network request failed"


def test_rows_without_session_fail_without_request(remote: SupabaseRemote, http: FakeHttp) -> None:
    with pytest.raises(RemoteError):
        remote.list_notes()
    assert http.requests == []


def test_expired_session_is_refreshed(remote: SupabaseRemote, http: FakeHttp) -> None:
    events = []
    remote.on_session_change(lambda event, session: events.append(event))
    _sign_in(remote, http, expires_in=1)
    http.queue(FakeResponse(200, _token_payload(token="access-2")))
    session = remote.get_session()
    assert session.access_token == "access-2"
    assert http.requests[-1]["params"] == {"grant_type": "refresh_token"}
    assert events == [SIGNED_IN, TOKEN_REFRESHED]


def test_rejected_refresh_signs_out(remote: SupabaseRemote, http: FakeHttp) -> None:
    events = []
    remote.on_session_change(lambda event, session: events.append(event))
    _sign_in(remote, http, expires_in=1)
    http.queue(FakeResponse(400, {"error_description": "Invalid Refresh Token"}))
    assert remote.get_session() is None
    assert events == [SIGNED_IN, SIGNED_OUT]


def test_sign_out_clears_session(remote: SupabaseRemote, http: FakeHttp) -> None:
    _sign_in(remote, http)
    http.queue(FakeResponse(204))
    remote.sign_out()
    assert http.requests[-1]["url"] == f"{BASE}/auth/v1/logout"
    assert remote.get_session() is None


def test_session_repr_hides_tokens() -> None:
    session = Session(user_id="u", email="a@b.c", access_token="secret-token", expires_at=now_utc() + timedelta(hours=1))
    assert "secret-token" not in repr(session)
