"""Escenarios completos contra la API HTTP con el backend en memoria."""
from fastapi.testclient import TestClient

from notesapp.infrastructure.remote.memory import InMemoryRemote
from notesapp.main import create_app

from conftest import make_settings


def _confirm(client: TestClient, prompt: dict, choice: str = "confirm"):
    return client.post(f"/confirmations/{prompt['id']}", json={"choice": choice})


def test_ping_and_health(client: TestClient) -> None:
    assert client.get("/ping").json() == {"message": "pong"}
    assert client.get("/health").json() == {"ok": True}
    status = client.get("/_debug/status").json()
    assert status["remote_backend"] == "memory"
    assert status["session_state"] == "authenticated"


def test_request_id_is_propagated(client: TestClient) -> None:
    response = client.get("/ping", headers={"X-Request-Id": "abc123"})
    assert response.headers["X-Request-Id"] == "abc123"


def test_existing_session_routes_to_notes(client: TestClient) -> None:
    body = client.get("/session").json()
    assert body["state"] == "authenticated"
    assert body["route"] == "notes"
    assert body["user"]["email"] == "ana@example.com"


def test_anonymous_user_is_routed_to_sign_in(anonymous_client: TestClient) -> None:
    assert anonymous_client.get("/session").json()["route"] == "auth"
    response = anonymous_client.get("/notes")
    assert response.status_code == 401
    assert response.json()["message"] == "Not signed in"
    assert anonymous_client.get("/profile").json()["display"] == "Sign in to see your profile"


def test_sign_up_and_sign_in_reroute(anonymous_client: TestClient) -> None:
    response = anonymous_client.post("/auth/sign-up", json={"email": "bob@example.com", "password": "secret-456"})
    assert response.status_code == 201
    assert response.json()["route"] == "notes"

    prompt = anonymous_client.post("/auth/sign-out").json()
    assert prompt["title"] == "Sign Out"
    assert anonymous_client.get("/session").json()["route"] == "notes"
    assert _confirm(anonymous_client, prompt).json()["executed"] is True
    assert anonymous_client.get("/session").json()["route"] == "auth"

    response = anonymous_client.post("/auth/sign-in", json={"email": "bob@example.com", "password": "secret-456"})
    assert response.json()["route"] == "notes"


def test_auth_error_message_is_shown_verbatim(anonymous_client: TestClient) -> None:
    response = anonymous_client.post("/auth/sign-in", json={"email": "nobody@example.com", "password": "x"})
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid login credentials"


def test_cancelled_sign_out_keeps_session(client: TestClient) -> None:
    prompt = client.post("/auth/sign-out").json()
    assert _confirm(client, prompt, "cancel").json()["executed"] is False
    assert client.get("/session").json()["route"] == "notes"


def test_groceries_lifecycle(client: TestClient) -> None:
    client.post("/notes", json={"title": "Older", "content": ""})
    created = client.post("/notes", json={"title": "Groceries", "content": "milk, eggs"})
    assert created.status_code == 201
    listed = client.get("/notes").json()
    assert listed["notes"][0]["title"] == "Groceries"
    note_id = listed["notes"][0]["id"]

    found = client.get("/search", params={"q": "egg"}).json()
    assert found["state"] == "results"
    assert [n["id"] for n in found["results"]] == [note_id]
    assert found["label"] == '1 result for "egg"'

    prompt = client.delete(f"/notes/{note_id}").json()
    assert [c["value"] for c in prompt["choices"]] == ["cancel", "confirm"]
    assert note_id in [n["id"] for n in client.get("/notes/cached").json()["notes"]]
    assert _confirm(client, prompt).status_code == 200

    cached = client.get("/notes/cached").json()
    assert note_id not in [n["id"] for n in cached["notes"]]
    assert note_id not in [n["id"] for n in client.get("/notes").json()["notes"]]


def test_blank_title_is_rejected(client: TestClient, signed_in_remote: InMemoryRemote) -> None:
    response = client.post("/notes", json={"title": "   ", "content": "x"})
    assert response.status_code == 422
    assert response.json() == {
        "title": "Error",
        "message": "Please enter a title for your note",
        "request_id": response.headers["X-Request-Id"],
    }
    assert "insert" not in signed_in_remote.calls
    assert client.get("/notes").json()["count"] == 0


def test_failed_delete_keeps_note(client: TestClient, signed_in_remote: InMemoryRemote) -> None:
    note_id = client.post("/notes", json={"title": "Keep me"}).json()["notes"][0]["id"]
    prompt = client.delete(f"/notes/{note_id}").json()
    signed_in_remote.fail_next("delete")
    response = _confirm(client, prompt)
    assert response.status_code == 502
    assert response.json()["message"] == "Failed to delete note."
    assert [n["id"] for n in client.get("/notes/cached").json()["notes"]] == [note_id]


def test_resolving_unknown_confirmation_is_404(client: TestClient) -> None:
    response = client.post("/confirmations/does-not-exist", json={"choice": "confirm"})
    assert response.status_code == 404


def test_update_via_put(client: TestClient) -> None:
    note_id = client.post("/notes", json={"title": "Draft", "content": "v1"}).json()["notes"][0]["id"]
    body = client.put(f"/notes/{note_id}", json={"title": "Draft", "content": "v2"}).json()
    assert body["notes"][0]["id"] == note_id
    assert body["notes"][0]["content"] == "v2"
    assert client.get(f"/notes/{note_id}").json()["content"] == "v2"
    assert client.get("/notes/missing").status_code == 404


def test_editor_flow(client: TestClient) -> None:
    assert client.get("/editor").json()["state"] == "browsing"
    opened = client.post("/editor/new").json()
    assert opened["header"] == "New Note"
    client.patch("/editor/draft", json={"title": "   "})
    failed = client.post("/editor/save")
    assert failed.status_code == 422
    assert client.get("/editor").json()["state"] == "editing"

    client.patch("/editor/draft", json={"title": "Groceries", "content": "milk"})
    saved = client.post("/editor/save").json()
    assert saved["state"] == "browsing"
    note_id = client.get("/notes/cached").json()["notes"][0]["id"]

    edit = client.post(f"/editor/edit/{note_id}").json()
    assert edit["header"] == "Edit Note"
    assert edit["draft"]["editing_note_id"] == note_id
    assert client.post("/editor/cancel").json()["state"] == "browsing"
    assert client.post("/editor/cancel").status_code == 409


def test_search_idle_and_clear(client: TestClient) -> None:
    idle = client.get("/search", params={"q": "   "}).json()
    assert idle["state"] == "idle"
    assert idle["suggestions"] == {"recent": ["example"], "trending": ["ideas"]}
    client.get("/search", params={"q": "egg"})
    assert client.get("/search/state").json()["state"] == "results"
    cleared = client.delete("/search").json()
    assert cleared["state"] == "idle"
    assert cleared["suggestions"]["recent"][0] == "egg"


def test_local_search_mode_filters_cached_notes(signed_in_remote: InMemoryRemote) -> None:
    app = create_app(make_settings(search_mode="local"), remote=signed_in_remote)
    with TestClient(app) as client:
        client.post("/notes", json={"title": "Groceries", "content": "milk, eggs"})
        signed_in_remote.calls.clear()
        found = client.get("/search", params={"q": "EGG"}).json()
        assert found["count"] == 1
        assert "search" not in signed_in_remote.calls


def test_refetch_delete_policy(signed_in_remote: InMemoryRemote) -> None:
    app = create_app(make_settings(delete_cache_policy="refetch"), remote=signed_in_remote)
    with TestClient(app) as client:
        note_id = client.post("/notes", json={"title": "Groceries"}).json()["notes"][0]["id"]
        prompt = client.delete(f"/notes/{note_id}").json()
        signed_in_remote.calls.clear()
        _confirm(client, prompt)
        assert signed_in_remote.calls == ["delete", "list"]
        assert client.get("/notes/cached").json()["count"] == 0


def test_session_fetch_failure_then_retry(signed_in_remote: InMemoryRemote) -> None:
    signed_in_remote.fail_next("get_session", "Network request failed")
    app = create_app(make_settings(), remote=signed_in_remote)
    with TestClient(app) as client:
        body = client.get("/session").json()
        assert body["state"] == "error"
        assert body["error"] == "Network request failed"
        assert client.get("/notes").status_code == 503
        assert client.post("/session/retry").json()["route"] == "notes"


def test_profile_and_export(client: TestClient) -> None:
    client.post("/notes", json={"title": "Groceries", "content": "milk, eggs"})
    profile = client.get("/profile").json()
    assert profile["email"] == "ana@example.com"
    assert profile["note_count"] == 1
    export = client.get("/profile/export").json()
    assert export["count"] == 1
    assert export["notes"][0]["title"] == "Groceries"


def test_sign_out_clears_cached_notes(client: TestClient) -> None:
    client.post("/notes", json={"title": "Groceries"})
    prompt = client.post("/auth/sign-out").json()
    _confirm(client, prompt)
    assert client.get("/notes/cached").status_code == 401
    client.post("/auth/sign-in", json={"email": "ana@example.com", "password": "secret-123"})
    assert client.get("/notes/cached").json()["count"] == 0
    assert client.get("/notes").json()["count"] == 1


def test_delete_prompt_does_not_survive_sign_out(client: TestClient) -> None:
    note_id = client.post("/notes", json={"title": "Private"}).json()["notes"][0]["id"]
    delete_prompt = client.delete(f"/notes/{note_id}").json()
    _confirm(client, client.post("/auth/sign-out").json())
    assert _confirm(client, delete_prompt).status_code == 401
    client.post("/auth/sign-in", json={"email": "ana@example.com", "password": "secret-123"})
    assert _confirm(client, delete_prompt).status_code == 404
    assert client.get("/notes").json()["count"] == 1


def test_confirmations_require_session(anonymous_client: TestClient) -> None:
    response = anonymous_client.post("/confirmations/anything", json={"choice": "cancel"})
    assert response.status_code == 401
