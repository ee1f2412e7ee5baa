import pytest
import requests

from app.core.errors import SupabaseError
from app.schemas.auth import UserData
from app.services.profile_data import SupabaseProfileDataService, row_to_user_data
from app.services.supabase_identity import SupabaseIdentityMirror


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} error")


@pytest.fixture
def mirror():
    return SupabaseIdentityMirror("https://proj.supabase.co/", "service-key", timeout=3)


def test_create_user_posts_auto_confirmed_user(mirror, monkeypatch):
    captured = {}

    def fake_post(url, json=None, headers=None, timeout=None):
        captured.update(url=url, json=json, headers=headers, timeout=timeout)
        return FakeResponse(200, {"id": "sb-42", "email": json["email"]})

    monkeypatch.setattr(requests, "post", fake_post)

    assert mirror.create_user("a@example.com", "secret123") == "sb-42"
    assert captured["url"] == "https://proj.supabase.co/auth/v1/admin/users"
    assert captured["json"] == {"email": "a@example.com", "password": "secret123", "email_confirm": True}
    assert captured["headers"]["Authorization"] == "Bearer service-key"
    assert captured["timeout"] == 3


def test_create_user_links_existing_supabase_account(mirror, monkeypatch):
    monkeypatch.setattr(
        requests, "post",
        lambda *a, **kw: FakeResponse(422, {"msg": "exists"}, text='{"code":"email_exists","msg":"A user with this email address has already been registered"}'),
    )
    monkeypatch.setattr(
        requests, "get",
        lambda *a, **kw: FakeResponse(200, {"users": [
            {"id": "sb-1", "email": "other@example.com"},
            {"id": "sb-7", "email": "A@Example.com"},
        ]}),
    )

    assert mirror.create_user("a@example.com", "secret123") == "sb-7"


def test_create_user_raises_on_other_errors(mirror, monkeypatch):
    monkeypatch.setattr(requests, "post", lambda *a, **kw: FakeResponse(500, None, text="boom"))

    with pytest.raises(SupabaseError) as exc:
        mirror.create_user("a@example.com", "secret123")
    assert exc.value.status_code == 500


def test_create_user_wraps_network_errors(mirror, monkeypatch):
    def refuse(*a, **kw):
        raise requests.exceptions.ConnectionError("connection refused")

    monkeypatch.setattr(requests, "post", refuse)

    with pytest.raises(SupabaseError):
        mirror.create_user("a@example.com", "secret123")


def test_unconfigured_clients_refuse_to_call_out():
    with pytest.raises(SupabaseError):
        SupabaseIdentityMirror("", "").create_user("a@example.com", "secret123")
    with pytest.raises(SupabaseError):
        SupabaseProfileDataService("", "").get_user_data("user-1")


def test_get_user_data_decodes_json_columns(monkeypatch):
    captured = {}

    def fake_get(url, params=None, headers=None, timeout=None):
        captured.update(url=url, params=params)
        return FakeResponse(200, [{
            "user_id": "user-1",
            "goal": "Learn Spanish",
            "time_commitment": "30 min",
            "answers": '["a", "b"]',
            "roadmap": {"phases": []},
            "completed_tasks": "[]",
            "streak_data": '{"streak": 3, "lastCompletionDate": "2026-10-01"}',
            "task_timers": None,
            "last_sync_at": "2026-10-01T10:00:00+00:00",
        }])

    monkeypatch.setattr(requests, "get", fake_get)
    service = SupabaseProfileDataService("https://proj.supabase.co", "service-key")

    data = service.get_user_data("user-1")

    assert captured["url"] == "https://proj.supabase.co/rest/v1/user_data"
    assert captured["params"]["user_id"] == "eq.user-1"
    assert data.goal == "Learn Spanish"
    assert data.time_commitment == "30 min"
    assert data.answers == ["a", "b"]
    assert data.roadmap == {"phases": []}
    assert data.completed_tasks == []
    assert data.streak_data == {"streak": 3, "lastCompletionDate": "2026-10-01"}
    assert data.task_timers is None


def test_get_user_data_returns_none_when_no_row(monkeypatch):
    monkeypatch.setattr(requests, "get", lambda *a, **kw: FakeResponse(200, []))
    assert SupabaseProfileDataService("https://proj.supabase.co", "k").get_user_data("user-1") is None


def test_get_user_data_raises_on_http_error(monkeypatch):
    monkeypatch.setattr(requests, "get", lambda *a, **kw: FakeResponse(401, None, text="invalid key"))
    with pytest.raises(SupabaseError):
        SupabaseProfileDataService("https://proj.supabase.co", "k").get_user_data("user-1")


def test_row_to_user_data_keeps_unparseable_strings():
    data = row_to_user_data({"roadmap": "not json", "goal": ""})
    assert data.roadmap == "not json"
    assert data.goal is None


def test_save_user_data_upserts_json_encoded_row(monkeypatch):
    captured = {}

    def fake_post(url, params=None, json=None, headers=None, timeout=None):
        captured.update(url=url, params=params, json=json, headers=headers)
        return FakeResponse(201)

    monkeypatch.setattr(requests, "post", fake_post)
    service = SupabaseProfileDataService("https://proj.supabase.co", "service-key")

    synced_at = service.save_user_data("user-1", UserData(
        goal="Learn Spanish",
        answers=["a", "b"],
        completed_tasks=[],
        streak_data={"streak": 3},
    ))

    row = captured["json"]
    assert captured["url"] == "https://proj.supabase.co/rest/v1/user_data"
    assert captured["params"] == {"on_conflict": "user_id"}
    assert "resolution=merge-duplicates" in captured["headers"]["Prefer"]
    assert row["user_id"] == "user-1"
    assert row["goal"] == "Learn Spanish"
    assert row["answers"] == '["a", "b"]'
    assert row["completed_tasks"] == "[]"
    assert row["streak_data"] == '{"streak": 3}'
    assert row["roadmap"] is None
    assert row["last_sync_at"] == synced_at
    assert row_to_user_data(row).answers == ["a", "b"]


def test_save_user_data_raises_on_http_error(monkeypatch):
    monkeypatch.setattr(requests, "post", lambda *a, **kw: FakeResponse(409, None, text="conflict"))
    with pytest.raises(SupabaseError) as exc:
        SupabaseProfileDataService("https://proj.supabase.co", "k").save_user_data("user-1", UserData())
    assert exc.value.status_code == 409


def test_delete_user_data_filters_on_user_id(monkeypatch):
    captured = {}

    def fake_delete(url, params=None, headers=None, timeout=None):
        captured.update(url=url, params=params)
        return FakeResponse(204)

    monkeypatch.setattr(requests, "delete", fake_delete)

    SupabaseProfileDataService("https://proj.supabase.co", "k").delete_user_data("user-1")

    assert captured["url"] == "https://proj.supabase.co/rest/v1/user_data"
    assert captured["params"] == {"user_id": "eq.user-1"}


def test_delete_user_data_wraps_network_errors(monkeypatch):
    def refuse(*a, **kw):
        raise requests.exceptions.ConnectionError("connection refused")

    monkeypatch.setattr(requests, "delete", refuse)
    with pytest.raises(SupabaseError):
        SupabaseProfileDataService("https://proj.supabase.co", "k").delete_user_data("user-1")
