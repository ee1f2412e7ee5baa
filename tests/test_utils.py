from datetime import datetime, timedelta, timezone

import pytest

from app.core.plans import get_plan_expiry
from app.utils.auth import generate_session_token, hash_password, verify_password
from app.utils.best_effort import Outcome, best_effort


def test_password_hash_roundtrip():
    hashed = hash_password("secret123")
    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("secret124", hashed)


def test_verify_password_handles_missing_or_garbage_hash():
    assert not verify_password("secret123", None)
    assert not verify_password("secret123", "")
    assert not verify_password("secret123", "plaintext-not-a-hash")


def test_session_token_is_opaque_and_unique():
    tokens = {generate_session_token("user-1") for _ in range(20)}
    assert len(tokens) == 20
    for token in tokens:
        assert len(token) == 64
        int(token, 16)
        assert "user-1" not in token


def test_best_effort_success_and_failure():
    assert best_effort("Test", lambda x: x * 2, 21) == Outcome(ok=True, value=42)

    def fail():
        raise RuntimeError("down")

    outcome = best_effort("Test", fail)
    assert not outcome.ok
    assert outcome.value is None
    assert outcome.reason == "down"


def test_plan_expiry():
    now = datetime(2026, 1, 1, tzinfo=timezone.utc)
    assert get_plan_expiry("monthly", now) == now + timedelta(days=30)
    assert get_plan_expiry("annual", now) == now + timedelta(days=365)
    assert get_plan_expiry("lifetime", now) is None
    with pytest.raises(ValueError):
        get_plan_expiry("weekly", now)


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
