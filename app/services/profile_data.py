"""
Per-user app state (goal, roadmap, progress) kept in the Supabase `user_data`
table, through PostgREST. Loaded on login; saved and cleared by /users routes.
One row per user_id.
"""
import json
import logging
from typing import Optional

import requests

from app.core.errors import SupabaseError
from app.schemas.auth import UserData
from app.utils.dates import isoformat_utc, utcnow

logger = logging.getLogger(__name__)

# Columns that older clients wrote as JSON strings instead of JSONB
_JSON_COLUMNS = ("answers", "roadmap", "completed_tasks", "streak_data", "task_timers")


def _decode(value):
    if isinstance(value, str):
        try:
            return json.loads(value)
        except ValueError:
            return value
    return value


def row_to_user_data(row: dict) -> UserData:
    data = dict(row)
    for column in _JSON_COLUMNS:
        data[column] = _decode(data.get(column))
    return UserData(
        goal=data.get("goal") or None,
        timeline=data.get("timeline") or None,
        time_commitment=data.get("time_commitment") or None,
        answers=data.get("answers"),
        roadmap=data.get("roadmap"),
        completed_tasks=data.get("completed_tasks"),
        streak_data=data.get("streak_data"),
        task_timers=data.get("task_timers"),
        last_sync_at=data.get("last_sync_at") or None,
    )


def user_data_to_row(user_id: str, data: UserData, synced_at: str) -> dict:
    """Row for the user_data upsert; structured columns stored as JSON text."""
    row = {
        "user_id": user_id,
        "goal": data.goal or None,
        "timeline": data.timeline or None,
        "time_commitment": data.time_commitment or None,
        "last_sync_at": synced_at,
        "updated_at": synced_at,
    }
    for column in _JSON_COLUMNS:
        value = getattr(data, column)
        row[column] = json.dumps(value) if value is not None else None
    return row


class SupabaseProfileDataService:
    table = "user_data"

    def __init__(self, supabase_url: str, api_key: str, timeout: float = 10.0):
        self.supabase_url = (supabase_url or "").rstrip("/")
        self.api_key = api_key or ""
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.supabase_url and self.api_key)

    @property
    def table_url(self) -> str:
        return f"{self.supabase_url}/rest/v1/{self.table}"

    def _headers(self, **extra) -> dict:
        if not self.configured:
            raise SupabaseError("Supabase is not configured (SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY)")
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }
        headers.update(extra)
        return headers

    def get_user_data(self, user_id: str) -> Optional[UserData]:
        headers = self._headers()
        try:
            r = requests.get(
                self.table_url,
                params={"select": "*", "user_id": f"eq.{user_id}", "limit": 1},
                headers=headers,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise SupabaseError(f"Supabase user_data request failed: {e}")

        if r.status_code != 200:
            raise SupabaseError(f"Supabase user_data query failed ({r.status_code}): {r.text[:200]}", r.status_code)

        rows = r.json() or []
        if not rows:
            return None
        return row_to_user_data(rows[0])

    def save_user_data(self, user_id: str, data: UserData) -> str:
        """Upsert the user's row (on user_id). Returns the new last_sync_at."""
        headers = self._headers(**{
            "Content-Type": "application/json",
            "Prefer": "resolution=merge-duplicates,return=minimal",
        })
        synced_at = isoformat_utc(utcnow())
        try:
            r = requests.post(
                self.table_url,
                params={"on_conflict": "user_id"},
                json=user_data_to_row(user_id, data, synced_at),
                headers=headers,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise SupabaseError(f"Supabase user_data save failed: {e}")

        if r.status_code not in (200, 201, 204):
            raise SupabaseError(f"Supabase user_data save failed ({r.status_code}): {r.text[:200]}", r.status_code)

        logger.info("[Supabase] User data saved for user %s", user_id)
        return synced_at

    def delete_user_data(self, user_id: str) -> None:
        headers = self._headers()
        try:
            r = requests.delete(
                self.table_url,
                params={"user_id": f"eq.{user_id}"},
                headers=headers,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise SupabaseError(f"Supabase user_data delete failed: {e}")

        if r.status_code not in (200, 204):
            raise SupabaseError(f"Supabase user_data delete failed ({r.status_code}): {r.text[:200]}", r.status_code)

        logger.info("[Supabase] User data cleared for user %s", user_id)
