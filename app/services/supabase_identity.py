"""
Mirror locally created accounts into Supabase Auth (GoTrue admin API).
Requires the service role key. Callers treat every failure as non-critical.
"""
import logging
from typing import Optional

import requests

from app.core.errors import SupabaseError

logger = logging.getLogger(__name__)

_ALREADY_REGISTERED_MARKERS = ("already registered", "already exists", "email_exists")


class SupabaseIdentityMirror:
    def __init__(self, supabase_url: str, service_role_key: str, timeout: float = 10.0):
        self.supabase_url = (supabase_url or "").rstrip("/")
        self.service_role_key = service_role_key or ""
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.supabase_url and self.service_role_key)

    def _headers(self) -> dict:
        return {
            "apikey": self.service_role_key,
            "Authorization": f"Bearer {self.service_role_key}",
            "Content-Type": "application/json",
        }

    def _admin_url(self, path: str) -> str:
        return f"{self.supabase_url}/auth/v1/admin/{path}"

    def create_user(self, email: str, password: str) -> str:
        """
        Create an auto-confirmed Supabase user and return its id.
        If Supabase already knows the email, link to the existing user instead.
        """
        if not self.configured:
            raise SupabaseError("Supabase is not configured (SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY)")

        try:
            r = requests.post(
                self._admin_url("users"),
                json={"email": email, "password": password, "email_confirm": True},
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise SupabaseError(f"Supabase request failed: {e}")

        if r.status_code in (200, 201):
            data = r.json() or {}
            # GoTrue returns the user object; older versions nest it under "user"
            user = data.get("user") or data
            supabase_id = user.get("id")
            if not supabase_id:
                raise SupabaseError("Supabase did not return a user id", r.status_code)
            logger.info("[Supabase] Created mirrored user %s", supabase_id)
            return supabase_id

        body = r.text or ""
        if any(marker in body.lower() for marker in _ALREADY_REGISTERED_MARKERS):
            logger.info("[Supabase] User already exists in Supabase, linking existing account")
            existing_id = self.find_user_id_by_email(email)
            if existing_id:
                return existing_id
            raise SupabaseError("Supabase reports the user exists but it could not be found", r.status_code)

        raise SupabaseError(f"Supabase admin createUser failed ({r.status_code}): {body[:200]}", r.status_code)

    def find_user_id_by_email(self, email: str, per_page: int = 1000) -> Optional[str]:
        """Scan the admin user list for `email` (first page only, like the dashboard)."""
        try:
            r = requests.get(
                self._admin_url("users"),
                params={"page": 1, "per_page": per_page},
                headers=self._headers(),
                timeout=self.timeout,
            )
            r.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise SupabaseError(f"Supabase listUsers failed: {e}")

        data = r.json() or {}
        users = data.get("users", []) if isinstance(data, dict) else data
        target = email.lower()
        for user in users:
            if (user.get("email") or "").lower() == target:
                return user.get("id")
        return None
