"""Data service client for the systems, conditions and profiles tables"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from pharmabook.config import SETTINGS
from pharmabook.errors import GatewayQueryError

from .schemas import Profile

logger = logging.getLogger(__name__)

SYSTEMS_SELECT = "*"
CONDITIONS_SELECT = "*,systems(slug,name,icon),medications(*)"
PROFILE_SELECT = "id,slug,display_name,plan"

# PostgREST error codes
NO_ROWS = "PGRST116"
UNIQUE_VIOLATION = "23505"


def _error_message(response: httpx.Response) -> tuple[str, Optional[str]]:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase, None
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or body), body.get("code")
    return str(body), None


class SupabaseGateway:
    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        access_token: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = (base_url or SETTINGS.supabase_url).rstrip("/")
        self.api_key = api_key if api_key is not None else SETTINGS.supabase_anon_key
        self.access_token = access_token
        self.timeout = timeout or SETTINGS.http_timeout
        self._transport = transport

    def with_token(self, access_token: str | None) -> "SupabaseGateway":
        return SupabaseGateway(
            base_url=self.base_url,
            api_key=self.api_key,
            access_token=access_token,
            timeout=self.timeout,
            transport=self._transport,
        )

    def _headers(self) -> Dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.access_token or self.api_key}",
            "Accept": "application/json",
        }

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=f"{self.base_url}/rest/v1",
            headers=self._headers(),
            timeout=self.timeout,
            transport=self._transport,
        )

    def _select(self, relation: str, params: Dict[str, str]) -> List[Dict[str, Any]]:
        logger.debug(f"GET /rest/v1/{relation} {params}")
        try:
            with self._client() as client:
                r = client.get(f"/{relation}", params=params)
        except httpx.HTTPError as e:
            raise GatewayQueryError(relation, str(e) or type(e).__name__) from e

        if r.is_error:
            message, _ = _error_message(r)
            raise GatewayQueryError(relation, message, r.status_code)
        try:
            rows = r.json()
        except ValueError as e:
            raise GatewayQueryError(relation, "Response body is not JSON", r.status_code) from e
        if not isinstance(rows, list):
            raise GatewayQueryError(relation, "Expected a list of rows", r.status_code)

        logger.info(f"Fetched {len(rows)} rows from '{relation}'")
        return rows

    def fetch_systems(self) -> List[Dict[str, Any]]:
        """Active systems in display order."""
        return self._select(
            "systems",
            {"select": SYSTEMS_SELECT, "active": "eq.true", "order": "order_index"},
        )

    def fetch_conditions(self) -> List[Dict[str, Any]]:
        """Active conditions by name, with owning system and medications embedded."""
        return self._select(
            "conditions",
            {"select": CONDITIONS_SELECT, "active": "eq.true", "order": "name"},
        )

    def fetch_profile(self, user_id: str) -> Optional[Profile]:
        rows = self._select("profiles", {"select": PROFILE_SELECT, "id": f"eq.{user_id}"})
        if not rows:
            return None
        return Profile.model_validate(rows[0])

    def insert_profile(self, profile: Profile) -> Profile:
        """Insert a profile row; an existing row with the same key is not an error."""
        try:
            with self._client() as client:
                r = client.post(
                    "/profiles",
                    json=profile.model_dump(),
                    headers={"Prefer": "return=representation"},
                )
        except httpx.HTTPError as e:
            raise GatewayQueryError("profiles", str(e) or type(e).__name__) from e

        if r.is_error:
            message, code = _error_message(r)
            if code == UNIQUE_VIOLATION:
                logger.info(f"Profile {profile.id} already exists")
                return profile
            raise GatewayQueryError("profiles", message, r.status_code)

        rows = r.json() if r.content else []
        if isinstance(rows, list) and rows:
            return Profile.model_validate(rows[0])
        return profile
