# 📦 utils/fetch_profiles.py

import asyncio
import json
from dataclasses import dataclass, field
from typing import Any, Optional

import structlog

from utils.supabase_utils import execute_with_retry

log = structlog.get_logger()

USER_TABLE = "User"
PRIVATE_TABLE = "user_private_profile"
EMBEDDING_TABLE = "profile_embeddings"


@dataclass
class ProfileBundle:
    """Everything the scoring engine needs about one user."""
    public: dict[str, Any]
    private: dict[str, Any] = field(default_factory=dict)
    embedding: Optional[list[float]] = None


def _first(response) -> Optional[dict[str, Any]]:
    rows = getattr(response, "data", None) or []
    return rows[0] if rows else None


def parse_embedding(value: Any) -> Optional[list[float]]:
    """pgvector columns come back either as a list or as a '[...]' string."""
    if value is None:
        return None
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            log.warning("Unparseable embedding ignored")
            return None
    if not isinstance(value, list):
        return None
    return value


class ProfileRepository:
    """Profile reads against Supabase, with retry.

    Tokens are checked with `auth_client` (the anon client); rows are read
    with `client` (the service-role client).
    """

    def __init__(self, client, auth_client=None, retries: int = 3, delay: float = 0.5):
        self.client = client
        self.auth_client = auth_client if auth_client is not None else client
        self.retries = retries
        self.delay = delay

    async def _one(self, query) -> Optional[dict[str, Any]]:
        response = await execute_with_retry(query.limit(1), retries=self.retries, delay=self.delay)
        return _first(response)

    async def authenticate(self, token: str):
        """Return the auth user for a bearer token, or None if invalid."""
        try:
            response = await asyncio.to_thread(self.auth_client.auth.get_user, token)
        except Exception as e:
            log.info("Token rejected", error=str(e))
            return None
        return getattr(response, "user", None)

    async def get_viewer(self, auth_user) -> Optional[dict[str, Any]]:
        row = await self._one(
            self.client.table(USER_TABLE).select("*").eq("auth_user_id", auth_user.id)
        )
        if row is None and getattr(auth_user, "email", None):
            row = await self._one(
                self.client.table(USER_TABLE).select("*").eq("email", auth_user.email.lower())
            )
        return row

    async def get_user(self, target_id: Optional[str] = None, target_email: Optional[str] = None) -> Optional[dict[str, Any]]:
        query = self.client.table(USER_TABLE).select("*")
        if target_id:
            query = query.eq("id", target_id)
        elif target_email:
            query = query.eq("email", target_email.lower())
        else:
            return None
        return await self._one(query)

    async def get_private_profile(self, user_id: str) -> dict[str, Any]:
        row = await self._one(self.client.table(PRIVATE_TABLE).select("*").eq("user_id", user_id))
        return row or {}

    async def get_embedding(self, user_id: str) -> Optional[list[float]]:
        row = await self._one(
            self.client.table(EMBEDDING_TABLE).select("combined_embedding").eq("user_id", user_id)
        )
        return parse_embedding((row or {}).get("combined_embedding"))

    async def get_bundle(self, user: dict[str, Any]) -> ProfileBundle:
        private, embedding = await asyncio.gather(
            self.get_private_profile(user["id"]),
            self.get_embedding(user["id"]),
        )
        log.info("Fetched profile bundle", user_id=user["id"], has_private=bool(private), has_embedding=embedding is not None)
        return ProfileBundle(public=user, private=private, embedding=embedding)
