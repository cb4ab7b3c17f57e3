# service/identity.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import requests

from core import config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """Resolved identity-provider account (read only here)."""
    id: str
    email: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)


def extract_bearer(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    parts = value.strip().split(None, 1)
    if not parts:
        return None
    if parts[0].lower() == "bearer":
        return parts[1].strip() if len(parts) > 1 else None
    return value.strip()


class IdentityClient:
    """
    Bearer token -> Identity | None against the auth REST API
    (GET {base_url}/auth/v1/user).

    - missing / invalid token is a normal outcome, never an exception
    - no caching, no refresh, no session handling
    - the requests.Session is owned by the app lifespan (close() at shutdown)
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        timeout: float = 5.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = (base_url or "").rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._session = session or requests.Session()

    @classmethod
    def from_config(cls) -> "IdentityClient":
        return cls(
            config.SUPABASE_URL,
            config.SUPABASE_ANON_KEY,
            timeout=config.IDENTITY_TIMEOUT_SECONDS,
        )

    def resolve(self, token: Optional[str]) -> Optional[Identity]:
        token = extract_bearer(token)
        if not token:
            return None
        if not self.base_url:
            logger.warning("identity provider url not configured; treating caller as anonymous")
            return None

        try:
            resp = self._session.get(
                f"{self.base_url}/auth/v1/user",
                headers={
                    "apikey": self.api_key,
                    "Authorization": f"Bearer {token}",
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("identity lookup failed: %s", e)
            return None

        if resp.status_code != 200:
            logger.debug("identity provider rejected token: status=%s", resp.status_code)
            return None

        try:
            data = resp.json()
        except ValueError:
            logger.warning("identity provider returned a non-json body")
            return None

        uid = data.get("id") if isinstance(data, dict) else None
        if not uid:
            return None
        return Identity(
            id=str(uid),
            email=data.get("email"),
            metadata=data.get("user_metadata") or {},
        )

    def close(self) -> None:
        self._session.close()
