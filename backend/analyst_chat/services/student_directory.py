"""Client for the external student information API used for auto-login."""

import logging
from typing import Any

import httpx

from analyst_chat.core.config import settings
from analyst_chat.core.errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)


class StudentDirectory:
    def __init__(self, base_url: str, api_token: str = "", transport: httpx.AsyncBaseTransport | None = None):
        self.base_url = base_url.rstrip("/")
        self.api_token = api_token
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        if self.api_token:
            return {"Authorization": f"Bearer {self.api_token}"}
        return {}

    async def fetch_student(self, student_id: str) -> dict[str, Any]:
        if not self.base_url:
            raise ConfigurationError("Student API URL not configured")

        url = f"{self.base_url}/{student_id}"
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                resp = await client.get(url, headers=self._headers(), timeout=15.0)
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPError as e:
            raise UpstreamError(f"GET {url} failed: {e}") from e
        except ValueError as e:
            raise UpstreamError(f"GET {url} returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise UpstreamError(f"GET {url} returned {type(data).__name__}, expected an object")
        logger.debug(f"Fetched student data for {student_id}: {sorted(data)}")
        return data


def resolve_student_name(profile: Any) -> str | None:
    """Pick a display name out of a loosely shaped profile blob."""
    if not isinstance(profile, dict):
        return None
    for key in ("name", "fullName"):
        value = profile.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    parts = [profile.get("firstName"), profile.get("lastName")]
    name = " ".join(p.strip() for p in parts if isinstance(p, str) and p.strip())
    return name or None


def get_student_directory() -> StudentDirectory:
    return StudentDirectory(settings.student_api_url, settings.student_api_token)
