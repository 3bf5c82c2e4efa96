"""
Guest profile lookup.

Profiles live in the external user directory. Lookups are best-effort
enrichment: callers treat a failure as "no profile".
"""

from typing import Any, Dict, Optional, Protocol

import httpx

from guesthouse.config.settings import Settings
from guesthouse.core.logging import get_structured_logger

logger = get_structured_logger(__name__)


class GuestDirectoryError(Exception):
    """Raised when the directory cannot be reached or answers badly."""


class GuestDirectory(Protocol):
    def get_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Profile dict for the user, None if unknown."""
        ...


class NullGuestDirectory:
    """Used when no directory is configured."""

    def get_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        return None


class HttpGuestDirectory:
    """
    Reads ``GET {base_url}/users/{user_id}`` from the user directory.

    A 404 means the user is unknown; other failures raise
    GuestDirectoryError so the caller can log and continue.
    """

    def __init__(self, base_url: str, timeout_seconds: float = 5.0, client: Optional[httpx.Client] = None):
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout_seconds)

    def get_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        try:
            response = self._client.get(f"/users/{user_id}")
        except httpx.HTTPError as exc:
            raise GuestDirectoryError(f"Directory request failed: {exc}") from exc

        if response.status_code == 404:
            return None
        if response.is_error:
            logger.warning("guest_directory_error", user_id=user_id, status_code=response.status_code)
            raise GuestDirectoryError(f"Directory answered {response.status_code}")

        try:
            body = response.json()
        except ValueError as exc:
            raise GuestDirectoryError("Directory returned invalid JSON") from exc

        profile = body.get("data", body) if isinstance(body, dict) else None
        if not isinstance(profile, dict):
            raise GuestDirectoryError("Directory returned an unexpected payload")
        return {
            "id": str(profile.get("id", user_id)),
            "name": profile.get("name", ""),
            "phone_number": profile.get("phone_number"),
            "role": profile.get("role"),
        }

    def close(self) -> None:
        self._client.close()


def build_guest_directory(settings: Settings) -> GuestDirectory:
    if settings.USER_DIRECTORY_URL:
        logger.info("guest_directory_configured", url=settings.USER_DIRECTORY_URL)
        return HttpGuestDirectory(settings.USER_DIRECTORY_URL, settings.USER_DIRECTORY_TIMEOUT_SECONDS)
    return NullGuestDirectory()
