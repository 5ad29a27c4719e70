"""Credential store: the site's API key and site identifier."""

from dataclasses import dataclass
from typing import Optional

from stream_client.config import Settings, get_settings


@dataclass(frozen=True)
class Credentials:
    """
    API key and site UUID, loaded once and read-only afterwards.

    Missing values are empty strings, never exceptions. Callers check
    ``has_site`` before hitting site-scoped endpoints.
    """

    api_key: str = ""
    site_id: str = ""

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "Credentials":
        """Load credentials from settings (env / .env)."""
        settings = settings or get_settings()
        return cls(
            api_key=settings.api_key or "",
            site_id=settings.site_uuid or "",
        )

    @property
    def has_key(self) -> bool:
        return bool(self.api_key)

    @property
    def has_site(self) -> bool:
        return bool(self.site_id)

    def __repr__(self) -> str:
        masked = f"{self.api_key[:4]}***" if self.api_key else ""
        return f"Credentials(api_key={masked!r}, site_id={self.site_id!r})"


__all__ = ["Credentials"]
