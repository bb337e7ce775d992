from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Identity:
    """Requesting user, supplied per request. Never persisted by the authorization layer."""

    key: str  # stable user key used for permission lookups
    name: Optional[str] = None
    is_global_admin: bool = False
    is_system_admin: bool = False

    @property
    def is_admin(self) -> bool:
        """Global administrator (system admins are admins too)."""
        return self.is_global_admin or self.is_system_admin
