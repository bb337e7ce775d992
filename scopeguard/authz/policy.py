"""Restriction levels, policy elements and the admin-restriction setting (env driven)."""
from __future__ import annotations

import enum
import os
from dataclasses import dataclass
from typing import Optional

from scopeguard.authz.scope import GlobalScope, ScopeRef, scope_from_keys


class RestrictionLevel(str, enum.Enum):
    EVERYONE = "EVERYONE"
    ADMIN = "ADMIN"

    @classmethod
    def parse(cls, raw: Optional[str]) -> Optional["RestrictionLevel"]:
        v = (raw or "").strip().upper()
        if not v:
            return None
        try:
            return cls(v)
        except ValueError:
            return None


@dataclass(frozen=True)
class PolicyElement:
    """
    A configurable action (e.g. a button) whose usability is governed by a restriction
    level and an optional project/repository scope.

    `level=None` means "inherit the global admin restriction".
    `scope=None` means no scope restriction beyond the level; it is never `GlobalScope`.
    """

    name: str
    level: Optional[RestrictionLevel] = None
    scope: Optional[ScopeRef] = None

    def __post_init__(self) -> None:
        if isinstance(self.scope, GlobalScope):
            raise ValueError(f"Policy element {self.name!r} must not be configured with a global scope")

    @classmethod
    def from_keys(
        cls,
        name: str,
        level: Optional[RestrictionLevel],
        project_key: Optional[str] = None,
        repository_slug: Optional[str] = None,
    ) -> "PolicyElement":
        scope = scope_from_keys(project_key, repository_slug)
        return cls(name=name, level=level, scope=None if isinstance(scope, GlobalScope) else scope)


def is_allowed(level: RestrictionLevel, is_scope_admin: bool, is_system_admin: bool) -> bool:
    """
    The canonical truth table.

    EVERYONE -> always allowed.
    ADMIN    -> allowed for system admins and for admins of the element's scope.
    """
    if level == RestrictionLevel.EVERYONE:
        return True
    return is_system_admin or is_scope_admin


@dataclass(frozen=True)
class AuthzSettings:
    # Who may administer scoped configuration, and the level inherited by elements
    # configured without one.
    admin_restriction: RestrictionLevel = RestrictionLevel.ADMIN


def load_authz_settings() -> AuthzSettings:
    """
    Load the authorization settings from env (ConfigMap/Secret friendly).

    Recommended vars:
    - AUTHZ_ADMIN_RESTRICTION=ADMIN|EVERYONE

    Unknown values fall back to ADMIN.
    """
    level = RestrictionLevel.parse(os.getenv("AUTHZ_ADMIN_RESTRICTION", ""))
    return AuthzSettings(admin_restriction=level or RestrictionLevel.ADMIN)
