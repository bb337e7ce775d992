from __future__ import annotations

from typing import Callable, Optional, Protocol

from scopeguard.auth.models import Identity
from scopeguard.authz.policy import AuthzSettings
from scopeguard.authz.scope import ProjectRef, RepositoryRef

# Resolves the identity behind the current request (None when anonymous).
CurrentUser = Callable[[], Optional[Identity]]

SettingsLoader = Callable[[], AuthzSettings]


class ScopeDirectory(Protocol):
    """
    Looks up scope entities. Callers wrap lookups in `elevated(...)` when they need to
    know whether a scope exists rather than whether the caller can see it.
    """

    def get_project_by_key(self, key: str) -> Optional[ProjectRef]:
        """Return the project, or None when it does not exist (or is not visible)."""

    def get_repository_by_slug(self, project_key: str, slug: str) -> Optional[RepositoryRef]:
        """Return the repository, or None when it does not exist (or is not visible)."""


class PermissionChecker(Protocol):
    def has_project_admin(self, identity: Identity, project: ProjectRef) -> bool:
        """Whether `identity` holds admin permission on `project`."""

    def has_repository_admin(self, identity: Identity, repository: RepositoryRef) -> bool:
        """Whether `identity` holds admin permission on `repository`."""
