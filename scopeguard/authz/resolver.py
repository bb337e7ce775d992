"""
Authorization resolver.

Every decision is a function of its inputs plus the collaborators' current answers;
nothing is cached between calls. Every check requires a resolvable identity, including
checks against EVERYONE-level elements: anonymous callers are always denied.
"""
from __future__ import annotations

import logging
from typing import Iterable, Iterator, Optional

from scopeguard.auth.models import Identity
from scopeguard.authz.collaborators import CurrentUser, PermissionChecker, ScopeDirectory, SettingsLoader
from scopeguard.authz.elevation import elevated
from scopeguard.authz.policy import PolicyElement, RestrictionLevel, is_allowed, load_authz_settings
from scopeguard.authz.scope import GLOBAL, ProjectRef, ProjectScope, RepositoryRef, RepositoryScope, ScopeRef

logger = logging.getLogger(__name__)


class AuthorizationResolver:
    def __init__(
        self,
        *,
        current_user: CurrentUser,
        scopes: ScopeDirectory,
        permissions: PermissionChecker,
        settings_loader: SettingsLoader = load_authz_settings,
    ):
        self._current_user = current_user
        self._scopes = scopes
        self._permissions = permissions
        self._settings_loader = settings_loader

    def _get_project(self, key: str) -> Optional[ProjectRef]:
        with elevated("Getting project"):
            return self._scopes.get_project_by_key(key)

    def _get_repository(self, project_key: str, slug: str) -> Optional[RepositoryRef]:
        with elevated("Getting repo"):
            return self._scopes.get_repository_by_slug(project_key, slug)

    def is_system_admin(self, identity: Identity) -> bool:
        return identity.is_system_admin

    def is_admin(self, identity: Identity, scope: Optional[ScopeRef] = None) -> bool:
        """
        Scope admin check.

        Global admins (and system admins) are admins everywhere and trigger no lookup.
        A repository scope is checked at repository level only; it is never widened to
        the project. The global scope makes nobody else an admin.

        A scope that does not exist is logged and denied.
        """
        if identity.is_admin:
            return True

        scope = scope or GLOBAL

        if isinstance(scope, RepositoryScope):
            repository = self._get_repository(scope.project_key, scope.slug)
            if repository is None:
                logger.error(
                    "Policy configured with project %s and repository %s, but no such repository exists!",
                    scope.project_key,
                    scope.slug,
                )
                return False
            return self._permissions.has_repository_admin(identity, repository)

        if isinstance(scope, ProjectScope):
            project = self._get_project(scope.key)
            if project is None:
                logger.error("Policy configured with project %s, but no such project exists!", scope.key)
                return False
            return self._permissions.has_project_admin(identity, project)

        return False

    def _is_allowed_for(self, identity: Identity, level: RestrictionLevel, scope: Optional[ScopeRef]) -> bool:
        is_system_admin = self.is_system_admin(identity)
        # System admins pass every level; skip the scope lookup entirely.
        is_scope_admin = is_system_admin or self.is_admin(identity, scope)
        return is_allowed(level, is_scope_admin, is_system_admin)

    def is_allowed_use(self, element: PolicyElement) -> bool:
        """Whether the current caller may use `element`."""
        identity = self._current_user()
        if identity is None:
            return False
        level = element.level
        if level is None:
            level = self._settings_loader().admin_restriction
        return self._is_allowed_for(identity, level, element.scope)

    def filter_allowed(
        self, elements: Iterable[PolicyElement], *, isolate_failures: bool = True
    ) -> Iterator[PolicyElement]:
        """
        Lazily yield the elements the current caller may use, in their original order.

        With `isolate_failures` (default) a collaborator failure while evaluating one
        element is logged and denies only that element. Otherwise it propagates and
        aborts the iteration.
        """
        for element in elements:
            try:
                allowed = self.is_allowed_use(element)
            except Exception:
                if not isolate_failures:
                    raise
                logger.exception("Failed to evaluate policy element %s; denying it", element.name)
                continue
            if allowed:
                yield element

    def is_view_allowed(self) -> bool:
        """Read-only visibility: any authenticated caller."""
        return self._current_user() is not None

    def is_admin_allowed(self, scope: Optional[ScopeRef] = None) -> bool:
        """
        Whether the current caller may administer configuration for `scope`, under the
        global admin restriction setting.
        """
        identity = self._current_user()
        if identity is None:
            return False
        admin_restriction = self._settings_loader().admin_restriction
        return self._is_allowed_for(identity, admin_restriction, scope)
