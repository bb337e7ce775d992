from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional, Tuple

from scopeguard.auth.models import Identity
from scopeguard.authz.elevation import is_elevated
from scopeguard.authz.scope import ProjectRef, RepositoryRef


@dataclass(frozen=True)
class ProjectEntry:
    project: ProjectRef
    public: bool = False
    admins: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class RepositoryEntry:
    repository: RepositoryRef
    admins: FrozenSet[str] = frozenset()


@dataclass
class InMemoryDirectory:
    """
    Static directory of projects/repositories and their admins.

    Lookups of non-public projects (and their repositories) return None unless the
    caller runs under `elevated(...)`, mirroring a platform that hides what the
    caller cannot see. Project admins are admins of every repository in the project.
    """

    projects: Dict[str, ProjectEntry] = field(default_factory=dict)
    repositories: Dict[Tuple[str, str], RepositoryEntry] = field(default_factory=dict)

    def add_project(
        self,
        key: str,
        *,
        name: Optional[str] = None,
        public: bool = False,
        admins: FrozenSet[str] = frozenset(),
    ) -> ProjectRef:
        ref = ProjectRef(key=key, name=name)
        self.projects[key] = ProjectEntry(project=ref, public=public, admins=frozenset(admins))
        return ref

    def add_repository(
        self,
        project_key: str,
        slug: str,
        *,
        name: Optional[str] = None,
        admins: FrozenSet[str] = frozenset(),
    ) -> RepositoryRef:
        if project_key not in self.projects:
            raise ValueError(f"Unknown project {project_key!r} for repository {slug!r}")
        ref = RepositoryRef(project_key=project_key, slug=slug, name=name)
        self.repositories[(project_key, slug)] = RepositoryEntry(repository=ref, admins=frozenset(admins))
        return ref

    def _visible(self, entry: ProjectEntry) -> bool:
        return entry.public or is_elevated()

    def get_project_by_key(self, key: str) -> Optional[ProjectRef]:
        entry = self.projects.get(key)
        if entry is None or not self._visible(entry):
            return None
        return entry.project

    def get_repository_by_slug(self, project_key: str, slug: str) -> Optional[RepositoryRef]:
        project = self.projects.get(project_key)
        entry = self.repositories.get((project_key, slug))
        if project is None or entry is None or not self._visible(project):
            return None
        return entry.repository

    def has_project_admin(self, identity: Identity, project: ProjectRef) -> bool:
        entry = self.projects.get(project.key)
        return entry is not None and identity.key in entry.admins

    def has_repository_admin(self, identity: Identity, repository: RepositoryRef) -> bool:
        entry = self.repositories.get((repository.project_key, repository.slug))
        if entry is not None and identity.key in entry.admins:
            return True
        project = self.projects.get(repository.project_key)
        return project is not None and identity.key in project.admins
