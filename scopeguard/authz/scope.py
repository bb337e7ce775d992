from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


def empty_to_none(value: Optional[str]) -> Optional[str]:
    v = (value or "").strip()
    return v or None


@dataclass(frozen=True)
class GlobalScope:
    """No project or repository. Only system-wide admins are admins here."""


@dataclass(frozen=True)
class ProjectScope:
    key: str

    def __post_init__(self) -> None:
        if not empty_to_none(self.key):
            raise ValueError("ProjectScope requires a non-empty project key")


@dataclass(frozen=True)
class RepositoryScope:
    project_key: str
    slug: str

    def __post_init__(self) -> None:
        if not empty_to_none(self.project_key):
            raise ValueError("RepositoryScope requires a non-empty project key")
        if not empty_to_none(self.slug):
            raise ValueError("RepositoryScope requires a non-empty repository slug")


ScopeRef = Union[GlobalScope, ProjectScope, RepositoryScope]

GLOBAL = GlobalScope()


def scope_from_keys(project_key: Optional[str], repository_slug: Optional[str] = None) -> ScopeRef:
    """
    Build a scope from raw (possibly empty) keys.

    Empty strings and None are equivalent. A repository slug without a project key
    does not identify anything, so it yields the global scope.
    """
    pk = empty_to_none(project_key)
    slug = empty_to_none(repository_slug)
    if pk is not None and slug is not None:
        return RepositoryScope(project_key=pk, slug=slug)
    if pk is not None:
        return ProjectScope(key=pk)
    return GLOBAL


def scope_keys(scope: Optional[ScopeRef]) -> tuple[Optional[str], Optional[str]]:
    """Inverse of `scope_from_keys`: (project_key, repository_slug)."""
    if isinstance(scope, RepositoryScope):
        return scope.project_key, scope.slug
    if isinstance(scope, ProjectScope):
        return scope.key, None
    return None, None


@dataclass(frozen=True)
class ProjectRef:
    """A project that currently exists."""

    key: str
    name: Optional[str] = None


@dataclass(frozen=True)
class RepositoryRef:
    """A repository that currently exists."""

    project_key: str
    slug: str
    name: Optional[str] = None
