from __future__ import annotations

import pytest

from scopeguard.authz.policy import PolicyElement, RestrictionLevel
from scopeguard.authz.scope import GLOBAL, GlobalScope, ProjectScope, RepositoryScope, scope_from_keys, scope_keys


def test_scope_from_keys_precedence() -> None:
    assert scope_from_keys("ACME", "repo1") == RepositoryScope(project_key="ACME", slug="repo1")
    assert scope_from_keys("ACME", None) == ProjectScope(key="ACME")
    assert scope_from_keys(None, None) == GLOBAL


def test_scope_from_keys_treats_empty_as_absent() -> None:
    assert scope_from_keys("ACME", "") == ProjectScope(key="ACME")
    assert scope_from_keys("ACME", "   ") == ProjectScope(key="ACME")
    assert scope_from_keys("", "") == GLOBAL


def test_slug_without_project_is_global() -> None:
    assert isinstance(scope_from_keys("", "repo1"), GlobalScope)


def test_scope_keys_inverts_scope_from_keys() -> None:
    assert scope_keys(RepositoryScope("ACME", "repo1")) == ("ACME", "repo1")
    assert scope_keys(ProjectScope("ACME")) == ("ACME", None)
    assert scope_keys(None) == (None, None)


def test_scopes_reject_empty_keys() -> None:
    with pytest.raises(ValueError):
        ProjectScope(key="")
    with pytest.raises(ValueError):
        RepositoryScope(project_key="ACME", slug=" ")
    with pytest.raises(ValueError):
        RepositoryScope(project_key="", slug="repo1")


def test_policy_element_never_global() -> None:
    with pytest.raises(ValueError):
        PolicyElement(name="Deploy", level=RestrictionLevel.ADMIN, scope=GLOBAL)


def test_policy_element_from_keys_drops_global_scope() -> None:
    el = PolicyElement.from_keys("Deploy", RestrictionLevel.ADMIN, project_key="", repository_slug="")
    assert el.scope is None

    el = PolicyElement.from_keys("Deploy", RestrictionLevel.ADMIN, project_key="ACME", repository_slug="repo1")
    assert el.scope == RepositoryScope(project_key="ACME", slug="repo1")
