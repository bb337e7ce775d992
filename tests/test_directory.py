from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from scopeguard.auth.models import Identity
from scopeguard.authz.elevation import elevated
from scopeguard.authz.policy import PolicyElement, RestrictionLevel
from scopeguard.authz.scope import ProjectRef, ProjectScope, RepositoryRef, RepositoryScope
from scopeguard.directory.loader import buttons_from_dict, directory_from_dict, load_buttons, load_directory
from scopeguard.directory.memory import InMemoryDirectory

DIRECTORY_YAML = """
projects:
  - key: ACME
    name: Acme
    admins: [alice]
    repositories:
      - slug: repo1
        admins: bob, dave
  - key: OPEN
    public: true
"""

BUTTONS_YAML = """
buttons:
  - name: Notify
    userLevel: EVERYONE
  - name: Deploy
    userLevel: ADMIN
    projectKey: ACME
  - name: Merge
    userLevel: admin
    projectKey: ACME
    repositorySlug: repo1
  - name: Inherit
    projectKey: ""
"""


def test_hidden_projects_need_elevation() -> None:
    d = InMemoryDirectory()
    d.add_project("ACME")
    d.add_repository("ACME", "repo1")
    d.add_project("OPEN", public=True)

    assert d.get_project_by_key("ACME") is None
    assert d.get_repository_by_slug("ACME", "repo1") is None
    assert d.get_project_by_key("OPEN") == ProjectRef(key="OPEN")
    with elevated("test"):
        assert d.get_project_by_key("ACME") == ProjectRef(key="ACME")
        assert d.get_repository_by_slug("ACME", "repo1") == RepositoryRef(project_key="ACME", slug="repo1")
        assert d.get_project_by_key("GHOST") is None
        assert d.get_repository_by_slug("ACME", "repo2") is None


def test_repository_requires_known_project() -> None:
    with pytest.raises(ValueError):
        InMemoryDirectory().add_repository("GHOST", "repo1")


def test_project_admins_administer_repositories() -> None:
    d = directory_from_dict(yaml.safe_load(DIRECTORY_YAML))
    repo = RepositoryRef(project_key="ACME", slug="repo1")
    assert d.has_repository_admin(Identity(key="alice"), repo) is True
    assert d.has_repository_admin(Identity(key="bob"), repo) is True
    assert d.has_repository_admin(Identity(key="dave"), repo) is True
    assert d.has_project_admin(Identity(key="bob"), ProjectRef(key="ACME")) is False
    assert d.has_project_admin(Identity(key="alice"), ProjectRef(key="GHOST")) is False


def test_buttons_from_dict() -> None:
    buttons = buttons_from_dict(yaml.safe_load(BUTTONS_YAML))
    assert buttons == [
        PolicyElement("Notify", RestrictionLevel.EVERYONE),
        PolicyElement("Deploy", RestrictionLevel.ADMIN, ProjectScope("ACME")),
        PolicyElement("Merge", RestrictionLevel.ADMIN, RepositoryScope("ACME", "repo1")),
        PolicyElement("Inherit", None),
    ]


@pytest.mark.parametrize(
    "data",
    [
        {"buttons": [{"name": "x", "userLevel": "ROOT"}]},
        {"buttons": [{"userLevel": "ADMIN"}]},
        {"buttons": "Deploy"},
    ],
)
def test_malformed_buttons_raise(data) -> None:
    with pytest.raises(ValueError):
        buttons_from_dict(data)


def test_malformed_directory_raises() -> None:
    with pytest.raises(ValueError):
        directory_from_dict({"projects": [{"name": "no key"}]})
    with pytest.raises(ValueError):
        directory_from_dict({"projects": [{"key": "ACME", "repositories": [{"name": "no slug"}]}]})


def test_loaders_read_env_files(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    dpath = tmp_path / "directory.yaml"
    dpath.write_text(DIRECTORY_YAML)
    bpath = tmp_path / "buttons.yaml"
    bpath.write_text(BUTTONS_YAML)
    monkeypatch.setenv("SCOPEGUARD_DIRECTORY_FILE", str(dpath))
    monkeypatch.setenv("SCOPEGUARD_BUTTONS_FILE", str(bpath))

    assert set(load_directory().projects) == {"ACME", "OPEN"}
    assert [b.name for b in load_buttons()] == ["Notify", "Deploy", "Merge", "Inherit"]


def test_loaders_default_to_empty(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SCOPEGUARD_DIRECTORY_FILE", raising=False)
    monkeypatch.delenv("SCOPEGUARD_BUTTONS_FILE", raising=False)
    assert load_directory().projects == {}
    assert load_buttons() == []


def test_non_mapping_file_raises(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    path = tmp_path / "buttons.yaml"
    path.write_text("- just\n- a list\n")
    monkeypatch.setenv("SCOPEGUARD_BUTTONS_FILE", str(path))
    with pytest.raises(ValueError):
        load_buttons()


def test_duplicate_button_names_raise() -> None:
    data = {"buttons": [{"name": "A", "userLevel": "ADMIN"}, {"name": "A", "userLevel": "EVERYONE"}]}
    with pytest.raises(ValueError, match="duplicate"):
        buttons_from_dict(data)


@pytest.mark.parametrize("raw,visible", [("false", False), ("no", False), ("true", True), ("Y", True), (True, True)])
def test_project_public_flag_parses_words(raw, visible: bool) -> None:
    d = directory_from_dict({"projects": [{"key": "ACME", "public": raw}]})
    assert (d.get_project_by_key("ACME") is not None) is visible


def test_project_public_flag_rejects_garbage() -> None:
    with pytest.raises(ValueError):
        directory_from_dict({"projects": [{"key": "ACME", "public": "sometimes"}]})
