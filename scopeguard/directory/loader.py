"""
YAML configuration for the API server.

Directory file (SCOPEGUARD_DIRECTORY_FILE):

    projects:
      - key: ACME
        name: Acme
        public: false           # bool or true/false words
        admins: [alice]
        repositories:
          - slug: repo1
            admins: [bob]

Buttons file (SCOPEGUARD_BUTTONS_FILE):

    buttons:
      - name: Deploy            # unique
        userLevel: ADMIN        # ADMIN | EVERYONE; omitted -> global admin restriction
        projectKey: ACME        # optional
        repositorySlug: repo1   # optional
"""
from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

import yaml

from scopeguard.authz.policy import PolicyElement, RestrictionLevel
from scopeguard.directory.memory import InMemoryDirectory

logger = logging.getLogger(__name__)


def _read_yaml(path: Path) -> Dict[str, Any]:
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")
    return data


def _list_of_dicts(data: Dict[str, Any], key: str, where: str) -> List[Dict[str, Any]]:
    items = data.get(key) or []
    if not isinstance(items, list) or not all(isinstance(x, dict) for x in items):
        raise ValueError(f"{where}: '{key}' must be a list of mappings")
    return items


def _names(raw: Any) -> frozenset:
    if raw is None:
        return frozenset()
    if isinstance(raw, str):
        raw = raw.split(",")
    return frozenset(str(x).strip() for x in raw if str(x).strip())


def _opt_str(raw: Any) -> Optional[str]:
    if raw is None:
        return None
    return str(raw).strip() or None


def _bool(raw: Any, default: bool, what: str) -> bool:
    if raw is None:
        return default
    if isinstance(raw, bool):
        return raw
    v = str(raw).strip().lower()
    if not v:
        return default
    if v in ("1", "true", "yes", "y", "on"):
        return True
    if v in ("0", "false", "no", "n", "off"):
        return False
    raise ValueError(f"{what}: expected a boolean, got {raw!r}")


def directory_from_dict(data: Dict[str, Any], where: str = "directory") -> InMemoryDirectory:
    directory = InMemoryDirectory()
    for p in _list_of_dicts(data, "projects", where):
        key = _opt_str(p.get("key"))
        if key is None:
            raise ValueError(f"{where}: project without a key")
        directory.add_project(
            key,
            name=_opt_str(p.get("name")),
            public=_bool(p.get("public"), False, f"{where}: project {key} public"),
            admins=_names(p.get("admins")),
        )
        for r in _list_of_dicts(p, "repositories", f"{where}: project {key}"):
            slug = _opt_str(r.get("slug"))
            if slug is None:
                raise ValueError(f"{where}: repository without a slug in project {key}")
            directory.add_repository(key, slug, name=_opt_str(r.get("name")), admins=_names(r.get("admins")))
    return directory


def buttons_from_dict(data: Dict[str, Any], where: str = "buttons") -> List[PolicyElement]:
    buttons: List[PolicyElement] = []
    seen: Set[str] = set()
    for b in _list_of_dicts(data, "buttons", where):
        name = _opt_str(b.get("name"))
        if name is None:
            raise ValueError(f"{where}: button without a name")
        if name in seen:
            raise ValueError(f"{where}: duplicate button name {name!r}")
        seen.add(name)
        raw_level = _opt_str(b.get("userLevel"))
        level = RestrictionLevel.parse(raw_level)
        if raw_level is not None and level is None:
            raise ValueError(f"{where}: button {name!r} has unknown userLevel {raw_level!r}")
        buttons.append(
            PolicyElement.from_keys(
                name,
                level,
                project_key=_opt_str(b.get("projectKey")),
                repository_slug=_opt_str(b.get("repositorySlug")),
            )
        )
    return buttons


@lru_cache(maxsize=1)
def load_directory() -> InMemoryDirectory:
    path = (os.getenv("SCOPEGUARD_DIRECTORY_FILE", "") or "").strip()
    if not path:
        logger.info("SCOPEGUARD_DIRECTORY_FILE not set; using an empty directory")
        return InMemoryDirectory()
    return directory_from_dict(_read_yaml(Path(path)), where=path)


@lru_cache(maxsize=1)
def load_buttons() -> List[PolicyElement]:
    path = (os.getenv("SCOPEGUARD_BUTTONS_FILE", "") or "").strip()
    if not path:
        logger.info("SCOPEGUARD_BUTTONS_FILE not set; no buttons configured")
        return []
    return buttons_from_dict(_read_yaml(Path(path)), where=path)
