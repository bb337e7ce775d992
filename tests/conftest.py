"""
Pytest config.

Pin the repo root onto sys.path so `import scopeguard` works without installing, and
reset the cached env-driven configuration around every test.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def _ensure_repo_root_on_syspath() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    repo_root_str = str(repo_root)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)


_ensure_repo_root_on_syspath()


@pytest.fixture(autouse=True)
def _clear_config_caches():
    from scopeguard.auth.config import load_auth_config
    from scopeguard.directory.loader import load_buttons, load_directory

    for fn in (load_auth_config, load_directory, load_buttons):
        fn.cache_clear()
    yield
    for fn in (load_auth_config, load_directory, load_buttons):
        fn.cache_clear()
