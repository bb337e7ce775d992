"""
Elevated-trust context for scope lookups.

Scope existence is checked regardless of what the caller may see. Elevation is
context-local (contextvars) and released on every exit path, so it never leaks into
unrelated calls on the same thread or into other threads/tasks.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

logger = logging.getLogger(__name__)

_elevation: ContextVar[Optional[str]] = ContextVar("scopeguard_elevation", default=None)


@contextmanager
def elevated(reason: str) -> Iterator[None]:
    """Run the enclosed block with elevated trust."""
    token = _elevation.set(reason)
    logger.debug("Elevated trust: %s", reason)
    try:
        yield
    finally:
        _elevation.reset(token)


def is_elevated() -> bool:
    return _elevation.get() is not None


def elevation_reason() -> Optional[str]:
    return _elevation.get()
