from __future__ import annotations

from typing import Optional

from fastapi import Request

from scopeguard.auth.config import load_auth_config
from scopeguard.auth.models import Identity
from scopeguard.auth.session import decode_session, session_cookie_name


def authenticate_request(request: Request) -> Optional[Identity]:
    """
    Resolve the identity behind a request from its session cookie.

    Returns None for anonymous callers (missing, expired or tampered cookie).
    """
    cfg = load_auth_config()
    return decode_session(cfg, request.cookies.get(session_cookie_name(cfg)))
