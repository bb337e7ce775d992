from __future__ import annotations

import json
from typing import Optional

from itsdangerous import BadSignature, BadTimeSignature, URLSafeTimedSerializer

from scopeguard.auth.config import AuthConfig
from scopeguard.auth.models import Identity


def session_cookie_name(cfg: AuthConfig) -> str:
    # `__Host-` requires Secure + Path=/ + no Domain; browsers may reject it on HTTP.
    return "__Host-scopeguard_session" if cfg.cookie_secure else "scopeguard_session"


SESSION_SALT = "scopeguard-session-v1"


def _serializer(cfg: AuthConfig) -> Optional[URLSafeTimedSerializer]:
    if not cfg.session_secret:
        return None
    return URLSafeTimedSerializer(secret_key=cfg.session_secret, salt=SESSION_SALT)


def identity_for(cfg: AuthConfig, key: str, name: Optional[str] = None) -> Identity:
    """Attach the configured global flags to a user key."""
    return Identity(
        key=key,
        name=name,
        is_global_admin=key in cfg.admins,
        is_system_admin=key in cfg.system_admins,
    )


def encode_session(cfg: AuthConfig, identity: Identity) -> Optional[str]:
    s = _serializer(cfg)
    if s is None:
        return None
    # Only the user key travels in the cookie; admin flags are re-derived on every request.
    payload = {"key": identity.key, "name": identity.name}
    raw = json.dumps(payload, separators=(",", ":"), sort_keys=True)
    return s.dumps(raw)


def decode_session(cfg: AuthConfig, value: str | None) -> Optional[Identity]:
    if not value:
        return None
    s = _serializer(cfg)
    if s is None:
        return None
    try:
        raw = s.loads(value, max_age=cfg.session_ttl_seconds)
        data = json.loads(raw)
        if not isinstance(data, dict):
            return None
        key = str(data.get("key") or "").strip()
        if not key:
            return None
        name = data.get("name")
        return identity_for(cfg, key, str(name) if name else None)
    except (BadSignature, BadTimeSignature, ValueError):
        return None

