"""
HTTP surface for button authorization.

Lists the configured buttons the caller may use, checks a single button, and gates
scope administration on the global admin restriction.
"""

from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from pydantic import BaseModel

from scopeguard.auth.models import Identity
from scopeguard.authz.policy import PolicyElement
from scopeguard.authz.resolver import AuthorizationResolver
from scopeguard.authz.scope import scope_from_keys, scope_keys
from scopeguard.directory.loader import load_buttons, load_directory

logger = logging.getLogger(__name__)

app = FastAPI(title="scopeguard")


class ButtonView(BaseModel):
    name: str
    user_level: Optional[str] = None
    project_key: Optional[str] = None
    repository_slug: Optional[str] = None


class IdentityView(BaseModel):
    key: str
    name: Optional[str] = None
    is_admin: bool
    is_system_admin: bool


def _button_view(element: PolicyElement) -> Dict[str, Any]:
    project_key, repository_slug = scope_keys(element.scope)
    return ButtonView(
        name=element.name,
        user_level=element.level.value if element.level is not None else None,
        project_key=project_key,
        repository_slug=repository_slug,
    ).model_dump(mode="json")


def _request_user(request: Request) -> Optional[Identity]:
    return getattr(request.state, "user", None)


def _resolver(request: Request) -> AuthorizationResolver:
    directory = load_directory()
    return AuthorizationResolver(
        current_user=lambda: _request_user(request),
        scopes=directory,
        permissions=directory,
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log requests and attach the caller's identity (if any) to request.state."""
    start_time = time.time()
    logger.debug("%s %s", request.method, request.url.path)
    try:
        from scopeguard.auth.deps import authenticate_request

        request.state.user = authenticate_request(request)
        response = await call_next(request)
        process_time = time.time() - start_time
        logger.debug("%s %s - %d (%.3fs)", request.method, request.url.path, response.status_code, process_time)
        return response
    except Exception as e:
        process_time = time.time() - start_time
        logger.exception("%s %s - ERROR after %.3fs: %s", request.method, request.url.path, process_time, str(e))
        raise


@app.get("/healthz")
def healthz() -> Dict[str, Any]:
    return {"ok": True}


@app.get("/api/auth/me")
async def auth_me(request: Request) -> Dict[str, Any]:
    user = _request_user(request)
    if user is None:
        # No `WWW-Authenticate`: browsers would show a basic-auth modal.
        raise HTTPException(status_code=401, detail="Unauthorized")
    return {
        "ok": True,
        "user": IdentityView(
            key=user.key,
            name=user.name,
            is_admin=user.is_admin,
            is_system_admin=user.is_system_admin,
        ).model_dump(mode="json"),
    }


@app.get("/api/buttons")
def list_buttons(request: Request) -> Dict[str, Any]:
    resolver = _resolver(request)
    if not resolver.is_view_allowed():
        raise HTTPException(status_code=401, detail="Unauthorized")
    buttons: List[Dict[str, Any]] = [_button_view(b) for b in resolver.filter_allowed(load_buttons())]
    return {"ok": True, "buttons": buttons}


@app.get("/api/buttons/{name}")
def get_button(name: str, request: Request) -> Dict[str, Any]:
    resolver = _resolver(request)
    if not resolver.is_view_allowed():
        raise HTTPException(status_code=401, detail="Unauthorized")
    button = next((b for b in load_buttons() if b.name == name), None)
    if button is None:
        raise HTTPException(status_code=404, detail="Button not found")
    if not resolver.is_allowed_use(button):
        raise HTTPException(status_code=403, detail="Forbidden")
    return {"ok": True, "button": _button_view(button)}


@app.get("/api/admin/allowed")
def admin_allowed(
    request: Request,
    project_key: Optional[str] = Query(None, alias="projectKey"),
    repository_slug: Optional[str] = Query(None, alias="repositorySlug"),
) -> Dict[str, Any]:
    resolver = _resolver(request)
    if not resolver.is_view_allowed():
        raise HTTPException(status_code=401, detail="Unauthorized")
    scope = scope_from_keys(project_key, repository_slug)
    return {"ok": True, "allowed": resolver.is_admin_allowed(scope)}


def run(host: str = "0.0.0.0", port: int = 8080) -> None:
    import uvicorn

    log_level = os.getenv("LOG_LEVEL", "info").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.setLevel(getattr(logging, log_level, logging.INFO))

    uvicorn_log_level = (
        log_level.lower() if log_level.lower() in ["critical", "error", "warning", "info", "debug", "trace"] else "info"
    )

    # Fail fast on malformed configuration.
    directory = load_directory()
    buttons = load_buttons()
    logger.info("Loaded %d project(s) and %d button(s)", len(directory.projects), len(buttons))

    logger.info("Starting scopeguard server on %s:%d (log_level=%s)", host, port, log_level)
    uvicorn.run(app, host=host, port=port, log_level=uvicorn_log_level)
