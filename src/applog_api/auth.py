"""Admin session cookie: login/logout routes and the guard used by log routes."""

from __future__ import annotations

import secrets

from fastapi import APIRouter, HTTPException, Request, Response
from pydantic import BaseModel

from applog.core.config import Settings

AUTHENTICATED = "authenticated"

router = APIRouter()


class LoginIn(BaseModel):
    password: str


def is_admin(request: Request) -> bool:
    """Admin check shared with the rest of the site.

    Skipped only when ``auth_dev_bypass`` is set and the environment is ``dev``.
    """
    settings: Settings = request.app.state.settings
    if settings.auth_dev_bypass and settings.environment == "dev":
        return True
    return request.cookies.get(settings.auth_cookie_name) == AUTHENTICATED


def require_admin(request: Request) -> None:
    if not is_admin(request):
        raise HTTPException(status_code=401, detail="unauthorized")


@router.post("/api/auth")
def login(request: Request, response: Response, body: LoginIn) -> dict[str, object]:
    settings: Settings = request.app.state.settings
    if not secrets.compare_digest(body.password.encode(), settings.admin_password.encode()):
        request.app.state.logger.warn("Admin login rejected")
        raise HTTPException(status_code=401, detail="invalid_password")
    response.set_cookie(
        settings.auth_cookie_name,
        AUTHENTICATED,
        max_age=settings.auth_cookie_max_age,
        httponly=True,
        secure=settings.environment == "prod",
        samesite="lax",
    )
    return {"success": True}


@router.get("/api/auth")
def session_status(request: Request) -> dict[str, bool]:
    settings: Settings = request.app.state.settings
    return {"authenticated": request.cookies.get(settings.auth_cookie_name) == AUTHENTICATED}


@router.delete("/api/auth")
def logout(request: Request, response: Response) -> dict[str, object]:
    response.delete_cookie(request.app.state.settings.auth_cookie_name)
    return {"success": True}
