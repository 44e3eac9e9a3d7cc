# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from typing import Optional

from fastapi import Request

from authdemo.auth.session import SessionAuthenticator
from authdemo.auth.store import CredentialStore
from authdemo.auth.users import Role, UserSnapshot
from authdemo.config import Settings
from authdemo.errors import Unauthenticated

DASHBOARD_BY_ROLE = {
    Role.CREATOR: "/dashboard",
    Role.INFLUENCER: "/influencer",
    Role.SPONSOR: "/sponsor",
}


def dashboard_path(role: Role) -> str:
    return DASHBOARD_BY_ROLE.get(Role.parse(role), "/dashboard")


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> CredentialStore:
    return request.app.state.store


def get_authenticator(request: Request) -> SessionAuthenticator:
    return request.app.state.authenticator


def session_cookie(request: Request) -> str:
    return request.cookies.get(get_settings(request).cookie_name, "")


def session_token(request: Request) -> Optional[str]:
    return get_authenticator(request).unsign_cookie(session_cookie(request))


def current_user_optional(request: Request) -> Optional[UserSnapshot]:
    try:
        return get_authenticator(request).current_user_from_cookie(session_cookie(request))
    except Unauthenticated:
        return None


def require_user(request: Request) -> UserSnapshot:
    u = current_user_optional(request)
    if u:
        return u
    raise Unauthenticated()


def cookie_settings(settings: Settings) -> dict:
    return {"httponly": True, "samesite": "lax", "secure": settings.cookie_secure}
