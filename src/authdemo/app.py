# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from authdemo.auth.session import SessionAuthenticator
from authdemo.auth.store import CredentialStore, build_store
from authdemo.auth.users import UserSnapshot
from authdemo.config import Settings
from authdemo.errors import AuthDemoError
from authdemo.permissions import (
    cookie_settings,
    dashboard_path,
    get_authenticator,
    get_settings,
    get_store,
    require_user,
    session_token,
)
from authdemo.schemas import LoginRequest, RegisterRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = [str(x) for x in err.get("loc", ()) if x != "body"]
        msg = str(err.get("msg", "invalid value"))
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        parts.append(f'{msg} at "{".".join(loc)}"' if loc else msg)
    return "Validation error: " + "; ".join(parts)


async def _auth_error_handler(request: Request, exc: AuthDemoError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc)
    else:
        logger.warning("%s %s -> %s %s", request.method, request.url.path, exc.status_code, type(exc).__name__)
    return JSONResponse({"message": exc.message}, status_code=exc.status_code)


async def _request_validation_handler(request: Request, exc: RequestValidationError):
    message = _validation_message(exc)
    logger.warning("%s %s -> 400 %s", request.method, request.url.path, message)
    return JSONResponse({"message": message}, status_code=400)


# ------------------ Routes ------------------


@router.post("/register", status_code=201)
def register(body: RegisterRequest, store: CredentialStore = Depends(get_store)):
    user = store.create(body.to_candidate())
    logger.info("User registered id=%s", user.id)
    return JSONResponse(
        {"message": "User registered successfully", "user": user.public().to_dict()},
        status_code=201,
    )


@router.post("/login")
def login(
    body: LoginRequest,
    settings: Settings = Depends(get_settings),
    authenticator: SessionAuthenticator = Depends(get_authenticator),
):
    session = authenticator.login(body.email, body.password)
    resp = JSONResponse({"message": "Login successful", "user": session.user.to_dict()})
    resp.set_cookie(
        settings.cookie_name,
        authenticator.sign_cookie(session.token),
        max_age=settings.session_max_age,
        **cookie_settings(settings),
    )
    return resp


@router.get("/user")
def current_user(user: UserSnapshot = Depends(require_user)):
    return user.to_dict()


@router.get("/dashboard")
def dashboard(user: UserSnapshot = Depends(require_user)):
    return {"role": user.role.value, "path": dashboard_path(user.role)}


@router.post("/logout")
def logout(request: Request, settings: Settings = Depends(get_settings)):
    try:
        get_authenticator(request).logout(session_token(request))
    except Exception:
        logger.exception("Logout failed")
        return JSONResponse({"message": "Could not log out"}, status_code=500)
    resp = JSONResponse({"message": "Logged out successfully"})
    resp.delete_cookie(settings.cookie_name, **cookie_settings(settings))
    return resp


def create_app(
    settings: Optional[Settings] = None,
    *,
    store: Optional[CredentialStore] = None,
    authenticator: Optional[SessionAuthenticator] = None,
) -> FastAPI:
    """Build the API with its own store and session table."""
    settings = settings or Settings.from_env()
    store = store or build_store(settings)
    authenticator = authenticator or SessionAuthenticator(
        store,
        secret_key=settings.secret_key,
        salt=settings.session_salt,
        max_age=settings.session_max_age,
    )

    app = FastAPI(title="authdemo")
    app.state.settings = settings
    app.state.store = store
    app.state.authenticator = authenticator

    app.add_exception_handler(AuthDemoError, _auth_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.include_router(router)

    logger.info("authdemo ready (store=%s, password_scheme=%s)", settings.store_backend, settings.password_scheme)
    return app
